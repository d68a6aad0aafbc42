"""Signed audits --- portable trust statements about package versions.

Submodules:
    models   -- Package, Audit, SignedAudit, the three-state Field, defaulting
    schema   -- ASN.1 definitions of the wire format
    codec    -- encode / decode with canonical normalization
    signing  -- Ed25519 signing, verification, and key files

All public names are re-exported here so callers can write
``from hexprove.core.audit import encode, Audit``.
"""

from hexprove.core.audit.codec import decode, encode, record_kind_of
from hexprove.core.audit.models import (
    DEFAULT,
    DEFAULT_ECOSYSTEM,
    NO_VALUE,
    Audit,
    Field,
    Marker,
    Package,
    Present,
    Record,
    RecordKind,
    SignedAudit,
    Verdict,
    field_value,
    normalize,
    with_defaults,
)
from hexprove.core.audit.signing import (
    fingerprint,
    generate_private_key,
    load_private_key,
    load_public_key,
    sign_audit,
    verify_signed_audit,
    write_key_pair,
)

__all__ = [
    "Audit",
    "DEFAULT",
    "DEFAULT_ECOSYSTEM",
    "Field",
    "Marker",
    "NO_VALUE",
    "Package",
    "Present",
    "Record",
    "RecordKind",
    "SignedAudit",
    "Verdict",
    "decode",
    "encode",
    "field_value",
    "fingerprint",
    "generate_private_key",
    "load_private_key",
    "load_public_key",
    "normalize",
    "record_kind_of",
    "sign_audit",
    "verify_signed_audit",
    "with_defaults",
    "write_key_pair",
]
