"""Binary codec for audit records.

Converts ``Package``, ``Audit`` and ``SignedAudit`` records to and from
their DER encoding (see ``schema``). The encoding is what gets signed and
shared between tools, so it must stay byte-compatible.

Guarantees:

- ``encode`` accepts any well-formed record and rejects anything else with
  ``UnrecognizedRecordKindError``.
- ``decode`` rejects bytes that do not parse as the requested schema with
  ``MalformedEncodingError`` instead of coercing them.
- Decoded records are canonical: string fields are always ``str`` (nested
  records included), an omitted ecosystem comes back as ``DEFAULT``, and
  omitted optional fields come back as ``NO_VALUE``. In other words
  ``decode(encode(x), kind) == normalize(x)``.
"""

from __future__ import annotations

from typing import Any

from asn1crypto import core

from hexprove.core.audit.models import (
    DEFAULT,
    DEFAULT_ECOSYSTEM,
    NO_VALUE,
    RECORD_CLASSES,
    Audit,
    Package,
    Present,
    Record,
    RecordKind,
    SignedAudit,
    Verdict,
    normalize,
)
from hexprove.core.audit.schema import (
    AuditMessage,
    PackageMessage,
    SignedAuditMessage,
)
from hexprove.exceptions import MalformedEncodingError, UnrecognizedRecordKindError

_MESSAGE_CLASSES: dict[RecordKind, type[core.Sequence]] = {
    RecordKind.PACKAGE: PackageMessage,
    RecordKind.AUDIT: AuditMessage,
    RecordKind.SIGNED_AUDIT: SignedAuditMessage,
}


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode(record: Record) -> bytes:
    """Encode a record to DER bytes.

    Args:
        record: A ``Package``, ``Audit`` or ``SignedAudit``.

    Returns:
        The DER encoding of the canonical form of *record*.

    Raises:
        UnrecognizedRecordKindError: If *record* is none of the three kinds.
    """
    if isinstance(record, Package):
        message = PackageMessage(_package_fields(record))
    elif isinstance(record, Audit):
        message = AuditMessage(_audit_fields(record))
    elif isinstance(record, SignedAudit):
        message = SignedAuditMessage(_signed_audit_fields(record))
    else:
        raise UnrecognizedRecordKindError(
            f"Cannot encode {type(record).__name__}; expected one of "
            + ", ".join(kind.value for kind in RecordKind)
        )
    return message.dump()


def _package_fields(package: Package) -> dict[str, Any]:
    package = normalize(package)
    fields: dict[str, Any] = {"name": package.name, "version": package.version}
    if isinstance(package.ecosystem, Present):
        fields["ecosystem"] = package.ecosystem.value
    return fields


def _audit_fields(audit: Audit) -> dict[str, Any]:
    audit = normalize(audit)
    fields: dict[str, Any] = {
        "package": _package_fields(audit.package),
        "publicKeyFingerprint": audit.public_key_fingerprint,
        "createdAt": audit.created_at,
        "auditedByAuthor": audit.audited_by_author,
    }
    if isinstance(audit.verdict, Present):
        fields["verdict"] = audit.verdict.value.value
    if isinstance(audit.message, Present):
        fields["message"] = audit.message.value
    return fields


def _signed_audit_fields(signed: SignedAudit) -> dict[str, Any]:
    return {
        "audit": _audit_fields(signed.audit),
        "signature": bytes(signed.signature),
    }


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode(data: bytes, kind: RecordKind | type | str) -> Record:
    """Decode DER bytes into a record of the expected kind.

    Args:
        data: The encoded record.
        kind: A ``RecordKind``, a record class, or a kind name such as
            ``"Audit"``.

    Returns:
        The decoded, canonical record.

    Raises:
        UnrecognizedRecordKindError: If *kind* names no known record.
        MalformedEncodingError: If *data* does not parse as that schema.
    """
    record_kind = record_kind_of(kind)
    if not isinstance(data, (bytes, bytearray)):
        raise MalformedEncodingError(
            f"Expected bytes, got {type(data).__name__}"
        )
    message_class = _MESSAGE_CLASSES[record_kind]
    try:
        message = message_class.load(bytes(data), strict=True)
        record = _READERS[record_kind](message)
    except (ValueError, TypeError, KeyError, OverflowError) as exc:
        raise MalformedEncodingError(
            f"Invalid {record_kind.value} encoding: {exc}"
        ) from exc
    return normalize(record)


def record_kind_of(kind: RecordKind | type | str) -> RecordKind:
    """Resolve the accepted spellings of a record kind."""
    if isinstance(kind, RecordKind):
        return kind
    for record_kind, record_class in RECORD_CLASSES.items():
        if kind is record_class or kind == record_kind.value:
            return record_kind
    raise UnrecognizedRecordKindError(f"Unknown record kind: {kind!r}")


def _required(message: core.Sequence, name: str) -> Any:
    value = message[name]
    if isinstance(value, core.Void):
        raise ValueError(f"Required field {name!r} is missing")
    return value.native


def _optional(message: core.Sequence, name: str) -> Any:
    value = message[name]
    if isinstance(value, core.Void):
        return None
    return value.native


def _read_package(message: core.Sequence) -> Package:
    ecosystem = _optional(message, "ecosystem")
    return Package(
        name=_required(message, "name"),
        version=_required(message, "version"),
        ecosystem=(
            DEFAULT
            if ecosystem is None or ecosystem == DEFAULT_ECOSYSTEM
            else Present(ecosystem)
        ),
    )


def _read_audit(message: core.Sequence) -> Audit:
    package_message = message["package"]
    if isinstance(package_message, core.Void):
        raise ValueError("Required field 'package' is missing")
    verdict = _optional(message, "verdict")
    text = _optional(message, "message")
    return Audit(
        package=_read_package(package_message),
        verdict=NO_VALUE if verdict is None else Present(Verdict(verdict)),
        message=NO_VALUE if text is None else Present(text),
        public_key_fingerprint=_required(message, "publicKeyFingerprint"),
        created_at=_required(message, "createdAt"),
        audited_by_author=_required(message, "auditedByAuthor"),
    )


def _read_signed_audit(message: core.Sequence) -> SignedAudit:
    audit_message = message["audit"]
    if isinstance(audit_message, core.Void):
        raise ValueError("Required field 'audit' is missing")
    return SignedAudit(
        audit=_read_audit(audit_message),
        signature=_required(message, "signature"),
    )


_READERS = {
    RecordKind.PACKAGE: _read_package,
    RecordKind.AUDIT: _read_audit,
    RecordKind.SIGNED_AUDIT: _read_signed_audit,
}
