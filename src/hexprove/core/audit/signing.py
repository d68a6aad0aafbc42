"""Signing and verification of audits with Ed25519 keys.

An audit is signed over its DER encoding, so any tool that reproduces the
encoding can verify it. The signer's key is named inside the audit by its
fingerprint: ``sha256:`` followed by the hex SHA-256 of the raw public key.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from hexprove.core.audit.codec import encode
from hexprove.core.audit.models import Audit, SignedAudit, normalize
from hexprove.exceptions import SignatureError

logger = logging.getLogger(__name__)

PRIVATE_KEY_FILENAME = "hexprove_ed25519.pem"
PUBLIC_KEY_FILENAME = "hexprove_ed25519.pub.pem"


def generate_private_key() -> Ed25519PrivateKey:
    """Create a fresh Ed25519 signing key."""
    return Ed25519PrivateKey.generate()


def fingerprint(public_key: Ed25519PublicKey) -> str:
    """Return the ``sha256:<hex>`` fingerprint of a public key."""
    raw = public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return "sha256:" + hashlib.sha256(raw).hexdigest()


def sign_audit(audit: Audit, private_key: Ed25519PrivateKey) -> SignedAudit:
    """Sign the canonical encoding of *audit*.

    Raises:
        SignatureError: If the audit names a different key's fingerprint.
    """
    audit = normalize(audit)
    expected = fingerprint(private_key.public_key())
    if audit.public_key_fingerprint != expected:
        raise SignatureError(
            f"Audit names key {audit.public_key_fingerprint}, "
            f"but the signing key is {expected}"
        )
    signature = private_key.sign(encode(audit))
    return SignedAudit(audit=audit, signature=signature)


def verify_signed_audit(signed: SignedAudit, public_key: Ed25519PublicKey) -> None:
    """Check that *signed* was produced by the holder of *public_key*.

    Raises:
        SignatureError: If the fingerprint does not match the key or the
            signature does not verify.
    """
    expected = fingerprint(public_key)
    audit = normalize(signed.audit)
    if audit.public_key_fingerprint != expected:
        raise SignatureError(
            f"Audit was signed by {audit.public_key_fingerprint}, "
            f"not by {expected}"
        )
    try:
        public_key.verify(bytes(signed.signature), encode(audit))
    except InvalidSignature as exc:
        raise SignatureError("Audit signature is invalid") from exc
    logger.debug("Verified audit of %s by %s", audit.package.name, expected)


# ---------------------------------------------------------------------------
# Key files
# ---------------------------------------------------------------------------


def write_key_pair(private_key: Ed25519PrivateKey, directory: Path) -> tuple[Path, Path]:
    """Write the key pair as PEM files into *directory*.

    Returns:
        The (private, public) key paths.
    """
    directory.mkdir(parents=True, exist_ok=True)
    private_path = directory / PRIVATE_KEY_FILENAME
    public_path = directory / PUBLIC_KEY_FILENAME
    private_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    private_path.chmod(0o600)
    public_path.write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    return private_path, public_path


def load_private_key(path: Path) -> Ed25519PrivateKey:
    """Load a PEM private key written by ``write_key_pair``.

    Raises:
        SignatureError: If the file is not an Ed25519 private key.
    """
    try:
        key = serialization.load_pem_private_key(path.read_bytes(), password=None)
    except (OSError, ValueError, TypeError) as exc:
        raise SignatureError(f"Cannot load private key {path}: {exc}") from exc
    if not isinstance(key, Ed25519PrivateKey):
        raise SignatureError(f"{path} is not an Ed25519 private key")
    return key


def load_public_key(path: Path) -> Ed25519PublicKey:
    """Load a PEM public key.

    Raises:
        SignatureError: If the file is not an Ed25519 public key.
    """
    try:
        key = serialization.load_pem_public_key(path.read_bytes())
    except (OSError, ValueError) as exc:
        raise SignatureError(f"Cannot load public key {path}: {exc}") from exc
    if not isinstance(key, Ed25519PublicKey):
        raise SignatureError(f"{path} is not an Ed25519 public key")
    return key
