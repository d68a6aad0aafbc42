"""Audit record models: Package, Audit, SignedAudit.

Records are immutable, portable claims. An ``Audit`` owns its ``Package``
by value, and a ``SignedAudit`` owns exactly one ``Audit``.

Optional fields never use ``None``. Each one holds one of three states:

- ``DEFAULT`` -- omitted, and the schema's default applies.
- ``NO_VALUE`` -- omitted, and there is no value at all.
- ``Present(value)`` -- an explicit value.

String fields accept ``bytes`` as an alternate representation of UTF-8
text. ``normalize`` folds records into the single canonical form that the
codec guarantees after decoding.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")

# Ecosystem assumed for packages that do not name one.
DEFAULT_ECOSYSTEM: str = "hex.pm"


# ---------------------------------------------------------------------------
# Three-state optional field
# ---------------------------------------------------------------------------


class Marker(Enum):
    """Markers for an omitted optional field."""

    DEFAULT = "default"
    NO_VALUE = "no_value"

    def __repr__(self) -> str:
        return self.name


DEFAULT = Marker.DEFAULT
NO_VALUE = Marker.NO_VALUE


@dataclass(frozen=True)
class Present(Generic[T]):
    """An optional field that carries a value."""

    value: T


Field = Union[Marker, Present[T]]


def field_value(field: Field[T], fallback: T | None = None) -> T | None:
    """Return the value of a ``Present`` field, or *fallback* for a marker."""
    if isinstance(field, Present):
        return field.value
    return fallback


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Verdict(Enum):
    """Reviewer opinion on a package. Declaration order is the wire order."""

    DANGEROUS = "dangerous"
    SUSPICIOUS = "suspicious"
    LGTM = "lgtm"
    SAFE = "safe"


class RecordKind(Enum):
    """The three record shapes known to the codec."""

    PACKAGE = "Package"
    AUDIT = "Audit"
    SIGNED_AUDIT = "SignedAudit"


Text = Union[str, bytes]


@dataclass(frozen=True)
class Package:
    """Identity of a published package version.

    Attributes:
        name: Package name in its registry.
        version: Published version string.
        ecosystem: Registry namespace. ``DEFAULT`` means ``"hex.pm"``.
    """

    name: Text
    version: Text
    ecosystem: Field[Text] = DEFAULT

    def __post_init__(self) -> None:
        if self.ecosystem is NO_VALUE:
            raise ValueError("Package.ecosystem has a default; use DEFAULT")
        _require_text("name", self.name)
        _require_text("version", self.version)
        if isinstance(self.ecosystem, Present):
            _require_text("ecosystem", self.ecosystem.value)


@dataclass(frozen=True)
class Audit:
    """A trust statement about one package version.

    Attributes:
        package: The audited package, owned by value.
        verdict: ``NO_VALUE`` when the auditor expressed no opinion.
        message: ``NO_VALUE`` when the auditor left no comment.
        public_key_fingerprint: Identifies the signer's key.
        created_at: Unix timestamp in seconds.
        audited_by_author: True when the signer authored the package.
    """

    package: Package
    public_key_fingerprint: Text
    created_at: int
    audited_by_author: bool = False
    verdict: Field[Verdict] = NO_VALUE
    message: Field[Text] = NO_VALUE

    def __post_init__(self) -> None:
        if not isinstance(self.package, Package):
            raise TypeError("Audit.package must be a Package")
        for name in ("verdict", "message"):
            if getattr(self, name) is DEFAULT:
                raise ValueError(f"Audit.{name} has no default; use NO_VALUE")
        if isinstance(self.verdict, Present) and not isinstance(
            self.verdict.value, Verdict
        ):
            raise TypeError("Audit.verdict must hold a Verdict")
        if isinstance(self.message, Present):
            _require_text("message", self.message.value)
        _require_text("public_key_fingerprint", self.public_key_fingerprint)
        if isinstance(self.created_at, bool) or not isinstance(self.created_at, int):
            raise TypeError("Audit.created_at must be an int")
        if not isinstance(self.audited_by_author, bool):
            raise TypeError("Audit.audited_by_author must be a bool")


@dataclass(frozen=True)
class SignedAudit:
    """An audit plus a signature over its canonical encoding."""

    audit: Audit
    signature: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.audit, Audit):
            raise TypeError("SignedAudit.audit must be an Audit")
        if not isinstance(self.signature, (bytes, bytearray)):
            raise TypeError("SignedAudit.signature must be bytes")


Record = Union[Package, Audit, SignedAudit]

RECORD_CLASSES: dict[RecordKind, type] = {
    RecordKind.PACKAGE: Package,
    RecordKind.AUDIT: Audit,
    RecordKind.SIGNED_AUDIT: SignedAudit,
}


def _require_text(name: str, value: object) -> None:
    if not isinstance(value, (str, bytes)):
        raise TypeError(f"{name} must be str or bytes, got {type(value).__name__}")


# ---------------------------------------------------------------------------
# Defaulting and normalization
# ---------------------------------------------------------------------------


def with_defaults(record: Record) -> Record:
    """Replace an omitted ecosystem with the concrete ``"hex.pm"``.

    Used by producers that need a real value. Applying it twice gives the
    same result as applying it once.
    """
    if isinstance(record, Package):
        if record.ecosystem is DEFAULT:
            return replace(record, ecosystem=Present(DEFAULT_ECOSYSTEM))
        return record
    if isinstance(record, Audit):
        return replace(record, package=with_defaults(record.package))
    if isinstance(record, SignedAudit):
        return replace(record, audit=with_defaults(record.audit))
    raise TypeError(f"Not an audit record: {type(record).__name__}")


def normalize(record: Record) -> Record:
    """Return the canonical form of *record*.

    Canonical records hold ``str`` (never ``bytes``) in every string field,
    and an ecosystem equal to the default is represented as ``DEFAULT``
    since the encoding cannot tell the two apart.
    """
    if isinstance(record, Package):
        ecosystem = record.ecosystem
        if isinstance(ecosystem, Present):
            value = _to_str(ecosystem.value)
            ecosystem = DEFAULT if value == DEFAULT_ECOSYSTEM else Present(value)
        return Package(
            name=_to_str(record.name),
            version=_to_str(record.version),
            ecosystem=ecosystem,
        )
    if isinstance(record, Audit):
        message = record.message
        if isinstance(message, Present):
            message = Present(_to_str(message.value))
        return replace(
            record,
            package=normalize(record.package),
            message=message,
            public_key_fingerprint=_to_str(record.public_key_fingerprint),
        )
    if isinstance(record, SignedAudit):
        return SignedAudit(
            audit=normalize(record.audit), signature=bytes(record.signature)
        )
    raise TypeError(f"Not an audit record: {type(record).__name__}")


def _to_str(value: Text) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value
