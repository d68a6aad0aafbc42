"""Tests for audit record models, defaulting, and normalization."""

from __future__ import annotations

from dataclasses import replace

import pytest

from hexprove.core.audit import (
    DEFAULT,
    DEFAULT_ECOSYSTEM,
    NO_VALUE,
    Audit,
    Package,
    Present,
    SignedAudit,
    Verdict,
    field_value,
    normalize,
    with_defaults,
)


class TestFieldStates:
    """The three states of an optional field."""

    def test_field_value_of_present(self) -> None:
        assert field_value(Present("x")) == "x"

    def test_field_value_of_markers_uses_fallback(self) -> None:
        assert field_value(DEFAULT, "fallback") == "fallback"
        assert field_value(NO_VALUE) is None

    def test_package_defaults_ecosystem(self) -> None:
        """A package built without an ecosystem carries DEFAULT."""
        assert Package(name="jason", version="1.0.0").ecosystem is DEFAULT

    def test_package_rejects_no_value_ecosystem(self) -> None:
        with pytest.raises(ValueError):
            Package(name="jason", version="1.0.0", ecosystem=NO_VALUE)

    def test_audit_rejects_default_verdict(self) -> None:
        with pytest.raises(ValueError):
            Audit(
                package=Package("jason", "1.0.0"),
                public_key_fingerprint="sha256:00",
                created_at=0,
                verdict=DEFAULT,
            )

    def test_audit_optional_fields_default_to_no_value(self) -> None:
        audit = Audit(
            package=Package("jason", "1.0.0"),
            public_key_fingerprint="sha256:00",
            created_at=0,
        )
        assert audit.verdict is NO_VALUE
        assert audit.message is NO_VALUE
        assert audit.audited_by_author is False


class TestValidation:
    """Type checks done when a record is built."""

    def test_verdict_must_hold_verdict(self) -> None:
        with pytest.raises(TypeError):
            Audit(
                package=Package("jason", "1.0.0"),
                public_key_fingerprint="sha256:00",
                created_at=0,
                verdict=Present("lgtm"),
            )

    def test_created_at_rejects_bool(self) -> None:
        with pytest.raises(TypeError):
            Audit(
                package=Package("jason", "1.0.0"),
                public_key_fingerprint="sha256:00",
                created_at=True,
            )

    def test_name_must_be_text(self) -> None:
        with pytest.raises(TypeError):
            Package(name=42, version="1.0.0")

    def test_signature_must_be_bytes(self, sample_audit: Audit) -> None:
        with pytest.raises(TypeError):
            SignedAudit(audit=sample_audit, signature="not bytes")


class TestWithDefaults:
    """Replacing the omitted ecosystem with its concrete default."""

    def test_fills_package_ecosystem(self) -> None:
        package = with_defaults(Package("jason", "1.0.0"))
        assert package.ecosystem == Present(DEFAULT_ECOSYSTEM)

    def test_fills_nested_package(self, sample_audit: Audit) -> None:
        signed = SignedAudit(audit=sample_audit, signature=b"sig")
        filled = with_defaults(signed)
        assert filled.audit.package.ecosystem == Present("hex.pm")

    def test_keeps_explicit_ecosystem(self) -> None:
        package = Package("left_pad", "1.0.0", ecosystem=Present("npm"))
        assert with_defaults(package) == package

    def test_idempotent(self, sample_audit: Audit) -> None:
        once = with_defaults(sample_audit)
        assert with_defaults(once) == once

    def test_rejects_other_values(self) -> None:
        with pytest.raises(TypeError):
            with_defaults("jason")


class TestNormalize:
    """Folding records into their canonical form."""

    def test_bytes_become_str(self) -> None:
        package = normalize(Package(name=b"jason", version=b"1.0.0"))
        assert package == Package(name="jason", version="1.0.0")
        assert isinstance(package.name, str)

    def test_explicit_default_ecosystem_becomes_marker(self) -> None:
        package = normalize(Package("jason", "1.0.0", ecosystem=Present(b"hex.pm")))
        assert package.ecosystem is DEFAULT

    def test_other_ecosystem_kept_as_str(self) -> None:
        package = normalize(Package("x", "1", ecosystem=Present(b"npm")))
        assert package.ecosystem == Present("npm")

    def test_nested_audit_message(self, sample_audit: Audit) -> None:
        audit = replace(sample_audit, message=Present(b"ok"), public_key_fingerprint=b"fp")
        normalized = normalize(audit)
        assert normalized.message == Present("ok")
        assert normalized.public_key_fingerprint == "fp"

    def test_verdict_untouched(self, sample_audit: Audit) -> None:
        assert normalize(sample_audit).verdict == Present(Verdict.LGTM)
