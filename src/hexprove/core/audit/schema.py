"""ASN.1 schema for the audit wire format.

Mirrors this module, compiled with AUTOMATIC TAGS (every field carries an
implicit context tag numbered in declaration order)::

    Package ::= SEQUENCE {
      ecosystem UTF8String DEFAULT "hex.pm",
      name      UTF8String,
      version   UTF8String
    }
    Verdict ::= ENUMERATED { dangerous(0), suspicious(1), lgtm(2), safe(3) }
    Audit ::= SEQUENCE {
      package              Package,
      verdict              Verdict OPTIONAL,
      message              UTF8String OPTIONAL,
      publicKeyFingerprint UTF8String,
      createdAt            INTEGER,
      auditedByAuthor      BOOLEAN
    }
    SignedAudit ::= SEQUENCE {
      audit     Audit,
      signature OCTET STRING
    }

The DEFAULT on ``ecosystem`` is modelled as an optional field here; the
codec omits it whenever it equals the default, which is what DER requires.
"""

from __future__ import annotations

from asn1crypto import core


class VerdictValue(core.Enumerated):
    _map = {
        0: "dangerous",
        1: "suspicious",
        2: "lgtm",
        3: "safe",
    }


class PackageMessage(core.Sequence):
    _fields = [
        ("ecosystem", core.UTF8String, {"implicit": 0, "optional": True}),
        ("name", core.UTF8String, {"implicit": 1}),
        ("version", core.UTF8String, {"implicit": 2}),
    ]


class AuditMessage(core.Sequence):
    _fields = [
        ("package", PackageMessage, {"implicit": 0}),
        ("verdict", VerdictValue, {"implicit": 1, "optional": True}),
        ("message", core.UTF8String, {"implicit": 2, "optional": True}),
        ("publicKeyFingerprint", core.UTF8String, {"implicit": 3}),
        ("createdAt", core.Integer, {"implicit": 4}),
        ("auditedByAuthor", core.Boolean, {"implicit": 5}),
    ]


class SignedAuditMessage(core.Sequence):
    _fields = [
        ("audit", AuditMessage, {"implicit": 0}),
        ("signature", core.OctetString, {"implicit": 1}),
    ]
