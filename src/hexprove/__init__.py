"""hexprove: Provenance verification and signed audits for Hex packages."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
