"""Pre-flight check for the external capabilities hexprove relies on.

Runs once before any package is processed. Every missing capability is
collected and reported together in one ``MissingCapabilitiesError``.
"""

from __future__ import annotations

import logging
import shutil
from typing import Callable, Mapping

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from hexprove.exceptions import MissingCapabilitiesError

logger = logging.getLogger(__name__)


def _program(name: str) -> Callable[[], bool]:
    return lambda: shutil.which(name) is not None


def _ed25519_available() -> bool:
    try:
        Ed25519PrivateKey.generate()
    except UnsupportedAlgorithm:
        return False
    return True


# Directory diffing runs in-process, so only git and the signing backend
# are external.
REQUIRED_CAPABILITIES: dict[str, Callable[[], bool]] = {
    "git": _program("git"),
    "ed25519 (cryptography backend)": _ed25519_available,
}


def check_required_capabilities(
    capabilities: Mapping[str, Callable[[], bool]] | None = None,
) -> None:
    """Raise if any required capability is missing.

    Args:
        capabilities: Name -> availability probe. Defaults to
            ``REQUIRED_CAPABILITIES``.

    Raises:
        MissingCapabilitiesError: Naming every missing capability.
    """
    checks = REQUIRED_CAPABILITIES if capabilities is None else capabilities
    missing = [name for name, available in checks.items() if not available()]
    if missing:
        raise MissingCapabilitiesError(missing)
    logger.debug("All required capabilities present: %s", ", ".join(checks))
