"""Result values for step-by-step pipelines.

Each pipeline step returns either ``Ok(value)`` or ``Err(error)``. Callers
chain steps with ``then`` and halt on the first ``Err`` instead of raising
past the per-package boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from hexprove.exceptions import HexProveError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful step carrying its value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def then(self, step: Callable[[T], Outcome[U]]) -> Outcome[U]:
        """Run the next step on this value."""
        return step(self.value)


@dataclass(frozen=True)
class Err:
    """A failed step carrying the error that stopped it."""

    error: HexProveError

    @property
    def is_ok(self) -> bool:
        return False

    def then(self, step: Callable[[object], Outcome[U]]) -> Err:
        return self


Outcome = Union[Ok[T], Err]


def attempt(func: Callable[..., T], *args: object) -> Outcome[T]:
    """Call *func* and capture a ``HexProveError`` as ``Err``.

    Any other exception is a programmer error and propagates.
    """
    try:
        return Ok(func(*args))
    except HexProveError as exc:
        return Err(exc)
