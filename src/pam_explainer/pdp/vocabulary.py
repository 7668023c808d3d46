"""Closed vocabulary of a PAM stack: facilities, controls and results.

Facility and Control are closed sets with an explicit Invalid variant.
Unknown tokens are data, not faults: parsing never fails, it captures the
original token so it can still be displayed and hashed.

    Facility.parse("auth")     -> Facility(kind=FacilityKind.AUTH, token="auth")
    Facility.parse("authz")    -> Facility(kind=FacilityKind.INVALID, token="authz")
    Facility.parse("authz").render() -> "invalid facility: authz"
"""

from __future__ import annotations

__all__ = [
    "Control",
    "ControlKind",
    "Facility",
    "FacilityKind",
    "FinalResult",
]

import functools
from dataclasses import dataclass
from enum import Enum


class FacilityKind(str, Enum):
    """Functional area of a PAM stack.

    Declaration order is the canonical presentation order.
    """

    ACCOUNT = "account"
    AUTH = "auth"
    PASSWORD = "password"
    SESSION = "session"
    INVALID = "invalid"


class ControlKind(str, Enum):
    """How one module's outcome combines into its facility's verdict."""

    REQUIRED = "required"
    REQUISITE = "requisite"
    SUFFICIENT = "sufficient"
    OPTIONAL = "optional"
    INVALID = "invalid"


_FACILITY_RANK: dict[FacilityKind, int] = {kind: rank for rank, kind in enumerate(FacilityKind)}


def _classify(enum_cls: type[Enum], token: str) -> Enum:
    """Map a token onto a canonical kind, falling back to INVALID."""
    for kind in enum_cls:
        if kind.value == token and kind.name != "INVALID":
            return kind
    return enum_cls["INVALID"]


@functools.total_ordering
@dataclass(frozen=True)
class Facility:
    """A facility token classified into the closed facility set.

    Attributes:
        kind: Canonical facility, or FacilityKind.INVALID.
        token: The original token as it appeared in the policy line.
    """

    kind: FacilityKind
    token: str

    @classmethod
    def parse(cls, token: str) -> Facility:
        """Classify a facility token. Never fails."""
        return cls(kind=_classify(FacilityKind, token), token=token)  # type: ignore[arg-type]

    @property
    def is_invalid(self) -> bool:
        return self.kind is FacilityKind.INVALID

    def render(self) -> str:
        """Canonical token, or a diagnostic string for Invalid."""
        if self.is_invalid:
            return f"invalid facility: {self.token}"
        return self.kind.value

    def sort_key(self) -> tuple[int, str]:
        """Key for the canonical order Account < Auth < Password < Session < Invalid."""
        return (_FACILITY_RANK[self.kind], self.token)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Facility):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Control:
    """A control token classified into the closed control set.

    Attributes:
        kind: Canonical control, or ControlKind.INVALID.
        token: The original token as it appeared in the policy line.
    """

    kind: ControlKind
    token: str

    @classmethod
    def parse(cls, token: str) -> Control:
        """Classify a control token. Never fails."""
        return cls(kind=_classify(ControlKind, token), token=token)  # type: ignore[arg-type]

    @property
    def is_invalid(self) -> bool:
        return self.kind is ControlKind.INVALID

    def render(self) -> str:
        """Canonical token, or a diagnostic string for Invalid."""
        if self.is_invalid:
            return f"invalid: {self.token}"
        return self.kind.value

    def __str__(self) -> str:
        return self.render()


class FinalResult(str, Enum):
    """Outcome of a module or a whole facility. Success is True, Failure is False."""

    SUCCESS = "Success"
    FAILURE = "Failure"

    @classmethod
    def from_bool(cls, value: bool) -> FinalResult:
        return cls.SUCCESS if value else cls.FAILURE

    def __bool__(self) -> bool:
        return self is FinalResult.SUCCESS
