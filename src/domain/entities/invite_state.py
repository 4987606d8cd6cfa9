"""
Invite lifecycle state.

An invite is Pending until exactly one terminal transition happens:
Accepted(at) or Revoked(at, reason). The union cannot express an invite
that is both accepted and revoked.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from .enums import InviteRevokedReason


@dataclass(frozen=True)
class Pending:
    pass


@dataclass(frozen=True)
class Accepted:
    at: datetime


@dataclass(frozen=True)
class Revoked:
    at: datetime
    reason: InviteRevokedReason


InviteState = Union[Pending, Accepted, Revoked]


class InviteTransitionError(Exception):
    """Raised when a transition is attempted out of a terminal state"""

    def __init__(self, state: InviteState):
        self.state = state
        super().__init__(f"Invite is already terminal: {state!r}")
