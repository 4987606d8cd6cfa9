"""
Invite Lifecycle Use Cases

Create, list, accept, decline and cancel workspace invites.
"""

from .accept_invite_use_case import AcceptInviteUseCase
from .cancel_invite_use_case import CancelInviteUseCase
from .create_invite_use_case import CreateInviteUseCase
from .decline_invite_use_case import DeclineInviteUseCase
from .dtos import (
    AcceptInviteResponse,
    CreateInviteResponse,
    InviteActionResponse,
    ListReceivedInvitesResponse,
    ListSentInvitesResponse,
    ReceivedInvite,
    SentInvite,
)
from .list_received_invites_use_case import ListReceivedInvitesUseCase
from .list_sent_invites_use_case import ListSentInvitesUseCase

__all__ = [
    "CreateInviteUseCase",
    "ListReceivedInvitesUseCase",
    "ListSentInvitesUseCase",
    "AcceptInviteUseCase",
    "DeclineInviteUseCase",
    "CancelInviteUseCase",
    "CreateInviteResponse",
    "ListReceivedInvitesResponse",
    "ListSentInvitesResponse",
    "ReceivedInvite",
    "SentInvite",
    "AcceptInviteResponse",
    "InviteActionResponse",
]
