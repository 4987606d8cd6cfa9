"""Workspace membership use cases."""

from .dtos import ListWorkspaceMembersResponse, WorkspaceMemberInfo
from .list_workspace_members_use_case import ListWorkspaceMembersUseCase

__all__ = [
    "ListWorkspaceMembersUseCase",
    "ListWorkspaceMembersResponse",
    "WorkspaceMemberInfo",
]
