from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.identity_link_repository import IIdentityLinkRepository
from src.app.repositories.invite_repository import IInviteRepository
from src.app.repositories.membership_repository import IMembershipRepository
from src.app.repositories.profile_repository import IProfileRepository
from src.app.repositories.super_admin_repository import ISuperAdminRepository
from src.app.repositories.workspace_repository import IWorkspaceRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    workspaces: IWorkspaceRepository
    memberships: IMembershipRepository
    invites: IInviteRepository
    profiles: IProfileRepository
    super_admins: ISuperAdminRepository
    identity_links: IIdentityLinkRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
