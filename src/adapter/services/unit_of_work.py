from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.identity_link_repository import IdentityLinkRepository
from src.adapter.repositories.invite_repository import InviteRepository
from src.adapter.repositories.membership_repository import MembershipRepository
from src.adapter.repositories.profile_repository import ProfileRepository
from src.adapter.repositories.super_admin_repository import SuperAdminRepository
from src.adapter.repositories.workspace_repository import WorkspaceRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.workspaces = WorkspaceRepository(self.session)
        self.memberships = MembershipRepository(self.session)
        self.invites = InviteRepository(self.session)
        self.profiles = ProfileRepository(self.session)
        self.super_admins = SuperAdminRepository(self.session)
        self.identity_links = IdentityLinkRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
