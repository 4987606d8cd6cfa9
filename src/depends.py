from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.gotrue_user_directory import DirectorySettings, GoTrueUserDirectory
from src.adapter.services.keycloak_admin_client import KeycloakAdminClient, KeycloakSettings
from src.adapter.services.resend_email_sender import EmailSettings, ResendEmailSender
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import verify_session_token
from src.app.services.email_sender import IEmailSender
from src.app.services.identity_provider import IIdentityProviderAdmin
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.reserve_admin import ReserveAdminBootstrap
from src.app.services.role_synchronizer import RealmRoleSynchronizer
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import IUserDirectory
from src.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    user_id: UUID
    email: Optional[str]


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_config():
    return ApplicationConfig


def get_identity_provider(config=Depends(get_config)) -> IIdentityProviderAdmin:
    return KeycloakAdminClient(KeycloakSettings.from_config(config))


def get_user_directory(config=Depends(get_config)) -> IUserDirectory:
    return GoTrueUserDirectory(DirectorySettings.from_config(config))


def get_email_sender(config=Depends(get_config)) -> IEmailSender:
    return ResendEmailSender(EmailSettings.from_config(config))


def get_identity_resolver(
    uow: UnitOfWork = Depends(get_unit_of_work),
    idp: IIdentityProviderAdmin = Depends(get_identity_provider),
    directory: IUserDirectory = Depends(get_user_directory),
) -> IdentityResolver:
    return IdentityResolver(uow, idp, directory)


def get_role_synchronizer(
    idp: IIdentityProviderAdmin = Depends(get_identity_provider),
) -> RealmRoleSynchronizer:
    return RealmRoleSynchronizer(idp)


def get_reserve_admin_bootstrap(
    resolver: IdentityResolver = Depends(get_identity_resolver),
    synchronizer: RealmRoleSynchronizer = Depends(get_role_synchronizer),
    config=Depends(get_config),
) -> ReserveAdminBootstrap:
    return ReserveAdminBootstrap(
        resolver, synchronizer, config.RESERVE_ADMIN_EMAIL, config.RESERVE_ADMIN_PASSWORD
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """
    Dependency to extract and verify the session JWT from the Authorization header.

    Raises:
        ClientError: 401 if the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise ClientError(
            Error("UNAUTHENTICATED", "Unauthorized"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_session_token(credentials.credentials)
    if payload is None:
        raise ClientError(
            Error("UNAUTHENTICATED", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        raise ClientError(
            Error("UNAUTHENTICATED", "Invalid token subject"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return CurrentUser(user_id=user_id, email=payload.get("email"))
