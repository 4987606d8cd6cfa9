from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import EmailStr, Field

from src.api.error import raise_for_error
from src.app.services.email_sender import IEmailSender
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.role_synchronizer import RealmRoleSynchronizer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invites.dtos import CamelModel
from src.app.use_cases.invites import (
    AcceptInviteResponse,
    AcceptInviteUseCase,
    CancelInviteUseCase,
    CreateInviteResponse,
    CreateInviteUseCase,
    DeclineInviteUseCase,
    InviteActionResponse,
    ListReceivedInvitesResponse,
    ListReceivedInvitesUseCase,
    ListSentInvitesResponse,
    ListSentInvitesUseCase,
)
from src.depends import (
    CurrentUser,
    get_config,
    get_current_user,
    get_email_sender,
    get_identity_resolver,
    get_role_synchronizer,
    get_unit_of_work,
)

router = APIRouter(prefix="/invite", tags=["Invites"])


class CreateInviteRequest(CamelModel):
    """
    Create invite HTTP request payload

    Validates incoming request for inviting an email into a workspace.
    """

    workspace_id: UUID = Field(..., description="Target workspace")
    email: EmailStr = Field(..., description="Invitee email address")
    role: Optional[str] = Field(None, description="viewer, editor or admin (default viewer)")
    group_id: Optional[UUID] = Field(None, description="Member group inside the workspace")


class InviteTokenRequest(CamelModel):
    token: str = Field(..., min_length=1, description="Invite token")


class ListSentInvitesRequest(CamelModel):
    pending_only: bool = Field(False, description="Only return pending invites")


@router.post(
    "/create",
    status_code=status.HTTP_200_OK,
    response_model=CreateInviteResponse,
    response_model_exclude_none=True,
)
async def create_invite(
    request: CreateInviteRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    resolver: IdentityResolver = Depends(get_identity_resolver),
    email_sender: IEmailSender = Depends(get_email_sender),
    config=Depends(get_config),
):
    """
    Create Invite

    Issues an invite, or refreshes the pending one for the same email.
    Email and invitee provisioning failures are returned as warnings.

    Raises:
        - 400 Bad Request: INVALID_ROLE, GROUP_NOT_FOUND, ALREADY_MEMBER
        - 401 Unauthorized: Missing or invalid session token
        - 403 Forbidden: Caller is not an admin of the workspace
        - 404 Not Found: WORKSPACE_NOT_FOUND
    """
    use_case = CreateInviteUseCase(
        uow,
        resolver,
        email_sender,
        app_url=config.APP_URL,
        invite_ttl_days=config.INVITE_TTL_DAYS,
    )
    result = await use_case.execute(
        inviter_user_id=current_user.user_id,
        workspace_id=request.workspace_id,
        email=request.email,
        role=request.role,
        group_id=request.group_id,
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/list", status_code=status.HTTP_200_OK, response_model=ListReceivedInvitesResponse)
async def list_received_invites(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Pending invites addressed to the caller's email"""
    use_case = ListReceivedInvitesUseCase(uow)
    result = await use_case.execute(current_user.user_id, current_user.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/listSent", status_code=status.HTTP_200_OK, response_model=ListSentInvitesResponse)
async def list_sent_invites(
    request: Optional[ListSentInvitesRequest] = None,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """Invites created by the caller in the recent window, with derived status"""
    use_case = ListSentInvitesUseCase(uow, window_days=config.SENT_INVITES_WINDOW_DAYS)
    result = await use_case.execute(
        current_user.user_id, pending_only=bool(request and request.pending_only)
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/accept",
    status_code=status.HTTP_200_OK,
    response_model=AcceptInviteResponse,
    response_model_exclude_none=True,
)
async def accept_invite(
    request: InviteTokenRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    resolver: IdentityResolver = Depends(get_identity_resolver),
    synchronizer: RealmRoleSynchronizer = Depends(get_role_synchronizer),
):
    """
    Accept Invite

    Raises:
        - 400 Bad Request: INVITE_EXPIRED, INVITE_REVOKED, INVITE_ALREADY_ACCEPTED
        - 403 Forbidden: Invite was sent to a different email
        - 404 Not Found: INVITE_NOT_FOUND
    """
    use_case = AcceptInviteUseCase(uow, resolver, synchronizer)
    result = await use_case.execute(current_user.user_id, current_user.email, request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/decline", status_code=status.HTTP_200_OK, response_model=InviteActionResponse)
async def decline_invite(
    request: InviteTokenRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = DeclineInviteUseCase(uow)
    result = await use_case.execute(current_user.user_id, current_user.email, request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/cancel", status_code=status.HTTP_200_OK, response_model=InviteActionResponse)
async def cancel_invite(
    request: InviteTokenRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = CancelInviteUseCase(uow)
    result = await use_case.execute(current_user.user_id, request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
