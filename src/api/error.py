from fastapi import status

from src.libs.result import Error

# Error codes returned by use cases, mapped to HTTP status
CLIENT_ERROR_STATUS = {
    "INVALID_ARGUMENT": status.HTTP_400_BAD_REQUEST,
    "INVALID_ROLE": status.HTTP_400_BAD_REQUEST,
    "GROUP_NOT_FOUND": status.HTTP_400_BAD_REQUEST,
    "ALREADY_MEMBER": status.HTTP_400_BAD_REQUEST,
    "INVITE_EXPIRED": status.HTTP_400_BAD_REQUEST,
    "INVITE_REVOKED": status.HTTP_400_BAD_REQUEST,
    "INVITE_ALREADY_ACCEPTED": status.HTTP_400_BAD_REQUEST,
    "UPSTREAM_REJECTED": status.HTTP_400_BAD_REQUEST,
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVITE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "WORKSPACE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "UPSTREAM_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error) -> None:
    """Raise the API exception for a use case error; unknown codes are server errors"""
    status_code = CLIENT_ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
