"""
Errors raised by outbound adapters (identity realm, user directory, email).

Adapters raise; services and use cases catch and turn them into
``Result`` errors or response diagnostics.
"""

from typing import Optional

from src.libs.result import Error


class UpstreamError(Exception):
    """Base class for failures of a remote collaborator"""

    code = "UPSTREAM_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_error(self) -> Error:
        return Error(self.code, self.message)


class UpstreamUnavailableError(UpstreamError):
    """Network failure, timeout or 5xx from a remote collaborator"""

    code = "UPSTREAM_UNAVAILABLE"


class UpstreamRejectedError(UpstreamError):
    """4xx business error; message is passed through verbatim"""

    code = "UPSTREAM_REJECTED"


class IdentityProviderNotConfiguredError(UpstreamError):
    """Realm admin credentials or URL are missing"""

    code = "IDP_NOT_CONFIGURED"


class EmailNotConfiguredError(UpstreamError):
    """Transactional email provider key is missing"""

    code = "EMAIL_NOT_CONFIGURED"


class DirectoryNotConfiguredError(UpstreamError):
    """Primary directory URL or service key is missing"""

    code = "DIRECTORY_NOT_CONFIGURED"
