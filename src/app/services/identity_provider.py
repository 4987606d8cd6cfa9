from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class RealmRoleRef:
    """Realm role as returned by the admin API (id + name)"""

    id: str
    name: str

    def to_representation(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass
class ExternalUser:
    """User record in the external realm"""

    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    enabled: Optional[bool] = None
    email_verified: Optional[bool] = None
    required_actions: List[str] = field(default_factory=list)

    @classmethod
    def from_representation(cls, payload: Dict[str, Any]) -> "ExternalUser":
        return cls(
            id=payload["id"],
            username=payload.get("username"),
            email=payload.get("email"),
            first_name=payload.get("firstName"),
            last_name=payload.get("lastName"),
            enabled=payload.get("enabled"),
            email_verified=payload.get("emailVerified"),
            required_actions=list(payload.get("requiredActions") or []),
        )


class IIdentityProviderAdmin(ABC):
    """
    Admin-API client of the external identity realm.

    Every method raises an UpstreamError subclass on failure.
    """

    @property
    @abstractmethod
    def issuer(self) -> str:
        """Issuer URL of the managed realm"""
        pass

    @abstractmethod
    def ensure_ready(self) -> None:
        """Raise IdentityProviderNotConfiguredError when credentials are missing"""
        pass

    @abstractmethod
    async def get_admin_token(self, force_refresh: bool = False) -> str:
        pass

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[ExternalUser]:
        pass

    @abstractmethod
    async def find_user_by_id(self, user_id: str) -> Optional[ExternalUser]:
        pass

    @abstractmethod
    async def create_user(
        self,
        email: str,
        display_name: Optional[str] = None,
        enabled: bool = True,
        email_verified: bool = True,
        required_actions: Optional[List[str]] = None,
        password: Optional[str] = None,
    ) -> ExternalUser:
        pass

    @abstractmethod
    async def update_user(self, user_id: str, representation: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def ensure_user(
        self,
        email: str,
        display_name: Optional[str] = None,
        enabled: bool = True,
        email_verified: bool = True,
        required_actions: Optional[List[str]] = None,
        password: Optional[str] = None,
    ) -> Tuple[ExternalUser, bool]:
        """Find, update in place or create; returns (user, created).

        password is only applied when the user is created.
        """
        pass

    @abstractmethod
    async def set_password(self, user_id: str, password: str, temporary: bool = False) -> None:
        pass

    @abstractmethod
    async def send_action_email(self, user_id: str, actions: Optional[List[str]] = None) -> None:
        pass

    @abstractmethod
    async def get_user_realm_roles(self, user_id: str) -> List[RealmRoleRef]:
        pass

    @abstractmethod
    async def get_realm_role(self, role_name: str) -> Optional[RealmRoleRef]:
        pass

    @abstractmethod
    async def create_realm_role_if_missing(self, role_name: str) -> RealmRoleRef:
        pass

    @abstractmethod
    async def ensure_realm_roles(self, role_names: Iterable[str]) -> Dict[str, RealmRoleRef]:
        pass

    @abstractmethod
    async def add_realm_roles_to_user(self, user_id: str, roles: List[RealmRoleRef]) -> None:
        pass

    @abstractmethod
    async def remove_realm_roles_from_user(self, user_id: str, roles: List[RealmRoleRef]) -> None:
        pass

    @abstractmethod
    async def delete_user(self, user_id: str) -> None:
        pass
