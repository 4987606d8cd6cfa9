from abc import ABC, abstractmethod

from src.domain.entities import AuditEvent


class IAuditEventRepository(ABC):
    """Audit event repository interface - application layer"""

    @abstractmethod
    async def create(self, event: AuditEvent) -> AuditEvent:
        """Create a new audit event"""
        pass
