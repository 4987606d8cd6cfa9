from abc import ABC, abstractmethod
from typing import List


class IEmailSender(ABC):
    """
    Transactional email provider.

    Raises EmailNotConfiguredError when no provider key is set and an
    UpstreamError subclass when delivery fails.
    """

    @abstractmethod
    async def send(self, to: List[str], subject: str, html: str) -> None:
        pass
