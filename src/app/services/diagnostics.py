"""
Secondary-effect diagnostics.

A request whose primary write succeeded still reports what its best-effort
follow-ups (emails, identity provisioning, role sync) failed to do.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass(frozen=True)
class Diagnostic:
    effect: str
    message: str


@dataclass
class Diagnostics:
    items: List[Diagnostic] = field(default_factory=list)

    def add(self, effect: str, message: str) -> None:
        self.items.append(Diagnostic(effect=effect, message=message))

    def messages(self) -> List[str]:
        return [item.message for item in self.items]

    def warning(self) -> Optional[str]:
        """All messages joined for the single `warning` response field"""
        if not self.items:
            return None
        return " ".join(self.messages())

    def __bool__(self) -> bool:
        return bool(self.items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
