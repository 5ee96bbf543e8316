from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class PushMessage:
    """Gateway-neutral push payload; ``data`` values must all be strings."""

    title: str
    body: str
    data: Dict[str, str] = field(default_factory=dict)


class BasePushSender(ABC):
    @property
    @abstractmethod
    def provider(self) -> str:
        ...

    @abstractmethod
    async def send(self, token: str, message: PushMessage) -> bool:
        """Deliver *message* to one device token. Returns False on delivery failure."""
        ...
