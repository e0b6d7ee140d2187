from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, Optional

ChatRole = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: ChatRole
    content: str


@dataclass(frozen=True)
class CompletionOptions:
    model: Optional[str] = None
    temperature: Optional[float] = None
    json_mode: bool = False
    timeout: Optional[float] = None


class ReasoningClient(ABC):
    """
    Defines the contract for chat-completion backends: role-tagged messages in,
    one assistant message out. Implementations raise on provider failure and on
    timeout (TimeoutError); callers decide how to degrade.
    """

    @abstractmethod
    async def complete(self, messages: list[ChatMessage], options: Optional[CompletionOptions] = None) -> str:
        raise NotImplementedError
