import asyncio
import logging
import time
from typing import Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_ollama import ChatOllama

from infra.llm.base import ChatMessage, CompletionOptions, ReasoningClient

logger = logging.getLogger("learnai")

DEFAULT_TIMEOUT = 60.0

_MESSAGE_TYPES = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


def to_langchain_messages(messages: list[ChatMessage]) -> list[BaseMessage]:
    return [_MESSAGE_TYPES[m.role](content=m.content) for m in messages]


class OllamaReasoningClient(ReasoningClient):
    """
    Chat completion against a local Ollama server through LangChain's ChatOllama.

    One ChatOllama per (model, temperature, json_mode) combination is created lazily
    and reused; ChatOllama keeps its own HTTP client.
    """

    def __init__(
        self,
        model: str,
        temperature: float = 0.7,
        base_url: str = "http://localhost:11434",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.model = model
        self.temperature = temperature
        self.base_url = base_url
        self.timeout = timeout
        self._chat_models: dict[tuple[str, float, bool], ChatOllama] = {}

    def _chat_model(self, model: str, temperature: float, json_mode: bool) -> ChatOllama:
        key = (model, temperature, json_mode)
        chat = self._chat_models.get(key)
        if chat is None:
            kwargs = {"model": model, "temperature": temperature, "base_url": self.base_url}
            if json_mode:
                kwargs["format"] = "json"
            chat = ChatOllama(**kwargs)
            self._chat_models[key] = chat
        return chat

    async def complete(self, messages: list[ChatMessage], options: Optional[CompletionOptions] = None) -> str:
        options = options or CompletionOptions()
        model = options.model or self.model
        temperature = self.temperature if options.temperature is None else options.temperature
        timeout_seconds = options.timeout or self.timeout
        chat = self._chat_model(model, temperature, options.json_mode)

        start_time = time.perf_counter()
        try:
            result = await asyncio.wait_for(chat.ainvoke(to_langchain_messages(messages)), timeout=timeout_seconds)
        except asyncio.TimeoutError:
            logger.error("LLM call timed out after %.2fs model=%s (timeout: %ss)", time.perf_counter() - start_time, model, timeout_seconds)
            raise TimeoutError(f"LLM call timed out after {timeout_seconds}s") from None

        elapsed = time.perf_counter() - start_time
        content = result.content if isinstance(result.content, str) else str(result.content)
        logger.info("LLM call completed in %.2fs model=%s messages=%d json=%s", elapsed, model, len(messages), options.json_mode)
        return content
