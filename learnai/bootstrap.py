"""
Process-wide wiring for the reasoning service.

The client is built once per process and injected through `get_reasoning_service`;
tests override that dependency with a fake client instead of patching globals.
"""

from functools import lru_cache

from infra.llm.base import ReasoningClient
from learnai.config import get_settings
from learnai.services.reasoning_service import ReasoningService


def build_reasoning_client() -> ReasoningClient:
    from infra.llm.ollama import OllamaReasoningClient

    settings = get_settings()
    return OllamaReasoningClient(
        model=settings.LLM_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        base_url=settings.OLLAMA_BASE_URL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )


def build_reasoning_service(client: ReasoningClient) -> ReasoningService:
    settings = get_settings()
    return ReasoningService(
        client,
        model=settings.LLM_MODEL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
        history_token_budget=settings.TUTOR_HISTORY_TOKEN_BUDGET,
    )


@lru_cache
def get_reasoning_service() -> ReasoningService:
    return build_reasoning_service(build_reasoning_client())
