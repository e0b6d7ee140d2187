"""
Outbound reasoning-service clients.

Import the Ollama client from its module (`infra.llm.ollama`); it pulls in
langchain-ollama, which tests that only need the contract can avoid.
"""

from infra.llm.base import ChatMessage, CompletionOptions, ReasoningClient

__all__ = ["ChatMessage", "CompletionOptions", "ReasoningClient"]
