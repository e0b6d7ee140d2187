"""
Token budgeting for the context sent to the reasoning service.

Estimates are word-based (~1.33 tokens per English word); they only need to be
good enough to keep long tutoring transcripts under the model's window.
"""

from __future__ import annotations

from typing import Sequence

from learnai.schemas.tutor_schemas import Turn

# Role tag and separators the chat template adds per message.
PER_TURN_OVERHEAD = 4


def estimate_tokens(text: str) -> int:
    """Estimate token count from text."""
    if not text:
        return 0
    words = len(text.split())
    return int(words * 1.33)


def truncate_text(text: str, max_tokens: int, suffix: str = "...") -> str:
    """
    Truncate text to fit within max_tokens.
    Tries to preserve word boundaries.
    """
    if estimate_tokens(text) <= max_tokens:
        return text

    max_chars = max_tokens * 3  # conservative: ~4 chars per token
    truncated = text[:max_chars]

    last_space = truncated.rfind(" ")
    if last_space > max_chars * 0.8:
        truncated = truncated[:last_space]

    return truncated + suffix


def bound_transcript(turns: Sequence[Turn], max_tokens: int) -> list[Turn]:
    """
    Keep the most recent turns whose combined estimate fits in max_tokens.

    The newest turn is always kept (truncated if it alone exceeds the budget);
    older turns are dropped whole, oldest first, so the kept window stays contiguous.
    """
    if not turns:
        return []

    newest = turns[-1]
    newest_cost = estimate_tokens(newest.content) + PER_TURN_OVERHEAD
    if newest_cost > max_tokens:
        budget = max(1, max_tokens - PER_TURN_OVERHEAD)
        return [Turn(role=newest.role, content=truncate_text(newest.content, budget))]

    kept = [newest]
    used = newest_cost
    for turn in reversed(turns[:-1]):
        cost = estimate_tokens(turn.content) + PER_TURN_OVERHEAD
        if used + cost > max_tokens:
            break
        kept.append(turn)
        used += cost
    kept.reverse()
    return kept
