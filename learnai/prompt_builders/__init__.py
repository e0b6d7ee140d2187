"""
Prompt builders for the reasoning service. All prompt text lives here; services
receive built prompts.
"""

from learnai.prompt_builders.tutor import build_tutor_system_prompt
from learnai.prompt_builders.insights import (
    build_learning_path_prompts,
    build_progress_analysis_prompts,
    build_recommendation_prompts,
)

__all__ = [
    "build_tutor_system_prompt",
    "build_recommendation_prompts",
    "build_learning_path_prompts",
    "build_progress_analysis_prompts",
]
