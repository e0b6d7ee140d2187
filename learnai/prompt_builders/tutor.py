"""AI tutor persona prompt. The learner's context is folded into the system text."""

from __future__ import annotations

import json

from learnai.prompt_builders.template import build_from_template
from learnai.schemas.tutor_schemas import UserContext

TEMPLATE_TUTOR_SYSTEM = """You are an AI tutor that provides personalized learning guidance. You use the Socratic method to guide students to understanding through strategic questioning. Be encouraging, patient, and adaptive to the student's learning style and pace.

User context: {user_context}

Guidelines:
- Ask probing questions to guide understanding
- Provide hints without giving away answers
- Celebrate progress and achievements
- Adapt explanations to the user's skill level ({skill_level})
- Be encouraging and supportive
"""


def build_tutor_system_prompt(user_context: UserContext) -> str:
    context_json = json.dumps(user_context.model_dump(mode="json", by_alias=True), ensure_ascii=False)
    return build_from_template(
        TEMPLATE_TUTOR_SYSTEM,
        user_context=context_json,
        skill_level=user_context.skill_level,
    ).strip()
