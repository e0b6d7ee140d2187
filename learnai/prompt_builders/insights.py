"""
Prompts for the structured (JSON) reasoning calls: course recommendations,
learning-path suggestions and progress analysis. Each builder returns
(system_prompt, user_prompt).
"""

from __future__ import annotations

import json
from typing import Any

from learnai.prompt_builders.template import build_from_template

SYSTEM_RECOMMENDATIONS = (
    "You are an AI learning assistant that provides personalized course recommendations based on "
    "user progress and skill level. Analyze the user's learning data and provide relevant "
    "recommendations with explanations. Respond with JSON only."
)

TEMPLATE_RECOMMENDATIONS = """User skill level: {skill_level}
User progress: {user_progress}
Completed courses: {completed_courses}

Please provide 3-5 personalized course recommendations in JSON format with the following structure:
{{
  "recommendations": [
    {{
      "title": "Course Title",
      "description": "Course description",
      "reason": "Why this course is recommended for this user",
      "priority": 1-5,
      "estimatedDuration": duration_in_minutes
    }}
  ]
}}"""

SYSTEM_LEARNING_PATH = (
    "You are an AI learning path generator that creates personalized learning journeys based on "
    "user goals, skill level, and time availability. Respond with JSON only."
)

TEMPLATE_LEARNING_PATH = """User goals: {goals}
Current skill level: {skill_level}
Time available per week: {hours_per_week} hours

Please create a personalized learning path in JSON format:
{{
  "path": {{
    "title": "Learning Path Title",
    "description": "Path description",
    "steps": [
      {{
        "title": "Step title",
        "description": "Step description",
        "estimatedDuration": duration_in_minutes,
        "skills": ["skill1", "skill2"]
      }}
    ],
    "totalDuration": total_duration_in_minutes
  }}
}}"""

SYSTEM_PROGRESS_ANALYSIS = (
    "You are an AI learning analytics expert that analyzes user progress and provides insights "
    "and recommendations. Respond with JSON only."
)

TEMPLATE_PROGRESS_ANALYSIS = """User progress data: {progress_data}
Assessment results: {assessment_results}

Please analyze the user's learning progress and provide insights in JSON format:
{{
  "analysis": {{
    "strengths": ["strength1", "strength2"],
    "weaknesses": ["weakness1", "weakness2"],
    "recommendations": ["recommendation1", "recommendation2"],
    "nextSteps": ["step1", "step2"],
    "motivationalMessage": "Encouraging message for the user"
  }}
}}"""


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def build_recommendation_prompts(
    skill_level: str,
    user_progress: list[dict],
    completed_courses: list[dict],
) -> tuple[str, str]:
    user_prompt = build_from_template(
        TEMPLATE_RECOMMENDATIONS,
        skill_level=skill_level,
        user_progress=_dumps(user_progress),
        completed_courses=_dumps(completed_courses),
    )
    return SYSTEM_RECOMMENDATIONS, user_prompt


def build_learning_path_prompts(goals: list[str], skill_level: str, hours_per_week: int) -> tuple[str, str]:
    user_prompt = build_from_template(
        TEMPLATE_LEARNING_PATH,
        goals=", ".join(goals),
        skill_level=skill_level,
        hours_per_week=hours_per_week,
    )
    return SYSTEM_LEARNING_PATH, user_prompt


def build_progress_analysis_prompts(progress_data: dict, assessment_results: list[dict]) -> tuple[str, str]:
    user_prompt = build_from_template(
        TEMPLATE_PROGRESS_ANALYSIS,
        progress_data=_dumps(progress_data),
        assessment_results=_dumps(assessment_results),
    )
    return SYSTEM_PROGRESS_ANALYSIS, user_prompt
