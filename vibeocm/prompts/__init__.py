"""
Prompt templates and substitution for OCM artifacts.
"""

from vibeocm.prompts.formatter import (
    build_messages,
    build_user_prompt,
    format_prompt_with_project_data,
    get_prompt_template,
)
from vibeocm.prompts.mock_responses import generate_mock_response
from vibeocm.prompts.templates import ARTIFACT_TYPE_TO_PROMPT, SYSTEM_PROMPT

__all__ = [
    "ARTIFACT_TYPE_TO_PROMPT",
    "SYSTEM_PROMPT",
    "build_messages",
    "build_user_prompt",
    "format_prompt_with_project_data",
    "generate_mock_response",
    "get_prompt_template",
]
