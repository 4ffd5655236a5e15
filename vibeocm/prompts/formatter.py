"""
Prompt substitution.
"""

from typing import Optional

from vibeocm.core.constants import REFINEMENT_INSTRUCTION, MessageRole
from vibeocm.domain.project import ProjectData
from vibeocm.prompts.templates import ARTIFACT_TYPE_TO_PROMPT, GENERIC_ARTIFACT_PROMPT, SYSTEM_PROMPT


def format_prompt_with_project_data(
    prompt_template: str,
    project: ProjectData,
    extra: Optional[dict[str, str]] = None,
) -> str:
    """
    Fill a prompt template with project data.

    Every occurrence of each {placeholder} is replaced; unknown braces are
    left alone, so templates may contain literal JSON or Markdown.

    Args:
        prompt_template: Template with {camelCase} placeholders
        project: Project data to insert
        extra: Additional placeholder values

    Returns:
        The formatted prompt
    """
    values = project.as_template_values()
    if extra:
        values.update(extra)

    prompt = prompt_template
    for key, value in values.items():
        prompt = prompt.replace(f"{{{key}}}", value)
    return prompt


def get_prompt_template(artifact_type: str) -> str:
    """Template for an artifact type, falling back to the generic one."""
    return ARTIFACT_TYPE_TO_PROMPT.get(artifact_type, GENERIC_ARTIFACT_PROMPT)


def build_user_prompt(artifact_type: str, project: ProjectData) -> str:
    return format_prompt_with_project_data(
        get_prompt_template(artifact_type),
        project,
        extra={"artifactType": artifact_type},
    )


def build_messages(
    user_prompt: str,
    system_prompt: str = SYSTEM_PROMPT,
    current_content: Optional[str] = None,
    refinement_feedback: Optional[str] = None,
) -> list[dict[str, str]]:
    """
    Chat messages for a generation or refinement call.

    A refinement replays the current content as the assistant turn and
    asks for a revision in a final user turn.
    """
    messages = [
        {"role": MessageRole.SYSTEM.value, "content": system_prompt},
        {"role": MessageRole.USER.value, "content": user_prompt},
    ]
    if refinement_feedback and current_content:
        messages.extend(
            [
                {"role": MessageRole.ASSISTANT.value, "content": current_content},
                {
                    "role": MessageRole.USER.value,
                    "content": REFINEMENT_INSTRUCTION.format(feedback=refinement_feedback),
                },
            ]
        )
    return messages
