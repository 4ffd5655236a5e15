"""
Prompt templates for OCM artifact generation.

Placeholders use {camelCase} names and are filled by
vibeocm.prompts.formatter.format_prompt_with_project_data.
"""

from vibeocm.core.constants import ArtifactType

SYSTEM_PROMPT = """You are an expert in Organizational Change Management (OCM).
Your task is to create professional, comprehensive OCM deliverables based on the provided project context.
Format your response in Markdown with clear headings, bullet points, and sections.
Be specific, practical, and actionable in your recommendations."""

PROJECT_CONTEXT_BLOCK = """Project Name: {projectName}
Project Goal: {projectGoal}
Timeline: {startDate} to {endDate}
Number of Impacted Users: {impactedUsers}

Stakeholders:
{stakeholders}

Benefits to Organization:
{orgBenefits}

Benefits to End Users:
{userBenefits}

Challenges:
{challenges}"""

CHANGE_PLAN_PROMPT = f"""
Generate a comprehensive Change Management Plan for the following project:

{PROJECT_CONTEXT_BLOCK}

The Change Management Plan should include:
1. Executive Summary
2. Project Timeline
3. Stakeholder Analysis
4. Change Strategy with phases
5. Communication Approach
6. Training Recommendations
7. Risk Mitigation Strategies
8. Success Metrics

Please format the Change Management Plan in Markdown format.
"""

COMMUNICATION_PLAN_PROMPT = f"""
Generate a detailed Communication Plan for the following project:

{PROJECT_CONTEXT_BLOCK}

The Communication Plan should include:
1. Communication Objectives
2. Key Messages for different audiences
3. Audience Segmentation
4. Communication Channels
5. Communication Timeline
6. Feedback Mechanisms
7. Templates for key communications

Please format the Communication Plan in Markdown format.
"""

COMMUNICATION_TEMPLATES_PROMPT = f"""
Generate Communication Message Templates for the following project:

{PROJECT_CONTEXT_BLOCK}

Please create templates for the following communications:
1. Initial Announcement (Executive Sponsor to All Staff)
2. Detailed Information (Project Team to Affected Departments)
3. Training Invitation (Training Team to End Users)
4. Go-Live Reminder (Project Manager to All Stakeholders)
5. Post-Implementation Survey (Change Manager to End Users)

Each template should include:
- Subject line
- Greeting
- Body with key messages
- Call to action
- Closing

Please format the Communication Templates in Markdown format.
"""

# Kept short: small models (mistral-small) follow terse instructions better
STAKEHOLDER_STRATEGY_PROMPT = """
# Stakeholder Engagement Strategy

You are an expert stakeholder management consultant tasked with creating a concise, effective Stakeholder Engagement Strategy.

PROJECT CONTEXT:
- Name: {projectName}
- Goal: {projectGoal}
- Timeline: {startDate} to {endDate}
- Impacted Users: {impactedUsers}
- Key Stakeholders:
{stakeholders}
- Org Benefits: {orgBenefits}
- User Benefits: {userBenefits}
- Challenges: {challenges}

INSTRUCTIONS:
Create a focused Stakeholder Engagement Strategy with these sections:

1. Stakeholder Analysis (identify 4-5 key stakeholder groups and their primary interests)

2. Stakeholder Mapping (classify stakeholders into 4 quadrants: high/low influence and high/low interest)

3. Engagement Approaches (specify 2-3 engagement tactics for each stakeholder group)

4. Key Concerns (list 3-4 major stakeholder concerns and specific mitigation strategies)

5. Engagement Timeline (outline 4-5 key engagement milestones with dates)

6. Success Metrics (recommend 3-4 measurable indicators of successful stakeholder engagement)

Use clear, direct language. Format in Markdown with ## for section headers and bullet points for lists.

*Disclaimer: This draft needs to be refined to suit the context further.*
"""

FEEDBACK_SURVEY_PROMPT = f"""
Generate Feedback Survey Templates for the following project:

{PROJECT_CONTEXT_BLOCK}

Please create templates for the following surveys:
1. Pre-implementation Readiness Assessment
2. Training Effectiveness Survey
3. Post-implementation Satisfaction Survey
4. 30-Day Follow-up Survey

Each survey template should include:
- Introduction text
- 5-10 relevant questions (mix of multiple choice, rating scales, and open-ended)
- Thank you message

Please format the Feedback Survey Templates in Markdown format.
"""

# Used for artifact types without a dedicated template
GENERIC_ARTIFACT_PROMPT = """
Generate a {artifactType} for the following project details:

""" + PROJECT_CONTEXT_BLOCK + """

Please format the {artifactType} in Markdown format.
"""

ARTIFACT_TYPE_TO_PROMPT: dict[str, str] = {
    ArtifactType.CHANGE_PLAN.value: CHANGE_PLAN_PROMPT,
    ArtifactType.COMMUNICATION_PLAN.value: COMMUNICATION_PLAN_PROMPT,
    ArtifactType.COMMUNICATION_TEMPLATES.value: COMMUNICATION_TEMPLATES_PROMPT,
    ArtifactType.STAKEHOLDER_STRATEGY.value: STAKEHOLDER_STRATEGY_PROMPT,
    ArtifactType.FEEDBACK_SURVEY.value: FEEDBACK_SURVEY_PROMPT,
}
