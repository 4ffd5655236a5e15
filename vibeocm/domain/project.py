"""
Project form-state models.

Each wizard form is validated on its own; ProjectData accumulates the
validated forms and is what prompts are rendered from.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field, SecretStr, ValidationInfo, field_validator

from vibeocm.core.config import settings
from vibeocm.core.constants import (
    MISTRAL_KEY_MIN_LENGTH,
    OPENAI_KEY_MIN_LENGTH,
    OPENAI_KEY_PREFIX,
    ApiProvider,
    AuthMethod,
)


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise ValueError(message)
    return value.strip()


class Stakeholder(BaseModel):
    """A stakeholder group and how the change affects it."""

    role: str = Field(default="", validate_default=True, description="e.g. Department Managers")
    impact: str = Field(default="", validate_default=True, description="e.g. High - daily workflow changes")

    @field_validator("role")
    @classmethod
    def role_required(cls, v: str) -> str:
        return _require_text(v, "Stakeholder role is required")

    @field_validator("impact")
    @classmethod
    def impact_required(cls, v: str) -> str:
        return _require_text(v, "Impact description is required")


class Credentials(BaseModel):
    """Authentication submitted in the api-key step."""

    auth_method: AuthMethod = Field(default=AuthMethod.OPENAI)
    api_key: Optional[SecretStr] = Field(default=None, validate_default=True)
    passphrase: Optional[SecretStr] = Field(default=None, validate_default=True)

    @field_validator("api_key")
    @classmethod
    def check_api_key(cls, v: Optional[SecretStr], info: ValidationInfo) -> Optional[SecretStr]:
        method = info.data.get("auth_method")
        if method not in (AuthMethod.OPENAI, AuthMethod.MISTRAL):
            # Passphrase and trial users never send a key of their own
            return None

        key = v.get_secret_value().strip() if v else ""
        if not key:
            raise ValueError("API key is required")
        if method is AuthMethod.OPENAI and (
            not key.startswith(OPENAI_KEY_PREFIX) or len(key) < OPENAI_KEY_MIN_LENGTH
        ):
            raise ValueError('Please enter a valid OpenAI API key (starts with "sk-")')
        if method is AuthMethod.MISTRAL and len(key) < MISTRAL_KEY_MIN_LENGTH:
            raise ValueError("Please enter a valid Mistral API key")
        return SecretStr(key)

    @field_validator("passphrase")
    @classmethod
    def check_passphrase(cls, v: Optional[SecretStr], info: ValidationInfo) -> Optional[SecretStr]:
        if info.data.get("auth_method") is not AuthMethod.PASSPHRASE:
            return None

        phrase = v.get_secret_value() if v else ""
        if not phrase.strip():
            raise ValueError("Passphrase is required")
        min_length = settings.security.passphrase_min_length
        if len(phrase.strip()) < min_length:
            raise ValueError(f"Passphrase must be at least {min_length} characters long")
        return v

    @property
    def provider(self) -> ApiProvider:
        return self.auth_method.provider

    @property
    def api_key_value(self) -> str:
        return self.api_key.get_secret_value() if self.api_key else ""

    @property
    def passphrase_value(self) -> str:
        return self.passphrase.get_secret_value() if self.passphrase else ""


class ProjectBasicsForm(BaseModel):
    """Step 1: what the change is and when it happens."""

    name: str = Field(default="", validate_default=True)
    goal: str = Field(default="", validate_default=True)
    start_date: Optional[date] = Field(default=None, validate_default=True)
    end_date: Optional[date] = Field(default=None, validate_default=True)

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return _require_text(v, "Project name is required")

    @field_validator("goal")
    @classmethod
    def goal_required(cls, v: str) -> str:
        return _require_text(v, "Project goal is required")

    @field_validator("start_date")
    @classmethod
    def start_required(cls, v: Optional[date]) -> date:
        if v is None:
            raise ValueError("Start date is required")
        return v

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, v: Optional[date], info: ValidationInfo) -> date:
        if v is None:
            raise ValueError("End date is required")
        start = info.data.get("start_date")
        if start is not None and v < start:
            raise ValueError("End date must be after start date")
        return v


class StakeholdersForm(BaseModel):
    """Step 2: who is affected, and how many users."""

    stakeholders: list[Stakeholder] = Field(default_factory=list, validate_default=True)
    impacted_users: int = Field(default=0, validate_default=True)

    @field_validator("stakeholders")
    @classmethod
    def at_least_one(cls, v: list[Stakeholder]) -> list[Stakeholder]:
        if not v:
            raise ValueError("At least one stakeholder is required")
        return v

    @field_validator("impacted_users")
    @classmethod
    def positive_users(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Number of impacted users must be greater than 0")
        return v


class BenefitsForm(BaseModel):
    """Step 3: why the change is worth it, and what will be hard."""

    org_benefits: str = Field(default="", validate_default=True)
    user_benefits: str = Field(default="", validate_default=True)
    challenges: str = Field(default="", validate_default=True)

    @field_validator("org_benefits")
    @classmethod
    def org_required(cls, v: str) -> str:
        return _require_text(v, "Organizational benefits are required")

    @field_validator("user_benefits")
    @classmethod
    def users_required(cls, v: str) -> str:
        return _require_text(v, "User benefits are required")

    @field_validator("challenges")
    @classmethod
    def challenges_required(cls, v: str) -> str:
        return _require_text(v, "Expected challenges are required")


class ProjectData(BaseModel):
    """Accumulated project details used to render prompts."""

    name: str = ""
    goal: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    stakeholders: list[Stakeholder] = Field(default_factory=list)
    impacted_users: int = 0
    org_benefits: str = ""
    user_benefits: str = ""
    challenges: str = ""

    def merge(self, form: BaseModel) -> "ProjectData":
        """Return a copy updated with a validated form's fields."""
        return self.model_copy(update=dict(form))

    def as_template_values(self) -> dict[str, Any]:
        """Values for the prompt placeholders."""
        return {
            "projectName": self.name,
            "projectGoal": self.goal,
            "startDate": self.start_date.isoformat() if self.start_date else "",
            "endDate": self.end_date.isoformat() if self.end_date else "",
            "impactedUsers": str(self.impacted_users),
            "stakeholders": "\n".join(f"- {s.role}: {s.impact}" for s in self.stakeholders),
            "orgBenefits": self.org_benefits,
            "userBenefits": self.user_benefits,
            "challenges": self.challenges,
        }
