"""
Unit tests for wizard form validation.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from vibeocm.core.constants import ApiProvider, AuthMethod
from vibeocm.domain.project import (
    BenefitsForm,
    Credentials,
    ProjectBasicsForm,
    ProjectData,
    StakeholdersForm,
)


def _messages(exc: ValidationError) -> list[str]:
    return [error["msg"].removeprefix("Value error, ") for error in exc.errors()]


class TestCredentials:
    def test_valid_openai_key(self) -> None:
        creds = Credentials(auth_method="openai", api_key="  sk-abcdefghijklmnopqrstu  ")
        assert creds.api_key_value == "sk-abcdefghijklmnopqrstu"
        assert creds.provider is ApiProvider.OPENAI

    @pytest.mark.parametrize("key", ["abcdefghijklmnopqrstuvwxyz", "sk-short"])
    def test_invalid_openai_key(self, key: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Credentials(auth_method="openai", api_key=key)
        assert _messages(exc_info.value) == ['Please enter a valid OpenAI API key (starts with "sk-")']

    def test_missing_key(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Credentials(auth_method="mistral", api_key="   ")
        assert _messages(exc_info.value) == ["API key is required"]

    def test_short_mistral_key(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Credentials(auth_method="mistral", api_key="abc")
        assert _messages(exc_info.value) == ["Please enter a valid Mistral API key"]

    def test_mistral_key_needs_no_prefix(self) -> None:
        creds = Credentials(auth_method="mistral", api_key="mistralkey123")
        assert creds.provider is ApiProvider.MISTRAL

    def test_trial_ignores_key(self) -> None:
        creds = Credentials(auth_method="trial", api_key="anything")
        assert creds.api_key is None
        assert creds.provider is ApiProvider.MISTRAL

    def test_passphrase_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Credentials(auth_method="passphrase")
        assert _messages(exc_info.value) == ["Passphrase is required"]

    def test_passphrase_min_length(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Credentials(auth_method="passphrase", passphrase="too short")
        assert _messages(exc_info.value) == ["Passphrase must be at least 10 characters long"]

    def test_passphrase_length_ignores_padding(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Credentials(auth_method="passphrase", passphrase="   short    ")
        assert _messages(exc_info.value) == ["Passphrase must be at least 10 characters long"]

    def test_passphrase_method_uses_default_key(self) -> None:
        creds = Credentials(auth_method="passphrase", passphrase="correct horse battery")
        assert creds.auth_method.uses_default_key
        assert creds.passphrase_value == "correct horse battery"
        assert creds.api_key is None

    def test_openai_is_default_method(self) -> None:
        creds = Credentials(api_key="sk-abcdefghijklmnopqrstu")
        assert creds.auth_method is AuthMethod.OPENAI


class TestProjectBasics:
    def test_valid(self) -> None:
        form = ProjectBasicsForm(name=" CRM ", goal="Adopt a CRM", start_date="2025-01-01", end_date="2025-03-01")
        assert form.name == "CRM"
        assert form.end_date == date(2025, 3, 1)

    def test_same_day_is_allowed(self) -> None:
        form = ProjectBasicsForm(name="CRM", goal="Adopt", start_date="2025-01-01", end_date="2025-01-01")
        assert form.start_date == form.end_date

    def test_end_before_start(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ProjectBasicsForm(name="CRM", goal="Adopt", start_date="2025-03-01", end_date="2025-01-01")
        assert _messages(exc_info.value) == ["End date must be after start date"]

    def test_all_fields_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ProjectBasicsForm()
        assert _messages(exc_info.value) == [
            "Project name is required",
            "Project goal is required",
            "Start date is required",
            "End date is required",
        ]


class TestStakeholders:
    def test_at_least_one(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            StakeholdersForm(stakeholders=[], impacted_users=10)
        assert _messages(exc_info.value) == ["At least one stakeholder is required"]

    def test_blank_role_and_impact(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            StakeholdersForm(stakeholders=[{"role": " ", "impact": ""}], impacted_users=10)
        errors = exc_info.value.errors()
        assert [e["loc"] for e in errors] == [("stakeholders", 0, "role"), ("stakeholders", 0, "impact")]
        assert _messages(exc_info.value) == [
            "Stakeholder role is required",
            "Impact description is required",
        ]

    @pytest.mark.parametrize("users", [0, -5])
    def test_impacted_users_positive(self, users: int) -> None:
        with pytest.raises(ValidationError) as exc_info:
            StakeholdersForm(stakeholders=[{"role": "Sales", "impact": "High"}], impacted_users=users)
        assert _messages(exc_info.value) == ["Number of impacted users must be greater than 0"]


class TestBenefits:
    def test_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            BenefitsForm(org_benefits="Savings", user_benefits="", challenges="")
        assert _messages(exc_info.value) == [
            "User benefits are required",
            "Expected challenges are required",
        ]


def test_project_data_merges_forms() -> None:
    data = ProjectData()
    data = data.merge(ProjectBasicsForm(name="CRM", goal="Adopt", start_date="2025-01-01", end_date="2025-02-01"))
    data = data.merge(StakeholdersForm(stakeholders=[{"role": "Sales", "impact": "High"}], impacted_users=12))

    assert data.name == "CRM"
    assert data.impacted_users == 12
    assert data.stakeholders[0].role == "Sales"
    assert data.org_benefits == ""
