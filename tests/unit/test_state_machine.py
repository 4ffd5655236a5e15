"""
Unit tests for the wizard state machine.
"""

import pytest

from vibeocm.core.constants import WizardStep
from vibeocm.orchestration import StateMachine, StateTransitionError, create_wizard_state_machine


@pytest.fixture
def machine() -> StateMachine:
    return create_wizard_state_machine()


def test_starts_on_hero(machine: StateMachine) -> None:
    assert machine.initial_state == WizardStep.HERO.value


@pytest.mark.parametrize(
    ("source", "target"),
    [
        ("hero", "api-key"),
        ("api-key", "project-basics"),
        ("project-basics", "stakeholders"),
        ("project-basics", "api-key"),
        ("stakeholders", "benefits"),
        ("benefits", "artifact-selection"),
        ("artifact-selection", "results"),
        ("results", "refinement"),
        ("results", "results"),
        ("results", "artifact-selection"),
        ("refinement", "results"),
    ],
)
def test_allowed_transitions(machine: StateMachine, source: str, target: str) -> None:
    assert machine.can_transition(source, target)
    assert machine.transition(source, target) == target


@pytest.mark.parametrize(
    ("source", "target"),
    [
        ("hero", "results"),
        ("api-key", "stakeholders"),
        ("stakeholders", "artifact-selection"),
        ("refinement", "artifact-selection"),
        ("artifact-selection", "refinement"),
    ],
)
def test_rejected_transitions(machine: StateMachine, source: str, target: str) -> None:
    assert not machine.can_transition(source, target)
    with pytest.raises(StateTransitionError):
        machine.transition(source, target)


@pytest.mark.parametrize(
    ("current", "expected"),
    [
        ("project-basics", "api-key"),
        ("stakeholders", "project-basics"),
        ("benefits", "stakeholders"),
        ("artifact-selection", "benefits"),
        ("results", "artifact-selection"),
        ("refinement", "results"),
        ("hero", "hero"),
        ("api-key", "api-key"),
    ],
)
def test_back_navigation(machine: StateMachine, current: str, expected: str) -> None:
    assert machine.previous(current) == expected


def test_back_steps_are_valid_transitions(machine: StateMachine) -> None:
    for current, previous in machine.back_steps.items():
        assert machine.can_transition(current, previous)


def test_unknown_states_are_rejected() -> None:
    with pytest.raises(ValueError):
        StateMachine(states=["a"], initial_state="a", transitions={"a": ["b"]})
