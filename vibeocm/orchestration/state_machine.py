"""
State machine for the wizard flow.
"""

from typing import Optional

from vibeocm.core.constants import WizardStep
from vibeocm.core.logging import get_logger

logger = get_logger(__name__)


class StateTransitionError(Exception):
    """Invalid state transition."""

    def __init__(self, from_state: str, to_state: str) -> None:
        super().__init__(f"Cannot go to '{to_state}' from step '{from_state}'")
        self.from_state = from_state
        self.to_state = to_state


class StateMachine:
    """
    Generic state machine over string-valued states.
    """

    def __init__(
        self,
        states: list[str],
        initial_state: str,
        transitions: dict[str, list[str]],
        back_steps: Optional[dict[str, str]] = None,
    ) -> None:
        """
        Initialize the state machine.

        Args:
            states: List of valid states
            initial_state: Starting state
            transitions: Valid transitions {from_state: [to_states]}
            back_steps: Where "back" leads from each state, if anywhere
        """
        self.states = set(states)
        self.initial_state = initial_state
        self.transitions = transitions
        self.back_steps = back_steps or {}

        # Validate
        if initial_state not in self.states:
            raise ValueError(f"Initial state '{initial_state}' not in states")
        for source, targets in transitions.items():
            unknown = [t for t in [source, *targets] if t not in self.states]
            if unknown:
                raise ValueError(f"Transition from '{source}' uses unknown states {unknown}")

    def can_transition(self, from_state: str, to_state: str) -> bool:
        """Check if transition is valid."""
        if from_state not in self.transitions:
            return False
        return to_state in self.transitions[from_state]

    def transition(self, from_state: str, to_state: str) -> str:
        """
        Validate a transition and return the new state.

        Raises:
            StateTransitionError: If the transition is not allowed
        """
        if not self.can_transition(from_state, to_state):
            logger.warning("Rejected transition", from_state=from_state, to_state=to_state)
            raise StateTransitionError(from_state, to_state)
        return to_state

    def previous(self, current_state: str) -> str:
        """State that "back" leads to; unchanged when there is none."""
        return self.back_steps.get(current_state, current_state)


WIZARD_STEPS = [step.value for step in WizardStep]

WIZARD_TRANSITIONS = {
    WizardStep.HERO.value: [WizardStep.API_KEY.value],
    WizardStep.API_KEY.value: [WizardStep.PROJECT_BASICS.value],
    WizardStep.PROJECT_BASICS.value: [WizardStep.STAKEHOLDERS.value, WizardStep.API_KEY.value],
    WizardStep.STAKEHOLDERS.value: [WizardStep.BENEFITS.value, WizardStep.PROJECT_BASICS.value],
    WizardStep.BENEFITS.value: [WizardStep.ARTIFACT_SELECTION.value, WizardStep.STAKEHOLDERS.value],
    WizardStep.ARTIFACT_SELECTION.value: [WizardStep.RESULTS.value, WizardStep.BENEFITS.value],
    WizardStep.RESULTS.value: [
        WizardStep.REFINEMENT.value,
        WizardStep.ARTIFACT_SELECTION.value,
        WizardStep.RESULTS.value,
    ],
    WizardStep.REFINEMENT.value: [WizardStep.RESULTS.value],
}

WIZARD_BACK_STEPS = {
    WizardStep.PROJECT_BASICS.value: WizardStep.API_KEY.value,
    WizardStep.STAKEHOLDERS.value: WizardStep.PROJECT_BASICS.value,
    WizardStep.BENEFITS.value: WizardStep.STAKEHOLDERS.value,
    WizardStep.ARTIFACT_SELECTION.value: WizardStep.BENEFITS.value,
    WizardStep.RESULTS.value: WizardStep.ARTIFACT_SELECTION.value,
    WizardStep.REFINEMENT.value: WizardStep.RESULTS.value,
}


def create_wizard_state_machine() -> StateMachine:
    """Create state machine for the wizard."""
    return StateMachine(
        states=WIZARD_STEPS,
        initial_state=WizardStep.HERO.value,
        transitions=WIZARD_TRANSITIONS,
        back_steps=WIZARD_BACK_STEPS,
    )
