"""
Orchestration module for the wizard flow.
"""

from vibeocm.orchestration.state_machine import (
    WIZARD_BACK_STEPS,
    WIZARD_TRANSITIONS,
    StateMachine,
    StateTransitionError,
    create_wizard_state_machine,
)

__all__ = [
    "StateMachine",
    "StateTransitionError",
    "WIZARD_BACK_STEPS",
    "WIZARD_TRANSITIONS",
    "create_wizard_state_machine",
]
