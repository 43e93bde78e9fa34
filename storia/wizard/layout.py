"""
Step indicator policy for wizard layouts.

The controller allows any in-range jump; these helpers decide what a step
header shows and which jumps the UI offers.
"""

from enum import Enum

from .controller import WizardState


class StepStatus(str, Enum):
    """How a step is drawn in the step indicator."""
    COMPLETED = "completed"
    ACTIVE = "active"
    UPCOMING = "upcoming"


def step_status(state: WizardState, step: int) -> StepStatus:
    # Completion wins over "active" so revisited steps keep their check mark
    if step in state.completed_steps:
        return StepStatus.COMPLETED
    if step == state.current_step:
        return StepStatus.ACTIVE
    if step < state.current_step:
        return StepStatus.COMPLETED
    return StepStatus.UPCOMING


def can_navigate_to(state: WizardState, step: int) -> bool:
    """Backwards and current are always reachable; forwards once the current step is done."""
    if not 1 <= step <= state.step_count:
        return False
    if step <= state.current_step:
        return True
    return state.current_step in state.completed_steps


def next_label(state: WizardState, submit_label: str = "Generate") -> str:
    return submit_label if state.is_last_step else "Continue"
