"""
Storia Wizard Controller

Step navigation state machine shared by every creation flow.
"""

from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional, Sequence, Set

from storia.core.logging_config import get_logger
from storia.core.exceptions import WizardConfigurationError
from .steps import StepDescriptor

logger = get_logger("wizard.controller")

StepValidator = Callable[[int], bool]


@dataclass(frozen=True)
class WizardState:
    """Read-only projection of a controller's navigation state."""
    current_step: int
    completed_steps: FrozenSet[int]
    step_count: int

    @property
    def can_go_back(self) -> bool:
        return self.current_step > 1

    @property
    def can_go_next(self) -> bool:
        return self.current_step < self.step_count

    @property
    def is_first_step(self) -> bool:
        return self.current_step == 1

    @property
    def is_last_step(self) -> bool:
        return self.current_step == self.step_count


class WizardController:
    """
    Tracks the current step and completed steps of a linear wizard.

    Features:
    - +1/-1 navigation and arbitrary in-range jumps
    - Completion marks that survive backward navigation
    - Pluggable per-step validation (always passes by default)

    Out-of-range or blocked navigation is a silent no-op; each operation
    returns whether the state actually changed.
    """

    def __init__(
        self,
        steps: Sequence[StepDescriptor],
        initial_step: int = 1,
        validator: Optional[StepValidator] = None
    ):
        """
        Initialize the controller.

        Args:
            steps: Ordered step descriptors; only their count is used
            initial_step: 1-based step to start on, clamped into range
            validator: Optional predicate replacing the default validate_step
        """
        if not steps:
            raise WizardConfigurationError("A wizard needs at least one step")

        self._steps = tuple(steps)
        self._initial_step = min(max(initial_step, 1), len(self._steps))
        self._current_step = self._initial_step
        self._completed_steps: Set[int] = set()
        self._validator = validator

    @property
    def steps(self) -> Sequence[StepDescriptor]:
        return self._steps

    @property
    def step_count(self) -> int:
        return len(self._steps)

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def completed_steps(self) -> FrozenSet[int]:
        return frozenset(self._completed_steps)

    @property
    def can_go_back(self) -> bool:
        return self._current_step > 1

    @property
    def can_go_next(self) -> bool:
        return self._current_step < self.step_count

    @property
    def is_last_step(self) -> bool:
        return self._current_step == self.step_count

    @property
    def state(self) -> WizardState:
        return WizardState(
            current_step=self._current_step,
            completed_steps=frozenset(self._completed_steps),
            step_count=self.step_count,
        )

    @property
    def current_descriptor(self) -> StepDescriptor:
        return self._steps[self._current_step - 1]

    def go_to_step(self, step: int) -> bool:
        """Jump to any step in range; completion marks are untouched."""
        if not 1 <= step <= self.step_count:
            logger.debug(f"Ignoring jump to step {step} (1..{self.step_count})")
            return False
        self._current_step = step
        return True

    def next_step(self) -> bool:
        """Mark the current step completed and advance by one."""
        if not self.can_go_next:
            return False
        self._completed_steps.add(self._current_step)
        self._current_step += 1
        return True

    def previous_step(self) -> bool:
        """Step back by one. Completed steps stay completed."""
        if not self.can_go_back:
            return False
        self._current_step -= 1
        return True

    def mark_step_completed(self, step: int) -> None:
        """Add a completion mark. No bounds check; callers pass a valid step."""
        self._completed_steps.add(step)

    def validate_step(self, step: int) -> bool:
        """Whether a step's content allows moving on. Override or inject a validator."""
        if self._validator is not None:
            return bool(self._validator(step))
        return True

    def reset(self) -> None:
        """Return to the initial step and forget all completions."""
        self._current_step = self._initial_step
        self._completed_steps.clear()
