"""
Tests for Wizard Controller

Tests for storia/wizard/controller.py and storia/wizard/steps.py
"""

import dataclasses

import pytest

from storia.core.exceptions import WizardConfigurationError
from storia.wizard.controller import WizardController, WizardState
from storia.wizard.steps import (
    StepDescriptor,
    AUTO_STORY_STEPS,
    AUTO_VIDEO_STEPS,
    STORY_STUDIO_STEPS,
    build_steps,
)


def make_controller(count: int = 5, **kwargs) -> WizardController:
    return WizardController(build_steps(*[f"Step {n}" for n in range(1, count + 1)]), **kwargs)


class TestStepCatalogs:
    """Tests for step descriptors and the built-in flows."""

    def test_build_steps_numbers_from_one(self):
        steps = build_steps("A", "B", "C")

        assert [step.number for step in steps] == [1, 2, 3]
        assert steps[1].title == "B"
        assert steps[1].skippable is False

    def test_descriptor_is_immutable(self):
        step = StepDescriptor(1, "Template")

        with pytest.raises(dataclasses.FrozenInstanceError):
            step.title = "Other"

    @pytest.mark.parametrize("steps", [AUTO_STORY_STEPS, AUTO_VIDEO_STEPS, STORY_STUDIO_STEPS])
    def test_catalogs_are_numbered_in_order(self, steps):
        assert [step.number for step in steps] == list(range(1, len(steps) + 1))

    def test_story_flow_optional_steps(self):
        skippable = [step.title for step in AUTO_STORY_STEPS if step.skippable]

        assert skippable == ["Scheduling", "Publishing"]
        assert AUTO_STORY_STEPS[1].title == "Content Setup"


class TestConstruction:
    """Tests for controller construction."""

    def test_initial_state(self):
        wizard = make_controller()

        assert wizard.current_step == 1
        assert wizard.completed_steps == frozenset()
        assert wizard.step_count == 5

    def test_initial_step_honoured(self):
        assert make_controller(initial_step=3).current_step == 3

    @pytest.mark.parametrize("initial, expected", [(0, 1), (-4, 1), (9, 5)])
    def test_initial_step_clamped(self, initial, expected):
        assert make_controller(initial_step=initial).current_step == expected

    def test_empty_steps_rejected(self):
        with pytest.raises(WizardConfigurationError):
            WizardController([])

    def test_single_step_wizard(self):
        wizard = make_controller(1)

        assert wizard.is_last_step
        assert not wizard.can_go_next
        assert not wizard.can_go_back


class TestNavigation:
    """Tests for next / previous / jump."""

    @pytest.mark.parametrize("target", [0, -1, 6, 100])
    def test_go_to_out_of_range_is_ignored(self, target):
        wizard = make_controller(initial_step=2)
        wizard.mark_step_completed(1)
        before = wizard.state

        assert wizard.go_to_step(target) is False
        assert wizard.state == before

    def test_go_to_any_step_in_range(self):
        wizard = make_controller()

        assert wizard.go_to_step(4) is True
        assert wizard.current_step == 4
        # Jumping never marks anything completed
        assert wizard.completed_steps == frozenset()

    def test_next_then_previous_restores_step(self):
        wizard = make_controller(initial_step=2)
        wizard.mark_step_completed(4)
        prior_step = wizard.current_step
        prior_completed = wizard.completed_steps

        wizard.next_step()
        wizard.previous_step()

        assert wizard.current_step == prior_step
        assert wizard.completed_steps == prior_completed | {prior_step}

    def test_next_on_last_step_is_noop(self):
        wizard = make_controller(initial_step=5)

        assert wizard.next_step() is False
        assert wizard.current_step == 5
        assert wizard.completed_steps == frozenset()

    def test_previous_on_first_step_is_noop(self):
        wizard = make_controller()

        assert wizard.previous_step() is False
        assert wizard.current_step == 1

    def test_previous_keeps_completion_marks(self):
        wizard = make_controller()
        wizard.next_step()
        wizard.next_step()
        wizard.previous_step()
        wizard.previous_step()

        assert wizard.completed_steps == {1, 2}

    def test_eight_step_walkthrough(self):
        wizard = make_controller(8)

        for _ in range(7):
            assert wizard.next_step() is True

        assert wizard.current_step == 8
        assert wizard.can_go_next is False
        assert wizard.is_last_step is True
        assert wizard.completed_steps == set(range(1, 8))

    def test_flags_track_position(self):
        wizard = make_controller(4)

        for step in range(1, 5):
            wizard.go_to_step(step)
            assert wizard.can_go_next == (step != 4)
            assert wizard.can_go_back == (step != 1)
            assert wizard.is_last_step == (step == 4)


class TestCompletionAndValidation:
    """Tests for completion marks, validation and reset."""

    def test_mark_step_completed_is_idempotent(self):
        wizard = make_controller()
        wizard.mark_step_completed(3)
        once = wizard.completed_steps
        wizard.mark_step_completed(3)

        assert wizard.completed_steps == once == {3}

    def test_mark_step_completed_has_no_bounds_check(self):
        wizard = make_controller()
        wizard.mark_step_completed(42)

        assert 42 in wizard.completed_steps

    def test_validate_step_defaults_to_true(self):
        wizard = make_controller()

        assert all(wizard.validate_step(step) for step in range(1, 6))

    def test_injected_validator(self):
        wizard = make_controller(validator=lambda step: step != 2)

        assert wizard.validate_step(1) is True
        assert wizard.validate_step(2) is False

    def test_subclass_override(self):
        class StrictWizard(WizardController):
            def validate_step(self, step: int) -> bool:
                return False

        wizard = StrictWizard(build_steps("A", "B"))

        assert wizard.validate_step(1) is False
        # Validation is advisory; navigation itself never consults it
        assert wizard.next_step() is True

    def test_reset(self):
        wizard = make_controller(initial_step=2)
        wizard.next_step()
        wizard.go_to_step(5)

        wizard.reset()

        assert wizard.current_step == 2
        assert wizard.completed_steps == frozenset()


class TestWizardState:
    """Tests for the read-only state projection."""

    def test_state_is_a_snapshot(self):
        wizard = make_controller()
        state = wizard.state
        wizard.next_step()

        assert state.current_step == 1
        assert state.completed_steps == frozenset()

    def test_state_is_frozen(self):
        state = make_controller().state

        with pytest.raises(dataclasses.FrozenInstanceError):
            state.current_step = 3

    def test_derived_flags(self):
        state = WizardState(current_step=1, completed_steps=frozenset(), step_count=3)

        assert state.is_first_step
        assert not state.can_go_back
        assert state.can_go_next
        assert not state.is_last_step

    def test_current_descriptor(self):
        wizard = WizardController(AUTO_VIDEO_STEPS, initial_step=4)

        assert wizard.current_descriptor.title == "Soundscape"
