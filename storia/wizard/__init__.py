"""
Storia Wizard Module

Step state machine, step catalogs, indicator policy and creation flows.
"""

from .steps import StepDescriptor, AUTO_STORY_STEPS, AUTO_VIDEO_STEPS, STORY_STUDIO_STEPS, build_steps
from .controller import WizardController, WizardState
from .layout import StepStatus, step_status, can_navigate_to

__all__ = [
    'StepDescriptor',
    'AUTO_STORY_STEPS',
    'AUTO_VIDEO_STEPS',
    'STORY_STUDIO_STEPS',
    'build_steps',
    'WizardController',
    'WizardState',
    'StepStatus',
    'step_status',
    'can_navigate_to',
]
