"""
Wizard step descriptors and the step catalogs of the creation flows.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class StepDescriptor:
    """One step of a wizard. Only the count matters to the controller."""
    number: int
    title: str
    skippable: bool = False
    description: str = ""
    icon: Optional[Any] = None  # opaque, owned by the rendering layer


def build_steps(*titles: str) -> Tuple[StepDescriptor, ...]:
    """Number a list of titles from 1."""
    return tuple(StepDescriptor(number=i, title=title) for i, title in enumerate(titles, start=1))


AUTO_STORY_STEPS: Tuple[StepDescriptor, ...] = (
    StepDescriptor(1, "Template", description="Story structure"),
    StepDescriptor(2, "Content Setup", description="Topics & settings"),
    StepDescriptor(3, "Style", description="Visual & audio"),
    StepDescriptor(4, "Scheduling", skippable=True, description="Timeline"),
    StepDescriptor(5, "Publishing", skippable=True, description="Platforms"),
)

AUTO_VIDEO_STEPS: Tuple[StepDescriptor, ...] = (
    StepDescriptor(1, "Mode", description="Video type"),
    StepDescriptor(2, "Content Setup", description="Ideas & settings"),
    StepDescriptor(3, "Style", description="Visual settings"),
    StepDescriptor(4, "Soundscape", description="Audio & voice"),
    StepDescriptor(5, "Schedule & Publish", skippable=True, description="Timeline & platforms"),
)

STORY_STUDIO_STEPS: Tuple[StepDescriptor, ...] = (
    StepDescriptor(1, "Concept & Script", description="Concept"),
    StepDescriptor(2, "Script Review", description="Script"),
    StepDescriptor(3, "Storyboard", description="Scenes"),
    StepDescriptor(4, "Audio", description="Audio"),
    StepDescriptor(5, "Preview & Export", description="Export"),
)

# Content setup is where campaign name and topics are entered
CONTENT_SETUP_STEP = 2
