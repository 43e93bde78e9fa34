"""
Storia - Autoproduction wizard and generation tracking core

Shared logic behind the campaign creation wizards and the batch generation
progress feed: a step state machine, a polling job tracker, the HTTP client
for the generation endpoints and the API that serves them.

Version: 1.0.0
"""

__version__ = "1.0.0"
__project__ = "Storia"

from pathlib import Path

# Package root directory
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent

from .wizard import WizardController, WizardState, StepDescriptor
from .generation import GenerationJobTracker, GenerationAPIClient, BatchProgress, JobStatus

__all__ = [
    # Version info
    "__version__",
    "__project__",
    # Paths
    "PACKAGE_ROOT",
    "PROJECT_ROOT",
    # Wizard
    "WizardController",
    "WizardState",
    "StepDescriptor",
    # Generation tracking
    "GenerationJobTracker",
    "GenerationAPIClient",
    "BatchProgress",
    "JobStatus",
]
