"""
Storia Custom Exceptions

Exception classes for the wizard, generation tracking and batch API.
"""


class StoriaError(Exception):
    """Base exception for all Storia errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(StoriaError):
    """Raised when there's an issue with configuration."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""
    pass


class WizardConfigurationError(ConfigurationError):
    """Raised when a wizard is built over an unusable step list."""
    pass


# =============================================================================
# GENERATION ERRORS
# =============================================================================

class GenerationError(StoriaError):
    """Base exception for generation job errors."""
    pass


class JobStartError(GenerationError):
    """Raised when the backend rejects a start-generation request."""

    def __init__(self, target_id: str, reason: str, status_code: int = None):
        message = f"Could not start generation for '{target_id}': {reason}"
        details = {"target_id": target_id}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code


class ProgressFetchError(GenerationError):
    """Raised when a single progress fetch fails."""

    def __init__(self, job_id: str, reason: str):
        message = f"Progress fetch failed for job '{job_id}': {reason}"
        super().__init__(message, {"job_id": job_id})


class JobCancelError(GenerationError):
    """Raised when a cancel request is not acknowledged."""

    def __init__(self, job_id: str, reason: str):
        message = f"Cancel failed for job '{job_id}': {reason}"
        super().__init__(message, {"job_id": job_id})


class GenerationNotConfiguredError(GenerationError):
    """Raised by the default item generator; no provider is wired in."""
    pass


# =============================================================================
# CAMPAIGN ERRORS
# =============================================================================

class CampaignError(StoriaError):
    """Base exception for campaign batch errors."""
    pass


class CampaignNotFoundError(CampaignError):
    """Raised when a campaign has no batch registered."""

    def __init__(self, campaign_id: str):
        message = f"Campaign not found: {campaign_id}"
        super().__init__(message, {"campaign_id": campaign_id})


class InvalidCampaignStateError(CampaignError):
    """Raised when an operation does not fit the campaign's current status."""

    def __init__(self, campaign_id: str, reason: str):
        super().__init__(reason, {"campaign_id": campaign_id})


class BatchItemNotFoundError(CampaignNotFoundError):
    """Raised when a campaign batch has no item at the given index."""

    def __init__(self, campaign_id: str, item_index: int):
        StoriaError.__init__(
            self,
            f"Item {item_index} not found in campaign {campaign_id}",
            {"campaign_id": campaign_id, "item_index": item_index}
        )
