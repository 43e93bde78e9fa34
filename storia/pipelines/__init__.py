"""
Storia Pipelines Module

Campaign batch processing behind the autoproduction API.
"""

from .batch_processor import CampaignBatchProcessor, ItemGenerator, unconfigured_generator

__all__ = [
    'CampaignBatchProcessor',
    'ItemGenerator',
    'unconfigured_generator',
]
