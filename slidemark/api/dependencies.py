"""FastAPI dependencies shared by the route modules."""

from fastapi import Depends

from slidemark.api.config import Settings, get_settings
from slidemark.samples.store import SampleStore


def get_sample_store(settings: Settings = Depends(get_settings)) -> SampleStore:
    """Sample store over the configured library directory."""
    return SampleStore(settings.samples_dir)
