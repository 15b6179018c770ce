"""Sample deck library - bundled decks for demos and tests."""

from slidemark.samples.store import SampleError, SampleStore, default_library_path

__all__ = [
    "SampleError",
    "SampleStore",
    "default_library_path",
]
