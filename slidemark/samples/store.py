"""Sample deck library: named deck documents stored as JSON files."""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class SampleError(Exception):
    """A sample exists but could not be read as a deck document."""


def default_library_path() -> Path:
    """Directory of the decks bundled with the package."""
    return Path(__file__).parent / "library"


class SampleStore:
    """Read-only access to a directory of ``<name>.json`` deck documents.

    Documents are read on every get() so edits on disk show up without a
    restart; nothing is cached.
    """

    def __init__(self, storage_path: Path | str | None = None) -> None:
        """Initialize the sample store.

        Args:
            storage_path: Directory holding the samples. Defaults to the
                bundled library.
        """
        self._storage_path = Path(storage_path) if storage_path else default_library_path()

    @property
    def storage_path(self) -> Path:
        return self._storage_path

    def list_names(self) -> list[str]:
        """List sample names, sorted.

        Returns:
            File stems of every ``*.json`` document in the library.
        """
        if not self._storage_path.is_dir():
            logger.warning(f"Sample library {self._storage_path} does not exist")
            return []
        return sorted(path.stem for path in self._storage_path.glob("*.json"))

    def get(self, name: str) -> dict[str, Any] | None:
        """Load a sample by name.

        Args:
            name: Sample name (file stem).

        Returns:
            The parsed deck document, or None if there is no such sample.

        Raises:
            SampleError: If the file is not a JSON object.
        """
        if name not in self.list_names():
            return None

        file_path = self._storage_path / f"{name}.json"
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SampleError(f"Sample '{name}' is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SampleError(f"Sample '{name}' is not a deck object")
        return data

    def get_or_raise(self, name: str) -> dict[str, Any]:
        """Load a sample by name, raising if not found.

        Raises:
            KeyError: If the sample is not found.
            SampleError: If the file is not a JSON object.
        """
        data = self.get(name)
        if data is None:
            raise KeyError(f"Sample '{name}' not found")
        return data

    def count(self) -> int:
        return len(self.list_names())
