"""Repository base class used by all concrete repositories."""
import json
import logging
from typing import Any


class BaseRepository:
    """Provides read-only JSON loading for a single data file.

    Sub-classes call :meth:`_load` once, at construction, and keep the
    result in memory.  Nothing is ever written back.
    """

    def __init__(self, file_path: str = None) -> None:
        self._path = file_path
        self._log = logging.getLogger(f'catalog.repository.{type(self).__name__}')

    def _load(self) -> Any:
        """Load JSON from *self._path*.

        Raises:
            IOError: If the file cannot be read.
            json.JSONDecodeError: If the file is not valid JSON.
        """
        with open(self._path, 'r', encoding='utf-8') as fh:
            data = json.load(fh)
        self._log.info("Loaded %s", self._path)
        return data
