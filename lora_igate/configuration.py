"""Persisting a project configuration as a JSON file."""

from __future__ import annotations

import abc
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

log = logging.getLogger(__name__)


class ConfigurationManagement(abc.ABC):
    """Reads and writes a configuration object through a JSON document.

    Subclasses map between the JSON document and their configuration.
    Reading also writes the file back, so fields added since it was saved
    are stored with their defaults.
    """

    def __init__(self, file_path: Union[str, Path]) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    @abc.abstractmethod
    def _read_project_configuration(self, data: Dict[str, Any], conf: Any) -> None:
        """Copy values from ``data`` into ``conf``, keeping defaults for missing ones."""

    @abc.abstractmethod
    def _write_project_configuration(self, conf: Any) -> Dict[str, Any]:
        """Build the JSON document for ``conf``."""

    def read_configuration(self, conf: Any) -> None:
        """Load ``conf`` from the file; a missing file leaves ``conf`` untouched."""
        try:
            with self._file_path.open("r", encoding="utf-8") as file:
                text = file.read()
        except OSError:
            log.error("Failed to open file for reading, using default configuration.")
            return

        try:
            data = json.loads(text)
        except ValueError:
            log.warning("Failed to read file, using default configuration.")
            data = {}
        if not isinstance(data, dict):
            log.warning("Failed to read file, using default configuration.")
            data = {}

        self._read_project_configuration(data, conf)
        self.write_configuration(conf)

    def write_configuration(self, conf: Any) -> None:
        """Save ``conf`` to the file; OSError is raised if it cannot be written."""
        data = self._write_project_configuration(conf)
        with self._file_path.open("w", encoding="utf-8") as file:
            json.dump(data, file)