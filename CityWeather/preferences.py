"""Small JSON-file key/value store for user preferences."""
import json
import logging
import os
import tempfile
from typing import Any, Dict


class PreferencesError(Exception):
    """Raised when preferences cannot be written."""
    pass


class PreferencesStore:
    """
    Preferences persisted as a single JSON object on disk.

    Every read goes back to the file, every write replaces it atomically.
    A missing or unreadable file behaves like an empty store.
    """

    def __init__(self, path: str):
        self.path = os.path.abspath(os.path.expanduser(path))

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logging.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logging.warning(f"Ignoring preferences file {self.path}: top level is not an object")
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key."""
        data = self._read_all()
        data[key] = value
        directory = os.path.dirname(self.path)
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".prefs-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logging.error(f"Failed to write preferences file {self.path}: {e}")
            raise PreferencesError(f"Cannot write preferences to {self.path}: {e}") from e
        logging.debug(f"Saved preference {key!r} to {self.path}")
