import copy
import json
import logging
import os
import tempfile
from pathlib import Path

from birthday_mailer.models import Store

logger = logging.getLogger("store")


class JsonStore:
    """
    Whole-document JSON persistence for employees and logs.

    Every load reads the full file and every replace rewrites it through a
    temp file + rename. I/O failures are logged and the last good in-memory
    copy is served instead.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._cache = Store()
        # Set while the last replace() only reached memory
        self._dirty = False

    def load(self) -> Store:
        if self._dirty or not self.path.exists():
            return copy.deepcopy(self._cache)

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            store = Store.from_dict(data)
        except (OSError, ValueError) as e:
            logger.error("❌ Error loading %s, using in-memory copy: %s", self.path, e)
            return copy.deepcopy(self._cache)

        self._cache = copy.deepcopy(store)
        return store

    def replace(self, store: Store) -> bool:
        """Persist ``store``. Returns False if only the in-memory copy was updated."""
        self._cache = copy.deepcopy(store)
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(store.serialize(), f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
            self._dirty = False
            return True
        except OSError as e:
            logger.error("❌ Error saving %s, keeping in-memory copy: %s", self.path, e)
            self._dirty = True
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            return False
