"""
Workspace Data Store

Holds the single workspace snapshot and the store-wide lock.

Every operation runs inside transaction():
1. Acquire the store lock (shared with timer callbacks)
2. Run registered reapers (due scheduled messages, expired standups)
3. Snapshot the workspace, run the operation, roll back on any exception
4. Save the snapshot to the JSON data file when persistence is enabled
"""

import functools
import logging
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from parley.config import Settings, get_settings
from parley.models.chat import Workspace

logger = logging.getLogger(__name__)

# A reaper receives the current time and returns True if it changed anything
Reaper = Callable[[float], bool]


class DataStore:
    """In-memory workspace with optional JSON-file persistence."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings or get_settings()
        self.clock = clock
        self.workspace = Workspace()
        self._lock = threading.RLock()
        self._in_transaction = False
        self._reapers: List[Reaper] = []

    def add_reaper(self, reaper: Reaper) -> None:
        self._reapers.append(reaper)

    @contextmanager
    def transaction(self) -> Iterator[Workspace]:
        """
        Run a block with exclusive, all-or-nothing access to the workspace.

        Nested transactions join the outer one.
        """
        with self._lock:
            if self._in_transaction:
                yield self.workspace
                return

            self._in_transaction = True
            try:
                if self._reap():
                    self.save()

                snapshot = self.workspace.model_copy(deep=True)
                try:
                    yield self.workspace
                except Exception:
                    self.workspace = snapshot
                    raise
                self.save()
            finally:
                self._in_transaction = False

    def wake(self) -> None:
        """Run the reapers now. Used as the timer callback."""
        with self.transaction():
            pass

    def _reap(self) -> bool:
        now = self.clock()
        changed = False
        for reaper in self._reapers:
            changed = reaper(now) or changed
        return changed

    @property
    def data_path(self) -> Path:
        return Path(self.settings.data_file)

    def load(self) -> None:
        """Replace the workspace with the persisted snapshot, if any."""
        if not self.settings.persist:
            return

        path = self.data_path
        if not path.exists():
            logger.info(f"No data file at {path}, starting with an empty workspace")
            return

        with self._lock:
            self.workspace = Workspace.model_validate_json(path.read_text(encoding="utf-8"))
        logger.info(
            f"Loaded workspace from {path}: {len(self.workspace.users)} users, "
            f"{len(self.workspace.channels)} channels, {len(self.workspace.dms)} dms"
        )

    def save(self) -> None:
        if not self.settings.persist:
            return

        path = self.data_path
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(self.workspace.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(path)
        logger.debug(f"Saved workspace to {path}")

    def reset(self) -> None:
        with self._lock:
            self.workspace = Workspace()
            self.save()
        logger.info("Workspace cleared")


def transactional(method):
    """Run a service method inside its store's transaction."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.store.transaction():
            return method(self, *args, **kwargs)

    return wrapper
