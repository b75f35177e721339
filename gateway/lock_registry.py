"""Per-name in-flight markers for upload, download and delete."""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Iterator, Set

logger = logging.getLogger(__name__)


class LockKind(str, Enum):
    UPLOAD = "uploading"
    DOWNLOAD = "downloading"
    DELETE = "deleting"


class LockRegistry:
    """
    Three independent sets of object names, one per operation kind.

    A name leaves a set only through the owning operation's own release.
    There is no timeout and no force-unlock.
    """

    def __init__(self):
        self._sets: Dict[LockKind, Set[str]] = {kind: set() for kind in LockKind}

    @property
    def uploading(self) -> Set[str]:
        return self._sets[LockKind.UPLOAD]

    @property
    def downloading(self) -> Set[str]:
        return self._sets[LockKind.DOWNLOAD]

    @property
    def deleting(self) -> Set[str]:
        return self._sets[LockKind.DELETE]

    def is_held(self, kind: LockKind, name: str) -> bool:
        return name in self._sets[kind]

    def is_busy(self, name: str) -> bool:
        """True if name is held by any operation kind."""
        return any(name in members for members in self._sets.values())

    def acquire(self, kind: LockKind, name: str) -> None:
        self._sets[kind].add(name)
        logger.debug(f"Lock acquired: {kind.value} {name}")

    def release(self, kind: LockKind, name: str) -> None:
        """Remove name from the set. Releasing a name that is not held is a no-op."""
        self._sets[kind].discard(name)
        logger.debug(f"Lock released: {kind.value} {name}")

    @contextmanager
    def hold(self, kind: LockKind, name: str) -> Iterator[None]:
        """
        Hold name in the given set for the duration of the block.

        The name is released on every exit path, including exceptions.
        """
        self.acquire(kind, name)
        try:
            yield
        finally:
            self.release(kind, name)

    def snapshot(self) -> Dict[str, Set[str]]:
        """Copy of every set keyed by kind value."""
        return {kind.value: set(members) for kind, members in self._sets.items()}

    def is_idle(self) -> bool:
        return not any(self._sets.values())
