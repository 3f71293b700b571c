"""
GroupRegistry: the append-only list of group ids a department has ever
published, used by the app to validate the group a student types in.

One read -> append -> flush per scrape; ids are never removed, even when a
later timetable no longer lists them.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Iterator, List

from .assemble import new_group_ids
from .errors import PersistenceError
from .export import write_json_atomic
from .logging import get_logger

log = get_logger(__name__)


class GroupRegistry:
    """Ordered, duplicate-free set of group ids backed by a JSON array file."""

    def __init__(self, path: str | Path, ids: Iterable[str] = ()) -> None:
        self.path = Path(path)
        self._ids: List[str] = []
        self._dirty = False
        for gid in ids:
            if gid not in self._ids:
                self._ids.append(gid)

    @classmethod
    def load(cls, path: str | Path) -> "GroupRegistry":
        """Read a registry file; a missing file is an empty registry.

        Raises:
            PersistenceError: If the file exists but is not a JSON array of strings.
        """
        p = Path(path)
        if not p.exists():
            return cls(p)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read group registry {p}: {e}") from e
        if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
            raise PersistenceError(f"Group registry {p} is not a JSON array of strings")
        return cls(p, data)

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def __contains__(self, gid: object) -> bool:
        return gid in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def extend(self, group_ids: Iterable[str]) -> List[str]:
        """Append unseen ids; returns the ones that were new."""
        fresh = new_group_ids(group_ids, self._ids)
        if fresh:
            self._ids.extend(fresh)
            self._dirty = True
        return fresh

    def flush(self, force: bool = False) -> None:
        """Write the registry if anything was appended since the last flush."""
        if not (self._dirty or force):
            return
        write_json_atomic(self._ids, self.path)
        self._dirty = False
        log.info("registry_flushed", path=str(self.path), groups=len(self._ids))


def update_registry(path: str | Path, group_ids: Iterable[str]) -> List[str]:
    """Load, append and flush in one step. Returns the newly registered ids."""
    registry = GroupRegistry.load(path)
    fresh = registry.extend(group_ids)
    if fresh:
        log.info("groups_registered", path=str(path), new=fresh)
    registry.flush()
    return fresh
