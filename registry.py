# registry.py

import logging
from typing import Iterable, NamedTuple, Tuple

from errors import RepoNotFound

logger = logging.getLogger(__name__)


class RepoEntry(NamedTuple):
    name: str
    path: str


def repo_name_from_path(path: str) -> str:
    """
    Returns the last segment of a repository path, e.g. '/srv/app' -> 'app'.
    Trailing separators are ignored so '/srv/app/' also yields 'app'.
    """
    trimmed = path.rstrip("/")
    return trimmed[trimmed.rfind("/") + 1:]


class RepoRegistry:
    """
    Read-only mapping from a repository short name to its local clone.
    Built once at startup and shared by every request without locking.
    """

    def __init__(self, entries: Iterable[RepoEntry] = ()):
        entries = tuple(entries)
        for entry in entries:
            if not entry.path:
                raise ValueError("Repository path must not be empty.")
            if not entry.name:
                raise ValueError(f"Repository at '{entry.path}' has no name.")
        self._entries: Tuple[RepoEntry, ...] = entries

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "RepoRegistry":
        entries = []
        for path in paths:
            if not path:
                continue
            name = repo_name_from_path(path)
            if not name:
                # An unnamed entry would match pushes that carry no repository name.
                logger.warning(f"Skipping repository path '{path}': it has no directory name.")
                continue
            entry = RepoEntry(name=name, path=path)
            logger.info(f"Registered repository '{entry.name}' at {entry.path}")
            entries.append(entry)
        return cls(entries)

    @property
    def entries(self) -> Tuple[RepoEntry, ...]:
        return self._entries

    def resolve(self, name: str) -> str:
        # First match wins; names are not required to be unique.
        for entry in self._entries:
            if entry.name == name:
                return entry.path
        raise RepoNotFound(name)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
