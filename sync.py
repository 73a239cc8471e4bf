import asyncio
import logging
import subprocess
import threading
from typing import Dict, List

from errors import ExecutionFailure
from utils import run_command

logger = logging.getLogger(__name__)

REMOTE_NAME = "origin"
SYNC_BRANCH = "main"


def build_pull_command(git_path: str, repo_path: str) -> List[str]:
    return [git_path, "-C", repo_path, "pull", REMOTE_NAME, SYNC_BRANCH]


class SyncExecutor:
    """
    Pulls `main` into a local clone with the git CLI.

    Calls for the same repository path are serialized with a per-path lock so
    two deliveries never run git against one working tree at the same time.
    Calls for different paths run in parallel.
    """

    def __init__(self, git_path: str = "git", timeout: float = 300):
        self.git_path = git_path
        self.timeout = timeout
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, repo_path: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(repo_path)
            if lock is None:
                lock = self._locks[repo_path] = threading.Lock()
            return lock

    def sync(self, repo_path: str):
        command = build_pull_command(self.git_path, repo_path)
        with self._lock_for(repo_path):
            logger.info(f"Running command: {' '.join(command)}")
            try:
                run_command(command, timeout=self.timeout)
            except subprocess.CalledProcessError as e:
                raise ExecutionFailure(
                    f"git pull in {repo_path} exited with status {e.returncode}",
                    exit_code=e.returncode
                )
            except subprocess.TimeoutExpired:
                raise ExecutionFailure(
                    f"git pull in {repo_path} did not finish within {self.timeout}s and was killed"
                )
            except OSError as e:
                raise ExecutionFailure(f"Could not start git for {repo_path}: {e}")
        logger.info(f"Repository at {repo_path} updated successfully.")


class RepoLocks:
    """
    One asyncio.Lock per repository path. Requests queue here, on the event
    loop, so a backlog for one repository never holds worker threads that a
    pull for another repository needs.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock_for(self, repo_path: str) -> asyncio.Lock:
        lock = self._locks.get(repo_path)
        if lock is None:
            lock = self._locks[repo_path] = asyncio.Lock()
        return lock
