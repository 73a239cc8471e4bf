# dependencies.py

from fastapi import Request

from config import Settings
from registry import RepoRegistry
from sync import RepoLocks, SyncExecutor


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> RepoRegistry:
    return request.app.state.registry


def get_executor(request: Request) -> SyncExecutor:
    return request.app.state.executor


def get_repo_locks(request: Request) -> RepoLocks:
    return request.app.state.repo_locks
