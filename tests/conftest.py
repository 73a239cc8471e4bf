"""Shared test fixtures."""

import hashlib
import hmac
import json

import pytest
from fastapi.testclient import TestClient

from config import Settings
from errors import ExecutionFailure
from main import create_app

TEST_SECRET = "test-secret"


def sign(body: bytes, secret: str = TEST_SECRET) -> str:
    """Signature in the 'sha256=<hex_digest>' form GitHub sends."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def push_body(ref: str = "refs/heads/main", repo: str = "app") -> bytes:
    return json.dumps({
        "ref": ref,
        "before": "0" * 40,
        "after": "a" * 40,
        "repository": {"id": 1, "name": repo, "full_name": f"acme/{repo}"},
        "pusher": {"name": "octocat", "email": "octocat@example.com"},
        "head_commit": {
            "id": "a" * 40,
            "message": "Update README",
            "author": {"name": "Octo Cat", "email": "octocat@example.com", "username": "octocat"},
            "modified": ["README.md"],
        },
    }).encode("utf-8")


class RecordingExecutor:
    """Stands in for SyncExecutor; records paths instead of running git."""

    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    def sync(self, repo_path: str):
        self.calls.append(repo_path)
        if self.fail:
            raise ExecutionFailure(f"git pull in {repo_path} exited with status 1", exit_code=1)


@pytest.fixture
def settings():
    return Settings(webhook_secret=TEST_SECRET, repo_paths=["/srv/app", "/srv/other"])


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def client(settings, executor):
    return TestClient(create_app(settings, executor=executor))
