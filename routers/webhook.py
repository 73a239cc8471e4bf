import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from config import Settings
from dependencies import get_executor, get_registry, get_repo_locks, get_settings
from errors import WebhookError
from models.github_webhook import PushEvent
from payload import extract_event_bytes, parse_push_event, should_sync
from registry import RepoRegistry
from sync import RepoLocks, SyncExecutor
from utils import require_valid_signature

router = APIRouter()
logger = logging.getLogger(__name__)

ACCEPTED_MESSAGE = "Webhook processed."


def _describe(event: PushEvent) -> str:
    parts = [f"repo={event.repository_name!r}", f"ref={event.ref!r}"]
    if event.pusher.name:
        parts.append(f"pusher={event.pusher.name!r}")
    if event.head_commit is not None:
        parts.append(f"commit={event.head_commit.id[:12]!r}")
        if event.head_commit.modified:
            parts.append(f"modified={len(event.head_commit.modified)} file(s)")
    return ", ".join(parts)


async def run_sync(executor: SyncExecutor, repo_locks: RepoLocks, repo_path: str):
    """
    Waits for the repository's turn on the event loop, then runs the blocking
    git pull in the default executor. Only the pull itself takes a worker
    thread, so a queue for one repository cannot starve pulls for another.
    """
    async with repo_locks.lock_for(repo_path):
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, executor.sync, repo_path)


@router.post("/webhook", summary="GitHub Webhook Endpoint")
async def handle_webhook(
        request: Request,
        x_hub_signature_256: Optional[str] = Header(None),
        x_github_event: Optional[str] = Header(None),
        x_github_delivery: Optional[str] = Header(None),
        settings: Settings = Depends(get_settings),
        registry: RepoRegistry = Depends(get_registry),
        executor: SyncExecutor = Depends(get_executor),
        repo_locks: RepoLocks = Depends(get_repo_locks)
):
    logger.info(f"Webhook endpoint was called (event={x_github_event}, delivery={x_github_delivery}).")
    body_bytes = await request.body()
    content_type = request.headers.get("Content-Type", "")
    event = None

    try:
        # 1. Make sure we understand the encoding before doing anything else.
        event_bytes = extract_event_bytes(body_bytes, content_type)

        # 2. Authenticate against the exact bytes GitHub signed: the raw body.
        require_valid_signature(body_bytes, settings.webhook_secret, x_hub_signature_256)

        if x_github_event == "ping":
            logger.info("Received ping event from GitHub.")
            return {"message": ACCEPTED_MESSAGE}

        # 3. Parse the push event.
        event = parse_push_event(event_bytes)
        logger.info(f"Received push: {_describe(event)}")

        # 4. Only main is deployed; other refs are accepted silently.
        if not should_sync(event):
            logger.info(f"Ref {event.ref!r} is not main. Sync skipped.")
            return {"message": ACCEPTED_MESSAGE}

        # 5. Resolve the local clone and pull.
        repo_path = registry.resolve(event.repository_name)
        logger.info(f"Received push to main branch of '{event.repository_name}'. Pulling changes...")
        await run_sync(executor, repo_locks, repo_path)

    except WebhookError as e:
        context = _describe(event) if event is not None else "event not decoded"
        log = logger.warning if e.status_code < 500 else logger.error
        log(f"Webhook rejected: {type(e).__name__}: {e} ({context})")
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    logger.info(f"Repository '{event.repository_name}' updated successfully.")
    return {"message": ACCEPTED_MESSAGE}
