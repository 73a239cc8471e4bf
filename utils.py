# utils.py

import hmac
import hashlib
import subprocess
import logging
from typing import List, Optional

from errors import SignatureMismatch

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="


def compute_signature(request_body: bytes, secret: str) -> str:
    mac = hmac.new(secret.encode(), msg=request_body, digestmod=hashlib.sha256)
    return SIGNATURE_PREFIX + mac.hexdigest()


def verify_signature(request_body: bytes, secret: str, signature: Optional[str]) -> bool:
    """
    Checks an X-Hub-Signature-256 value against the HMAC of the raw body.

    The whole 'sha256=<hex>' string is compared with hmac.compare_digest, so
    the comparison time does not depend on where the two values first differ.
    """
    if not signature:
        logger.warning("No signature provided.")
        return False

    expected = compute_signature(request_body, secret)
    is_valid = hmac.compare_digest(
        expected.encode("ascii"),
        signature.encode("utf-8", errors="replace")
    )
    if is_valid:
        logger.debug("Webhook signature verified successfully.")
    else:
        logger.warning("Webhook signature verification failed.")
    return is_valid


def require_valid_signature(request_body: bytes, secret: str, signature: Optional[str]):
    if not verify_signature(request_body, secret, signature):
        raise SignatureMismatch("Signature missing or did not match the request body.")


def run_command(args: List[str], cwd: Optional[str] = None, timeout: Optional[float] = None) -> int:
    """
    Runs an external command from an argument vector (never through a shell).

    stdout and stderr are inherited from this process so the command's output
    shows up next to the service logs. Raises CalledProcessError on a nonzero
    exit, TimeoutExpired when the command outlives `timeout` (the child is
    killed first) and OSError when it cannot be started.
    """
    logger.debug(f"Executing command: {args} in {cwd or '.'}")
    result = subprocess.run(
        args,
        cwd=cwd,
        shell=False,
        check=True,
        timeout=timeout
    )
    logger.debug(f"Command executed successfully: {args}")
    return result.returncode
