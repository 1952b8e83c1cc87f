"""
Retry loop for ledger transactions.

Version conflicts and transient database errors (lock timeouts, "database is
locked") abort the whole transaction; the operation is re-run from scratch
with jittered exponential backoff. When attempts run out the failure surfaces
as ``UnavailableError``.
"""
import logging
import random
import time

from django.conf import settings
from django.db import OperationalError

from apps.core.exceptions import ConflictError, UnavailableError

logger = logging.getLogger(__name__)

RETRYABLE_EXCEPTIONS = (ConflictError, OperationalError)


def calculate_delay(attempt: int, base_delay: float, max_delay: float = 2.0) -> float:
    """Exponential backoff with jitter for the given 1-based attempt."""
    delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
    return delay * (0.5 + random.random() * 0.5)


def run_with_retries(operation, *, label: str, max_attempts: int = None, base_delay: float = None):
    """
    Call ``operation()`` until it succeeds or attempts are exhausted.

    ``operation`` must open and close its own transaction so every attempt
    starts clean. Non-retryable errors propagate immediately.

    Raises:
        UnavailableError: If every attempt hit a conflict or transient error
    """
    if max_attempts is None:
        max_attempts = settings.LEDGER_MAX_RETRIES
    if base_delay is None:
        base_delay = settings.LEDGER_RETRY_BASE_DELAY

    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except RETRYABLE_EXCEPTIONS as exc:
            if attempt >= max_attempts:
                logger.error(
                    "%s failed after %d attempts: %s", label, max_attempts, exc
                )
                raise UnavailableError(
                    f"{label} could not be completed, please retry"
                ) from exc

            delay = calculate_delay(attempt, base_delay)
            logger.warning(
                "%s attempt %d/%d hit %s; retrying in %.3fs",
                label, attempt, max_attempts, type(exc).__name__, delay,
            )
            time.sleep(delay)
