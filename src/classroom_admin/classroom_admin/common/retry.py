from __future__ import annotations

import logging
from typing import Callable, TypeVar

from ..core.exceptions import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_store_error(fn: Callable[[], T], *, attempts: int, what: str) -> T:
    """Run an idempotent store operation, retrying it on StoreError.

    The last StoreError propagates once ``attempts`` runs have failed.
    """
    attempts = max(1, int(attempts))
    attempt = 1
    while True:
        try:
            return fn()
        except StoreError:
            if attempt >= attempts:
                raise
            logger.warning("Store failure during %s (attempt %d/%d), retrying", what, attempt, attempts)
            attempt += 1
