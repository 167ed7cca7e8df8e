#!/usr/bin/env python3
"""Fixed-delay retry policy for remote calls.

This module wraps tenacity so that list, upload and download share one
retry definition: a bounded number of attempts, a fixed wait between them,
and a predicate deciding which errors are worth another attempt.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_fixed

from alistclip.constants import MAX_ATTEMPTS, RETRY_DELAY
from alistclip.errors import ServerError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_transient(error: BaseException) -> bool:
    """Return True for failures that may succeed on another attempt.

    Network failures and non-success server responses are transient.
    AuthError is not: a rejected token stays rejected.
    """
    return isinstance(error, (TransportError, ServerError))


@dataclass(frozen=True)
class RetryPolicy:
    """Retry parameters applied uniformly to remote calls.

    Attributes:
        max_attempts: Total attempts, the first one included.
        delay: Seconds to wait between attempts.
        retryable: Predicate selecting errors that trigger another attempt.
    """

    max_attempts: int = MAX_ATTEMPTS
    delay: float = RETRY_DELAY
    retryable: Callable[[BaseException], bool] = field(default=is_transient)

    async def call(
        self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        """Await func(*args, **kwargs), retrying per this policy.

        Raises:
            The last error raised by func once attempts are exhausted, or
            the first error the predicate rejects.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception(self.retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(func, *args, **kwargs)
