"""Minimal requeue driver for running reconcile passes outside a watch loop.

In a cluster an informer redelivers on change; the CLI and the tests use this
loop instead. Errors back off exponentially up to ``max_retry_after``.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from podinfo_operator.engine.types import ReconcileResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from podinfo_operator.engine.engine import ReconcileEngine
    from podinfo_operator.resources.base import NamespacedName

logger = logging.getLogger(__name__)


def drive(
    engine: ReconcileEngine,
    identity: NamespacedName,
    *,
    max_passes: int = 10,
    retry_after: float = 1.0,
    max_retry_after: float = 60.0,
    sleep: Callable[[float], None] = time.sleep,
    on_pass: Callable[[int, ReconcileResult], None] | None = None,
) -> ReconcileResult:
    """Invoke ``engine.reconcile`` until done, fatal, or *max_passes* is reached.

    Returns the last result; check ``result.done`` to know whether the
    resource converged.
    """
    if max_passes < 1:
        raise ValueError(f"max_passes must be >= 1, got {max_passes}")

    backoff = retry_after
    result = ReconcileResult()
    for attempt in range(1, max_passes + 1):
        result = engine.reconcile(identity)
        if on_pass is not None:
            on_pass(attempt, result)
        if result.done or result.fatal:
            return result

        if result.error is not None:
            delay = max(backoff, result.requeue_after or 0.0)
            backoff = min(backoff * 2, max_retry_after)
        else:
            delay = result.requeue_after or 0.0
            backoff = retry_after

        if attempt < max_passes and delay > 0:
            logger.debug("Requeue %s in %.1fs (pass %d)", identity, delay, attempt)
            sleep(delay)

    logger.warning("%s did not converge after %d passes", identity, max_passes)
    return result
