# wallet/observability.py
import logging
import time
from typing import Optional

import httpx

logger = logging.getLogger("wallet.req")


def log_exchange(
    request: httpx.Request,
    status: Optional[int],
    started: float,
    user_id: Optional[int] = None,
) -> None:
    """One line per API call; status None means the request never got an answer."""
    ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %s in %.1fms user=%s",
        request.method,
        request.url.path,
        status if status is not None else "ERR",
        ms,
        user_id,
    )
