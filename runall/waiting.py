"""等待原语：按固定间隔轮询条件，直到成立或超时"""

import asyncio
import logging
from typing import Awaitable, Callable

from .errors import WaitTimedOut

logger = logging.getLogger(__name__)


async def await_condition(
    predicate: Callable[[], Awaitable[bool]],
    interval: float,
    timeout: float,
) -> int:
    """
    轮询 predicate，成立时立即返回轮询次数。

    每次调用 predicate 都应重新查询元素，不复用旧句柄。
    超时后抛出 WaitTimedOut，此时大约已轮询 timeout / interval 次。
    """
    if interval <= 0:
        raise ValueError(f"interval 必须为正数: {interval}")
    if timeout <= 0:
        raise ValueError(f"timeout 必须为正数: {timeout}")

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    attempts = 0

    while True:
        attempts += 1
        if await predicate():
            logger.debug("✓ 条件成立（第 %d 次轮询）", attempts)
            return attempts

        remaining = deadline - loop.time()
        if remaining <= 0:
            raise WaitTimedOut(attempts, timeout)
        await asyncio.sleep(min(interval, remaining))
