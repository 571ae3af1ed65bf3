"""基于 Appium 会话的查询客户端，用于原生应用（WinUI / Android / iOS）"""

import asyncio
from typing import List, Optional

from appium.webdriver.common.appiumby import AppiumBy
from appium.webdriver.webdriver import WebDriver

from .models import ElementHandle


class AppiumQueryClient:
    """
    选择器按 XPath 处理，例如 //Button、//Text。

    Appium 的调用是阻塞的，统一放到工作线程里执行。
    会话的创建和销毁由调用方负责。
    """

    def __init__(self, driver: WebDriver, by: str = AppiumBy.XPATH):
        self.driver = driver
        self.by = by

    async def find(self, selector: str) -> List[ElementHandle]:
        nodes = await asyncio.to_thread(self.driver.find_elements, self.by, selector)
        return [await asyncio.to_thread(self._snapshot, node) for node in nodes]

    async def find_one(self, selector: str) -> Optional[ElementHandle]:
        elements = await self.find(selector)
        return elements[0] if elements else None

    def _snapshot(self, node) -> ElementHandle:
        async def click() -> None:
            await asyncio.to_thread(node.click)

        return ElementHandle(
            text=(node.text or "").strip(),
            tag=node.tag_name or "",
            enabled=node.is_enabled(),
            _click=click,
        )
