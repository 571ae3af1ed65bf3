"""元素查询客户端：按选择器查找界面元素"""

from typing import List, Optional, Protocol

from playwright.async_api import ElementHandle as PlaywrightElement
from playwright.async_api import Page

from .models import ElementHandle


class ElementQueryClient(Protocol):
    """
    查询接口。选择器是不透明字符串，这里只负责透传。

    返回的句柄只在本次查询结果内有效。
    """

    async def find(self, selector: str) -> List[ElementHandle]:
        ...

    async def find_one(self, selector: str) -> Optional[ElementHandle]:
        ...


class PlaywrightQueryClient:
    """基于 Playwright 页面的查询客户端"""

    def __init__(self, page: Page):
        self.page = page

    async def find(self, selector: str) -> List[ElementHandle]:
        nodes = await self.page.query_selector_all(selector)
        return [await self._snapshot(node) for node in nodes]

    async def find_one(self, selector: str) -> Optional[ElementHandle]:
        node = await self.page.query_selector(selector)
        if node is None:
            return None
        return await self._snapshot(node)

    async def _snapshot(self, node: PlaywrightElement) -> ElementHandle:
        text = (await node.inner_text()).strip()
        tag = await node.evaluate("el => el.tagName.toLowerCase()")
        enabled = await node.is_enabled()
        return ElementHandle(text=text, tag=tag, enabled=enabled, _click=node.click)
