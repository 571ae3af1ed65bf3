"""执行模块：点击控件，并在有失败时筛选出失败详情"""

import asyncio
import logging
from typing import Callable, List, Optional

from .client import ElementQueryClient
from .errors import ControlNotFound, OptionNotFound
from .models import ElementHandle

logger = logging.getLogger(__name__)


class Controller:
    """执行模块：所有交互之后都等待界面重新渲染（settle）"""

    def __init__(self, client: ElementQueryClient,
                 filter_settle: float = 0.5,
                 option_settle: float = 0.5,
                 checkpoint: Optional[Callable[[str], None]] = None):
        self.client = client
        self.filter_settle = filter_settle
        self.option_settle = option_settle
        # 每一步之前调用，用于响应取消
        self.checkpoint = checkpoint or (lambda stage: None)

    async def click_containing(self, selector: str, text: str, stage: str) -> ElementHandle:
        """点击第一个文本包含 text 的元素"""
        elements = await self.client.find(selector)
        target = next((el for el in elements if text in el.text), None)
        if target is None:
            logger.error("❌ 找不到控件 %r（%s 下共 %d 个元素）", text, selector, len(elements))
            raise ControlNotFound(selector, text, stage)
        await target.click()
        logger.info("✓ 点击 [%s] %s", target.tag, target.text)
        return target

    async def click_exact(self, selector: str, text: str, stage: str) -> ElementHandle:
        """点击第一个文本与 text 完全相同的元素"""
        elements = await self.client.find(selector)
        target = next((el for el in elements if el.text == text), None)
        if target is None:
            raise ControlNotFound(selector, text, stage)
        await target.click()
        logger.info("✓ 点击 [%s] %s", target.tag, target.text)
        return target

    async def collect_failure_diagnostics(self,
                                          filter_control_selector: str,
                                          filter_option_selector: str,
                                          failed_option_label: str,
                                          result_text_selector: str) -> List[str]:
        """
        筛选出失败项并收集诊断文本。

        筛选分两段：先点开下拉控件，选项列表此时才出现在元素树里，
        再从选项中点击 failed_option_label。两次点击之后都需要等待重新渲染。
        返回结果区域每个文本元素的内容，保持扫描顺序。
        """
        stage = "filter_control"
        self.checkpoint(stage)
        control = await self.client.find_one(filter_control_selector)
        if control is None:
            raise ControlNotFound(filter_control_selector, "filter control", stage)
        await control.click()
        logger.info("✓ 打开筛选控件 [%s] %s", control.tag, control.text)
        await asyncio.sleep(self.filter_settle)

        stage = "filter_option"
        self.checkpoint(stage)
        options = await self.client.find(filter_option_selector)
        option = next((el for el in options if el.text == failed_option_label), None)
        if option is None:
            seen = [el.text for el in options]
            logger.error("❌ 筛选选项中没有 %r: %s", failed_option_label, seen)
            raise OptionNotFound(failed_option_label, seen, stage)
        await option.click()
        logger.info("✓ 选择筛选项 %s", option.text)
        await asyncio.sleep(self.option_settle)

        self.checkpoint("collect_diagnostics")
        results = await self.client.find(result_text_selector)
        lines = [el.text for el in results]
        logger.info("✓ 收集到 %d 行失败详情", len(lines))
        return lines
