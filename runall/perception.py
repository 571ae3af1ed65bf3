"""感知模块：从界面文本元素中解析运行结果"""

import logging
import re
from typing import List, Sequence, Tuple

from .client import ElementQueryClient
from .errors import OutcomeParseError
from .models import ElementHandle, MarkerValuePair, RunSummary

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "✔"
FAILURE_MARKER = "⛔"

_COUNT_RE = re.compile(r"\d+", re.ASCII)


def parse_count(index: int, raw_text: str) -> int:
    """把计数元素的文本解析为非负整数"""
    text = raw_text.strip()
    if not _COUNT_RE.fullmatch(text):
        raise OutcomeParseError(index, raw_text)
    return int(text)


def find_marker_pairs(
    elements: Sequence[ElementHandle],
    success_marker: str = SUCCESS_MARKER,
    failure_marker: str = FAILURE_MARKER,
) -> List[MarkerValuePair]:
    """
    单次扫描，找出 标记/数值 对。

    标记与数值只按扫描顺序相邻（i, i+1）配对，界面上没有其他结构把两者关联起来。
    同类标记重复出现时以第一次为准，两类都找到后立即停止。
    """
    pairs: List[MarkerValuePair] = []
    seen = set()
    i = 0
    while i < len(elements) and len(seen) < 2:
        text = elements[i].text
        if text in (success_marker, failure_marker) and text not in seen:
            if i + 1 >= len(elements):
                raise OutcomeParseError(i, text, "标记后没有数值元素")
            value = parse_count(i + 1, elements[i + 1].text)
            pairs.append(MarkerValuePair(marker=text, marker_index=i, value=value))
            seen.add(text)
            i += 1
        i += 1
    return pairs


def parse_summary(
    elements: Sequence[ElementHandle],
    success_marker: str = SUCCESS_MARKER,
    failure_marker: str = FAILURE_MARKER,
) -> RunSummary:
    """把扫描到的文本元素归约为 RunSummary，缺失的计数保持为 -1"""
    summary = RunSummary()
    for pair in find_marker_pairs(elements, success_marker, failure_marker):
        if pair.marker == success_marker:
            summary.passed_count = pair.value
        else:
            summary.failed_count = pair.value
    return summary


class Perception:
    """感知模块：查询结果页文本并解析"""

    def __init__(self, client: ElementQueryClient,
                 success_marker: str = SUCCESS_MARKER,
                 failure_marker: str = FAILURE_MARKER):
        self.client = client
        self.success_marker = success_marker
        self.failure_marker = failure_marker

    async def scan(self, selector: str) -> Tuple[List[ElementHandle], RunSummary]:
        """重新查询文本元素，返回元素列表 + 解析出的摘要"""
        elements = await self.client.find(selector)
        logger.debug("扫描到 %d 个文本元素:\n%s", len(elements), self._generate_summary(elements))
        summary = parse_summary(elements, self.success_marker, self.failure_marker)
        return elements, summary

    def _generate_summary(self, elements: Sequence[ElementHandle]) -> str:
        """生成元素文本摘要，便于排查"""
        lines = []
        for i, el in enumerate(elements):
            disabled_str = " [DISABLED]" if not el.enabled else ""
            lines.append(f"[{i}] {el.tag}: \"{el.text}\"{disabled_str}")
        return "\n".join(lines)
