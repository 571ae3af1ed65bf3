"""数据模型定义"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional


@dataclass
class ElementHandle:
    """
    单个界面元素的句柄。

    只在一次查询结果内有效，远端界面会在两次查询之间变化，
    因此不要跨轮询缓存。
    """
    text: str
    tag: str
    enabled: bool
    _click: Callable[[], Awaitable[None]] = field(repr=False, compare=False)

    async def click(self) -> None:
        await self._click()


@dataclass
class RunSummary:
    """运行结果摘要，-1 表示尚未找到"""
    passed_count: int = -1
    failed_count: int = -1
    diagnostics: List[str] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return self.passed_count >= 0 and self.failed_count >= 0


@dataclass
class MarkerValuePair:
    """扫描到的相邻 标记/数值 对"""
    marker: str
    marker_index: int
    value: int

    @property
    def value_index(self) -> int:
        return self.marker_index + 1


class RunState(Enum):
    IDLE = "idle"
    TRIGGERED = "triggered"
    AWAITING_COMPLETION = "awaiting_completion"
    SCANNED = "scanned"
    ALL_PASSED = "all_passed"
    HAS_FAILURES = "has_failures"
    FILTERING_FAILURES = "filtering_failures"
    DIAGNOSTICS_COLLECTED = "diagnostics_collected"
    DONE = "done"
    FAILED = "failed"


@dataclass
class Transition:
    """单条状态迁移记录"""
    step_num: int
    state: RunState
    detail: Optional[str] = None


@dataclass
class VerdictReport:
    """最终裁决，交给调用方 / CI"""
    passed: bool
    passed_count: int
    failed_count: int
    diagnostics: List[str] = field(default_factory=list)
    state: RunState = RunState.DONE
    error: Optional[str] = None  # 编排错误类型名，断言失败时为 None
    message: Optional[str] = None
    history: List[Transition] = field(default_factory=list)

    @property
    def diagnostic_text(self) -> str:
        return "\n".join(self.diagnostics)

    def to_dict(self) -> Dict:
        return {
            "passed": self.passed,
            "passedCount": self.passed_count,
            "failedCount": self.failed_count,
            "diagnostics": list(self.diagnostics),
            "state": self.state.value,
            "error": self.error,
            "message": self.message,
            "history": [
                {"step": t.step_num, "state": t.state.value, "detail": t.detail}
                for t in self.history
            ],
        }
