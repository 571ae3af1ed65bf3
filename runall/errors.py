"""异常定义：编排流程无法判定结果时抛出的错误"""

from typing import List, Optional


class WaitTimedOut(Exception):
    """等待原语超时"""

    def __init__(self, attempts: int, timeout: float):
        self.attempts = attempts
        self.timeout = timeout
        super().__init__(f"条件在 {timeout:g}s 内未满足（已轮询 {attempts} 次）")


class OrchestrationError(Exception):
    """
    编排失败的基类。

    与被测应用内的断言失败（failed_count > 0）不同，这类错误表示
    无法从界面状态判定本次运行的结果。
    """

    exit_code = 7
    kind = "OrchestrationError"

    def __init__(self, message: str, stage: Optional[str] = None):
        self.stage = stage
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.stage:
            return f"[{self.stage}] {message}"
        return message


class ControlNotFound(OrchestrationError):
    """找不到需要点击的控件"""

    exit_code = 2
    kind = "ControlNotFound"

    def __init__(self, selector: str, expected: str, stage: Optional[str] = None):
        self.selector = selector
        self.expected = expected
        super().__init__(f"在 {selector!r} 中找不到控件 {expected!r}", stage)


class RunTimedOut(OrchestrationError):
    """运行控件在超时时间内没有重新启用"""

    exit_code = 3
    kind = "RunTimedOut"

    def __init__(self, timeout: float, attempts: int, stage: Optional[str] = None):
        self.timeout = timeout
        self.attempts = attempts
        super().__init__(
            f"运行未在 {timeout:g}s 内结束（轮询 {attempts} 次，控件仍为禁用状态）", stage
        )


class OutcomeParseError(OrchestrationError):
    """结果文本无法解析为计数"""

    exit_code = 4
    kind = "OutcomeParseError"

    def __init__(self, index: int, raw_text: str, reason: str = "", stage: Optional[str] = None):
        self.index = index
        self.raw_text = raw_text
        detail = reason or "不是非负整数"
        super().__init__(f"第 {index} 个元素 {raw_text!r}: {detail}", stage)


class SummaryUnresolved(OutcomeParseError):
    """扫描结束时仍缺少通过/失败计数"""

    def __init__(self, index: int, missing: List[str], stage: Optional[str] = None):
        self.missing = missing
        super().__init__(index, "", f"扫描结束仍未找到标记 {', '.join(missing)}", stage)


class OptionNotFound(OrchestrationError):
    """筛选列表中没有期望的选项"""

    exit_code = 5
    kind = "OptionNotFound"

    def __init__(self, label: str, seen: List[str], stage: Optional[str] = None):
        self.label = label
        self.seen = seen
        super().__init__(f"筛选选项中找不到 {label!r}，实际选项: {seen}", stage)


class RunCancelled(OrchestrationError):
    """调用方中止了运行"""

    exit_code = 6
    kind = "RunCancelled"

    def __init__(self, stage: Optional[str] = None):
        super().__init__("运行已被取消", stage)
