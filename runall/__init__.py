"""Run All 结果探针包

包含各个模块：
- models: 数据模型
- errors: 编排错误
- client: 元素查询客户端（Playwright）
- appium_client: 元素查询客户端（Appium，需要单独导入）
- waiting: 等待原语
- perception: 感知模块（结果解析）
- controller: 执行模块（点击与失败筛选）
- memory: 记忆模块（状态历史）
- config: 配置
- core: 编排核心类
"""

from .models import ElementHandle, MarkerValuePair, RunState, RunSummary, Transition, VerdictReport
from .errors import (
    ControlNotFound,
    OptionNotFound,
    OrchestrationError,
    OutcomeParseError,
    RunCancelled,
    RunTimedOut,
    SummaryUnresolved,
    WaitTimedOut,
)
from .client import ElementQueryClient, PlaywrightQueryClient
from .waiting import await_condition
from .perception import Perception, parse_summary
from .controller import Controller
from .memory import Memory
from .config import RunConfig
from .core import RunOrchestrator

__all__ = [
    "ElementHandle",
    "MarkerValuePair",
    "RunState",
    "RunSummary",
    "Transition",
    "VerdictReport",
    "ControlNotFound",
    "OptionNotFound",
    "OrchestrationError",
    "OutcomeParseError",
    "RunCancelled",
    "RunTimedOut",
    "SummaryUnresolved",
    "WaitTimedOut",
    "ElementQueryClient",
    "PlaywrightQueryClient",
    "await_condition",
    "Perception",
    "parse_summary",
    "Controller",
    "Memory",
    "RunConfig",
    "RunOrchestrator",
]
