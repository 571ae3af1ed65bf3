"""Run All 编排核心类：触发运行、等待结束、解析结果、收集失败详情"""

import asyncio
import logging
from typing import Optional

from .client import ElementQueryClient
from .config import RunConfig
from .controller import Controller
from .errors import (
    OrchestrationError,
    OutcomeParseError,
    RunCancelled,
    RunTimedOut,
    SummaryUnresolved,
    WaitTimedOut,
)
from .memory import Memory
from .models import RunState, RunSummary, VerdictReport
from .perception import Perception
from .waiting import await_condition

logger = logging.getLogger(__name__)

_TERMINAL = {RunState.DONE, RunState.FAILED}

_TRANSITIONS = {
    RunState.IDLE: {RunState.TRIGGERED},
    RunState.TRIGGERED: {RunState.AWAITING_COMPLETION},
    RunState.AWAITING_COMPLETION: {RunState.SCANNED},
    RunState.SCANNED: {RunState.ALL_PASSED, RunState.HAS_FAILURES},
    RunState.ALL_PASSED: {RunState.DONE},
    RunState.HAS_FAILURES: {RunState.FILTERING_FAILURES},
    RunState.FILTERING_FAILURES: {RunState.DIAGNOSTICS_COLLECTED},
    RunState.DIAGNOSTICS_COLLECTED: {RunState.DONE},
    RunState.DONE: set(),
    RunState.FAILED: set(),
}


class RunOrchestrator:
    """
    一次 Run All 运行的状态机。

    每个实例独占一个查询客户端，只能运行一次；重新运行需要新建实例。
    被测应用里的断言失败作为正常裁决返回（passed=False），
    无法判定结果时抛出 OrchestrationError 的子类。
    """

    def __init__(self, client: ElementQueryClient, config: Optional[RunConfig] = None):
        self.client = client
        self.config = config or RunConfig()
        self.config.validate()
        self.perception = Perception(client, self.config.success_marker, self.config.failure_marker)
        self.controller = Controller(
            client,
            filter_settle=self.config.filter_settle,
            option_settle=self.config.option_settle,
            checkpoint=self._checkpoint,
        )
        self.memory = Memory()
        self.state = RunState.IDLE
        self.summary = RunSummary()
        self.report: Optional[VerdictReport] = None
        self._started = False
        self._cancelled = False

    def cancel(self):
        """请求中止。正在进行的查询不会被打断，下一步开始前生效。"""
        self._cancelled = True

    async def run(self) -> VerdictReport:
        """执行整个流程，返回最终裁决"""
        if self._started:
            raise RuntimeError("RunOrchestrator 只能运行一次，请新建实例")
        self._started = True

        try:
            return await self._run()
        except OrchestrationError as e:
            self._fail(e)
            raise
        except Exception as e:
            # 驱动 / 会话错误同样属于无法判定结果，不能当作被测应用失败
            error = OrchestrationError(f"{type(e).__name__}: {e}", self.state.value)
            self._fail(error)
            raise error from e

    async def _run(self) -> VerdictReport:
        cfg = self.config

        # 1. 触发
        self._checkpoint("trigger")
        await self.controller.click_containing(cfg.run_control_selector, cfg.run_control_text, "trigger")
        self._advance(RunState.TRIGGERED)
        # 给控件时间进入禁用状态
        await asyncio.sleep(cfg.trigger_settle)

        # 2. 等待控件重新启用
        self._advance(RunState.AWAITING_COMPLETION)
        try:
            attempts = await await_condition(self._run_control_enabled, cfg.poll_interval, cfg.run_timeout)
        except WaitTimedOut as e:
            logger.error("❌ 运行超时（%gs）", e.timeout)
            raise RunTimedOut(e.timeout, e.attempts, "awaiting_completion") from e
        self._advance(RunState.SCANNED, f"轮询 {attempts} 次")

        # 3. 解析结果
        self._checkpoint("scan")
        try:
            elements, summary = await self.perception.scan(cfg.result_text_selector)
        except OutcomeParseError as e:
            e.stage = "scan"
            raise
        self.summary = summary
        if not summary.resolved:
            missing = []
            if summary.passed_count < 0:
                missing.append(cfg.success_marker)
            if summary.failed_count < 0:
                missing.append(cfg.failure_marker)
            raise SummaryUnresolved(len(elements), missing, "scan")
        logger.info("✓ 通过 %d，失败 %d", summary.passed_count, summary.failed_count)

        if summary.failed_count == 0:
            self._advance(RunState.ALL_PASSED)
            return self._finish(passed=True)

        # 4. 筛选失败项
        self._advance(RunState.HAS_FAILURES, f"{summary.failed_count} 个失败")
        self._advance(RunState.FILTERING_FAILURES)
        if cfg.open_results:
            self._checkpoint("open_results")
            await self.controller.click_exact(cfg.result_text_selector, cfg.failure_marker, "open_results")
            await asyncio.sleep(cfg.results_settle)
        summary.diagnostics = await self.controller.collect_failure_diagnostics(
            cfg.filter_control_selector,
            cfg.filter_option_selector,
            cfg.failed_option_label,
            cfg.result_text_selector,
        )
        self._advance(RunState.DIAGNOSTICS_COLLECTED, f"{len(summary.diagnostics)} 行")
        return self._finish(passed=False)

    async def _run_control_enabled(self) -> bool:
        """每次都重新查询运行控件；控件暂时消失视为仍在运行"""
        self._checkpoint("awaiting_completion")
        elements = await self.client.find(self.config.run_control_selector)
        control = next((el for el in elements if self.config.run_control_text in el.text), None)
        return control is not None and control.enabled

    def _checkpoint(self, stage: str):
        if self._cancelled:
            logger.warning("⚠ 运行在 %s 阶段前被取消", stage)
            raise RunCancelled(stage)

    def _advance(self, state: RunState, detail: Optional[str] = None):
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"非法状态迁移: {self.state.value} -> {state.value}")
        self.state = state
        self.memory.record(state, detail)
        logger.debug("→ %s%s", state.value, f" ({detail})" if detail else "")

    def _finish(self, passed: bool) -> VerdictReport:
        self._advance(RunState.DONE)
        self.report = VerdictReport(
            passed=passed,
            passed_count=self.summary.passed_count,
            failed_count=self.summary.failed_count,
            diagnostics=list(self.summary.diagnostics),
            state=self.state,
            history=list(self.memory.history),
        )
        return self.report

    def _fail(self, error: OrchestrationError):
        if self.state not in _TERMINAL:
            self.state = RunState.FAILED
            self.memory.record(RunState.FAILED, error.kind)
        logger.error("❌ %s: %s", error.kind, error)
        self.report = VerdictReport(
            passed=False,
            passed_count=self.summary.passed_count,
            failed_count=self.summary.failed_count,
            state=self.state,
            error=error.kind,
            message=str(error),
            history=list(self.memory.history),
        )
