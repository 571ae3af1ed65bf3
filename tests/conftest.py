"""测试用的假界面：按选择器返回元素，点击会改变界面状态"""

from typing import Dict, List, Optional, Sequence

import pytest

from runall import ElementHandle, RunConfig

RUN_LABEL = "Run All  ►►"


def make_element(text: str, tag: str = "Text", enabled: bool = True, on_click=None) -> ElementHandle:
    async def click():
        if on_click is not None:
            on_click()

    return ElementHandle(text=text, tag=tag, enabled=enabled, _click=click)


class FakeUI:
    """
    模拟 MAUI 测试宿主：

    - 点击 Run All 后按钮禁用，再被查询 busy_polls 次后重新启用（None 表示永不启用）
    - 摘要页显示 summary_texts
    - 点击 ⛔ 进入结果页，下拉框 + 选项，选中 Failed 后显示 failure_texts
    - inline_filter 为 True 时摘要页上直接有下拉框
    """

    def __init__(self,
                 summary_texts: Sequence[str],
                 busy_polls: Optional[int] = 2,
                 run_label: Optional[str] = RUN_LABEL,
                 options: Sequence[str] = ("All", "Passed", "Failed", "Skipped"),
                 failure_texts: Sequence[str] = ("TestCApiGraph", "Assert.Equal() Failure"),
                 has_filter: bool = True,
                 inline_filter: bool = False):
        self.summary_texts = list(summary_texts)
        self.busy_polls = busy_polls
        self.run_label = run_label
        self.options = list(options)
        self.failure_texts = list(failure_texts)
        self.has_filter = has_filter
        self.inline_filter = inline_filter

        self.queries: List[str] = []
        self.clicks: List[str] = []
        self.run_clicked = False
        self.page = "summary"
        self.filter_open = False
        self.filter_value: Optional[str] = None

    # ElementQueryClient

    async def find(self, selector: str) -> List[ElementHandle]:
        self.queries.append(selector)
        handler = {
            "//Button": self._buttons,
            "//Text": self._texts,
            "//ComboBox": self._combos,
            "//ListItem": self._list_items,
        }.get(selector)
        return handler() if handler else []

    async def find_one(self, selector: str) -> Optional[ElementHandle]:
        elements = await self.find(selector)
        return elements[0] if elements else None

    # 界面状态

    def _click(self, label: str, action=None):
        def on_click():
            self.clicks.append(label)
            if action is not None:
                action()
        return on_click

    def _buttons(self) -> List[ElementHandle]:
        buttons = [make_element("Settings", "Button")]
        if self.run_label is None:
            return buttons
        enabled = True
        if self.run_clicked:
            if self.busy_polls is None:
                enabled = False
            else:
                enabled = self.busy_polls <= 0
                self.busy_polls -= 1

        def start():
            self.run_clicked = True

        buttons.append(make_element(self.run_label, "Button", enabled, self._click(self.run_label, start)))
        return buttons

    def _texts(self) -> List[ElementHandle]:
        if self.filter_value == "Failed":
            return [make_element(t) for t in self.failure_texts]
        if self.page == "summary":
            def open_results():
                self.page = "results"
            return [make_element(t, on_click=self._click(t, open_results)) for t in self.summary_texts]
        return [make_element(t) for t in ["Results", "TestOk"] + self.failure_texts]

    def _combos(self) -> List[ElementHandle]:
        if not self.has_filter or (self.page != "results" and not self.inline_filter):
            return []

        def open_filter():
            self.filter_open = True
        return [make_element(self.filter_value or "All", "ComboBox", on_click=self._click("ComboBox", open_filter))]

    def _list_items(self) -> List[ElementHandle]:
        if not self.filter_open:
            return []

        def choose(label):
            def action():
                self.filter_value = label
                self.filter_open = False
            return action
        return [make_element(o, "ListItem", on_click=self._click(o, choose(o))) for o in self.options]


class SessionLostUI(FakeUI):
    """点击 Run All 之后会话断开，之后的查询都抛出驱动错误"""

    async def find(self, selector: str) -> List[ElementHandle]:
        if self.run_clicked:
            raise RuntimeError("session lost")
        return await super().find(selector)


@pytest.fixture
def fast_config() -> RunConfig:
    return RunConfig(
        poll_interval=0.01,
        run_timeout=0.2,
        trigger_settle=0,
        results_settle=0,
        filter_settle=0,
        option_settle=0,
    )


@pytest.fixture
def texts():
    def build(values: Sequence[str]) -> List[ElementHandle]:
        return [make_element(v) for v in values]
    return build


@pytest.fixture
def clean_env(monkeypatch) -> Dict[str, str]:
    """清掉 RUNALL_* 环境变量，避免本机配置影响测试"""
    import os

    for key in list(os.environ):
        if key.startswith("RUNALL_"):
            monkeypatch.delenv(key)
    return os.environ
