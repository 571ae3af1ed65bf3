"""配置：选择器、标记字符与各类等待时长"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .perception import FAILURE_MARKER, SUCCESS_MARKER

ENV_PREFIX = "RUNALL_"


@dataclass
class RunConfig:
    """
    一次运行所需的全部可调参数。

    默认值对应 MAUI 测试宿主应用的界面（Run All 按钮、✔ / ⛔ 计数、
    结果页的筛选下拉框）。时长单位均为秒。
    """

    # 触发
    run_control_selector: str = "//Button"
    run_control_text: str = "Run All"

    # 结果扫描
    result_text_selector: str = "//Text"
    success_marker: str = SUCCESS_MARKER
    failure_marker: str = FAILURE_MARKER

    # 失败详情
    open_results: bool = True
    filter_control_selector: str = "//ComboBox"
    filter_option_selector: str = "//ListItem"
    failed_option_label: str = "Failed"

    # 时长
    poll_interval: float = 0.5
    run_timeout: float = 600.0
    trigger_settle: float = 0.5
    results_settle: float = 1.0
    filter_settle: float = 0.5
    option_settle: float = 0.5

    @classmethod
    def from_env(cls, env_file: Optional[str] = None,
                 defaults: Optional[Dict[str, Any]] = None, **overrides) -> "RunConfig":
        """
        从环境变量（以及 .env 文件）读取配置，例如 RUNALL_RUN_TIMEOUT=120。
        优先级：overrides > 环境变量 > defaults > 字段默认值。
        """
        load_dotenv(env_file)
        values = dict(defaults or {})
        for f in fields(cls):
            raw = os.environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _coerce(f.name, raw, f.type)
        values.update({k: v for k, v in overrides.items() if v is not None})
        config = cls(**values)
        config.validate()
        return config

    def validate(self):
        """检查配置，非法时抛出 ValueError"""
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval 必须为正数: {self.poll_interval}")
        if self.run_timeout <= 0:
            raise ValueError(f"run_timeout 必须为正数: {self.run_timeout}")
        for name in ("trigger_settle", "results_settle", "filter_settle", "option_settle"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} 不能为负数: {getattr(self, name)}")
        for name in ("run_control_selector", "run_control_text", "result_text_selector",
                     "success_marker", "failure_marker", "filter_control_selector",
                     "filter_option_selector", "failed_option_label"):
            if not getattr(self, name):
                raise ValueError(f"{name} 不能为空")
        if self.success_marker == self.failure_marker:
            raise ValueError("success_marker 与 failure_marker 不能相同")


def _coerce(name: str, raw: str, type_):
    if type_ in (bool, "bool"):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if type_ in (float, "float"):
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"环境变量 {ENV_PREFIX}{name.upper()} 不是数字: {raw!r}") from None
    return raw
