"""记忆模块：记录一次运行经过的状态"""

from typing import List, Optional

from .models import RunState, Transition


class Memory:
    """记忆模块：按顺序保存状态迁移"""

    def __init__(self):
        self.history: List[Transition] = []
        self.step_counter = 0

    def record(self, state: RunState, detail: Optional[str] = None):
        """记录一次状态迁移"""
        self.step_counter += 1
        self.history.append(Transition(step_num=self.step_counter, state=state, detail=detail))

    def format_history(self, last_n: int = 10) -> str:
        """格式化状态历史"""
        if not self.history:
            return "(无历史)"

        lines = []
        for rec in self.history[-last_n:]:
            detail_str = f" ({rec.detail})" if rec.detail else ""
            lines.append(f"Step {rec.step_num}: {rec.state.value}{detail_str}")

        return "\n".join(lines)
