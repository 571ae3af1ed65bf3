"""日志配置：终端可读格式，或供 CI 收集的 JSON 格式"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """每条日志一行 JSON，extra 字段原样带上"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                log_data[key] = value
        return json.dumps(log_data, ensure_ascii=False, default=str)


class RunAllHandler(logging.StreamHandler):
    """setup_logging 装上的 handler，用来区分别处添加的 handler"""


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """配置根 logger，重复调用会替换之前装上的 handler"""
    handler = RunAllHandler(sys.stderr)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s"))

    root = logging.getLogger()
    for old in [h for h in root.handlers if isinstance(h, RunAllHandler)]:
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(level.upper())
