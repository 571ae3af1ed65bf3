"""
Run All 结果探针 - 点击测试宿主应用的 "Run All"，等待结束后读出通过/失败计数

两种后端：
  playwright  打开网页版测试宿主（--url）
  appium      连接已启动的 Appium 服务，驱动原生测试宿主（--app）

退出码：
  0 全部通过    1 被测应用有失败用例
  2 ControlNotFound  3 RunTimedOut  4 OutcomeParseError
  5 OptionNotFound   6 RunCancelled 7 其他编排/配置错误

运行示例：
    python run_all.py --backend playwright --url http://localhost:5000 --report report.json
    python run_all.py --backend appium --app "ORT.CSharp.Tests.MAUI_9zz4h110yvjzm!App"
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

from playwright.async_api import async_playwright

from runall import OrchestrationError, RunConfig, RunOrchestrator, RunState, VerdictReport
from runall.client import PlaywrightQueryClient
from runall.logging_config import setup_logging

logger = logging.getLogger("run_all")

EXIT_PASSED = 0
EXIT_TEST_FAILURES = 1
EXIT_CONFIG_ERROR = 7

DEFAULT_APPIUM_SERVER = "http://127.0.0.1:4723/wd/hub"

# 网页版宿主的默认选择器，原生宿主使用 RunConfig 自带的 XPath
PLAYWRIGHT_SELECTORS = {
    "run_control_selector": "button",
    "result_text_selector": "span, label, p",
    "filter_control_selector": "select, [role=combobox]",
    "filter_option_selector": "option, [role=option]",
}

Outcome = Tuple[VerdictReport, Optional[OrchestrationError]]


async def execute(orchestrator: RunOrchestrator) -> Outcome:
    """运行一次，编排错误随裁决一起返回"""
    try:
        await orchestrator.run()
        return orchestrator.report, None
    except OrchestrationError as e:
        return orchestrator.report, e
    finally:
        logger.debug("状态历史:\n%s", orchestrator.memory.format_history())


async def run_with_playwright(config: RunConfig, url: str, headful: bool) -> Outcome:
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=not headful)
        try:
            page = await browser.new_page()
            await page.goto(url)
            return await execute(RunOrchestrator(PlaywrightQueryClient(page), config))
        finally:
            await browser.close()


async def run_with_appium(config: RunConfig, server: str, app: str, platform: str) -> Outcome:
    # appium 是可选依赖，只有这个后端需要
    from appium import webdriver
    from appium.options.common import AppiumOptions

    from runall.appium_client import AppiumQueryClient

    options = AppiumOptions()
    if platform == "android":
        options.platform_name = "Android"
        options.automation_name = "UIAutomator2"
    else:
        options.platform_name = "Windows"
        options.automation_name = "windows"
    options.set_capability("app", app)

    driver = await asyncio.to_thread(webdriver.Remote, server, options=options)
    try:
        return await execute(RunOrchestrator(AppiumQueryClient(driver), config))
    finally:
        await asyncio.to_thread(driver.quit)


def write_report(report: VerdictReport, path: Path):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info("📄 报告已写入 %s", path)


def exit_code_for(report: VerdictReport, error: Optional[OrchestrationError]) -> int:
    if error is not None:
        return error.exit_code
    if report.passed:
        return EXIT_PASSED
    return EXIT_TEST_FAILURES


def print_verdict(report: VerdictReport, error: Optional[OrchestrationError]):
    if error is not None:
        print(f"❌ 无法判定运行结果 ({error.kind}): {error}")
    elif report.passed:
        print(f"✅ 全部通过：{report.passed_count} 个")
    else:
        print(f"⛔ 失败 {report.failed_count} 个，通过 {report.passed_count} 个")
        print(report.diagnostic_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run All → 等待结束 → 解析结果")
    parser.add_argument("--backend", choices=["playwright", "appium"], default="playwright")
    parser.add_argument("--url", help="网页版测试宿主地址（playwright）")
    parser.add_argument("--headful", action="store_true", help="显示浏览器窗口，便于调试")
    parser.add_argument("--appium-server", default=DEFAULT_APPIUM_SERVER)
    parser.add_argument("--app", help="被测应用标识（appium）")
    parser.add_argument("--platform", choices=["windows", "android"], default="windows")
    parser.add_argument("--timeout", type=float, help="等待运行结束的超时秒数")
    parser.add_argument("--env-file", help=".env 文件路径")
    parser.add_argument("--report", type=Path, help="把裁决写成 JSON")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--json-logs", action="store_true", help="日志输出为 JSON")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, json_format=args.json_logs)

    if args.backend == "playwright" and not args.url:
        logger.error("❌ playwright 后端需要 --url")
        return EXIT_CONFIG_ERROR
    if args.backend == "appium" and not args.app:
        logger.error("❌ appium 后端需要 --app")
        return EXIT_CONFIG_ERROR

    defaults = PLAYWRIGHT_SELECTORS if args.backend == "playwright" else None
    try:
        config = RunConfig.from_env(args.env_file, defaults, run_timeout=args.timeout)
    except ValueError as e:
        logger.error("❌ 配置错误: %s", e)
        return EXIT_CONFIG_ERROR

    try:
        if args.backend == "playwright":
            report, error = asyncio.run(run_with_playwright(config, args.url, args.headful))
        else:
            report, error = asyncio.run(run_with_appium(config, args.appium_server, args.app, args.platform))
    except Exception as e:
        # 浏览器 / 会话启动失败，编排还没开始
        logger.exception("❌ 会话错误")
        error = OrchestrationError(f"{type(e).__name__}: {e}", "session")
        report = VerdictReport(passed=False, passed_count=-1, failed_count=-1,
                               state=RunState.FAILED, error=error.kind, message=str(error))

    print_verdict(report, error)
    if args.report:
        write_report(report, args.report)
    return exit_code_for(report, error)


if __name__ == "__main__":
    sys.exit(main())
