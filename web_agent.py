"""
Browser Agent - 基于 Playwright + OpenAI function calling 的网页自动化助手

从标准输入读取一句自然语言任务，启动浏览器，让模型反复调用
take_screenshot / smart_click / smart_type / smart_scroll / navigate
直到给出最终答案或用完轮次。

依赖安装：
    pip install -e .
    playwright install chromium

运行示例：
    export OPENAI_API_KEY='sk-...'
    python web_agent.py
"""

import asyncio
import signal
import sys

from browser_agent import AgentConfig, BrowserAgent, BrowserAgentError
from browser_agent.logger import configure_logging, console


async def run_task(task: str, config: AgentConfig) -> int:
    agent = BrowserAgent.from_config(config)
    runner = asyncio.ensure_future(agent.run(task))

    # 收到终止信号时取消任务，run() 的 finally 负责关闭浏览器
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, runner.cancel)
        except NotImplementedError:
            pass

    try:
        result = await runner
    except asyncio.CancelledError:
        console.print("\n[yellow]Interrupted, browser closed.[/yellow]")
        return 130
    except BrowserAgentError as e:
        console.print(f"[bold red]Task failed:[/bold red] {e}")
        return 1

    console.print("[bold green]Final result:[/bold green]", result.final_output)
    return 0


def main() -> int:
    config = AgentConfig.from_env()
    configure_logging(config.log_level)

    console.print("\n💡 What would you like me to do for you?")
    try:
        task = console.input("👉 Your request: ").strip()
    except (EOFError, KeyboardInterrupt):
        return 0
    if not task:
        return 0

    try:
        return asyncio.run(run_task(task, config))
    except BrowserAgentError as e:
        # 配置错误等在任务开始前抛出
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
