"""浏览器自动化智能体核心类"""

import logging
from typing import Optional

from .config import AgentConfig
from .controller import Controller
from .exceptions import MaxTurnsExceeded
from .memory import Conversation
from .models import ActionOutcome, AgentResult, AgentState
from .planner import SYSTEM_PROMPT, OpenAIPlanner, Planner, build_client
from .registry import ActionRegistry
from .session import BrowserSession

logger = logging.getLogger(__name__)


class BrowserAgent:
    """
    单任务控制循环：INITIALIZING -> RUNNING -> SUCCEEDED | FAILED。

    每轮把对话和动作表交给 planner，planner 返回一个动作就同步执行并把结果
    写回对话，返回最终答案就结束。本层不做自动重试，重试完全由模型决定。
    """

    def __init__(self, planner: Planner, config: Optional[AgentConfig] = None,
                 session: Optional[BrowserSession] = None):
        self.planner = planner
        self.config = config or AgentConfig()
        self.session = session or BrowserSession(self.config)
        self.state = AgentState.INITIALIZING
        self.conversation: Optional[Conversation] = None

    @classmethod
    def from_config(cls, config: AgentConfig) -> "BrowserAgent":
        planner = OpenAIPlanner(build_client(config), config.model, config.temperature)
        return cls(planner, config)

    async def run(self, task: str, initial_site: Optional[str] = None) -> AgentResult:
        """执行一个任务，无论成败都会关闭浏览器"""
        self.state = AgentState.INITIALIZING
        try:
            await self.session.start()
            controller = Controller(self.session)
            registry = ActionRegistry(controller)

            # 不计入轮次预算，和 navigate 动作用同一套快捷名解析
            if initial_site:
                logger.info("Starting with initial site: %s", initial_site)
                logger.info(await controller.navigate(initial_site))

            self.state = AgentState.RUNNING
            logger.info("Starting automation task: %s", task)
            logger.info("=" * 60)

            result = await self._loop(task, registry)

            logger.info("=" * 60)
            logger.info("Task completed in %d turns", result.turns)
            self.state = AgentState.SUCCEEDED
            return result
        except Exception as e:
            self.state = AgentState.FAILED
            logger.error("Automation task failed: %s", e)
            raise
        finally:
            await self.session.stop()

    async def _loop(self, task: str, registry: ActionRegistry) -> AgentResult:
        self.conversation = Conversation(SYSTEM_PROMPT, task, self.config.send_screenshots)
        tools = registry.tools()
        max_turns = self.config.max_turns

        for turn in range(1, max_turns + 1):
            logger.debug("Turn %d/%d", turn, max_turns)
            decision = await self.planner.next_step(self.conversation, tools)

            if decision.is_final:
                return AgentResult(
                    final_output=decision.final or "",
                    turns=turn,
                    actions=list(self.conversation.history),
                )

            if decision.thought:
                logger.info("Thought: %s", decision.thought)
            request = decision.action
            logger.info("Action: %s %s", request.name, request.arguments)

            result = await registry.dispatch(request)
            outcome = ActionOutcome(request=request, result=result)
            self.conversation.record_outcome(outcome, decision.skipped_call_ids)
            logger.debug("Recent steps:\n%s", self.conversation.format_history())

        raise MaxTurnsExceeded(max_turns)


async def run_browser_automation(task: str, initial_site: Optional[str] = None,
                                 config: Optional[AgentConfig] = None) -> AgentResult:
    """按环境配置构建智能体并执行单个任务"""
    config = config or AgentConfig.from_env()
    agent = BrowserAgent.from_config(config)
    return await agent.run(task, initial_site=initial_site)
