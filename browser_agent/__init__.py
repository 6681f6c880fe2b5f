"""Browser Agent 包

包含各个模块：
- models: 数据模型
- config: 环境配置
- session: 浏览器会话生命周期
- perception: 感知模块（元素定位）
- controller: 执行模块（五个浏览器动作）
- registry: 暴露给模型的动作表
- memory: 对话记忆
- planner: 规划模块（LLM）
- core: 核心 Agent 类
"""

from .config import AgentConfig
from .controller import Controller, SHORTCUTS, resolve_url
from .core import BrowserAgent, run_browser_automation
from .exceptions import BrowserAgentError, ConfigError, MaxTurnsExceeded, PlannerError, SessionError
from .memory import Conversation
from .models import (
    ActionOutcome,
    ActionRequest,
    AgentResult,
    AgentState,
    CaptureResult,
    InteractiveElement,
    PlannerOutput,
)
from .perception import ElementLocator
from .planner import SYSTEM_PROMPT, OpenAIPlanner, Planner
from .registry import ACTION_SPECS, ActionRegistry
from .session import BrowserSession

__all__ = [
    "AgentConfig",
    "Controller",
    "SHORTCUTS",
    "resolve_url",
    "BrowserAgent",
    "run_browser_automation",
    "BrowserAgentError",
    "ConfigError",
    "MaxTurnsExceeded",
    "PlannerError",
    "SessionError",
    "Conversation",
    "ActionOutcome",
    "ActionRequest",
    "AgentResult",
    "AgentState",
    "CaptureResult",
    "InteractiveElement",
    "PlannerOutput",
    "ElementLocator",
    "SYSTEM_PROMPT",
    "OpenAIPlanner",
    "Planner",
    "ACTION_SPECS",
    "ActionRegistry",
    "BrowserSession",
]
