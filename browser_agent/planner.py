"""规划模块：调用 LLM 决定下一步动作或给出最终答案"""

import json
import logging
from typing import Any, Dict, List

from openai import AsyncOpenAI, OpenAIError

from .config import AgentConfig
from .exceptions import ConfigError, PlannerError
from .memory import Conversation
from .models import ActionRequest, PlannerOutput

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are an AI agent designed to operate in an iterative loop to automate browser tasks.
Your ultimate goal is to accomplish the task provided in <user_request>.

CAPABILITIES
You excel at:
1. Navigating complex websites and extracting precise information.
2. Automating form submissions and interactive web actions (always complete the form fully if present).
3. Gathering and saving information.
4. Operating effectively in an agent loop.
5. Efficiently performing diverse web tasks.

STRATEGY
1. Understand and improve the user query before processing the task.
2. Always begin with a viewport screenshot to understand the current state.
3. Use DOM selectors as the primary method (semantic and reliable).
4. Fall back to coordinate clicks if DOM-based methods fail.
5. Prioritize visible and interactive elements to minimize noise.

If a form is present, detect all required fields -> fill them completely -> scroll to check for extra fields -> then submit.

WORKFLOW
1. Start with take_screenshot.
2. Use navigate if a URL is needed.
3. Use smart_click for interactions (tries DOM first, then coordinates).
4. Use smart_type for entering data into form fields.
5. Submit forms via the relevant button (e.g., Sign Up, Login, Search, Create Account).
6. Validate success via take_screenshot + success message.
7. Reply without calling an action to finish, with a concise success or failure message.

BEST PRACTICES
- Call exactly one action per turn.
- Be precise but concise in explaining each step.
- Handle errors gracefully and retry with fallback methods.
- Stay efficient by avoiding irrelevant elements.
""".strip()


def build_client(config: AgentConfig) -> AsyncOpenAI:
    if not config.api_key:
        raise ConfigError("OPENAI_API_KEY is not set, e.g. export OPENAI_API_KEY='sk-...'")
    return AsyncOpenAI(api_key=config.api_key, base_url=config.base_url)


class Planner:
    """推理协作者接口：每轮返回一个动作或最终答案，测试里可替换"""

    async def next_step(self, conversation: Conversation, tools: List[Dict[str, Any]]) -> PlannerOutput:
        raise NotImplementedError


class OpenAIPlanner(Planner):
    """基于 chat.completions + function calling 的实现"""

    def __init__(self, client: AsyncOpenAI, model: str, temperature: float = 0.0):
        self.client = client
        self.model = model
        self.temperature = temperature

    async def next_step(self, conversation: Conversation, tools: List[Dict[str, Any]]) -> PlannerOutput:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=conversation.messages,
                tools=tools,
            )
        except OpenAIError as e:
            raise PlannerError(f"Model call failed: {e}") from e

        if not response.choices:
            raise PlannerError("Model returned no choices")
        message = response.choices[0].message
        content = message.content or ""
        tool_calls = message.tool_calls or []

        if not tool_calls:
            conversation.record_assistant(content)
            return PlannerOutput(thought="", final=content or "Task completed")

        requests = [
            ActionRequest(name=tc.function.name, arguments=_decode_arguments(tc.function.arguments), call_id=tc.id)
            for tc in tool_calls
        ]
        # 保留原始 arguments 字符串，避免解析失败时改写历史
        conversation.record_assistant(
            content or None,
            [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.function.name, "arguments": tc.function.arguments},
                }
                for tc in tool_calls
            ],
        )

        if len(requests) > 1:
            logger.debug("Model issued %d tool calls, executing only the first", len(requests))
        return PlannerOutput(
            thought=content,
            action=requests[0],
            skipped_call_ids=[r.call_id for r in requests[1:]],
        )


def _decode_arguments(raw: str) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Could not decode tool arguments %r: %s", raw, e)
        return {}
    return data if isinstance(data, dict) else {}
