"""动作注册表：暴露给模型的全部可调用动作

每个动作有名字、描述和参数 schema。所有参数都可选，默认值在动作内部应用，
schema 层只负责类型、枚举和取值范围校验。
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .controller import Controller
from .models import ActionRequest, ActionResult

logger = logging.getLogger(__name__)


class ActionArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ScreenshotArgs(ActionArgs):
    max_elements: Optional[int] = Field(None, ge=1, alias="maxElements", description="max elements to return")
    quality: Optional[int] = Field(None, ge=1, le=100, description="jpeg quality 1-100")


class ClickArgs(ActionArgs):
    selector: Optional[str] = Field(None, description="CSS selector")
    text: Optional[str] = Field(None, description="element text content")
    x: Optional[float] = Field(None, description="x coordinate")
    y: Optional[float] = Field(None, description="y coordinate")
    wait_time: Optional[int] = Field(None, alias="waitTime", description="wait timeout ms")


class TypeArgs(ActionArgs):
    selector: Optional[str] = Field(None, description="CSS selector of input field")
    text: Optional[str] = Field(None, description="Text to type")
    clear_first: Optional[bool] = Field(None, alias="clearFirst", description="Clear field before typing")
    typing_delay: Optional[int] = Field(None, alias="typingDelay", description="Delay in ms between keystrokes")


class ScrollArgs(ActionArgs):
    direction: Optional[Literal["up", "down", "left", "right"]] = Field(None, description="scroll direction")
    amount: Optional[int] = Field(None, description="pixels to scroll")
    smooth: Optional[bool] = Field(None, description="smooth scrolling")


class NavigateArgs(ActionArgs):
    url: Optional[str] = Field(None, description="full URL or shortcut name")


Handler = Callable[[Controller, Any], Awaitable[ActionResult]]


@dataclass(frozen=True)
class ActionSpec:
    name: str
    description: str
    args_model: Type[ActionArgs]
    handler: Handler

    def to_tool(self) -> Dict[str, Any]:
        """OpenAI function-calling 格式"""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.args_model.model_json_schema(by_alias=True),
            },
        }


ACTION_SPECS: List[ActionSpec] = [
    ActionSpec(
        name="take_screenshot",
        description="Capture viewport screenshot and get visible interactive elements",
        args_model=ScreenshotArgs,
        handler=lambda c, a: c.capture_state(max_elements=a.max_elements, quality=a.quality),
    ),
    ActionSpec(
        name="smart_click",
        description="Click element using hybrid approach: CSS selector first, then exact text, then x/y coordinates",
        args_model=ClickArgs,
        handler=lambda c, a: c.smart_click(selector=a.selector, text=a.text, x=a.x, y=a.y, wait_time=a.wait_time),
    ),
    ActionSpec(
        name="smart_type",
        description="Type text into specified field or active element with optional typing effect",
        args_model=TypeArgs,
        handler=lambda c, a: c.smart_type(
            selector=a.selector, text=a.text, clear_first=a.clear_first, typing_delay=a.typing_delay
        ),
    ),
    ActionSpec(
        name="smart_scroll",
        description="Scroll the page up, down, left, or right",
        args_model=ScrollArgs,
        handler=lambda c, a: c.smart_scroll(direction=a.direction, amount=a.amount, smooth=a.smooth),
    ),
    ActionSpec(
        name="navigate",
        description="Navigate to specified URL or use shortcut like chaicode, amazon, google, login, form, todo, calculator, search",
        args_model=NavigateArgs,
        handler=lambda c, a: c.navigate(url=a.url),
    ),
]


class ActionRegistry:
    """按动作名分发，调用前先做 schema 校验"""

    def __init__(self, controller: Controller, specs: Optional[List[ActionSpec]] = None):
        self.controller = controller
        self._specs: Dict[str, ActionSpec] = {s.name: s for s in (specs or ACTION_SPECS)}

    @property
    def names(self) -> List[str]:
        return list(self._specs)

    def tools(self) -> List[Dict[str, Any]]:
        return [spec.to_tool() for spec in self._specs.values()]

    async def dispatch(self, request: ActionRequest) -> ActionResult:
        spec = self._specs.get(request.name)
        if spec is None:
            logger.warning("Unknown action requested: %s", request.name)
            return f"Unknown action: {request.name}. Available actions: {', '.join(self.names)}"

        try:
            args = spec.args_model.model_validate(request.arguments or {})
        except ValidationError as e:
            logger.warning("Invalid arguments for %s: %s", request.name, e)
            return f"Invalid arguments for {request.name}: {e.errors(include_url=False)}"

        return await spec.handler(self.controller, args)
