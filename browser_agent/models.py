"""数据模型定义"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


@dataclass
class InteractiveElement:
    """视口内单个可见可交互元素（每次截图重新计算，不缓存）"""
    tag: str
    type: str
    id: str
    text: str  # 最多 30 个字符
    selector: str  # 尽力而为，不保证唯一
    x: int
    y: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InteractiveElement":
        coords = data.get("coordinates") or {}
        return cls(
            tag=data.get("tag", ""),
            type=data.get("type", ""),
            id=data.get("id", ""),
            text=data.get("text", ""),
            selector=data.get("selector", ""),
            x=int(coords.get("x", 0)),
            y=int(coords.get("y", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "type": self.type,
            "id": self.id,
            "text": self.text,
            "selector": self.selector,
            "coordinates": {"x": self.x, "y": self.y},
        }


@dataclass
class CaptureResult:
    """capture-state 的结构化结果"""
    image: str  # base64 编码的 JPEG
    elements: List[InteractiveElement]
    count: int
    summary: str

    def to_observation(self) -> Dict[str, Any]:
        """给模型看的观测结果，不含图片（图片单独附加）"""
        return {
            "elements": [el.to_dict() for el in self.elements],
            "elementCount": self.count,
            "message": self.summary,
        }


@dataclass
class ActionRequest:
    """模型发出的一次动作调用"""
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    call_id: Optional[str] = None


ActionResult = Union[str, CaptureResult]


@dataclass
class ActionOutcome:
    """单轮动作及其结果"""
    request: ActionRequest
    result: ActionResult

    @property
    def text(self) -> str:
        if isinstance(self.result, CaptureResult):
            return json.dumps(self.result.to_observation(), ensure_ascii=False)
        return self.result


@dataclass
class PlannerOutput:
    """Planner 每一轮的输出：要么是一个动作，要么是最终答案"""
    thought: str
    action: Optional[ActionRequest] = None
    final: Optional[str] = None
    skipped_call_ids: List[str] = field(default_factory=list)  # 同一轮里多余的 tool call

    @property
    def is_final(self) -> bool:
        return self.action is None


class AgentState(Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class AgentResult:
    """一次任务的最终结果"""
    final_output: str
    turns: int
    actions: List[ActionOutcome] = field(default_factory=list)
