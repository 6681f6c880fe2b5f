"""记忆模块：维护与模型的对话历史"""

import json
from typing import Any, Dict, List, Optional

from .models import ActionOutcome, CaptureResult

SKIPPED_CALL = "Skipped: only one action per turn is allowed."


class Conversation:
    """按 OpenAI chat 消息格式累积的对话状态"""

    def __init__(self, system_prompt: str, task: str, send_screenshots: bool = True):
        self.send_screenshots = send_screenshots
        self.messages: List[Dict[str, Any]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": f"<user_request>\n{task}\n</user_request>"},
        ]
        self.history: List[ActionOutcome] = []

    def record_assistant(self, content: Optional[str], tool_calls: Optional[List[Dict[str, Any]]] = None):
        """记录模型这一轮的原始输出（含全部 tool_calls，保证消息序列合法）"""
        message: Dict[str, Any] = {"role": "assistant", "content": content}
        if tool_calls:
            message["tool_calls"] = tool_calls
        self.messages.append(message)

    def record_outcome(self, outcome: ActionOutcome, skipped_call_ids: Optional[List[str]] = None):
        """追加动作结果；截图以图片形式单独附加一条 user 消息"""
        self.history.append(outcome)
        if outcome.request.call_id:
            self.messages.append({
                "role": "tool",
                "tool_call_id": outcome.request.call_id,
                "content": outcome.text,
            })
        else:
            self.messages.append({
                "role": "user",
                "content": f"Result of {outcome.request.name}: {outcome.text}",
            })

        for call_id in skipped_call_ids or []:
            self.messages.append({"role": "tool", "tool_call_id": call_id, "content": SKIPPED_CALL})

        if self.send_screenshots and isinstance(outcome.result, CaptureResult):
            self.messages.append({
                "role": "user",
                "content": [
                    {"type": "text", "text": outcome.result.summary},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:image/jpeg;base64,{outcome.result.image}"},
                    },
                ],
            })

    def format_history(self, last_n: int = 5) -> str:
        """格式化最近几步，用于日志"""
        if not self.history:
            return "(no actions yet)"

        lines = []
        start = max(len(self.history) - last_n, 0)
        for step, outcome in enumerate(self.history[start:], start=start + 1):
            args = json.dumps(outcome.request.arguments, ensure_ascii=False)
            result = outcome.result.summary if isinstance(outcome.result, CaptureResult) else outcome.result
            lines.append(f"Step {step}: {outcome.request.name}({args}) → {result}")
        return "\n".join(lines)

