"""异常定义

元素找不到、导航失败、输入失败这三类错误不会以异常形式离开动作层，
而是转换成结果字符串交给模型；这里只定义对整个任务致命的错误。
"""


class BrowserAgentError(Exception):
    """所有 browser_agent 异常的基类"""


class ConfigError(BrowserAgentError):
    """配置缺失或无效"""


class SessionError(BrowserAgentError):
    """浏览器启动失败，或在会话启动前调用了动作"""


class PlannerError(BrowserAgentError):
    """推理模型调用失败或返回了无法使用的结果"""


class MaxTurnsExceeded(BrowserAgentError):
    """在轮次上限内没有得到最终答案"""

    def __init__(self, max_turns: int):
        self.max_turns = max_turns
        super().__init__(f"Max turns ({max_turns}) exceeded without a final answer")
