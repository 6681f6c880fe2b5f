"""配置：从环境变量 / .env 读取"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigError

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


@dataclass
class AgentConfig:
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: str = "gpt-4o"
    viewport_width: int = 920
    viewport_height: int = 920
    headless: bool = False
    slow_mo: int = 1000  # 毫秒，便于肉眼观察
    max_turns: int = 20
    temperature: float = 0.0
    send_screenshots: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "AgentConfig":
        """加载 .env 后读取环境变量，未设置的项使用默认值"""
        load_dotenv(dotenv_path)
        return cls(
            api_key=os.getenv("OPENAI_API_KEY"),
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            model=os.getenv("OPENAI_MODEL", cls.model),
            viewport_width=_env_int("VIEWPORT_WIDTH", cls.viewport_width),
            viewport_height=_env_int("VIEWPORT_HEIGHT", cls.viewport_height),
            headless=_env_bool("BROWSER_HEADLESS", cls.headless),
            slow_mo=_env_int("BROWSER_SLOW_MO", cls.slow_mo),
            max_turns=_env_int("AGENT_MAX_TURNS", cls.max_turns),
            send_screenshots=_env_bool("AGENT_SEND_SCREENSHOTS", cls.send_screenshots),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
