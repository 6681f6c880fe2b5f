"""日志配置：标准 logging + rich 输出到 stderr"""

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "browser_agent"

console = Console()


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """给 browser_agent 根 logger 装一个 RichHandler，重复调用只更新级别"""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            markup=False,
            show_time=False,
        )
        logger.addHandler(handler)
    logger.propagate = False

    return logger
