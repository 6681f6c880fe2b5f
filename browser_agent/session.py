"""会话生命周期：唯一的浏览器 / 页面句柄"""

import logging
from typing import Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

from .config import AgentConfig
from .exceptions import SessionError

logger = logging.getLogger(__name__)
browser_logger = logging.getLogger("browser_agent.browser")


class BrowserSession:
    """
    持有一个浏览器进程和一个固定视口大小的页面。
    由控制循环独占，所有动作通过引用共享同一个 page。
    """

    def __init__(self, config: AgentConfig):
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    @property
    def viewport(self) -> dict:
        return {"width": self.config.viewport_width, "height": self.config.viewport_height}

    @property
    def is_started(self) -> bool:
        return self._page is not None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise SessionError("Browser session is not started")
        return self._page

    async def start(self) -> Page:
        if self._page is not None:
            return self._page

        logger.debug("Launching browser...")
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                slow_mo=self.config.slow_mo,
            )
            context = await self._browser.new_context(viewport=self.viewport)
            page = await context.new_page()
        except Exception as e:
            await self.stop()
            raise SessionError(f"Browser initialization failed: {e}") from e

        # 仅用于诊断输出，不参与程序逻辑
        page.on("console", lambda msg: browser_logger.info(msg.text))
        page.on("pageerror", lambda error: browser_logger.error(str(error)))

        self._page = page
        logger.info(
            "Browser initialized with %dx%d viewport",
            self.config.viewport_width,
            self.config.viewport_height,
        )
        return page

    async def stop(self):
        """关闭浏览器；未启动或重复调用都是安全的"""
        browser, playwright = self._browser, self._playwright
        self._page = None
        self._browser = None
        self._playwright = None

        if browser is not None:
            try:
                await browser.close()
                logger.debug("Browser closed successfully")
            except Exception as e:
                logger.warning("Browser close failed: %s", e)
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                logger.warning("Playwright stop failed: %s", e)

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()
