"""执行模块：五个浏览器动作

所有动作都是尽力而为：可恢复的失败（元素找不到、超时、导航失败、输入失败）
都转换成描述性字符串返回，由模型决定是否重试。
"""

import base64
import logging
from typing import Awaitable, Callable, List, Optional, Tuple, Union

from playwright.async_api import Page

from .models import CaptureResult
from .perception import DEFAULT_MAX_ELEMENTS, ElementLocator
from .session import BrowserSession

logger = logging.getLogger(__name__)

DEFAULT_QUALITY = 40
DEFAULT_WAIT_MS = 3000
TYPE_WAIT_MS = 3000
DEFAULT_TYPING_DELAY_MS = 50
DEFAULT_SCROLL_AMOUNT = 300
SCROLL_SETTLE_MS = 500
NAVIGATION_TIMEOUT_MS = 10000

NO_CLICK_PARAMS = "No valid click parameters provided"

SHORTCUTS = {
    "chaicode": "https://ui.chaicode.com",
    "amazon": "https://amazon.com",
    "google": "https://google.com",
    "form": "https://httpbin.org/forms/post",
    "login": "https://the-internet.herokuapp.com/login",
    "todo": "https://todomvc.com/examples/vanilla-es6/",
    "calculator": "https://calculator.net/",
    "search": "https://duckduckgo.com/",
}

SCROLL_DELTAS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}


def resolve_url(url: Optional[str]) -> str:
    """快捷名转成完整 URL，未命中时原样返回"""
    if url is None:
        return ""
    return SHORTCUTS.get(url, url)


def scroll_delta(direction: str, amount: int) -> Tuple[int, int]:
    """方向 -> 带符号的 (dx, dy)；未知方向不移动"""
    sx, sy = SCROLL_DELTAS.get(direction, (0, 0))
    return sx * amount, sy * amount


ClickStrategy = Callable[[Page], Awaitable[str]]


class Controller:
    """执行模块：在共享 page 上执行动作"""

    def __init__(self, session: BrowserSession, locator: Optional[ElementLocator] = None):
        self.session = session
        self.locator = locator or ElementLocator()

    @property
    def page(self) -> Page:
        return self.session.page

    async def capture_state(self, max_elements: Optional[int] = None,
                            quality: Optional[int] = None) -> Union[CaptureResult, str]:
        """截取视口 JPEG 并列出可交互元素，不改变页面状态"""
        quality = quality or DEFAULT_QUALITY
        # 非正数同样按默认值处理，否则 slice 会从尾部截掉元素
        if not max_elements or max_elements < 1:
            max_elements = DEFAULT_MAX_ELEMENTS
        page = self.page

        logger.debug("Taking screenshot (quality=%d, max_elements=%d)", quality, max_elements)
        try:
            screenshot = await page.screenshot(
                full_page=False,
                type="jpeg",
                quality=quality,
                clip={
                    "x": 0,
                    "y": 0,
                    "width": self.session.config.viewport_width,
                    "height": self.session.config.viewport_height,
                },
            )
            elements = await self.locator.locate(page, max_elements)
        except Exception as e:
            logger.warning("Screenshot failed: %s", e)
            return f"Screenshot failed: {e}"
        logger.debug("Elements:\n%s", self.locator.summarize(elements))

        return CaptureResult(
            image=base64.b64encode(screenshot).decode("ascii"),
            elements=elements,
            count=len(elements),
            summary=f"Screenshot with {len(elements)} interactive elements",
        )

    async def smart_click(
        self,
        selector: Optional[str] = None,
        text: Optional[str] = None,
        x: Optional[float] = None,
        y: Optional[float] = None,
        wait_time: Optional[int] = None,
    ) -> str:
        """
        依次尝试 selector -> 文本 -> 坐标，第一个成功即返回。
        只尝试参数齐全的策略，失败时静默进入下一个。
        """
        wait_time = wait_time or DEFAULT_WAIT_MS
        page = self.page
        strategies: List[Tuple[str, ClickStrategy]] = []

        if selector:
            async def by_selector(p: Page) -> str:
                await p.wait_for_selector(selector, timeout=wait_time)
                await p.click(selector)
                return f"Clicked successfully using selector: {selector}"
            strategies.append((f"selector {selector}", by_selector))

        if text:
            async def by_text(p: Page) -> str:
                await p.get_by_text(text, exact=True).first.click(timeout=wait_time)
                return f"Clicked successfully using text: {text}"
            strategies.append((f"text {text!r}", by_text))

        if x is not None and y is not None:
            point = f"({x:g}, {y:g})"

            async def by_coordinates(p: Page) -> str:
                await p.mouse.click(x, y)
                return f"Clicked successfully using coordinates: {point}"
            strategies.append((f"coordinates {point}", by_coordinates))

        last_error: Optional[Exception] = None
        for label, strategy in strategies:
            logger.info("Trying click with %s", label)
            try:
                result = await strategy(page)
            except Exception as e:
                logger.warning("Click with %s failed: %s", label, e)
                last_error = e
                continue
            logger.info(result)
            return result

        if last_error is not None:
            return f"All click strategies failed. Last error: {last_error}"
        return NO_CLICK_PARAMS

    async def smart_type(
        self,
        selector: Optional[str] = None,
        text: Optional[str] = None,
        clear_first: Optional[bool] = None,
        typing_delay: Optional[int] = None,
    ) -> str:
        """逐字输入；没有 selector 时输入到当前焦点元素"""
        text = text or ""
        clear_first = clear_first is not False
        delay = DEFAULT_TYPING_DELAY_MS if typing_delay is None else typing_delay
        target = selector or "active element"
        page = self.page

        logger.info("Typing %r into %s with delay %sms", text, target, delay)
        try:
            if selector:
                await page.wait_for_selector(selector, timeout=TYPE_WAIT_MS)
                if clear_first:
                    await page.fill(selector, "")
                await page.locator(selector).first.press_sequentially(text, delay=delay)
            else:
                await page.keyboard.type(text, delay=delay)
        except Exception as e:
            logger.warning("Typing failed: %s", e)
            return f"Typing failed: {e}"

        return f'Successfully typed "{text}" into {target} with delay {delay}ms'

    async def smart_scroll(
        self,
        direction: Optional[str] = None,
        amount: Optional[int] = None,
        smooth: Optional[bool] = None,
    ) -> str:
        direction = direction or "down"
        amount = amount or DEFAULT_SCROLL_AMOUNT
        smooth = smooth is not False
        dx, dy = scroll_delta(direction, amount)
        page = self.page

        logger.info("Scrolling %s by %spx %s", direction, amount, "(smooth)" if smooth else "(instant)")
        try:
            if smooth:
                await page.evaluate(
                    "([dx, dy]) => window.scrollBy({ left: dx, top: dy, behavior: 'smooth' })",
                    [dx, dy],
                )
                # 等平滑滚动结束
                await page.wait_for_timeout(SCROLL_SETTLE_MS)
            else:
                await page.mouse.wheel(dx, dy)
        except Exception as e:
            logger.warning("Scroll failed: %s", e)
            return f"Scroll failed: {e}"

        return f"Successfully scrolled {direction} by {amount}px"

    async def navigate(self, url: Optional[str] = None) -> str:
        final_url = resolve_url(url)
        page = self.page

        logger.info("Navigating to: %s", final_url)
        try:
            await page.goto(final_url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)
            title = await page.title()
        except Exception as e:
            logger.warning("Navigation failed: %s", e)
            return f"Navigation failed: {e}"

        logger.info("Navigation completed. Page title: %s", title)
        return f"Successfully navigated to {title} ({page.url})"
