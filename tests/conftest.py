from typing import Any, Dict, List, Optional, Set

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_agent.config import AgentConfig
from browser_agent.exceptions import SessionError


class FakeMouse:
    def __init__(self, page: "FakePage"):
        self.page = page

    async def click(self, x, y):
        self.page.calls.append(("mouse.click", x, y))
        if self.page.fail_mouse:
            raise RuntimeError("mouse click failed")

    async def wheel(self, dx, dy):
        self.page.calls.append(("mouse.wheel", dx, dy))


class FakeKeyboard:
    def __init__(self, page: "FakePage"):
        self.page = page

    async def type(self, text, delay=0):
        self.page.calls.append(("keyboard.type", text, delay))
        self.page.focused_value += text


class FakeLocator:
    def __init__(self, page: "FakePage", kind: str, target: str):
        self.page = page
        self.kind = kind
        self.target = target

    @property
    def first(self) -> "FakeLocator":
        return self

    async def click(self, timeout=None):
        self.page.calls.append(("text.click", self.target))
        if self.target not in self.page.texts:
            raise PlaywrightTimeoutError(f'Timeout {timeout}ms exceeded waiting for text "{self.target}"')

    async def press_sequentially(self, text, delay=0):
        self.page.calls.append(("press_sequentially", self.target, text, delay))
        self.page.values[self.target] = self.page.values.get(self.target, "") + text


class FakePage:
    """只记录调用的 Playwright Page 替身"""

    def __init__(self, selectors: Optional[Set[str]] = None, texts: Optional[Set[str]] = None,
                 elements: Optional[List[Dict[str, Any]]] = None, title: str = "Example Domain"):
        self.selectors = selectors or set()
        self.texts = texts or set()
        self.elements = elements or []
        self._title = title
        self.url = "about:blank"
        self.values: Dict[str, str] = {}
        self.focused_value = ""
        self.fail_mouse = False
        self.fail_goto: Optional[Exception] = None
        self.calls: List[tuple] = []
        self.mouse = FakeMouse(self)
        self.keyboard = FakeKeyboard(self)

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]

    async def wait_for_selector(self, selector, timeout=None):
        self.calls.append(("wait_for_selector", selector, timeout))
        if selector not in self.selectors:
            raise PlaywrightTimeoutError(f'Timeout {timeout}ms exceeded waiting for "{selector}"')

    async def click(self, selector):
        self.calls.append(("click", selector))

    async def fill(self, selector, value):
        self.calls.append(("fill", selector, value))
        self.values[selector] = value

    def locator(self, selector):
        return FakeLocator(self, "css", selector)

    def get_by_text(self, text, exact=False):
        self.calls.append(("get_by_text", text, exact))
        return FakeLocator(self, "text", text)

    async def evaluate(self, script, arg=None):
        self.calls.append(("evaluate", arg))
        if isinstance(arg, int):
            return self.elements[:arg]
        return None

    async def wait_for_timeout(self, ms):
        self.calls.append(("wait_for_timeout", ms))

    async def screenshot(self, **kwargs):
        self.calls.append(("screenshot", kwargs))
        return b"\xff\xd8jpeg-bytes"

    async def goto(self, url, wait_until=None, timeout=None):
        self.calls.append(("goto", url, wait_until, timeout))
        if self.fail_goto is not None:
            raise self.fail_goto
        self.url = url

    async def title(self):
        return self._title


class FakeSession:
    """BrowserSession 的替身：不启动真实浏览器"""

    def __init__(self, page: FakePage, config: Optional[AgentConfig] = None):
        self.config = config or AgentConfig()
        self._fake_page = page
        self.started = False
        self.start_calls = 0
        self.stop_calls = 0

    @property
    def page(self):
        if not self.started:
            raise SessionError("Browser session is not started")
        return self._fake_page

    async def start(self):
        self.start_calls += 1
        self.started = True
        return self._fake_page

    async def stop(self):
        self.stop_calls += 1
        self.started = False


def make_element(tag="button", text="Login", selector=None, x=100, y=50, **extra):
    data = {
        "tag": tag,
        "type": extra.get("type", ""),
        "id": extra.get("id", ""),
        "text": text,
        "selector": selector or tag,
        "coordinates": {"x": x, "y": y},
    }
    return data


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def session(page):
    s = FakeSession(page)
    s.started = True
    return s
