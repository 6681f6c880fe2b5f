"""感知模块：枚举视口内可见的可交互元素"""

import logging
from typing import List

from playwright.async_api import Page

from .models import InteractiveElement

logger = logging.getLogger(__name__)

DEFAULT_MAX_ELEMENTS = 8

# 按文档顺序遍历，过滤后截断到 maxElements
ENUMERATE_ELEMENTS_JS = """
(maxElements) => {
    const isVisible = (el) => {
        const rect = el.getBoundingClientRect();
        const style = window.getComputedStyle(el);

        return (
            rect.width > 8 &&
            rect.height > 8 &&
            rect.top >= 0 &&
            rect.left >= 0 &&
            rect.bottom <= window.innerHeight &&
            rect.right <= window.innerWidth &&
            style.display !== 'none' &&
            style.visibility !== 'hidden' &&
            style.visibility !== 'collapse' &&
            style.opacity !== '0' &&
            !el.disabled &&
            !el.readOnly
        );
    };

    const INTERACTIVE =
        'button, input:not([type="hidden"]), textarea, select, a[href], [role="button"], [onclick]';

    // 只靠 tabindex 入选的元素要求 tabIndex 非负
    const isCandidate = (el) => el.matches(INTERACTIVE) || el.tabIndex >= 0;

    const nodes = document.querySelectorAll(INTERACTIVE + ', [tabindex]');

    return Array.from(nodes)
        .filter(isCandidate)
        .filter(isVisible)
        .slice(0, maxElements)
        .map((el) => {
            const rect = el.getBoundingClientRect();
            const className = typeof el.className === 'string' ? el.className.trim() : '';
            return {
                tag: el.tagName.toLowerCase(),
                type: el.type || '',
                id: el.id || '',
                text: (el.textContent || el.placeholder || '').trim().slice(0, 30),
                selector: el.id
                    ? `#${el.id}`
                    : className
                    ? `.${className.split(/\\s+/)[0]}`
                    : el.tagName.toLowerCase(),
                coordinates: {
                    x: Math.round(rect.left + rect.width / 2),
                    y: Math.round(rect.top + rect.height / 2),
                },
            };
        });
}
"""


class ElementLocator:
    """
    DOM 结构化的元素发现（不做视觉识别）。

    可见性条件（全部满足）：
    - 包围盒大于 8x8 像素
    - 完全位于当前视口内
    - 没有被 display/visibility/opacity 隐藏
    - 没有 disabled / readOnly

    selector 依次取 id、第一个 class、标签名，不保证唯一。
    """

    async def locate(self, page: Page, max_elements: int = DEFAULT_MAX_ELEMENTS) -> List[InteractiveElement]:
        if max_elements < 1:
            max_elements = DEFAULT_MAX_ELEMENTS
        raw = await page.evaluate(ENUMERATE_ELEMENTS_JS, max_elements)
        elements = [InteractiveElement.from_dict(item) for item in raw[:max_elements]]
        logger.info("Found %d interactive elements", len(elements))
        return elements

    @staticmethod
    def summarize(elements: List[InteractiveElement]) -> str:
        """生成给日志看的文本摘要"""
        lines = []
        for i, el in enumerate(elements, start=1):
            kind = f"{el.tag}[{el.type}]" if el.type else el.tag
            lines.append(f"[{i}] {kind} {el.selector}: \"{el.text}\" @ ({el.x}, {el.y})")
        return "\n".join(lines)
