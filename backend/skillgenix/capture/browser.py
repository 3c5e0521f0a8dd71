"""
浏览器截图引擎 - 基于Playwright(Chromium)的HTML/SVG渲染

职责：
1. 独立HTML文档截图（#capture-root），按过采样倍数输出
2. SVG按包围盒渲染为临时位图（透明背景，由调用方铺白底）
3. 允许跨域图片加载，单次截图带超时

依赖：
- playwright: 无头Chromium（需先执行 `playwright install chromium`）
- Pillow: 截图解码

使用方式：
    async with PlaywrightRasterizer() as rasterizer:
        capturer = SectionCapturer(rasterizer, rasterizer)
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from PIL import Image
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ..config import get_config
from ..interfaces import IElementRasterizer, ISvgRenderer, RasterizeError
from ..view.live_page import CAPTURE_ROOT_ID

if TYPE_CHECKING:
    from playwright.async_api import Browser, Playwright

    from ..config import RuntimeConfig

SVG_ROOT_ID = "svg-root"
_INITIAL_VIEWPORT_HEIGHT = 800


class PlaywrightRasterizer(IElementRasterizer, ISvgRenderer):
    """Playwright截图引擎（同一浏览器实例服务整个导出任务）"""

    def __init__(self, config: RuntimeConfig | None = None):
        capture_cfg = (config or get_config()).capture
        self.scale = capture_cfg.scale
        self.timeout_ms = capture_cfg.timeout_ms
        self.allow_cors = capture_cfg.allow_cors
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self) -> PlaywrightRasterizer:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        if self._browser is not None:
            return
        self._playwright = await async_playwright().start()
        args = ["--disable-web-security"] if self.allow_cors else []
        self._browser = await self._playwright.chromium.launch(args=args)

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def rasterize(self, html: str, width: int) -> Image.Image:
        """截取 #capture-root"""
        return await self._screenshot(html, f"#{CAPTURE_ROOT_ID}", width, _INITIAL_VIEWPORT_HEIGHT, self.scale)

    async def render_svg(self, markup: str, width: int, height: int, scale: int) -> Image.Image:
        """SVG渲染为透明背景位图"""
        document = (
            "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
            f"<style>#{SVG_ROOT_ID}>svg{{width:100%;height:100%;display:block}}</style></head>"
            "<body style=\"margin:0;background:transparent\">"
            f"<div id=\"{SVG_ROOT_ID}\" style=\"width:{width}px;height:{height}px\">{markup}</div>"
            "</body></html>"
        )
        return await self._screenshot(
            document, f"#{SVG_ROOT_ID}", width, height, scale, omit_background=True
        )

    async def _screenshot(
        self,
        document: str,
        selector: str,
        width: int,
        height: int,
        scale: int,
        omit_background: bool = False,
    ) -> Image.Image:
        await self.start()
        context = await self._browser.new_context(
            viewport={"width": max(width, 1), "height": max(height, 1)},
            device_scale_factor=scale,
            bypass_csp=self.allow_cors,
        )
        try:
            page = await context.new_page()
            await page.set_content(document, wait_until="load", timeout=self.timeout_ms)
            png = await page.locator(selector).screenshot(
                type="png",
                timeout=self.timeout_ms,
                omit_background=omit_background,
                animations="disabled",
            )
        except PlaywrightTimeoutError as e:
            raise RasterizeError(f"截图超时({self.timeout_ms}ms): {selector}") from e
        except PlaywrightError as e:
            raise RasterizeError(f"截图失败: {e}") from e
        finally:
            await context.close()

        image = Image.open(io.BytesIO(png))
        image.load()
        return image
