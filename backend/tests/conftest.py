"""
pytest 配置与公共 fixtures

无浏览器环境：截图引擎与SVG渲染器用Pillow假实现替换。

使用方式：
    def test_something(runtime_config, fake_rasterizer, live_page):
        capturer = SectionCapturer(fake_rasterizer, FakeSvgRenderer(), runtime_config)
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from skillgenix.config import CaptureConfig, OutputConfig, RuntimeConfig
from skillgenix.interfaces import IElementRasterizer, ISvgRenderer, RasterizeError
from skillgenix.view import LivePage

_SOURCE_RE = re.compile(r'data-capture-source="([^"]+)"')

# 1800px宽 -> 内容宽180mm，即 10px = 1mm
FAKE_WIDTH = 1800


# ============================================================================
# 假实现
# ============================================================================

class FakeRasterizer(IElementRasterizer):
    """按章节key返回指定尺寸的位图，可指定失败章节"""

    def __init__(
        self,
        sizes: dict[str, tuple[int, int]] | None = None,
        fail_keys: set[str] | None = None,
        default_size: tuple[int, int] = (FAKE_WIDTH, 600),
    ):
        self.sizes = sizes or {}
        self.fail_keys = fail_keys or set()
        self.default_size = default_size
        self.calls: list[tuple[str, str, int]] = []  # (key, html, width)

    async def rasterize(self, html: str, width: int) -> Image.Image:
        m = _SOURCE_RE.search(html)
        key = m.group(1) if m else "?"
        self.calls.append((key, html, width))
        if key in self.fail_keys:
            raise RasterizeError(f"截图超时: {key}")
        w, h = self.sizes.get(key, self.default_size)
        image = Image.new("RGB", (w, h), (255, 255, 255))
        # 每行灰度不同，便于核对切片
        for y in range(0, h, max(1, h // 16)):
            image.paste((y % 256, 80, 120), (0, y, w, min(h, y + 2)))
        return image


class FakeSvgRenderer(ISvgRenderer):
    """返回带透明通道的纯色位图"""

    def __init__(self):
        self.calls: list[tuple[int, int, int]] = []

    async def render_svg(self, markup: str, width: int, height: int, scale: int) -> Image.Image:
        self.calls.append((width, height, scale))
        return Image.new("RGBA", (width * scale, height * scale), (30, 60, 200, 0))


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config(temp_dir: Path) -> RuntimeConfig:
    """运行期配置（无稳定延迟，输出到临时目录）"""
    return RuntimeConfig(
        capture=CaptureConfig(settle_delay_ms=0),
        output=OutputConfig(output_dir=temp_dir / "exports"),
    )


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def fake_rasterizer() -> FakeRasterizer:
    return FakeRasterizer()


@pytest.fixture
def make_rasterizer():
    """按章节尺寸/失败章节构造假截图引擎"""
    return FakeRasterizer


@pytest.fixture
def fake_svg_renderer() -> FakeSvgRenderer:
    return FakeSvgRenderer()


# ============================================================================
# 页面 Fixtures
# ============================================================================

LIVE_PAGE_HTML = """<!DOCTYPE html>
<html>
<head><style>.section { padding: 10px; }</style></head>
<body>
<main data-rendered-width="1200">
  <div class="section executive-summary" id="executive-summary">
    <h2>Executive Summary</h2>
    <p>Strong analytical background.</p>
  </div>
  <div class="section skill-gap-analysis" id="skill-gap-analysis">
    <h2>Skill Gap Analysis</h2>
    <svg width="300" height="200" viewBox="0 0 300 200"><rect width="300" height="200"></rect></svg>
    <svg width="4" height="4"><circle r="2"></circle></svg>
    <canvas id="gap-canvas" width="200" height="100"></canvas>
    <canvas id="blank-canvas" width="50" height="50"></canvas>
  </div>
</main>
</body>
</html>
"""


@pytest.fixture
def live_page() -> LivePage:
    """两个章节的在线页面（gap-canvas 已绘制）"""
    canvases = {"gap-canvas": Image.new("RGBA", (200, 100), (200, 30, 30, 255))}
    return LivePage.from_html(LIVE_PAGE_HTML, canvases)


# ============================================================================
# 报告数据 Fixtures
# ============================================================================

@pytest.fixture
def raw_report() -> dict[str, Any]:
    """AI返回的松散报告JSON（备用键、字符串数字、纯字符串列表项）"""
    return {
        "executiveSummary": "Jane is ready to move into data engineering.",
        "skillMapping": {
            "skillsAnalysis": "Solid programming foundation.",
            "sfia9": [
                {"skill": "Programming", "proficiency": "5"},
                {"name": "Data Management", "level": "Level 4"},
            ],
            "digcomp22": ["Digital content creation"],
        },
        "gapAnalysis": {
            "targetRole": "Data Engineer",
            "skillGaps": [
                {"skill": "Cloud Platforms", "currentLevel": "2", "requiredLevel": 5, "importance": "High"},
            ],
        },
        "pathwayOptions": {
            "currentRole": "Analyst",
            "targetRole": "Data Engineer",
            "pathwaySteps": ["Learn Spark", {"title": "Build pipelines", "duration": "6 months"}],
        },
        "timestamp": "2024-05-01T10:00:00Z",
    }
