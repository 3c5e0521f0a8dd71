"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换（无浏览器环境下用假实现替换截图引擎）

使用方式：
    from skillgenix.interfaces import IElementRasterizer

    class MyRasterizer(IElementRasterizer):
        async def rasterize(self, html: str, width: int) -> Image.Image:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lxml.html import HtmlElement
    from PIL import Image

    from .models import CapturedSection, Notification
    from .view.live_page import LivePage


# ============================================================================
# 截图模块接口
# ============================================================================

class IElementRasterizer(ABC):
    """元素截图接口 - 把一段独立HTML渲染为位图"""

    @abstractmethod
    async def rasterize(self, html: str, width: int) -> Image.Image:
        """
        渲染HTML并截取捕获根节点

        Args:
            html: 完整HTML文档（含样式与 #capture-root 容器）
            width: 容器像素宽度（CSS像素）

        Returns:
            截图位图（已按过采样倍数放大）

        Raises:
            RasterizeError: 渲染或截图失败/超时
        """
        ...


class ISvgRenderer(ABC):
    """SVG渲染接口 - 矢量图转临时位图"""

    @abstractmethod
    async def render_svg(self, markup: str, width: int, height: int, scale: int) -> Image.Image:
        """
        渲染单个SVG

        Args:
            markup: 序列化后的SVG文本
            width: 渲染包围盒宽度（CSS像素）
            height: 渲染包围盒高度（CSS像素）
            scale: 过采样倍数

        Returns:
            位图，尺寸为 (width*scale, height*scale)；可带透明通道，由调用方铺白底
        """
        ...


class ISectionCapturer(ABC):
    """章节截图器接口"""

    @abstractmethod
    async def capture(self, page: LivePage, element: HtmlElement) -> CapturedSection:
        """
        截取单个章节

        流程：
        1. 深拷贝到离屏暂存容器
        2. 等待固定稳定延迟
        3. canvas重绘 + SVG栅格化
        4. 高倍率截图，移除暂存容器

        Raises:
            CaptureError: 任一步骤失败（章节级失败，不中断任务）
        """
        ...


# ============================================================================
# 通知接口
# ============================================================================

class INotifier(ABC):
    """用户通知通道 - 任务开始/章节进度/章节失败/最终结果"""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        ...


# ============================================================================
# 异常定义
# ============================================================================

class SkillgenixError(Exception):
    """基础异常"""
    pass


class RasterizeError(SkillgenixError):
    """渲染/截图错误"""
    pass


class CaptureError(SkillgenixError):
    """章节截图错误（章节级）"""

    def __init__(self, section_key: str, message: str):
        super().__init__(f"{section_key}: {message}")
        self.section_key = section_key


class ExportError(SkillgenixError):
    """导出错误（任务级）"""
    pass


class ExportBusyError(ExportError):
    """已有导出任务在运行"""
    pass
