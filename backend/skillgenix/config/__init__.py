"""
配置层 - 加载运行期配置与章节目录

职责：
- 加载 config/skillgenix_runtime.yaml（运行期参数）
- 加载 report_sections.yaml（章节顺序与标题）
- 提供类型安全的配置访问接口
"""

from .runtime_config import (
    BrandingConfig,
    CaptureConfig,
    LoggingConfig,
    OutputConfig,
    PageLayoutConfig,
    RuntimeConfig,
    get_config,
    reload_config,
)
from .section_catalog import CatalogLoader, SectionCatalog, load_catalog

__all__ = [
    "CatalogLoader",
    "SectionCatalog",
    "load_catalog",
    "RuntimeConfig",
    "CaptureConfig",
    "PageLayoutConfig",
    "BrandingConfig",
    "OutputConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
]
