"""
运行期配置 - 读取 config/skillgenix_runtime.yaml

职责：
- 加载截图/版式/品牌/输出/日志等运行参数
- 提供环境变量覆盖机制（SKILLGENIX_ 前缀）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

PACKAGED_RUNTIME_PATH = Path(__file__).with_name("skillgenix_runtime.yaml")
DEFAULT_RUNTIME_PATH = Path("config/skillgenix_runtime.yaml")


class CaptureConfig(BaseModel):
    """截图配置（经验常数，调用方不可修改）"""

    settle_delay_ms: int = 500
    scale: int = 3
    timeout_ms: int = 30000
    min_vector_px: int = 8
    default_width_px: int = 1200
    allow_cors: bool = True


class PageLayoutConfig(BaseModel):
    """版式配置（单位mm，坐标从页面顶部向下计）"""

    page_width: float = 210.0
    page_height: float = 297.0
    margin_x: float = 15.0
    header_text_y: float = 12.0
    header_rule_y: float = 15.0
    section_title_y: float = 24.0
    content_top: float = 32.0
    max_content_height: float = 240.0
    block_gap: float = 8.0
    footer_rule_y: float = 280.0
    footer_page_y: float = 287.0
    footer_note_y: float = 293.0

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin_x


class BrandingConfig(BaseModel):
    """品牌与元数据"""

    product_name: str = "Skillgenix"
    document_title: str = "Skillgenix Career Analysis"
    subject: str = "Career Analysis Report"
    keywords: list[str] = Field(
        default_factory=lambda: ["career", "skills", "gap analysis", "development plan"]
    )
    footer_note: str = "© Skillgenix - AI-Powered Career Analysis"
    accent_rgb: tuple[int, int, int] = (163, 29, 82)


class OutputConfig(BaseModel):
    """输出配置"""

    output_dir: Path = Path("exports")


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    layout: PageLayoutConfig = Field(default_factory=PageLayoutConfig)
    branding: BrandingConfig = Field(default_factory=BrandingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "SKILLGENIX_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            capture=CaptureConfig(**cls._extract(runtime_opts, "capture")),
            layout=PageLayoutConfig(**cls._extract(runtime_opts, "layout")),
            branding=BrandingConfig(**cls._extract(runtime_opts, "branding")),
            output=OutputConfig(**cls._extract(runtime_opts, "output")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

        if "output_dir" in cls._extract(runtime_opts, "output"):
            config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key, {}) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对输出目录（基于配置文件所在目录）"""
        if not self.output.output_dir.is_absolute():
            self.output.output_dir = (base_dir / self.output.output_dir).resolve()

    def ensure_dirs(self) -> None:
        """确保输出目录存在"""
        self.output.output_dir.mkdir(parents=True, exist_ok=True)


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        default_path = DEFAULT_RUNTIME_PATH
        if not default_path.exists():
            default_path = PACKAGED_RUNTIME_PATH
        _config = RuntimeConfig.from_yaml(default_path)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_RUNTIME_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
