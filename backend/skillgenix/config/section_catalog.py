"""
章节目录加载器 - 读取 report_sections.yaml

职责：
- 解析YAML并提供类型安全访问
- 提供导出时的固定章节顺序（key + 标题）
- 缓存加载结果（避免重复解析）

使用方式：
    catalog = CatalogLoader.load()
    document = catalog.to_document()
    title = catalog.get_title("skill-gap-analysis")
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from ..models import ReportDocument, ReportSection

PACKAGED_CATALOG_PATH = Path(__file__).with_name("report_sections.yaml")


class SectionCatalog(BaseModel):
    """章节目录（report_sections.yaml 的结构化表示）"""
    schema_version: str
    sections: list[ReportSection] = Field(default_factory=list)

    def get_keys(self) -> list[str]:
        return [s.key for s in self.sections]

    def get_title(self, key: str) -> str | None:
        for section in self.sections:
            if section.key == key:
                return section.title
        return None

    def to_document(self, keys: list[str] | None = None) -> ReportDocument:
        """
        构建导出文档（保持目录顺序）

        keys 给定时只保留其中的章节，顺序仍以目录为准
        """
        sections = self.sections
        if keys is not None:
            wanted = set(keys)
            sections = [s for s in sections if s.key in wanted]
        return ReportDocument(sections=list(sections))


class CatalogLoader:
    """章节目录加载器（缓存）"""

    @classmethod
    @lru_cache(maxsize=4)
    def load(cls, catalog_path: str | Path = PACKAGED_CATALOG_PATH) -> SectionCatalog:
        """加载并缓存章节目录"""
        path = Path(catalog_path)
        if not path.exists():
            raise FileNotFoundError(f"章节目录文件不存在: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return SectionCatalog(**data)

    @classmethod
    def reload(cls, catalog_path: str | Path = PACKAGED_CATALOG_PATH) -> SectionCatalog:
        """强制重新加载（清除缓存）"""
        cls.load.cache_clear()
        return cls.load(catalog_path)


def load_catalog(catalog_path: str | Path = PACKAGED_CATALOG_PATH) -> SectionCatalog:
    """加载章节目录"""
    return CatalogLoader.load(catalog_path)
