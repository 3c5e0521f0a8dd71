"""
配置加载单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_config.py -v
"""

from pathlib import Path

from skillgenix.config import CatalogLoader, RuntimeConfig, get_config, load_catalog, reload_config
from skillgenix.config import runtime_config as runtime_config_module
from skillgenix.config.runtime_config import PACKAGED_RUNTIME_PATH


class TestRuntimeConfig:
    """运行期配置测试"""

    def test_default_capture_constants(self):
        """测试截图经验常数"""
        config = RuntimeConfig()
        assert config.capture.settle_delay_ms == 500
        assert config.capture.scale == 3
        assert config.capture.timeout_ms == 30000
        assert config.capture.min_vector_px == 8
        assert config.capture.allow_cors is True

    def test_layout_content_width(self):
        """测试内容宽度 = 页宽 - 2*边距"""
        layout = RuntimeConfig().layout
        assert layout.content_width == 180.0
        assert layout.content_top + layout.max_content_height < layout.footer_rule_y

    def test_packaged_yaml_matches_defaults(self):
        """测试随包默认配置"""
        config = RuntimeConfig.from_yaml(PACKAGED_RUNTIME_PATH)
        assert config.capture.settle_delay_ms == 500
        assert config.layout.max_content_height == 240
        assert config.branding.accent_rgb == (163, 29, 82)
        assert config.output.output_dir == Path("exports")

    def test_from_yaml_flattens_defaults(self, temp_dir: Path):
        """测试 {default: 值} 展平与输出目录解析"""
        yaml_path = temp_dir / "runtime.yaml"
        yaml_path.write_text(
            "runtime_options:\n"
            "  capture:\n"
            "    settle_delay_ms: {default: 120}\n"
            "    scale: 2\n"
            "  output:\n"
            "    output_dir: {default: out}\n",
            encoding="utf-8",
        )
        config = RuntimeConfig.from_yaml(yaml_path)
        assert config.capture.settle_delay_ms == 120
        assert config.capture.scale == 2
        assert config.output.output_dir == (temp_dir / "out").resolve()

    def test_from_yaml_missing_file(self, temp_dir: Path):
        """测试配置文件不存在时使用默认值"""
        config = RuntimeConfig.from_yaml(temp_dir / "missing.yaml")
        assert config.capture.scale == 3

    def test_ensure_dirs(self, runtime_config: RuntimeConfig):
        """测试创建输出目录"""
        runtime_config.ensure_dirs()
        assert runtime_config.output.output_dir.is_dir()

    def test_reload_config_replaces_global(self, temp_dir: Path, monkeypatch):
        """测试重新加载后全局配置被替换"""
        monkeypatch.setattr(runtime_config_module, "_config", None)
        yaml_path = temp_dir / "runtime.yaml"
        yaml_path.write_text("runtime_options:\n  capture:\n    settle_delay_ms: 42\n", encoding="utf-8")

        config = reload_config(yaml_path)

        assert config.capture.settle_delay_ms == 42
        assert get_config() is config


class TestSectionCatalog:
    """章节目录测试"""

    def test_catalog_order(self):
        """测试11个章节的固定顺序"""
        catalog = load_catalog()
        keys = catalog.get_keys()
        assert len(keys) == 11
        assert keys[0] == "executive-summary"
        assert keys[2] == "skill-gap-analysis"
        assert keys[-1] == "learning-path-roadmap"

    def test_get_title(self):
        """测试获取章节标题"""
        catalog = load_catalog()
        assert catalog.get_title("career-pathway") == "Career Pathway Options"
        assert catalog.get_title("unknown") is None

    def test_to_document_keeps_catalog_order(self):
        """测试子集文档仍按目录顺序"""
        document = load_catalog().to_document(["quick-tips", "executive-summary"])
        assert [s.key for s in document.sections] == ["executive-summary", "quick-tips"]

    def test_loader_cached(self):
        """测试加载结果缓存"""
        assert CatalogLoader.load() is CatalogLoader.load()
        assert CatalogLoader.reload().get_keys() == load_catalog().get_keys()
