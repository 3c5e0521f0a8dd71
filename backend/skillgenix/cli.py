"""
命令行入口 - 报告JSON -> 报告视图 -> PDF

示例：
    skillgenix-export report.json --user "Jane Doe"
    skillgenix-export report.json --user "Jane Doe" --out exports --save-html view.html
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

from .capture import SectionCapturer
from .capture.browser import PlaywrightRasterizer
from .config import RuntimeConfig, get_config, reload_config
from .doc_gen import ReportNormalizer
from .interfaces import SkillgenixError
from .models import ReportMetadata
from .pipeline import ExportExecutor
from .view import LivePage, ReportViewRenderer

logger = logging.getLogger("skillgenix")


def setup_logging(config: RuntimeConfig) -> None:
    """按配置初始化根日志（控制台 + 可选文件）"""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.logging.log_to_file:
        log_dir = config.output.output_dir / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / "export.log", encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, config.logging.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="skillgenix-export", description="Export a career analysis report to PDF")
    ap.add_argument("report", type=Path, help="career analysis JSON file")
    ap.add_argument("--user", required=True, help="recipient name shown on the title page")
    ap.add_argument("--out", type=Path, default=None, help="output directory")
    ap.add_argument("--config", type=Path, default=None, help="runtime YAML")
    ap.add_argument("--target-role", default="", help="target role for the report header")
    ap.add_argument("--save-html", type=Path, default=None, help="also write the rendered report view")
    return ap


async def _export(args: argparse.Namespace, config: RuntimeConfig) -> Path:
    raw = args.report.read_text(encoding="utf-8")
    report = ReportNormalizer().structure(raw)
    metadata = ReportMetadata(target_role=args.target_role, date_created=date.today().isoformat())

    markup = ReportViewRenderer(config.capture.default_width_px).render(report, metadata)
    if args.save_html:
        args.save_html.write_text(markup, encoding="utf-8")
    page = LivePage.from_html(markup, default_width=config.capture.default_width_px)

    async with PlaywrightRasterizer(config) as rasterizer:
        capturer = SectionCapturer(rasterizer, rasterizer, config)
        executor = ExportExecutor(capturer, config=config)
        job = await executor.run(page, args.user, output_dir=args.out)
    return job.artifacts.pdf_path


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = reload_config(args.config) if args.config else get_config()
    if args.out is not None:
        config.output.output_dir = args.out
    setup_logging(config)

    if not args.report.exists():
        logger.error(f"报告文件不存在: {args.report}")
        return 1
    try:
        pdf_path = asyncio.run(_export(args, config))
    except SkillgenixError as e:
        logger.error(f"导出失败: {e}")
        return 1
    print(pdf_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
