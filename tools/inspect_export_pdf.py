"""
检查导出PDF：页数、元数据、逐页页脚页码。

用于人工核对一次导出的结果（每页应为“Page i of N”，N为总页数）。

示例：
  python tools/inspect_export_pdf.py --pdf exports/Skillgenix_Career_Analysis_Jane_Doe_2024-05-01.pdf
"""

from __future__ import annotations

import argparse
from pathlib import Path

from skillgenix.doc_gen import PDFInspector, count_pdf_pages


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--pdf", required=True)
    args = ap.parse_args()

    pdf_path = Path(args.pdf)
    total = count_pdf_pages(pdf_path)
    inspector = PDFInspector(pdf_path)
    print(f"pages: {total}")
    for key, value in sorted(inspector.metadata().items()):
        print(f"  {key}: {value}")

    bad = 0
    for i, stamp in enumerate(inspector.page_stamps(), start=1):
        ok = stamp == (i, total)
        bad += 0 if ok else 1
        print(f"  page {i}: {stamp} {'ok' if ok else 'MISMATCH'}")
    if bad:
        raise SystemExit(f"{bad} page(s) with wrong footer stamp")


if __name__ == "__main__":
    main()
