"""
SVG图表生成 - 报告视图中的内嵌矢量图

图表：
- radar_chart: 技能熟练度雷达图（最多6项，等级按7级缩放）
- gap_bar_chart: 技能差距柱状图（当前/要求，最多5项）
- pathway_chart: 职业路径时间线（最多4步）

数据为空时使用占位数据，保证图表区域始终可渲染
"""

from __future__ import annotations

import math
from html import escape

from ..models.report import CareerAnalysisReport

CHART_SIZE = 400
MAX_LEVEL = 7

_PLACEHOLDER_SKILLS = [
    ("Technical Skills", 3),
    ("Communication", 4),
    ("Management", 3),
    ("Domain Knowledge", 2),
]
_PLACEHOLDER_GAPS = [("Technical", 2, 5), ("Data", 1, 4), ("Management", 4, 4)]
_PLACEHOLDER_STEPS = [
    ("Skill Building", "3-6 months"),
    ("Certification", "6-9 months"),
    ("Career Transition", "9-12 months"),
]


def _svg_open(width: int, height: int, css: str) -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}"><style>{css}</style>'
    )


def _fmt(value: float) -> str:
    return f"{value:.1f}"


def radar_chart(skills: list[tuple[str, float]]) -> str:
    """技能雷达图"""
    skills = (skills or _PLACEHOLDER_SKILLS)[:6]
    c = CHART_SIZE / 2
    outer = 150
    parts = [
        _svg_open(
            CHART_SIZE,
            CHART_SIZE,
            ".t{font:bold 16px sans-serif;fill:#1c3b82;text-anchor:middle}"
            ".a{font:12px sans-serif;fill:#64748b;text-anchor:middle}"
            ".g{fill:none;stroke:rgba(0,0,0,0.1)}"
            ".p{fill:rgba(28,59,130,0.5);stroke:#1c3b82;stroke-width:2}",
        ),
        f'<text x="{_fmt(c)}" y="40" class="t">Skills Proficiency Radar</text>',
    ]
    for level in range(1, MAX_LEVEL):
        parts.append(f'<circle cx="{_fmt(c)}" cy="{_fmt(c)}" r="{_fmt(outer * level / (MAX_LEVEL - 1))}" class="g"/>')

    points = []
    n = len(skills)
    for i, (name, value) in enumerate(skills):
        angle = 2 * math.pi * i / n
        lx = c + 175 * math.sin(angle)
        ly = c - 175 * math.cos(angle)
        parts.append(f'<line x1="{_fmt(c)}" y1="{_fmt(c)}" x2="{_fmt(lx)}" y2="{_fmt(ly)}" class="g"/>')
        dy = 15 if angle > math.pi else -5
        parts.append(f'<text x="{_fmt(lx)}" y="{_fmt(ly)}" dy="{dy}" class="a">{escape(name)}</text>')
        radius = min(value, MAX_LEVEL) / MAX_LEVEL * outer
        points.append(f"{_fmt(c + radius * math.sin(angle))},{_fmt(c - radius * math.cos(angle))}")
    parts.append(f'<polygon points="{" ".join(points)}" class="p"/>')
    parts.append("</svg>")
    return "".join(parts)


def gap_bar_chart(gaps: list[tuple[str, float, float]]) -> str:
    """技能差距柱状图（当前 vs 要求）"""
    gaps = (gaps or _PLACEHOLDER_GAPS)[:5]
    base_y = 330
    unit = 30
    parts = [
        _svg_open(
            CHART_SIZE,
            CHART_SIZE,
            ".t{font:bold 16px sans-serif;fill:#ff9900;text-anchor:middle}"
            ".a{font:12px sans-serif;fill:#64748b}"
            ".g{stroke:rgba(0,0,0,0.1);stroke-dasharray:3,3}"
            ".c{fill:rgba(28,59,130,0.8)}.r{fill:rgba(163,29,82,0.8)}",
        ),
        '<text x="200" y="40" class="t">Skill Gap Analysis</text>',
        '<rect x="240" y="60" width="15" height="15" class="c"/>',
        '<text x="260" y="72" class="a">Current</text>',
        '<rect x="310" y="60" width="15" height="15" class="r"/>',
        '<text x="330" y="72" class="a">Required</text>',
    ]
    for level in range(MAX_LEVEL + 1):
        y = base_y - level * unit
        parts.append(f'<line x1="50" y1="{y}" x2="350" y2="{y}" class="g"/>')
        parts.append(f'<text x="40" y="{y + 5}" text-anchor="end" class="a">{level}</text>')
    for i, (skill, current, required) in enumerate(gaps):
        x = 70 + i * 65
        ch = min(current, MAX_LEVEL) * unit
        rh = min(required, MAX_LEVEL) * unit
        parts.append(f'<rect x="{x}" y="{_fmt(base_y - ch)}" width="25" height="{_fmt(ch)}" class="c"/>')
        parts.append(f'<rect x="{x + 30}" y="{_fmt(base_y - rh)}" width="25" height="{_fmt(rh)}" class="r"/>')
        parts.append(f'<text x="{x + 25}" y="355" text-anchor="middle" class="a">{escape(skill)}</text>')
    parts.append("</svg>")
    return "".join(parts)


def pathway_chart(steps: list[tuple[str, str]], current_role: str, target_role: str) -> str:
    """职业路径时间线"""
    steps = (steps or _PLACEHOLDER_STEPS)[:4]
    width, height = 800, 220
    parts = [
        _svg_open(
            width,
            height,
            ".n{fill:#4f46e5}.l{stroke:#c7d2fe;stroke-width:4}"
            ".s{font:bold 13px sans-serif;fill:#1e293b;text-anchor:middle}"
            ".f{font:11px sans-serif;fill:#64748b;text-anchor:middle}"
            ".e{font:bold 12px sans-serif;fill:#4f46e5}",
        ),
        f'<text x="20" y="30" class="e">{escape(current_role or "Current Role")}</text>',
        f'<text x="{width - 20}" y="30" text-anchor="end" class="e">{escape(target_role or "Target Role")}</text>',
        f'<line x1="60" y1="110" x2="{width - 60}" y2="110" class="l"/>',
    ]
    span = (width - 120) / max(1, len(steps) - 1) if len(steps) > 1 else 0
    for i, (step, timeframe) in enumerate(steps):
        x = 60 + i * span if len(steps) > 1 else width / 2
        parts.append(f'<circle cx="{_fmt(x)}" cy="110" r="16" class="n"/>')
        parts.append(f'<text x="{_fmt(x)}" y="115" class="s" style="fill:#fff">{i + 1}</text>')
        parts.append(f'<text x="{_fmt(x)}" y="155" class="s">{escape(step)}</text>')
        parts.append(f'<text x="{_fmt(x)}" y="175" class="f">{escape(timeframe)}</text>')
    parts.append("</svg>")
    return "".join(parts)


def build_report_charts(report: CareerAnalysisReport) -> dict[str, str]:
    """从报告提取图表数据并生成全部SVG"""
    skills = [(s.skill, s.proficiency) for s in report.skill_mapping.all_skills()]
    gaps = [(g.skill, g.current_level, g.required_level) for g in report.skill_gap_analysis.key_gaps]
    pathway = report.career_pathway_options
    steps = [(s.step, s.timeframe) for s in pathway.pathway_steps]
    return {
        "radar": radar_chart(skills),
        "gap_bars": gap_bar_chart(gaps),
        "pathway": pathway_chart(steps, pathway.current_role, pathway.target_role),
    }
