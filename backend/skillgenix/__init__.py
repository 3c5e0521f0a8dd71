"""
Skillgenix 职业分析报告导出 - 后端核心模块

模块结构：
- config/     运行期配置与章节目录
- models/     数据模型定义（报告/导出任务/通知）
- view/       报告视图渲染（HTML+SVG图表，即截图目标页面）
- capture/    章节截图（离屏克隆/矢量栅格化/浏览器截图）
- doc_gen/    PDF文档生成（分页合成/页眉页脚/目录/报告规整）
- pipeline/   导出任务编排与忙碌保护
"""

__version__ = "0.1.0"
