"""
文件路径：main.py

命令行入口：
- 功能：将文本按宽度自动换行，输出为 PDF（ReportLab / PyMuPDF）、PNG（Pillow）或 SVG。
- 依赖：`textflow/text_renderer.py`、`textflow/data_handler.py`、`textflow/components`、`textflow/variables.py`。

快速使用示例：
    # 1) 单个文本框输出为 SVG
    python main.py --text "Hello World! This is a test." --width 120 --font-size 16 --engine svg

    # 2) 读取文本文件，居中对齐，叠加到已有 PDF 上
    python main.py --text-file note.txt --x 72 --y 72 --width 300 --align center --base-pdf a.pdf

    # 3) 使用 JSON 描述多个文本框（数组或 {"boxes": [...]}）
    python main.py --config-json boxes.json --engine pymupdf --output out/boxes.pdf

    # 4) 仅打印换行结果
    python main.py --text "A\\n\\nB" --print-lines --engine svg

变量引用说明（来自 textflow/variables.py）：
- CONST_ENGINES, CONST_ENGINE_DEFAULT, CONST_PAGE_SIZES, CONST_OUTPUT_SUFFIXES, PATH_FONT_FILE, STYLE_*

组件调用说明：
- get_logger, FileHandler.ensure_project_dirs/timestamped_output_path, register_font_file
- load_textbox_config, load_text_file
- TextboxRenderer.create_or_update / render_to_file
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from textflow.components import FileHandler, get_logger, register_font_file
from textflow.data_handler import load_text_file, load_textbox_config
from textflow.processors.engines.svg import SVGExportOptions
from textflow.processors.metrics import MetricsProvider, PillowMetrics, ReportLabMetrics
from textflow.text_renderer import RenderTextboxOptions, TextboxRenderer
from textflow.variables import (
    PATH_FONT_FILE,
    STYLE_BOX_MIN_WIDTH_DEFAULT,
    STYLE_BOX_WIDTH_DEFAULT,
    STYLE_CHAR_SPACING_DEFAULT,
    STYLE_FILL_DEFAULT,
    STYLE_FONT_FAMILY_DEFAULT,
    STYLE_FONT_SIZE_DEFAULT,
    STYLE_FONT_STYLE_DEFAULT,
    STYLE_FONT_WEIGHT_DEFAULT,
    STYLE_LINE_HEIGHT_DEFAULT,
    STYLE_TEXT_ALIGN_DEFAULT,
    CONST_ENGINE_DEFAULT,
    CONST_ENGINE_RASTER,
    CONST_ENGINES,
    CONST_OUTPUT_SUFFIXES,
    CONST_PAGE_SIZE_DEFAULT,
    CONST_PAGE_SIZES,
    CONST_TEXT_ALIGNS,
)


logger = get_logger(__name__)


def _log_runtime_capabilities(metrics: MetricsProvider) -> None:
    """启动时输出运行环境信息：PyMuPDF / Pillow 版本与度量来源。"""
    import importlib.metadata as im

    versions = {}
    for dist in ("PyMuPDF", "Pillow", "reportlab"):
        try:
            versions[dist] = im.version(dist)
        except im.PackageNotFoundError:
            versions[dist] = "unknown"
    logger.info("运行环境：%s, metrics=%s", versions, metrics.name)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="自动换行文本框（PDF / PNG / SVG 输出）")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--text", type=str, default=None, help="文本内容（支持 \\n 表示换行）")
    source.add_argument("--text-file", dest="text_file", type=Path, default=None, help="从 UTF-8 文本文件读取内容")
    source.add_argument("--config-json", dest="config_json", type=Path, default=None, help="文本框 JSON：数组或 {\"boxes\": [...]}")

    parser.add_argument("--x", type=float, default=0.0, help="文本框左上角 x")
    parser.add_argument("--y", type=float, default=0.0, help="文本框左上角 y")
    parser.add_argument("--width", type=float, default=STYLE_BOX_WIDTH_DEFAULT, help="最大行宽")
    parser.add_argument("--min-width", dest="min_width", type=float, default=STYLE_BOX_MIN_WIDTH_DEFAULT, help="宽度下限")
    parser.add_argument("--font-size", dest="font_size", type=float, default=STYLE_FONT_SIZE_DEFAULT, help="字号")
    parser.add_argument("--font-family", dest="font_family", type=str, default=None, help="字体族名")
    parser.add_argument("--font-weight", dest="font_weight", type=str, default=STYLE_FONT_WEIGHT_DEFAULT, help="字重：normal/bold/100~900")
    parser.add_argument("--font-style", dest="font_style", type=str, default=STYLE_FONT_STYLE_DEFAULT, help="字形：normal/italic")
    parser.add_argument("--line-height", dest="line_height", type=float, default=STYLE_LINE_HEIGHT_DEFAULT, help="行高倍数")
    parser.add_argument("--char-spacing", dest="char_spacing", type=float, default=STYLE_CHAR_SPACING_DEFAULT, help="字符间距")
    parser.add_argument("--align", type=str, choices=list(CONST_TEXT_ALIGNS), default=STYLE_TEXT_ALIGN_DEFAULT, help="对齐方式")
    parser.add_argument("--fill", type=str, default=STYLE_FILL_DEFAULT, help="文字颜色：名称或 #RRGGBB")
    parser.add_argument("--split-by-grapheme", dest="split_by_grapheme", action="store_true", help="逐字符换行（适合中日韩文本）")

    parser.add_argument("--engine", type=str, choices=list(CONST_ENGINES), default=CONST_ENGINE_DEFAULT, help="输出引擎")
    parser.add_argument("--output", type=Path, default=None, help="输出路径（可省略，自动生成）")
    parser.add_argument("--output-prefix", dest="output_prefix", type=str, default=None, help="自动生成输出文件名时使用的前缀")
    parser.add_argument("--base-pdf", dest="base_pdf", type=Path, default=None, help="叠加到已有 PDF 的第一页（reportlab / pymupdf）")
    parser.add_argument("--page-size", dest="page_size", type=str, choices=sorted(CONST_PAGE_SIZES), default=CONST_PAGE_SIZE_DEFAULT, help="页面尺寸")
    parser.add_argument("--font-file", dest="font_file", type=Path, default=PATH_FONT_FILE, help="TTF/OTF 字体文件（注册后用于度量与绘制）")

    parser.add_argument("--include-bounds", dest="include_bounds", action="store_true", help="SVG：绘制虚线边框")
    parser.add_argument("--no-wrapper", dest="no_wrapper", action="store_true", help="SVG：不输出外层 <svg>")
    parser.add_argument("--no-position", dest="no_position", action="store_true", help="SVG：不输出 translate 定位")
    parser.add_argument("--print-lines", dest="print_lines", action="store_true", help="打印每个文本框的换行结果")
    return parser.parse_args(argv)


def build_options_from_args(args: argparse.Namespace, default_family: str) -> List[RenderTextboxOptions]:
    """由命令行参数构造文本框列表：--config-json 优先，其次 --text-file / --text。"""
    if args.config_json is not None:
        return load_textbox_config(args.config_json)

    if args.text_file is not None:
        text = load_text_file(args.text_file)
    elif args.text is not None:
        text = args.text.replace("\\n", "\n")
    else:
        raise SystemExit("需要提供 --text、--text-file 或 --config-json 之一")

    weight = int(args.font_weight) if str(args.font_weight).isdigit() else args.font_weight
    return [
        RenderTextboxOptions(
            text=text,
            x=args.x,
            y=args.y,
            width=args.width,
            min_width=args.min_width,
            font_size=args.font_size,
            font_family=args.font_family or default_family,
            font_weight=weight,
            font_style=args.font_style,
            line_height=args.line_height,
            char_spacing=args.char_spacing,
            text_align=args.align,
            fill=args.fill,
            split_by_grapheme=args.split_by_grapheme,
        )
    ]


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    FileHandler.ensure_project_dirs()

    metrics: MetricsProvider = (
        PillowMetrics(args.font_file) if args.engine == CONST_ENGINE_RASTER else ReportLabMetrics()
    )
    _log_runtime_capabilities(metrics)

    try:
        default_family = STYLE_FONT_FAMILY_DEFAULT
        if args.font_file is not None:
            default_family = register_font_file(args.font_file.stem, args.font_file)

        options_list = build_options_from_args(args, default_family)
        renderer = TextboxRenderer(metrics=metrics)
        for index, options in enumerate(options_list, start=1):
            renderer.create_or_update(options.id or f"box{index}", options)

        if args.print_lines:
            for box_id in renderer.ids():
                box = renderer.get(box_id)
                print(f"[{box_id}] width={box.width:.2f} height={box.height:.2f}")
                for line in box.get_wrapped_lines():
                    print(f"  |{line}|")

        output = args.output or FileHandler.timestamped_output_path(
            CONST_OUTPUT_SUFFIXES[args.engine], prefix=args.output_prefix
        )
        svg_options = SVGExportOptions(
            include_wrapper=not args.no_wrapper,
            include_position=not args.no_position,
            include_bounds=args.include_bounds,
        )
        out = renderer.render_to_file(
            output,
            engine=args.engine,
            page_size=CONST_PAGE_SIZES[args.page_size],
            base_pdf=args.base_pdf,
            font_file=args.font_file,
            svg_options=svg_options,
        )
    except (FileNotFoundError, PermissionError, RuntimeError, ValueError) as exc:
        logger.error("处理失败：%s", exc)
        raise SystemExit(str(exc)) from exc

    stats = renderer.last_render_stats
    print(f"输出完成，保存至：{out}")
    print(f"引擎：{stats.get('engine')}，文本框：{stats.get('boxes')}，行数：{stats.get('lines')}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
