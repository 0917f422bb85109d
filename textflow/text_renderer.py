"""
文件路径：textflow/text_renderer.py

模块职责：
- 面向调用方的门面：以扁平的 RenderTextboxOptions 描述文本框，一次性绘制到 ReportLab 画布或导出 SVG；
- TextboxRenderer：按 id 管理多个文本框，支持增量更新、批量绘制与按引擎输出到文件。

组件调用说明：
- 换行与度量由 `textbox.TextBox` 完成；
- 绘制由 `processors/engines/*` 完成（reportlab / pymupdf / raster / svg）。
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from reportlab.pdfgen import canvas as rl_canvas

from .components import ErrorHandler, FileHandler, get_logger
from .processors.engines.pymupdf import fill_with_pymupdf
from .processors.engines.raster import fill_with_raster
from .processors.engines.reportlab import draw_textbox, fill_with_reportlab
from .processors.engines.svg import SVGExportOptions, export_all_as_svg, textbox_to_svg
from .processors.metrics import MetricsProvider
from .textbox import FontConfig, TextBox, TextBoxOptions, TextStyle
from .variables import (
    PATH_FONT_FILE,
    PATH_TEMP_OVERLAY_PDF,
    STYLE_BOX_MIN_WIDTH_DEFAULT,
    STYLE_BOX_WIDTH_DEFAULT,
    STYLE_CHAR_SPACING_DEFAULT,
    STYLE_FILL_DEFAULT,
    STYLE_FONT_FAMILY_DEFAULT,
    STYLE_FONT_SIZE_DEFAULT,
    STYLE_FONT_STYLE_DEFAULT,
    STYLE_FONT_WEIGHT_DEFAULT,
    STYLE_LINE_HEIGHT_DEFAULT,
    STYLE_SIMPLE_FONT_SIZE,
    STYLE_TEXT_ALIGN_DEFAULT,
    CONST_CLEAN_TEMP_ON_EXIT,
    CONST_ENCODING,
    CONST_ENGINE_DEFAULT,
    CONST_ENGINE_PYMUPDF,
    CONST_ENGINE_RASTER,
    CONST_ENGINE_SVG,
    CONST_ENGINES,
    CONST_PAGE_SIZE_DEFAULT,
    CONST_PAGE_SIZES,
    CONST_RASTER_SCALE,
    ERR_RENDER_FAILED,
    ERR_UNKNOWN_ENGINE,
    ERR_UNKNOWN_OPTION,
)


logger = get_logger(__name__)


@dataclass
class RenderTextboxOptions:
    """扁平的文本框描述（x / y 为左上角坐标）。"""

    text: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = STYLE_BOX_WIDTH_DEFAULT
    font_size: float = STYLE_FONT_SIZE_DEFAULT
    font_family: str = STYLE_FONT_FAMILY_DEFAULT
    font_weight: Union[str, int] = STYLE_FONT_WEIGHT_DEFAULT
    font_style: str = STYLE_FONT_STYLE_DEFAULT
    fill: str = STYLE_FILL_DEFAULT
    text_align: str = STYLE_TEXT_ALIGN_DEFAULT
    line_height: float = STYLE_LINE_HEIGHT_DEFAULT
    char_spacing: float = STYLE_CHAR_SPACING_DEFAULT
    min_width: float = STYLE_BOX_MIN_WIDTH_DEFAULT
    split_by_grapheme: bool = False
    id: Optional[str] = None

    # 外部（JSON / 前端）常用的驼峰命名 -> 字段名
    ALIASES = {
        "left": "x",
        "top": "y",
        "align": "text_align",
        "textAlign": "text_align",
        "fontSize": "font_size",
        "fontFamily": "font_family",
        "fontWeight": "font_weight",
        "fontStyle": "font_style",
        "lineHeight": "line_height",
        "charSpacing": "char_spacing",
        "minWidth": "min_width",
        "splitByGrapheme": "split_by_grapheme",
    }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RenderTextboxOptions":
        """由字典构造；支持驼峰别名，未知键抛出 ValueError。"""
        known = set(cls.__dataclass_fields__)
        values: Dict[str, Any] = {}
        unknown: List[str] = []
        for raw_key, value in data.items():
            key = cls.ALIASES.get(str(raw_key), str(raw_key))
            if key not in known:
                unknown.append(str(raw_key))
                continue
            values[key] = value
        if unknown:
            raise ValueError(ErrorHandler.format_error(ERR_UNKNOWN_OPTION, f"未知的文本框属性: {', '.join(sorted(unknown))}"))
        return cls(**values)

    def to_textbox(self, metrics: Optional[MetricsProvider] = None) -> TextBox:
        return TextBox(
            self.text,
            left=self.x,
            top=self.y,
            width=self.width,
            min_width=self.min_width,
            split_by_grapheme=self.split_by_grapheme,
            font=FontConfig(
                family=self.font_family,
                size=self.font_size,
                weight=self.font_weight,
                style=self.font_style,
                line_height=self.line_height,
                char_spacing=self.char_spacing,
            ),
            style=TextStyle(fill=self.fill, text_align=self.text_align),
            metrics=metrics,
        )

    def to_options(self) -> TextBoxOptions:
        """转换为 TextBox.set 使用的批量更新选项。"""
        return TextBoxOptions(
            text=self.text,
            left=self.x,
            top=self.y,
            width=self.width,
            min_width=self.min_width,
            split_by_grapheme=self.split_by_grapheme,
            font_family=self.font_family,
            font_size=self.font_size,
            font_weight=self.font_weight,
            font_style=self.font_style,
            line_height=self.line_height,
            char_spacing=self.char_spacing,
            text_align=self.text_align,
            fill=self.fill,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================
# 一次性接口
# =============================
def render_textbox(
    c: rl_canvas.Canvas,
    options: RenderTextboxOptions,
    page_height: float,
    metrics: Optional[MetricsProvider] = None,
) -> TextBox:
    """创建文本框并绘制到 ReportLab 画布，返回所用的 TextBox（可读取行与尺寸）。"""
    box = options.to_textbox(metrics)
    draw_textbox(c, box, page_height)
    return box


def export_textbox_as_svg(
    options: RenderTextboxOptions,
    svg_options: SVGExportOptions = SVGExportOptions(),
    metrics: Optional[MetricsProvider] = None,
) -> str:
    return textbox_to_svg(options.to_textbox(metrics), svg_options)


def render_simple_textbox(
    c: rl_canvas.Canvas,
    text: str,
    x: float,
    y: float,
    width: float,
    page_height: float,
    font_size: float = STYLE_SIMPLE_FONT_SIZE,
    font_family: str = STYLE_FONT_FAMILY_DEFAULT,
    fill: str = STYLE_FILL_DEFAULT,
) -> TextBox:
    """简化接口：只需文本、位置和宽度。"""
    options = RenderTextboxOptions(
        text=text, x=x, y=y, width=width, font_size=font_size, font_family=font_family, fill=fill
    )
    return render_textbox(c, options, page_height)


def export_simple_textbox_as_svg(
    text: str,
    width: float,
    font_size: float = STYLE_SIMPLE_FONT_SIZE,
    font_family: str = STYLE_FONT_FAMILY_DEFAULT,
    include_wrapper: bool = True,
) -> str:
    options = RenderTextboxOptions(text=text, width=width, font_size=font_size, font_family=font_family)
    return export_textbox_as_svg(options, SVGExportOptions(include_wrapper=include_wrapper))


# =============================
# 多文本框管理
# =============================
class TextboxRenderer:
    """按 id 管理文本框；同一 id 再次提交时就地更新（仅受影响的部分重新换行）。

    单线程使用；跨线程共享时由调用方加锁。
    """

    def __init__(self, metrics: Optional[MetricsProvider] = None) -> None:
        self.metrics = metrics
        self._boxes: Dict[str, TextBox] = {}
        self.last_engine_used: Optional[str] = None
        self.last_render_stats: Dict[str, Any] = {}

    def create_or_update(self, box_id: str, options: RenderTextboxOptions) -> TextBox:
        box = self._boxes.get(box_id)
        if box is None:
            box = options.to_textbox(self.metrics)
            self._boxes[box_id] = box
            logger.debug("新建文本框：%s", box_id)
        else:
            box.set(options.to_options())
            logger.debug("更新文本框：%s", box_id)
        return box

    def get(self, box_id: str) -> Optional[TextBox]:
        return self._boxes.get(box_id)

    def ids(self) -> List[str]:
        return list(self._boxes)

    def __len__(self) -> int:
        return len(self._boxes)

    def __contains__(self, box_id: object) -> bool:
        return box_id in self._boxes

    def render(self, c: rl_canvas.Canvas, box_id: str, page_height: float) -> bool:
        """绘制单个文本框；id 不存在时返回 False。"""
        box = self._boxes.get(box_id)
        if box is None:
            logger.warning("未找到文本框：%s", box_id)
            return False
        draw_textbox(c, box, page_height)
        return True

    def render_all(self, c: rl_canvas.Canvas, page_height: float) -> int:
        """按插入顺序绘制全部文本框，返回绘制的总行数。"""
        return sum(draw_textbox(c, box, page_height) for box in self._boxes.values())

    def export_as_svg(self, box_id: str, svg_options: SVGExportOptions = SVGExportOptions()) -> str:
        box = self._boxes.get(box_id)
        if box is None:
            return ""
        return textbox_to_svg(box, svg_options)

    def export_all_as_svg(self, svg_options: SVGExportOptions = SVGExportOptions()) -> str:
        return export_all_as_svg(self._boxes.values(), svg_options)

    def remove(self, box_id: str) -> bool:
        return self._boxes.pop(box_id, None) is not None

    def clear(self) -> None:
        self._boxes.clear()

    def render_to_file(
        self,
        output: Path,
        engine: str = CONST_ENGINE_DEFAULT,
        page_size: Optional[Tuple[float, float]] = None,
        base_pdf: Optional[Path] = None,
        *,
        font_file: Optional[Path] = PATH_FONT_FILE,
        svg_options: SVGExportOptions = SVGExportOptions(),
        raster_scale: float = CONST_RASTER_SCALE,
    ) -> Path:
        """使用指定引擎将全部文本框输出到文件。

        异常：
            ValueError: 未知引擎（3001）。
            RuntimeError: 绘制失败（3002）或 PDF 合并失败（3003）。
        """
        if engine not in CONST_ENGINES:
            raise ValueError(ErrorHandler.format_error(ERR_UNKNOWN_ENGINE, f"未知的绘制引擎: {engine}"))

        output = Path(output)
        size = page_size or CONST_PAGE_SIZES[CONST_PAGE_SIZE_DEFAULT]
        boxes = list(self._boxes.values())
        logger.info("开始输出：engine=%s, boxes=%s, output=%s", engine, len(boxes), output)
        try:
            if engine == CONST_ENGINE_SVG:
                FileHandler.ensure_parent_writable(output)
                output.write_text(export_all_as_svg(boxes, svg_options), encoding=CONST_ENCODING)
                used, lines = CONST_ENGINE_SVG, sum(len(box.get_wrapped_lines()) for box in boxes)
            elif engine == CONST_ENGINE_RASTER:
                used, lines = fill_with_raster(
                    boxes, output, page_size=size, raster_scale=raster_scale, font_file=font_file
                )
            elif engine == CONST_ENGINE_PYMUPDF:
                used, lines = fill_with_pymupdf(
                    boxes,
                    output,
                    page_size=size,
                    base_pdf=base_pdf,
                    font_file=font_file,
                    temp_overlay_pdf=PATH_TEMP_OVERLAY_PDF,
                    clean_temp_on_exit=CONST_CLEAN_TEMP_ON_EXIT,
                )
            else:
                used, lines = fill_with_reportlab(
                    boxes,
                    output,
                    page_size=size,
                    base_pdf=base_pdf,
                    temp_overlay_pdf=PATH_TEMP_OVERLAY_PDF,
                    clean_temp_on_exit=CONST_CLEAN_TEMP_ON_EXIT,
                )
        except (RuntimeError, OSError):
            raise
        except Exception as exc:  # noqa: BLE001
            raise RuntimeError(ErrorHandler.format_error(ERR_RENDER_FAILED, f"输出失败（{engine}）: {exc}")) from exc

        if used != engine:
            logger.warning("引擎 %s 不可用，已回退为 %s", engine, used)
        self.last_engine_used = used
        self.last_render_stats = {"boxes": len(boxes), "lines": lines, "engine": used}
        logger.info("输出完成：%s（%s）", output, self.last_render_stats)
        return output


__all__ = [
    "RenderTextboxOptions",
    "render_textbox",
    "export_textbox_as_svg",
    "render_simple_textbox",
    "export_simple_textbox_as_svg",
    "TextboxRenderer",
]
