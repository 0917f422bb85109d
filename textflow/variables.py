"""
文件路径：textflow/variables.py

模块职责：
- 统一管理全局跨模块变量，确保模块化、无冲突、可追溯，可复用。
- 变量命名规范：{分类前缀}_{描述性名称}（全大写+下划线）。
  - PATH_：路径相关
  - STYLE_：样式相关（文本框默认字体与外观）
  - CONST_：通用常量
  - ERR_：错误码

使用说明：
- 业务模块严禁定义新的全局变量，必须从本模块导入所需常量。
- 目录路径均使用 pathlib.Path 对象表示，使用时如需字符串请显式 str() 转换。
"""

from pathlib import Path
from typing import Dict, Optional, Tuple


# =============================
# 路径（PATH_）
# =============================
# 项目根目录：定位到当前文件（variables.py）的上两级目录
PATH_ROOT: Path = Path(__file__).resolve().parents[1]

PATH_TEMP_DIR: Path = PATH_ROOT / "temp"
PATH_OUTPUT_DIR: Path = PATH_ROOT / "output"
PATH_LOGS_DIR: Path = PATH_ROOT / "logs"

PATH_LOG_FILE: Path = PATH_LOGS_DIR / "app.log"  # 应用运行日志
PATH_TEMP_OVERLAY_PDF: Path = PATH_TEMP_DIR / "overlay_layer.pdf"  # ReportLab 文字图层临时文件

# 可选 TTF/OTF 字体文件（光栅与 PyMuPDF 路径使用；None 表示使用内置字体）
PATH_FONT_FILE: Optional[Path] = None


# =============================
# 样式（STYLE_）
# =============================
STYLE_FONT_FAMILY_DEFAULT: str = "Arial"
STYLE_FONT_SIZE_DEFAULT: float = 40.0  # 默认字号（px / pt 一致处理）
STYLE_FONT_WEIGHT_DEFAULT: str = "normal"
STYLE_FONT_STYLE_DEFAULT: str = "normal"
STYLE_LINE_HEIGHT_DEFAULT: float = 1.16  # 行高倍数（相对字号）
STYLE_CHAR_SPACING_DEFAULT: float = 0.0  # 字符间距（px），0 表示不额外加宽
STYLE_TEXT_ALIGN_DEFAULT: str = "left"
STYLE_FILL_DEFAULT: str = "black"
STYLE_STROKE_WIDTH_DEFAULT: float = 1.0
STYLE_OPACITY_DEFAULT: float = 1.0

STYLE_BOX_WIDTH_DEFAULT: float = 100.0  # 文本框默认宽度约束
STYLE_BOX_MIN_WIDTH_DEFAULT: float = 20.0  # 文本框宽度下限

STYLE_SIMPLE_FONT_SIZE: float = 16.0  # 简化接口（render_simple_textbox 等）的默认字号

# 调试边框（SVG includeBounds）
STYLE_BOUNDS_STROKE: str = "#999999"
STYLE_BOUNDS_DASHARRAY: str = "4 2"

# 对齐方式 -> SVG text-anchor
STYLE_TEXT_ANCHORS: Dict[str, str] = {
    "left": "start",
    "center": "middle",
    "right": "end",
    "justify": "start",
}


# =============================
# 常量（CONST_）
# =============================
CONST_ENCODING: str = "utf-8"  # 文件读写默认编码
CONST_TEXT_ALIGNS: Tuple[str, ...] = ("left", "center", "right", "justify")

# 换行：段落分隔（\n 或 \r\n），单元切分（保留空白段）
CONST_PARAGRAPH_BREAK_PATTERN: str = r"\r?\n"
CONST_WORD_UNIT_PATTERN: str = r"(\s+)"

# 宽度估算：ASCII 字符相对字号的宽度比例（非 ASCII 按整字号计）
CONST_CHAR_WIDTH_RATIO: float = 0.6

# 度量缓存容量上限（超出后按插入顺序淘汰最早的条目）
CONST_MEASURE_CACHE_MAX_ENTRIES: int = 4096

# SVG 导出
CONST_SVG_XMLNS: str = "http://www.w3.org/2000/svg"
CONST_SVG_MIN_WIDTH: float = 100.0  # 外层 <svg> 最小宽度
CONST_SVG_MIN_HEIGHT: float = 50.0  # 外层 <svg> 最小高度
CONST_SVG_SCENE_SIZE: Tuple[int, int] = (800, 600)  # export_all_as_svg 的画布尺寸
CONST_SVG_NUMBER_PRECISION: int = 6  # 数值属性保留的小数位

# 绘制引擎
CONST_ENGINE_REPORTLAB: str = "reportlab"
CONST_ENGINE_PYMUPDF: str = "pymupdf"
CONST_ENGINE_RASTER: str = "raster"
CONST_ENGINE_SVG: str = "svg"
CONST_ENGINES: Tuple[str, ...] = (
    CONST_ENGINE_REPORTLAB,
    CONST_ENGINE_PYMUPDF,
    CONST_ENGINE_RASTER,
    CONST_ENGINE_SVG,
)
CONST_ENGINE_DEFAULT: str = CONST_ENGINE_REPORTLAB

# 页面尺寸（pt）；文本框坐标以左上角为原点
CONST_PAGE_SIZES: Dict[str, Tuple[float, float]] = {
    "a4": (595.28, 841.89),
    "letter": (612.0, 792.0),
    "a5": (419.53, 595.28),
}
CONST_PAGE_SIZE_DEFAULT: str = "a4"

CONST_RASTER_SCALE: float = 2.0  # 光栅渲染比例，2.0 提升清晰度（2x）
CONST_CLEAN_TEMP_ON_EXIT: bool = True  # 完成后是否清理临时文件

# 输出命名
CONST_OUTPUT_PREFIX_DEFAULT: str = "textbox"
CONST_OUTPUT_SUFFIXES: Dict[str, str] = {
    CONST_ENGINE_REPORTLAB: ".pdf",
    CONST_ENGINE_PYMUPDF: ".pdf",
    CONST_ENGINE_RASTER: ".png",
    CONST_ENGINE_SVG: ".svg",
}

# 常见字体族 -> ReportLab 内置（Base-14）字体族
CONST_FONT_FAMILY_ALIASES: Dict[str, str] = {
    "arial": "Helvetica",
    "helvetica": "Helvetica",
    "sans-serif": "Helvetica",
    "verdana": "Helvetica",
    "times": "Times",
    "times new roman": "Times",
    "georgia": "Times",
    "serif": "Times",
    "courier": "Courier",
    "courier new": "Courier",
    "monospace": "Courier",
}
CONST_FONT_FAMILY_FALLBACK: str = "Helvetica"

# ReportLab Base-14 字体名 -> PyMuPDF 内置字体别名
CONST_PYMUPDF_BASE14: Dict[str, str] = {
    "Helvetica": "helv",
    "Helvetica-Oblique": "heit",
    "Helvetica-Bold": "hebo",
    "Helvetica-BoldOblique": "hebi",
    "Times-Roman": "tiro",
    "Times-Italic": "tiit",
    "Times-Bold": "tibo",
    "Times-BoldItalic": "tibi",
    "Courier": "cour",
    "Courier-Oblique": "coit",
    "Courier-Bold": "cobo",
    "Courier-BoldOblique": "cobi",
}

# 日志格式（供 logging.basicConfig 使用）
CONST_LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CONST_LOG_DATEFMT: str = "%Y-%m-%d %H:%M:%S"


# =============================
# 错误码（ERR_）
# =============================
# 1xxx：文件/路径相关
ERR_FILE_NOT_FOUND: int = 1001  # 输入文件不存在
ERR_PATH_NOT_WRITABLE: int = 1003  # 目标路径不可写

# 2xxx：布局/度量相关
ERR_INVALID_FONT_CONFIG: int = 2001  # 字号/行高等字体配置非法
ERR_UNKNOWN_OPTION: int = 2002  # 批量设置中出现未知属性
ERR_FONT_REGISTER_FAILED: int = 2003  # 字体文件注册失败

# 3xxx：绘制/导出相关
ERR_UNKNOWN_ENGINE: int = 3001  # 未知的绘制引擎
ERR_RENDER_FAILED: int = 3002  # 绘制或写出失败
ERR_PDF_MERGE_FAILED: int = 3003  # PDF 合并失败

# 4xxx：配置/数据相关
ERR_CONFIG_LOAD_FAILED: int = 4001  # 配置加载失败
ERR_DATA_INVALID: int = 4002  # 输入数据非法


# =============================
# 导出声明
# =============================
__all__ = [
    # PATH_
    "PATH_ROOT",
    "PATH_TEMP_DIR",
    "PATH_OUTPUT_DIR",
    "PATH_LOGS_DIR",
    "PATH_LOG_FILE",
    "PATH_TEMP_OVERLAY_PDF",
    "PATH_FONT_FILE",
    # STYLE_
    "STYLE_FONT_FAMILY_DEFAULT",
    "STYLE_FONT_SIZE_DEFAULT",
    "STYLE_FONT_WEIGHT_DEFAULT",
    "STYLE_FONT_STYLE_DEFAULT",
    "STYLE_LINE_HEIGHT_DEFAULT",
    "STYLE_CHAR_SPACING_DEFAULT",
    "STYLE_TEXT_ALIGN_DEFAULT",
    "STYLE_FILL_DEFAULT",
    "STYLE_STROKE_WIDTH_DEFAULT",
    "STYLE_OPACITY_DEFAULT",
    "STYLE_BOX_WIDTH_DEFAULT",
    "STYLE_BOX_MIN_WIDTH_DEFAULT",
    "STYLE_SIMPLE_FONT_SIZE",
    "STYLE_BOUNDS_STROKE",
    "STYLE_BOUNDS_DASHARRAY",
    "STYLE_TEXT_ANCHORS",
    # CONST_
    "CONST_ENCODING",
    "CONST_TEXT_ALIGNS",
    "CONST_PARAGRAPH_BREAK_PATTERN",
    "CONST_WORD_UNIT_PATTERN",
    "CONST_CHAR_WIDTH_RATIO",
    "CONST_MEASURE_CACHE_MAX_ENTRIES",
    "CONST_SVG_XMLNS",
    "CONST_SVG_MIN_WIDTH",
    "CONST_SVG_MIN_HEIGHT",
    "CONST_SVG_SCENE_SIZE",
    "CONST_SVG_NUMBER_PRECISION",
    "CONST_ENGINE_REPORTLAB",
    "CONST_ENGINE_PYMUPDF",
    "CONST_ENGINE_RASTER",
    "CONST_ENGINE_SVG",
    "CONST_ENGINES",
    "CONST_ENGINE_DEFAULT",
    "CONST_PAGE_SIZES",
    "CONST_PAGE_SIZE_DEFAULT",
    "CONST_RASTER_SCALE",
    "CONST_CLEAN_TEMP_ON_EXIT",
    "CONST_OUTPUT_PREFIX_DEFAULT",
    "CONST_OUTPUT_SUFFIXES",
    "CONST_FONT_FAMILY_ALIASES",
    "CONST_FONT_FAMILY_FALLBACK",
    "CONST_PYMUPDF_BASE14",
    "CONST_LOG_FORMAT",
    "CONST_LOG_DATEFMT",
    # ERR_
    "ERR_FILE_NOT_FOUND",
    "ERR_PATH_NOT_WRITABLE",
    "ERR_INVALID_FONT_CONFIG",
    "ERR_UNKNOWN_OPTION",
    "ERR_FONT_REGISTER_FAILED",
    "ERR_UNKNOWN_ENGINE",
    "ERR_RENDER_FAILED",
    "ERR_PDF_MERGE_FAILED",
    "ERR_CONFIG_LOAD_FAILED",
    "ERR_DATA_INVALID",
]
