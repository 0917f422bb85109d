"""
文件路径：textflow/components/__init__.py

说明：
- 通用组件包入口：日志、文件路径、错误格式化；
- 按职责拆分的子模块：`text.py`（段落/单元切分与宽度估算）、`coords.py`（对齐与基线坐标）、
  `fonts.py`（字体解析与注册）、`markup.py`（SVG 标记拼装）；
- 业务模块与测试统一使用 `from textflow.components import ...` 导入。
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

from ..variables import (
    PATH_LOGS_DIR,
    PATH_OUTPUT_DIR,
    PATH_TEMP_DIR,
    PATH_LOG_FILE,
    CONST_LOG_FORMAT,
    CONST_LOG_DATEFMT,
    CONST_OUTPUT_PREFIX_DEFAULT,
    ERR_PATH_NOT_WRITABLE,
    ERR_FILE_NOT_FOUND,
)


# =============================
# 日志工具
# =============================
_LOGGER_CONFIGURED: bool = False


def get_logger(name: str) -> logging.Logger:
    """获取 logger，首次调用时配置文件与控制台双输出。

    参数：
        name: 日志记录器名称（一般使用 __name__）。

    返回：
        logging.Logger 对象。

    说明：日志目录不可写（例如以只读方式安装）时退化为仅控制台输出。
    """
    global _LOGGER_CONFIGURED
    if not _LOGGER_CONFIGURED:
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        try:
            PATH_LOGS_DIR.mkdir(parents=True, exist_ok=True)
            handlers.insert(0, logging.FileHandler(PATH_LOG_FILE, encoding="utf-8"))
        except OSError:
            pass
        logging.basicConfig(
            level=logging.INFO,
            format=CONST_LOG_FORMAT,
            datefmt=CONST_LOG_DATEFMT,
            handlers=handlers,
        )
        _LOGGER_CONFIGURED = True
    return logging.getLogger(name)


# =============================
# 文件操作
# =============================
class FileHandler:
    """文件与路径相关的通用处理器。"""

    @staticmethod
    def ensure_project_dirs() -> None:
        """确保项目运行所需目录存在：logs/output/temp。"""
        for d in (PATH_LOGS_DIR, PATH_OUTPUT_DIR, PATH_TEMP_DIR):
            d.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def validate_readable_file(path: Path) -> None:
        """校验文件可读。

        异常：
            FileNotFoundError: 文件不存在或不可读。
        """
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(ErrorHandler.format_error(ERR_FILE_NOT_FOUND, f"文件不存在或不可读: {path}"))

    @staticmethod
    def ensure_parent_writable(target: Path) -> None:
        """确保目标文件的父目录可写，不存在则创建。

        异常：
            PermissionError: 目录不可写。
        """
        parent = target.parent
        parent.mkdir(parents=True, exist_ok=True)
        # Windows 上 os.access 可能不可靠，尝试创建临时文件验证
        probe = parent / f".__writable_probe_{int(time.time()*1000)}"
        try:
            with open(probe, "w", encoding="utf-8") as f:  # noqa: P103
                f.write("probe")
        except OSError as exc:
            raise PermissionError(ErrorHandler.format_error(ERR_PATH_NOT_WRITABLE, f"目录不可写: {parent}")) from exc
        else:
            probe.unlink(missing_ok=True)

    @staticmethod
    def timestamped_output_path(
        suffix: str,
        prefix: Optional[str] = None,
        output_dir: Optional[Path] = None,
    ) -> Path:
        """生成带时间戳的输出路径，默认位于 output 目录。

        参数：
            suffix: 输出文件扩展名（含点），例如 ".pdf" / ".svg"。
            prefix: 文件名前缀；None 或空白时使用 CONST_OUTPUT_PREFIX_DEFAULT。
            output_dir: 自定义输出目录；None 则使用 PATH_OUTPUT_DIR。

        返回：
            输出路径，例如 output/textbox_20240101_120000.svg
        """
        target_dir = output_dir if output_dir is not None else PATH_OUTPUT_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        ts = time.strftime("%Y%m%d_%H%M%S")
        stem = (prefix or "").strip() or CONST_OUTPUT_PREFIX_DEFAULT
        return target_dir / f"{stem}_{ts}{suffix}"


class ErrorHandler:
    """错误处理相关工具。"""

    @staticmethod
    def format_error(err_code: int, message: str) -> str:
        """生成统一错误信息字符串。"""
        return f"[{err_code}] {message}"


# 聚合导出：拆分后的子模块（须在上方工具定义之后导入）
from .coords import (
    x_offset_for_alignment,
    text_anchor_for_alignment,
    line_baseline_y,
    to_bottom_left_y,
    aligned_line_x,
    export_canvas_size,
)
from .fonts import (
    resolve_reportlab_font_name,
    resolve_pymupdf_font_name,
    register_font_file,
    font_file_for,
    is_bold,
    is_italic,
)
from .text import (
    estimate_text_width,
    split_paragraphs,
    split_units,
    is_whitespace_unit,
)


# =============================
# 导出声明
# =============================
__all__ = [
    # 日志工具
    "get_logger",
    # 文件操作
    "FileHandler",
    # 错误处理
    "ErrorHandler",
    # 坐标与对齐
    "x_offset_for_alignment",
    "text_anchor_for_alignment",
    "line_baseline_y",
    "to_bottom_left_y",
    "aligned_line_x",
    "export_canvas_size",
    # 字体
    "resolve_reportlab_font_name",
    "resolve_pymupdf_font_name",
    "register_font_file",
    "font_file_for",
    "is_bold",
    "is_italic",
    # 文本切分与估算
    "estimate_text_width",
    "split_paragraphs",
    "split_units",
    "is_whitespace_unit",
]
