"""
文件路径：textflow/data_handler.py

模块职责：
- 读取文本框 JSON 配置（数组，或包含 boxes 数组的对象），转换为 RenderTextboxOptions 列表；
- 读取纯文本输入文件（--text-file）；
- 基础清洗：去除值为 None 的键，保证未提供的字段使用默认值。

变量引用说明（来自 textflow/variables.py）：
- CONST_ENCODING, ERR_CONFIG_LOAD_FAILED
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .components import ErrorHandler, FileHandler, get_logger
from .text_renderer import RenderTextboxOptions
from .variables import CONST_ENCODING, ERR_CONFIG_LOAD_FAILED


logger = get_logger(__name__)


def _json_loads_strip_bom(content: str):
    """解析 JSON 字符串，自动去除 UTF-8 BOM。"""
    if content.startswith("\ufeff"):
        content = content.lstrip("\ufeff")
    return json.loads(content)


def sanitize_options(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """过滤值为 None 的键，返回新字典（文本内容原样保留，不去空白）。"""
    return {str(k): v for k, v in raw.items() if v is not None}


def load_textbox_config(path: Path) -> List[RenderTextboxOptions]:
    """从 JSON 文件加载文本框配置。

    支持两种结构：
    - 数组：[{"text": "...", "x": 10, "y": 20, "width": 200}, {...}]
    - 对象：{"boxes": [ ... ]}

    键为 RenderTextboxOptions 字段名，亦接受驼峰别名（fontSize、textAlign 等）。

    异常：
        FileNotFoundError: 文件不存在（1001）。
        RuntimeError: 结构非法、JSON 解析失败或包含未知属性（4001）。
    """
    FileHandler.validate_readable_file(path)
    try:
        data = _json_loads_strip_bom(path.read_text(encoding=CONST_ENCODING))
    except (OSError, ValueError) as exc:
        raise RuntimeError(ErrorHandler.format_error(ERR_CONFIG_LOAD_FAILED, f"配置读取失败: {path}: {exc}")) from exc

    if isinstance(data, dict) and isinstance(data.get("boxes"), list):
        items = data["boxes"]
    elif isinstance(data, list):
        items = data
    else:
        raise RuntimeError(
            ErrorHandler.format_error(ERR_CONFIG_LOAD_FAILED, "文本框 JSON 结构需为数组或包含 boxes 数组的对象")
        )

    results: List[RenderTextboxOptions] = []
    for index, obj in enumerate(items):
        if not isinstance(obj, dict):
            logger.warning("第 %s 项不是对象，已跳过", index + 1)
            continue
        try:
            results.append(RenderTextboxOptions.from_mapping(sanitize_options(obj)))
        except (TypeError, ValueError) as exc:
            raise RuntimeError(
                ErrorHandler.format_error(ERR_CONFIG_LOAD_FAILED, f"第 {index + 1} 项配置非法: {exc}")
            ) from exc
    logger.info("已加载文本框配置：%s（%s 项）", path, len(results))
    return results


def load_text_file(path: Path) -> str:
    """读取纯文本文件（UTF-8，容忍 BOM），保留原有换行。"""
    FileHandler.validate_readable_file(path)
    content = path.read_text(encoding=CONST_ENCODING)
    if content.startswith("\ufeff"):
        content = content.lstrip("\ufeff")
    return content


__all__ = [
    "sanitize_options",
    "load_textbox_config",
    "load_text_file",
]
