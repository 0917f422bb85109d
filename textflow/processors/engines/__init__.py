"""
文件路径：textflow/processors/engines/__init__.py

说明：四种输出实现：`reportlab.py`（画布 / 合并）、`pymupdf.py`（直接写 PDF）、`raster.py`（PNG）、`svg.py`（标记导出）。
"""

from typing import List

__all__: List[str] = []
