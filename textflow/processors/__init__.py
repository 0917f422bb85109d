"""
文件路径：textflow/processors/__init__.py

说明：
- metrics.py（文本度量与度量缓存）
- layout.py（贪心换行）
- engines/{reportlab.py, pymupdf.py, raster.py, svg.py}（绘制与导出）
"""

from typing import List

__all__: List[str] = []
