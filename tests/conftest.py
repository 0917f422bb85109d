from __future__ import annotations

"""
pytest 全局配置：将项目根目录加入 sys.path，确保 `from textflow...` 与 `import main` 可被导入。

公共夹具：
- char_measure：每个字符固定 10 宽的度量回调，换行结果可手算；
- estimated_metrics：EstimatedMetrics（ASCII = 0.6 * 字号，非 ASCII = 字号），不依赖字体文件。
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from textflow.processors.metrics import EstimatedMetrics  # noqa: E402


@pytest.fixture
def char_measure():
    return lambda text: 10.0 * len(text)


@pytest.fixture
def estimated_metrics():
    return EstimatedMetrics()
