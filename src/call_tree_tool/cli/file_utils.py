"""
文件处理工具模块
"""

import os
from pathlib import Path

SUPPORTED_SUFFIXES = ('.json', '.json.gz', '.perfcore', '.perfcore.gz')


def validate_profile_path(file_path: str) -> str:
    """
    检查 profile 文件路径

    Args:
        file_path: 文件路径

    Returns:
        str: 文件路径

    Raises:
        ValueError: 文件不存在或不是支持的格式
    """
    if not os.path.isfile(file_path):
        raise ValueError(f"文件不存在: {file_path}")

    if not file_path.lower().endswith(SUPPORTED_SUFFIXES):
        raise ValueError(f"文件不是 perfcore JSON 格式: {file_path}")

    return file_path


def default_label(file_path: str) -> str:
    """使用文件名（去掉扩展名）作为默认标签"""
    name = Path(file_path).name
    for suffix in sorted(SUPPORTED_SUFFIXES, key=len, reverse=True):
        if name.lower().endswith(suffix):
            return name[:-len(suffix)]
    return Path(file_path).stem
