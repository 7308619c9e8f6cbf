# -*- coding: utf-8 -*-
"""
CLI验证器模块
"""

from typing import List, Optional, Tuple


VALID_OUTPUT_FORMATS = {'json', 'xlsx'}


def validate_output_formats(output_format: str) -> List[str]:
    """
    验证输出格式

    Args:
        output_format: 逗号分隔的输出格式，例如 "json,xlsx"

    Returns:
        List[str]: 输出格式列表

    Raises:
        ValueError: 如果格式为空或不支持
    """
    if not output_format or not output_format.strip():
        raise ValueError("输出格式不能为空")

    formats = [fmt.strip() for fmt in output_format.split(',') if fmt.strip()]
    for fmt in formats:
        if fmt not in VALID_OUTPUT_FORMATS:
            raise ValueError(f"不支持的输出格式: {fmt}。支持的格式: {', '.join(sorted(VALID_OUTPUT_FORMATS))}")

    if len(formats) != len(set(formats)):
        raise ValueError("输出格式不能重复")

    return formats


def validate_timestamp_range(start: Optional[int], end: Optional[int]) -> Optional[Tuple[int, int]]:
    """
    验证时间戳过滤范围

    Args:
        start: 起始时间戳
        end: 结束时间戳

    Returns:
        Optional[Tuple[int, int]]: 过滤范围，两者都未指定时返回 None

    Raises:
        ValueError: 只指定了一端，或 start > end，或存在负数
    """
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise ValueError("--start 和 --end 必须同时指定")
    if start < 0 or end < 0:
        raise ValueError("时间戳不能为负数")
    if start > end:
        raise ValueError(f"起始时间戳 {start} 大于结束时间戳 {end}")
    return start, end


def validate_symbol_path(symbol_path: str) -> List[str]:
    """
    验证符号路径

    Args:
        symbol_path: 分号分隔的符号路径，例如 "main;foo"

    Returns:
        List[str]: 符号列表

    Raises:
        ValueError: 如果路径为空
    """
    from ..utils.tree_utils import parse_symbol_path

    symbols = parse_symbol_path(symbol_path or '')
    if not symbols:
        raise ValueError("符号路径不能为空")
    return symbols


def validate_positive_int(value: Optional[int], name: str) -> Optional[int]:
    """验证可选的正整数参数"""
    if value is not None and value <= 0:
        raise ValueError(f"{name} 必须为正整数: {value}")
    return value


def validate_non_negative_int(value: Optional[int], name: str) -> Optional[int]:
    """验证可选的非负整数参数"""
    if value is not None and value < 0:
        raise ValueError(f"{name} 不能为负数: {value}")
    return value
