# -*- coding: utf-8 -*-
"""
过滤状态
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .exceptions import InvalidTimestampRangeError


@dataclass(frozen=True)
class FilterState:
    """
    调用树构建时使用的过滤状态

    每次修改都会生成新的 FilterState 对象，由 Profile 负责替换并触发重建。
    """
    timestamp_range: Optional[Tuple[int, int]] = None
    inverted: bool = False
    show_top_functions: bool = False
    show_percentages: bool = False

    @property
    def has_timestamp_range(self) -> bool:
        return self.timestamp_range is not None

    def includes(self, timestamp: int) -> bool:
        """判断时间戳是否落在过滤范围内（闭区间）"""
        if self.timestamp_range is None:
            return True
        start, end = self.timestamp_range
        return start <= timestamp <= end

    def with_timestamp_range(self, start: int, end: int) -> 'FilterState':
        """
        返回设置了时间戳范围的新状态

        Raises:
            InvalidTimestampRangeError: start > end 或存在负数边界
        """
        if start < 0 or end < 0 or start > end:
            raise InvalidTimestampRangeError(start, end)
        return replace(self, timestamp_range=(start, end))

    def without_timestamp_range(self) -> 'FilterState':
        return replace(self, timestamp_range=None)

    def with_inverted(self, inverted: bool) -> 'FilterState':
        return replace(self, inverted=bool(inverted))

    def with_show_top_functions(self, show_top_functions: bool) -> 'FilterState':
        return replace(self, show_top_functions=bool(show_top_functions))

    def with_show_percentages(self, show_percentages: bool) -> 'FilterState':
        return replace(self, show_percentages=bool(show_percentages))
