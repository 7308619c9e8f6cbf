# -*- coding: utf-8 -*-
"""
Profile：持有事件日志、过滤状态以及当前的调用森林
"""

from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from .call_tree_builder import CallTreeBuilder, ProfileNode
from .filter_state import FilterState
from .models import Event
from .statistics import (AggregateStatistics, TimelineBucket, calculate_aggregate_statistics,
                         percentage, timeline_histogram)
from .utils.tree_utils import find_node_by_path
from .view.address_histogram_model import AddressHistogramModel
from .view.profile_model import ProfileModel

logger = logging.getLogger(__name__)


class Profile:
    """
    一次采样运行的内存分析对象

    事件日志在创建后不再改变；任何过滤状态的修改都会在返回前同步地
    完整重建调用森林。
    """

    def __init__(self, events: Sequence[Event], executable_path: str = "", pid: Optional[int] = None):
        self._events: Tuple[Event, ...] = tuple(events)
        self.executable_path = executable_path
        self.pid = pid

        self._builder = CallTreeBuilder()
        self._filter_state = FilterState()
        self._roots: List[ProfileNode] = []
        self._filtered_event_count = 0
        self._selected_path: Optional[Tuple[str, ...]] = None

        self._statistics = calculate_aggregate_statistics(self._events, 0)
        self.rebuild_tree()

    def __repr__(self):
        return (f"Profile(executable={self.executable_path!r}, events={len(self._events)}, "
                f"roots={len(self._roots)})")

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    @property
    def roots(self) -> List[ProfileNode]:
        return self._roots

    @property
    def filter_state(self) -> FilterState:
        return self._filter_state

    @property
    def filtered_event_count(self) -> int:
        return self._filtered_event_count

    @property
    def first_timestamp(self) -> int:
        return self._statistics.first_timestamp

    @property
    def last_timestamp(self) -> int:
        return self._statistics.last_timestamp

    @property
    def length_in_ms(self) -> int:
        return self._statistics.length_in_ms

    @property
    def deepest_stack_depth(self) -> int:
        return self._statistics.deepest_stack_depth

    @property
    def has_timestamp_filter_range(self) -> bool:
        return self._filter_state.has_timestamp_range

    @property
    def timestamp_filter_range(self) -> Optional[Tuple[int, int]]:
        return self._filter_state.timestamp_range

    @property
    def is_inverted(self) -> bool:
        return self._filter_state.inverted

    @property
    def show_top_functions(self) -> bool:
        return self._filter_state.show_top_functions

    @property
    def show_percentages(self) -> bool:
        return self._filter_state.show_percentages

    def set_timestamp_filter_range(self, start: int, end: int):
        """
        只统计 start <= timestamp <= end 的事件

        Raises:
            InvalidTimestampRangeError: start > end，此时状态与调用森林均保持不变
        """
        self._apply_filter_state(self._filter_state.with_timestamp_range(start, end))

    def clear_timestamp_filter_range(self):
        self._apply_filter_state(self._filter_state.without_timestamp_range())

    set_timestamp_range = set_timestamp_filter_range
    clear_timestamp_range = clear_timestamp_filter_range

    def set_inverted(self, inverted: bool):
        self._apply_filter_state(self._filter_state.with_inverted(inverted))

    def set_show_top_functions(self, show_top_functions: bool):
        self._apply_filter_state(self._filter_state.with_show_top_functions(show_top_functions))

    def set_show_percentages(self, show_percentages: bool):
        # 只影响显示，不需要重建
        self._filter_state = self._filter_state.with_show_percentages(show_percentages)

    def _apply_filter_state(self, filter_state: FilterState):
        self._filter_state = filter_state
        self.rebuild_tree()

    def rebuild_tree(self):
        """根据当前过滤状态完整重建调用森林"""
        result = self._builder.build(self._events, self._filter_state)
        self._roots = result.roots
        self._filtered_event_count = result.filtered_event_count
        self._statistics.filtered_event_count = result.filtered_event_count
        logger.debug(f"重建完成: {len(self._roots)} 个根节点, {self._filtered_event_count} 个事件")

    def statistics(self) -> AggregateStatistics:
        """返回当前汇总统计的快照，之后的重建不会修改它"""
        return replace(self._statistics, event_counts_by_kind=dict(self._statistics.event_counts_by_kind))

    def tree_statistics(self) -> Dict[str, Any]:
        """当前调用森林的节点数与深度"""
        return self._builder.get_tree_statistics(self._roots)

    def percentage(self, count: int) -> float:
        """计数相对于过滤后事件数的百分比"""
        return percentage(count, self._filtered_event_count)

    def timeline(self, bucket_count: int = 20) -> List[TimelineBucket]:
        """
        过滤窗口内事件的时间分布

        Args:
            bucket_count: 分桶数量

        Returns:
            List[TimelineBucket]: 分桶结果
        """
        events = [event for event in self._events if self._filter_state.includes(event.timestamp)]
        return timeline_histogram(events, bucket_count)

    def set_selected_path(self, symbol_path: Optional[Sequence[str]]):
        """按符号路径记录选中的节点，重建后依然有效"""
        self._selected_path = tuple(symbol_path) if symbol_path else None

    def select_node(self, node: Optional[ProfileNode]):
        self.set_selected_path(node.get_call_stack() if node is not None else None)

    @property
    def selected_path(self) -> Optional[Tuple[str, ...]]:
        return self._selected_path

    @property
    def selected_node(self) -> Optional[ProfileNode]:
        """在当前调用森林中重新解析选中的节点"""
        if self._selected_path is None:
            return None
        return find_node_by_path(self._roots, self._selected_path)

    def model(self):
        """层级/扁平视图模型"""

        return ProfileModel(self)

    def address_histogram_model(self):
        """选中节点的指令地址分布模型，没有选中节点时返回 None"""

        node = self.selected_node
        if node is None:
            return None
        return AddressHistogramModel(node)
