# -*- coding: utf-8 -*-
"""
统计相关工具
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence
import numpy as np

from .models import Event


@dataclass
class AggregateStatistics:
    """事件日志的汇总统计"""
    event_count: int
    filtered_event_count: int
    first_timestamp: int
    last_timestamp: int
    deepest_stack_depth: int
    kernel_event_count: int = 0
    event_counts_by_kind: Dict[str, int] = field(default_factory=dict)

    @property
    def length_in_ms(self) -> int:
        return self.last_timestamp - self.first_timestamp

    def __str__(self):
        return (f"AggregateStatistics(events={self.event_count}, filtered={self.filtered_event_count}, "
                f"length={self.length_in_ms}ms, deepest_stack={self.deepest_stack_depth})")


@dataclass
class TimelineBucket:
    """时间轴上一个区间内的事件分布"""
    start: float
    end: float
    user_count: int
    kernel_count: int

    @property
    def total_count(self) -> int:
        return self.user_count + self.kernel_count


def percentage(count: int, total: int) -> float:
    """
    计算百分比，total 为 0 时返回 0

    Args:
        count: 计数
        total: 总数

    Returns:
        float: 0 ~ 100 之间的百分比
    """
    if total <= 0:
        return 0.0
    return min(100.0, count * 100.0 / total)


def calculate_aggregate_statistics(events: Sequence[Event], filtered_event_count: int) -> AggregateStatistics:
    """根据完整事件日志计算汇总统计"""
    if not events:
        return AggregateStatistics(
            event_count=0,
            filtered_event_count=filtered_event_count,
            first_timestamp=0,
            last_timestamp=0,
            deepest_stack_depth=0,
        )

    kinds = Counter(event.type for event in events)
    return AggregateStatistics(
        event_count=len(events),
        filtered_event_count=filtered_event_count,
        first_timestamp=min(event.timestamp for event in events),
        last_timestamp=max(event.timestamp for event in events),
        deepest_stack_depth=max(event.stack_depth for event in events),
        kernel_event_count=sum(1 for event in events if event.in_kernel),
        event_counts_by_kind=dict(kinds),
    )


def timeline_histogram(events: Sequence[Event], bucket_count: int = 20) -> List[TimelineBucket]:
    """
    按时间将事件分桶，区分用户态和内核态

    Args:
        events: 事件列表
        bucket_count: 分桶数量

    Returns:
        List[TimelineBucket]: 覆盖 [first_timestamp, last_timestamp] 的分桶列表
    """
    if bucket_count <= 0:
        raise ValueError(f"分桶数量必须为正数: {bucket_count}")
    if not events:
        return []

    timestamps = np.array([event.timestamp for event in events], dtype=np.float64)
    in_kernel = np.array([event.in_kernel for event in events], dtype=bool)

    first = timestamps.min()
    last = timestamps.max()
    # 所有事件时间戳相同时扩展为单位区间
    if first == last:
        last = first + 1

    edges = np.linspace(first, last, bucket_count + 1)
    kernel_counts, _ = np.histogram(timestamps[in_kernel], bins=edges)
    user_counts, _ = np.histogram(timestamps[~in_kernel], bins=edges)

    return [
        TimelineBucket(
            start=float(edges[i]),
            end=float(edges[i + 1]),
            user_count=int(user_counts[i]),
            kernel_count=int(kernel_counts[i]),
        )
        for i in range(bucket_count)
    ]
