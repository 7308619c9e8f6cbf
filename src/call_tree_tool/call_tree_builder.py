# -*- coding: utf-8 -*-
"""
基于采样调用栈合并的调用树构建算法
时间复杂度: O(E * D)，E 为参与构建的事件数，D 为平均栈深度
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple
import logging
import weakref

from .filter_state import FilterState
from .models import Event, EventKind, Frame, UNKNOWN_SYMBOL

logger = logging.getLogger(__name__)


class ProfileNode:
    """调用树节点，对应合并后某条调用路径上的一个符号"""

    def __init__(self, symbol: str, address: int, offset: int, timestamp: int):
        self.symbol = symbol
        self.address = address
        self.offset = offset
        # 首次出现该节点的事件时间戳
        self.timestamp = timestamp
        self.self_count = 0
        self.total_count = 0
        self.children: List['ProfileNode'] = []
        self.events_per_address: Dict[int, int] = {}
        self._children_by_symbol: Dict[str, 'ProfileNode'] = {}
        self._parent_ref: Optional[weakref.ref] = None
        # 仅根节点使用：记录已计数过的事件下标
        self._seen_events: Optional[bytearray] = None

    def __repr__(self):
        return (f"ProfileNode({self.symbol!r}, total={self.total_count}, "
                f"self={self.self_count}, children={len(self.children)})")

    @property
    def parent(self) -> Optional['ProfileNode']:
        """父节点（弱引用），根节点返回 None"""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def is_root(self) -> bool:
        return self._parent_ref is None

    @property
    def event_count(self) -> int:
        return self.total_count

    @property
    def depth(self) -> int:
        depth = 0
        current = self.parent
        while current is not None:
            depth += 1
            current = current.parent
        return depth

    # 以下三个方法只对根节点有意义
    def will_track_seen_events(self, event_count: int):
        if self._seen_events is None or len(self._seen_events) != event_count:
            self._seen_events = bytearray(event_count)

    def has_seen_event(self, event_index: int) -> bool:
        return bool(self._seen_events[event_index])

    def did_see_event(self, event_index: int):
        self._seen_events[event_index] = 1

    def add_child(self, child: 'ProfileNode'):
        """添加子节点，子节点只能归属于一个父节点"""
        if child.parent is self:
            return
        if child._parent_ref is not None:
            raise ValueError(f"节点 {child.symbol} 已经属于其他父节点")
        child._parent_ref = weakref.ref(self)
        self.children.append(child)
        self._children_by_symbol.setdefault(child.symbol, child)

    def find_child(self, symbol: str) -> Optional['ProfileNode']:
        return self._children_by_symbol.get(symbol)

    def find_or_create_child(self, symbol: str, address: int, offset: int, timestamp: int) -> 'ProfileNode':
        """
        按符号查找子节点，不存在则创建

        只比较符号名，同一符号的不同地址/偏移会合并到同一个节点。
        """
        child = self._children_by_symbol.get(symbol)
        if child is not None:
            return child
        child = ProfileNode(symbol, address, offset, timestamp)
        self.add_child(child)
        return child

    def increment_event_count(self):
        self.total_count += 1

    def increment_self_count(self):
        self.self_count += 1

    def add_event_address(self, address: int):
        self.events_per_address[address] = self.events_per_address.get(address, 0) + 1

    def sort_children(self):
        """按 total_count 降序递归排序子节点，相同计数保持插入顺序"""
        stack = [self]
        while stack:
            current = stack.pop()
            current.children.sort(key=lambda node: -node.total_count)
            stack.extend(current.children)

    def get_call_stack(self) -> List[str]:
        """获取从根到当前节点的符号路径"""
        path = []
        current = self
        while current is not None:
            path.append(current.symbol)
            current = current.parent
        return list(reversed(path))

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            'symbol': self.symbol,
            'address': self.address,
            'offset': self.offset,
            'timestamp': self.timestamp,
            'self_count': self.self_count,
            'total_count': self.total_count,
            'events_per_address': dict(self.events_per_address),
            'children': [child.to_dict() for child in self.children],
        }


def sort_profile_nodes(nodes: List[ProfileNode]):
    """对根节点列表及其所有子树排序"""
    nodes.sort(key=lambda node: -node.total_count)
    for node in nodes:
        node.sort_children()


@dataclass
class BuildResult:
    """一次构建的结果"""
    roots: List[ProfileNode]
    filtered_event_count: int


class CallTreeBuilder:
    """将事件日志中的调用栈合并为调用森林"""

    def __init__(self):
        self.logger = logger

    def build(self, events: Sequence[Event], filter_state: FilterState) -> BuildResult:
        """
        根据过滤状态构建调用森林

        Args:
            events: 完整的事件日志（按时间顺序）
            filter_state: 过滤状态

        Returns:
            BuildResult: 根节点列表以及参与构建的事件数
        """
        contributing_events = self.select_contributing_events(events, filter_state)
        event_count = len(contributing_events)

        roots: List[ProfileNode] = []
        roots_by_symbol: Dict[str, ProfileNode] = {}

        for event_index, event in enumerate(contributing_events):
            if filter_state.show_top_functions:
                self._add_event_to_top_functions(event, event_index, event_count, roots, roots_by_symbol)
            else:
                self._add_event_to_tree(event, event_index, event_count, filter_state.inverted,
                                        roots, roots_by_symbol)

        sort_profile_nodes(roots)

        self.logger.info(f"调用树构建完成: {len(roots)} 个根节点, {event_count} 个事件参与构建"
                         f" (inverted={filter_state.inverted}, top_functions={filter_state.show_top_functions})")
        return BuildResult(roots=roots, filtered_event_count=event_count)

    def select_contributing_events(self, events: Sequence[Event], filter_state: FilterState) -> List[Event]:
        """
        选出参与构建的事件

        malloc 事件只有在过滤窗口结束时仍未被 free 才计入，free 事件从不计入。

        Args:
            events: 完整的事件日志
            filter_state: 过滤状态

        Returns:
            List[Event]: 参与构建的事件（保持原有顺序）
        """
        in_range = [event for event in events if filter_state.includes(event.timestamp)]

        live_allocations = set()
        for event in in_range:
            if event.kind == EventKind.MALLOC:
                live_allocations.add(event.pointer)
            elif event.kind == EventKind.FREE:
                live_allocations.discard(event.pointer)

        contributing = []
        skipped_without_frames = 0
        for event in in_range:
            if event.kind == EventKind.FREE:
                continue
            if event.kind == EventKind.MALLOC and event.pointer not in live_allocations:
                continue
            if not event.frames:
                skipped_without_frames += 1
                continue
            contributing.append(event)

        if skipped_without_frames:
            self.logger.debug(f"跳过 {skipped_without_frames} 个没有调用栈的事件")
        return contributing

    @staticmethod
    def _walk_frames(event: Event, inverted: bool) -> Iterator[Tuple[Frame, bool]]:
        """按遍历方向产出 (帧, 是否为最内层帧)"""
        innermost_index = len(event.frames) - 1
        if inverted:
            indices = range(innermost_index, -1, -1)
        else:
            indices = range(len(event.frames))
        for i in indices:
            yield event.frames[i], i == innermost_index

    @staticmethod
    def _find_or_create_root(frame: Frame, timestamp: int, event_count: int,
                             roots: List[ProfileNode], roots_by_symbol: Dict[str, ProfileNode]) -> ProfileNode:
        symbol = frame.symbol or UNKNOWN_SYMBOL
        root = roots_by_symbol.get(symbol)
        if root is None:
            root = ProfileNode(symbol, frame.address, frame.offset, timestamp)
            root.will_track_seen_events(event_count)
            roots_by_symbol[symbol] = root
            roots.append(root)
        return root

    def _add_event_to_tree(self, event: Event, event_index: int, event_count: int, inverted: bool,
                           roots: List[ProfileNode], roots_by_symbol: Dict[str, ProfileNode]):
        """沿调用栈向下合并一条路径"""
        node = None
        for frame, is_innermost in self._walk_frames(event, inverted):
            if node is None:
                node = self._find_or_create_root(frame, event.timestamp, event_count, roots, roots_by_symbol)
                if not node.has_seen_event(event_index):
                    node.did_see_event(event_index)
                    node.increment_event_count()
            else:
                node = node.find_or_create_child(frame.symbol or UNKNOWN_SYMBOL, frame.address,
                                                 frame.offset, event.timestamp)
                node.increment_event_count()

            if is_innermost:
                node.add_event_address(frame.address)
                node.increment_self_count()

    def _add_event_to_top_functions(self, event: Event, event_index: int, event_count: int,
                                    roots: List[ProfileNode], roots_by_symbol: Dict[str, ProfileNode]):
        """扁平模式：栈上每个不同的符号各计一次"""
        for frame in event.frames:
            root = self._find_or_create_root(frame, event.timestamp, event_count, roots, roots_by_symbol)
            if not root.has_seen_event(event_index):
                root.did_see_event(event_index)
                root.increment_event_count()

        innermost = event.innermost_frame
        root = self._find_or_create_root(innermost, event.timestamp, event_count, roots, roots_by_symbol)
        root.add_event_address(innermost.address)
        root.increment_self_count()

    def get_tree_statistics(self, roots: List[ProfileNode]) -> Dict[str, Any]:
        """
        获取调用森林的统计信息

        Args:
            roots: 根节点列表

        Returns:
            Dict[str, Any]: 统计信息
        """
        stats = {
            'total_trees': len(roots),
            'total_nodes': 0,
            'max_depth': 0,
            'tree_sizes': []
        }

        for root in roots:
            tree_size = self._count_nodes(root)
            tree_depth = self._get_tree_depth(root)

            stats['total_nodes'] += tree_size
            stats['max_depth'] = max(stats['max_depth'], tree_depth)
            stats['tree_sizes'].append({
                'symbol': root.symbol,
                'size': tree_size,
                'depth': tree_depth
            })

        return stats

    def _count_nodes(self, root: ProfileNode) -> int:
        """计算树中的节点数"""
        count = 1
        for child in root.children:
            count += self._count_nodes(child)
        return count

    def _get_tree_depth(self, root: ProfileNode) -> int:
        """获取树的深度"""
        if not root.children:
            return 0

        max_child_depth = 0
        for child in root.children:
            max_child_depth = max(max_child_depth, self._get_tree_depth(child))

        return max_child_depth + 1


def build_call_tree(events: Sequence[Event], filter_state: Optional[FilterState] = None) -> BuildResult:
    """
    构建调用森林的便捷函数

    Args:
        events: 事件日志
        filter_state: 过滤状态，默认不过滤

    Returns:
        BuildResult: 构建结果
    """
    builder = CallTreeBuilder()
    return builder.build(events, filter_state or FilterState())
