"""
指令地址分布视图模型
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from ..call_tree_builder import ProfileNode
from ..models import UNKNOWN_SYMBOL
from ..statistics import percentage
from .base import TreeTableModel


@dataclass(frozen=True)
class AddressHit:
    """单个指令地址的命中统计"""
    address: int
    offset: Optional[int]
    hits: int
    percent: float


class AddressHistogramModel(TreeTableModel):
    """某个节点内各指令地址的命中次数，按地址排序"""

    ADDRESS = 0
    OFFSET = 1
    HITS = 2
    PERCENT = 3

    COLUMNS = ["Address", "Offset", "Hits", "Percent"]

    def __init__(self, node: ProfileNode):
        self.node = node
        # 节点记录的是首个帧的 (地址, 偏移)，由此推出符号起始地址；占位符号没有起始地址
        symbol_base = None if node.symbol == UNKNOWN_SYMBOL else node.address - node.offset
        self.rows: List[AddressHit] = [
            AddressHit(
                address=address,
                offset=None if symbol_base is None else address - symbol_base,
                hits=hits,
                percent=percentage(hits, node.self_count),
            )
            for address, hits in sorted(node.events_per_address.items())
        ]

    def column_names(self) -> List[str]:
        return list(self.COLUMNS)

    def children(self, parent: Optional[Any] = None) -> List[AddressHit]:
        if parent is None:
            return self.rows
        return []

    def data(self, item: AddressHit, column: int) -> Any:
        if column == self.ADDRESS:
            return f"{item.address:#010x}"
        if column == self.OFFSET:
            return "" if item.offset is None else item.offset
        if column == self.HITS:
            return item.hits
        if column == self.PERCENT:
            return f"{item.percent:.2f}%"
        raise IndexError(f"列号越界: {column}")

    @property
    def total_hits(self) -> int:
        return sum(row.hits for row in self.rows)
