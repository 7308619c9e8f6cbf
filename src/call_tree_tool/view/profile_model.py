"""
调用树视图模型
"""

from typing import Any, List, Optional

from ..call_tree_builder import ProfileNode
from .base import TreeTableModel


class ProfileModel(TreeTableModel):
    """
    绑定到 Profile 当前调用森林的层级模型

    show_top_functions 打开时森林只有一层，同一个模型即为扁平视图。
    模型不缓存节点，每次访问都读取 Profile 的最新森林。
    """

    TOTAL_COUNT = 0
    SELF_COUNT = 1
    SYMBOL = 2
    ADDRESS = 3
    OFFSET = 4

    COLUMNS = ["Total Count", "Self Count", "Symbol", "Address", "Offset"]
    PERCENTAGE_COLUMNS = ["Total %", "Self %", "Symbol", "Address", "Offset"]

    def __init__(self, profile):
        self.profile = profile

    def column_names(self) -> List[str]:
        if self.profile.show_percentages:
            return list(self.PERCENTAGE_COLUMNS)
        return list(self.COLUMNS)

    def children(self, parent: Optional[ProfileNode] = None) -> List[ProfileNode]:
        if parent is None:
            return self.profile.roots
        return parent.children

    def parent_of(self, item: ProfileNode) -> Optional[ProfileNode]:
        return item.parent

    def data(self, item: ProfileNode, column: int) -> Any:
        if column == self.TOTAL_COUNT:
            return self._count_value(item.total_count)
        if column == self.SELF_COUNT:
            return self._count_value(item.self_count)
        if column == self.SYMBOL:
            return item.symbol
        if column == self.ADDRESS:
            return f"{item.address:#010x}"
        if column == self.OFFSET:
            return item.offset
        raise IndexError(f"列号越界: {column}")

    def _count_value(self, count: int):
        if self.profile.show_percentages:
            return f"{self.profile.percentage(count):.2f}%"
        return count
