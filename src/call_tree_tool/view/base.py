"""
视图模型抽象接口
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional


class TreeTableModel(ABC):
    """
    只读的树/表模型，任何前端都可以绑定

    item 为 None 表示不可见的根；表格模型只有一层。
    """

    @abstractmethod
    def column_names(self) -> List[str]:
        """列名列表"""

    @abstractmethod
    def children(self, parent: Optional[Any] = None) -> List[Any]:
        """parent 的子项列表"""

    @abstractmethod
    def data(self, item: Any, column: int) -> Any:
        """item 在指定列上的显示值"""

    def parent_of(self, item: Any) -> Optional[Any]:
        return None

    def column_count(self) -> int:
        return len(self.column_names())

    def column_name(self, column: int) -> str:
        return self.column_names()[column]

    def row_count(self, parent: Optional[Any] = None) -> int:
        return len(self.children(parent))

    def index(self, row: int, parent: Optional[Any] = None) -> Any:
        """
        获取 parent 下第 row 行的子项

        Raises:
            IndexError: 行号越界
        """
        items = self.children(parent)
        if row < 0 or row >= len(items):
            raise IndexError(f"行号越界: {row} (共 {len(items)} 行)")
        return items[row]

    def row(self, item: Any) -> List[Any]:
        """item 所有列的显示值"""
        return [self.data(item, column) for column in range(self.column_count())]
