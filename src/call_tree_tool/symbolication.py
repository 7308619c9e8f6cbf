# -*- coding: utf-8 -*-
"""
符号解析接口

真正的符号解析（读取可执行文件/调试信息）由外部服务完成，
这里只定义接口以及一个基于符号表的简单实现。
"""

import bisect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class Symbolicator(ABC):
    """地址到 (符号, 符号内偏移) 的解析器"""

    @abstractmethod
    def symbolicate(self, address: int) -> Optional[Tuple[str, int]]:
        """
        解析指令地址

        Args:
            address: 指令地址

        Returns:
            Optional[Tuple[str, int]]: (符号名, 符号内偏移)，无法解析时返回 None
        """


@dataclass(frozen=True)
class SymbolEntry:
    """符号表中的一项"""
    address: int
    size: int
    name: str

    @property
    def end(self) -> int:
        return self.address + self.size


class SymbolTable(Symbolicator):
    """按起始地址排序的符号表，使用二分查找解析地址"""

    def __init__(self, entries: Iterable[SymbolEntry]):
        self.entries: List[SymbolEntry] = sorted(entries, key=lambda e: e.address)
        self._starts = [entry.address for entry in self.entries]

    @classmethod
    def from_json(cls, raw_symbols: List[Dict[str, Any]]) -> 'SymbolTable':
        """
        从 JSON 符号列表创建符号表

        Args:
            raw_symbols: [{"address": int, "size": int, "name": str}, ...]

        Raises:
            ValueError: 符号项格式不正确
        """
        entries = []
        for raw in raw_symbols:
            if not isinstance(raw, dict):
                raise ValueError(f"符号项不是对象: {raw!r}")
            address = raw.get('address')
            size = raw.get('size', 0)
            name = raw.get('name')
            if not isinstance(address, int) or not isinstance(size, int) or not isinstance(name, str):
                raise ValueError(f"符号项字段不正确: {raw!r}")
            entries.append(SymbolEntry(address=address, size=size, name=name))
        return cls(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def symbolicate(self, address: int) -> Optional[Tuple[str, int]]:
        index = bisect.bisect_right(self._starts, address) - 1
        if index < 0:
            return None
        entry = self.entries[index]
        # size 为 0 时只匹配起始地址
        if address >= entry.end and not (entry.size == 0 and address == entry.address):
            return None
        return entry.name, address - entry.address
