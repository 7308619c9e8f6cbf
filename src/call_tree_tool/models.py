# -*- coding: utf-8 -*-
"""
采样事件数据模型定义
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

# 大于等于该地址的指令属于内核空间
KERNEL_BASE_ADDRESS = 0xc0000000

# 无法解析的地址使用的占位符号
UNKNOWN_SYMBOL = "??"


class EventKind(Enum):
    """事件类型"""
    SAMPLE = "sample"
    MALLOC = "malloc"
    FREE = "free"
    OTHER = "other"

    @classmethod
    def from_type(cls, type_name: str) -> 'EventKind':
        """根据原始类型字符串获取事件类型，未知类型归为 OTHER"""
        for kind in cls:
            if kind.value == type_name:
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class Frame:
    """调用栈中的单个已解析帧"""
    symbol: str
    address: int
    offset: int = 0


@dataclass(frozen=True)
class Event:
    """
    一次采样事件

    frames 按从最外层调用者到最内层（正在执行的指令）的顺序排列，
    最后一个元素即当前正在执行的帧。
    """
    timestamp: int
    kind: EventKind = EventKind.SAMPLE
    type: str = "sample"
    pointer: int = 0
    size: int = 0
    in_kernel: bool = False
    frames: Tuple[Frame, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.frames, tuple):
            object.__setattr__(self, 'frames', tuple(self.frames))

    @property
    def stack_depth(self) -> int:
        """调用栈深度"""
        return len(self.frames)

    @property
    def innermost_frame(self) -> Frame:
        """当前正在执行的帧"""
        return self.frames[-1]
