"""
树结构处理工具模块
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from ..call_tree_builder import ProfileNode


def iter_nodes(roots: Sequence[ProfileNode], max_depth: Optional[int] = None) -> Iterator[Tuple[ProfileNode, int]]:
    """
    按显示顺序（先序）深度优先遍历森林

    Args:
        roots: 根节点列表
        max_depth: 最大深度（根节点深度为 0），None 表示不限制

    Yields:
        Tuple[ProfileNode, int]: (节点, 深度)
    """
    stack = [(root, 0) for root in reversed(roots)]
    while stack:
        current, depth = stack.pop()
        yield current, depth
        if max_depth is not None and depth >= max_depth:
            continue
        stack.extend((child, depth + 1) for child in reversed(current.children))


def find_node_by_path(roots: Sequence[ProfileNode], symbol_path: Sequence[str]) -> Optional[ProfileNode]:
    """
    按符号路径在森林中查找节点

    Args:
        roots: 根节点列表
        symbol_path: 从根开始的符号路径

    Returns:
        Optional[ProfileNode]: 找到的节点，找不到返回 None
    """
    if not symbol_path:
        return None

    node = None
    for root in roots:
        if root.symbol == symbol_path[0]:
            node = root
            break
    if node is None:
        return None

    for symbol in symbol_path[1:]:
        node = node.find_child(symbol)
        if node is None:
            return None
    return node


def parse_symbol_path(path_text: str) -> List[str]:
    """
    解析以分号分隔的符号路径，例如 "main;foo;bar"

    Args:
        path_text: 符号路径字符串

    Returns:
        List[str]: 符号列表
    """
    return [symbol.strip() for symbol in path_text.split(';') if symbol.strip()]


def format_symbol_path(symbol_path: Sequence[str]) -> str:
    """符号路径转换为分号分隔的字符串（folded stack 格式）"""
    return ';'.join(symbol_path)
