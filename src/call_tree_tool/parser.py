"""
perfcore JSON 解析器
"""

import json
import gzip
import zlib
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

from .exceptions import CorruptProfileError, ProfileNotFoundError, UnresolvableImageError
from .models import Event, EventKind, Frame, KERNEL_BASE_ADDRESS, UNKNOWN_SYMBOL
from .profile import Profile
from .symbolication import Symbolicator, SymbolTable

logger = logging.getLogger(__name__)


class _FrameResolver:
    """将栈中的原始地址或已解析帧转换为 Frame"""

    def __init__(self, symbolicator: Optional[Symbolicator], kernel_symbolicator: Optional[Symbolicator]):
        self.symbolicator = symbolicator
        self.kernel_symbolicator = kernel_symbolicator
        self.unresolved_count = 0

    def resolve(self, raw_frame: Any) -> Frame:
        if isinstance(raw_frame, dict):
            return self._resolve_object(raw_frame)
        if isinstance(raw_frame, int) and not isinstance(raw_frame, bool):
            return self._resolve_address(raw_frame)
        raise ValueError(f"无法识别的栈帧: {raw_frame!r}")

    def _resolve_object(self, raw_frame: Dict[str, Any]) -> Frame:
        address = raw_frame.get('address')
        offset = raw_frame.get('offset', 0)
        symbol = raw_frame.get('symbol')
        if not isinstance(address, int) or not isinstance(offset, int):
            raise ValueError(f"栈帧地址或偏移不是整数: {raw_frame!r}")
        if symbol is None:
            return self._resolve_address(address)
        if not isinstance(symbol, str):
            raise ValueError(f"栈帧符号不是字符串: {raw_frame!r}")
        if not symbol:
            self.unresolved_count += 1
            symbol = UNKNOWN_SYMBOL
        return Frame(symbol=symbol, address=address, offset=offset)

    def _resolve_address(self, address: int) -> Frame:
        if address >= KERNEL_BASE_ADDRESS and self.kernel_symbolicator is not None:
            symbolicator = self.kernel_symbolicator
        else:
            symbolicator = self.symbolicator

        if symbolicator is None:
            raise UnresolvableImageError("", "缺少符号信息，无法解析原始地址")

        resolved = symbolicator.symbolicate(address)
        if resolved is None:
            self.unresolved_count += 1
            return Frame(symbol=UNKNOWN_SYMBOL, address=address, offset=0)
        symbol, offset = resolved
        return Frame(symbol=symbol or UNKNOWN_SYMBOL, address=address, offset=offset)


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _parse_event(event_data: Dict[str, Any], resolver: _FrameResolver) -> Optional[Event]:
    """
    解析单个事件

    Args:
        event_data: 事件数据字典
        resolver: 栈帧解析器

    Returns:
        Event: 解析后的事件对象，没有调用栈的事件返回 None

    Raises:
        ValueError: 事件格式不正确
    """
    if not isinstance(event_data, dict):
        raise ValueError(f"事件不是对象: {event_data!r}")

    timestamp = event_data.get('timestamp')
    if not _is_non_negative_int(timestamp):
        raise ValueError(f"事件时间戳无效: {timestamp!r}")

    type_name = event_data.get('type', 'sample')
    if not isinstance(type_name, str):
        raise ValueError(f"事件类型不是字符串: {type_name!r}")
    kind = EventKind.from_type(type_name)

    pointer = 0
    size = 0
    if kind in (EventKind.MALLOC, EventKind.FREE):
        pointer = event_data.get('ptr', 0)
        if not _is_non_negative_int(pointer):
            raise ValueError(f"内存事件指针无效: {pointer!r}")
    if kind == EventKind.MALLOC:
        size = event_data.get('size', 0)
        if not _is_non_negative_int(size):
            raise ValueError(f"内存事件大小无效: {size!r}")

    raw_stack = event_data.get('stack', [])
    if not isinstance(raw_stack, list):
        raise ValueError(f"事件调用栈不是数组: {raw_stack!r}")
    if not raw_stack:
        return None

    # 文件中的调用栈从最内层开始，这里翻转为从最外层开始
    frames = [resolver.resolve(raw_frame) for raw_frame in reversed(raw_stack)]

    in_kernel = event_data.get('in_kernel')
    if in_kernel is None:
        in_kernel = frames[-1].address >= KERNEL_BASE_ADDRESS
    elif not isinstance(in_kernel, bool):
        raise ValueError(f"事件 in_kernel 不是布尔值: {in_kernel!r}")

    return Event(
        timestamp=timestamp,
        kind=kind,
        type=type_name,
        pointer=pointer,
        size=size,
        in_kernel=in_kernel,
        frames=tuple(frames),
    )


def _read_json(file_path: Path) -> Any:
    open_func = gzip.open if file_path.suffix == '.gz' else open
    try:
        with open_func(file_path, 'rt', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, EOFError, zlib.error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptProfileError(file_path, f"无效的 perfcore 格式 ({e})") from e


def _build_symbolicator(raw_symbols: Any, file_path: Path, field_name: str) -> Optional[SymbolTable]:
    if raw_symbols is None:
        return None
    if not isinstance(raw_symbols, list):
        raise CorruptProfileError(file_path, f"{field_name} 不是数组")
    try:
        return SymbolTable.from_json(raw_symbols)
    except ValueError as e:
        raise CorruptProfileError(file_path, f"{field_name} 格式错误 ({e})") from e


def load_profile(file_path: Union[str, Path], symbolicator: Optional[Symbolicator] = None) -> Profile:
    """
    解析 perfcore JSON 文件（支持 .gz）并创建 Profile

    Args:
        file_path: 文件路径
        symbolicator: 外部符号解析器，不指定时使用文件中的 symbols 符号表

    Returns:
        Profile: 加载完成的 Profile

    Raises:
        ProfileNotFoundError: 文件不存在
        CorruptProfileError: 文件内容损坏或没有事件
        UnresolvableImageError: 存在原始地址但没有可用的符号信息
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise ProfileNotFoundError(file_path, "文件不存在")

    logger.info(f"正在解析文件: {file_path}")
    data = _read_json(file_path)
    if not isinstance(data, dict):
        raise CorruptProfileError(file_path, "无效的 perfcore 格式 (不是 JSON 对象)")

    raw_events = data.get('events')
    if not isinstance(raw_events, list):
        raise CorruptProfileError(file_path, "格式错误 (events 不是数组)")
    if not raw_events:
        raise CorruptProfileError(file_path, "没有采集到事件 (目标进程从未运行)")

    executable_path = data.get('executable', '')
    if not isinstance(executable_path, str):
        raise CorruptProfileError(file_path, "executable 不是字符串")
    pid = data.get('pid')

    if symbolicator is None:
        symbolicator = _build_symbolicator(data.get('symbols'), file_path, 'symbols')
    kernel_symbolicator = _build_symbolicator(data.get('kernel_symbols'), file_path, 'kernel_symbols')
    resolver = _FrameResolver(symbolicator, kernel_symbolicator)

    events: List[Event] = []
    dropped = 0
    for index, raw_event in enumerate(raw_events):
        try:
            event = _parse_event(raw_event, resolver)
        except UnresolvableImageError as e:
            raise UnresolvableImageError(file_path, e.message) from e
        except ValueError as e:
            raise CorruptProfileError(file_path, f"第 {index} 个事件格式错误 ({e})") from e
        if event is None:
            dropped += 1
            continue
        events.append(event)

    if dropped:
        logger.debug(f"丢弃了 {dropped} 个没有调用栈的事件")
    if resolver.unresolved_count:
        logger.warning(f"{resolver.unresolved_count} 个栈帧无法解析符号，使用占位符 {UNKNOWN_SYMBOL!r}")

    logger.info(f"读取到 {len(raw_events)} 个原始事件，保留 {len(events)} 个")
    return Profile(events, executable_path=executable_path, pid=pid if isinstance(pid, int) else None)
