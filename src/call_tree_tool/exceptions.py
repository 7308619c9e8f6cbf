# -*- coding: utf-8 -*-
"""
异常类型定义
"""


class ProfileLoadError(Exception):
    """加载 profile 文件失败"""

    def __init__(self, path, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{message}: {self.path}")


class ProfileNotFoundError(ProfileLoadError):
    """profile 文件不存在"""


class CorruptProfileError(ProfileLoadError):
    """profile 文件格式损坏"""


class UnresolvableImageError(ProfileLoadError):
    """缺少符号信息，无法解析原始指令地址"""


class InvalidTimestampRangeError(ValueError):
    """时间戳过滤范围不合法"""

    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f"无效的时间戳范围: start={start}, end={end}")
