"""
时间工具函数
"""


def format_duration_ms(milliseconds: int) -> str:
    """
    将毫秒数格式化为便于阅读的时长字符串，例如 "1m 02.500s"
    """
    if milliseconds < 1000:
        return f"{milliseconds}ms"
    seconds = milliseconds / 1000.0
    if seconds < 60:
        return f"{seconds:.3f}s"
    minutes, seconds = divmod(seconds, 60)
    return f"{int(minutes)}m {seconds:06.3f}s"
