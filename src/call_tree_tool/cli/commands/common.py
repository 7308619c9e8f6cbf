"""
命令共用的加载逻辑
"""

from ...parser import load_profile
from ...profile import Profile
from ..file_utils import validate_profile_path
from ..validators import validate_timestamp_range


def load_filtered_profile(args) -> Profile:
    """
    按命令行参数加载 profile 并应用过滤状态

    Raises:
        ValueError: 参数不合法
        ProfileLoadError: 文件加载失败
    """
    timestamp_range = validate_timestamp_range(getattr(args, 'start', None), getattr(args, 'end', None))
    file_path = validate_profile_path(args.file)

    profile = load_profile(file_path)
    print(f"加载完成: {len(profile.events)} 个事件, 时长 {profile.length_in_ms} ms, "
          f"最大栈深度 {profile.deepest_stack_depth}")

    if timestamp_range is not None:
        profile.set_timestamp_filter_range(*timestamp_range)
    if getattr(args, 'invert', False):
        profile.set_inverted(True)
    if getattr(args, 'top_functions', False):
        profile.set_show_top_functions(True)
    if getattr(args, 'percentages', False):
        profile.set_show_percentages(True)
    return profile
