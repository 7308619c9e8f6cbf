"""
统计命令模块
"""

from ...exceptions import ProfileLoadError
from ...presenter import CallTreePresenter
from ...utils.time import format_duration_ms
from ..validators import validate_positive_int
from .common import load_filtered_profile


class StatsCommand:
    """汇总统计命令处理器"""

    def run(self, args) -> int:
        try:
            buckets = validate_positive_int(args.buckets, "--buckets")
            profile = load_filtered_profile(args)
        except (ValueError, ProfileLoadError) as e:
            print(f"错误: {e}")
            return 1

        stats = profile.statistics()
        print("=== 汇总统计 ===")
        print(f"可执行文件: {profile.executable_path or '未知'}")
        print(f"事件总数: {stats.event_count}")
        print(f"过滤后事件数: {stats.filtered_event_count}")
        print(f"内核态事件数: {stats.kernel_event_count}")
        print(f"时间范围: {stats.first_timestamp} - {stats.last_timestamp} "
              f"({format_duration_ms(stats.length_in_ms)})")
        print(f"最大栈深度: {stats.deepest_stack_depth}")
        for kind, count in sorted(stats.event_counts_by_kind.items()):
            print(f"  {kind}: {count}")

        tree_stats = profile.tree_statistics()
        print(f"调用树: {tree_stats['total_trees']} 个根节点, {tree_stats['total_nodes']} 个节点, "
              f"最大深度 {tree_stats['max_depth']}")
        print()

        presenter = CallTreePresenter(profile)
        presenter.print_markdown_table(presenter.build_timeline_rows(profile.timeline(buckets)), "时间分布")
        return 0
