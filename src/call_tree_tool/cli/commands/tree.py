"""
调用树命令模块
"""

import time

from ...exceptions import ProfileLoadError
from ...presenter import CallTreePresenter
from ..file_utils import default_label
from ..validators import validate_non_negative_int, validate_output_formats
from .common import load_filtered_profile


class TreeCommand:
    """调用树命令处理器"""

    def run(self, args) -> int:
        """构建并导出调用树"""
        print("=== 调用树分析 ===")
        print(f"文件: {args.file}")
        print(f"反转: {args.invert}")
        print(f"热点函数: {args.top_functions}")
        print(f"输出格式: {args.output_format}")
        print(f"输出目录: {args.output_dir}")
        print()

        try:
            output_formats = validate_output_formats(args.output_format)
            max_depth = validate_non_negative_int(args.max_depth, "--max-depth")
        except ValueError as e:
            print(f"错误: 参数验证失败 - {e}")
            return 1

        start_time = time.time()
        try:
            profile = load_filtered_profile(args)
        except (ValueError, ProfileLoadError) as e:
            print(f"错误: {e}")
            return 1

        print(f"过滤后事件数: {profile.filtered_event_count}, 根节点数: {len(profile.roots)}")

        presenter = CallTreePresenter(profile)
        rows = presenter.build_rows(max_depth=max_depth)

        if args.print_tree:
            presenter.print_tree(max_depth=max_depth)
        if args.print_markdown:
            presenter.print_markdown_table(rows, f"{args.label or default_label(args.file)} 调用树")

        base_name = presenter.generate_base_name(args.label or default_label(args.file))
        generated_files = presenter.generate_output_files(rows, args.output_dir, base_name, output_formats)

        print(f"\n分析完成，总耗时: {time.time() - start_time:.2f} 秒")
        print("\n生成的文件:")
        for file_path in generated_files:
            print(f"  {file_path}")
        return 0
