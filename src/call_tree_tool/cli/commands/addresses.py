"""
指令地址分布命令模块
"""

from ...exceptions import ProfileLoadError
from ...presenter import CallTreePresenter
from ...utils.tree_utils import format_symbol_path
from ..validators import validate_symbol_path
from .common import load_filtered_profile


class AddressesCommand:
    """指令地址分布命令处理器"""

    def run(self, args) -> int:
        try:
            symbol_path = validate_symbol_path(args.symbol_path)
            profile = load_filtered_profile(args)
        except (ValueError, ProfileLoadError) as e:
            print(f"错误: {e}")
            return 1

        profile.set_selected_path(symbol_path)
        model = profile.address_histogram_model()
        if model is None:
            print(f"错误: 找不到调用路径: {format_symbol_path(symbol_path)}")
            return 1

        node = model.node
        print(f"{format_symbol_path(symbol_path)}: self={node.self_count}, total={node.total_count}")

        presenter = CallTreePresenter(profile)
        rows = presenter.build_model_rows(model)
        if args.print_markdown:
            presenter.print_markdown_table(rows, f"{node.symbol} 指令地址分布")
        else:
            for row in rows:
                print("  ".join(str(value) for value in row.values()))
        return 0
