"""
CLI主模块
"""

import argparse
import logging
import sys
from .commands import TreeCommand, StatsCommand, AddressesCommand


def _add_filter_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('file', help='perfcore JSON 文件路径 (支持 .gz)')
    parser.add_argument('--start', type=int, default=None, help='时间戳过滤范围起点 (毫秒，需与 --end 同时指定)')
    parser.add_argument('--end', type=int, default=None, help='时间戳过滤范围终点 (毫秒，需与 --start 同时指定)')
    parser.add_argument('--invert', action='store_true', help='构建反转调用树 (从被调用者开始) (默认: False)')


def parse_arguments(argv=None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description="Call Tree Tool - 基于采样调用栈构建调用树",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  # 构建调用树并输出 json 和 xlsx
  call-tree-tool tree run.json --output-format json,xlsx

  # 反转调用树，只统计 1000~2000ms 之间的事件，打印 markdown 表格
  call-tree-tool tree run.json --invert --start 1000 --end 2000 --print-markdown

  # 热点函数视图，显示百分比
  call-tree-tool tree run.json --top-functions --percentages --print-tree

  # 汇总统计与时间分布
  call-tree-tool stats run.json --buckets 10

  # 查看某个调用路径的指令地址分布
  call-tree-tool addresses run.json --symbol-path "main;foo"
        """
    )
    parser.add_argument('--verbose', action='store_true', help='输出调试日志 (默认: False)')

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # tree 命令 - 构建并导出调用树
    tree_parser = subparsers.add_parser('tree', help='构建并导出调用树')
    _add_filter_arguments(tree_parser)
    tree_parser.add_argument('--top-functions', action='store_true',
                             help='按符号扁平聚合，不区分调用路径 (默认: False)')
    tree_parser.add_argument('--percentages', action='store_true', help='以百分比显示计数 (默认: False)')
    tree_parser.add_argument('--max-depth', type=int, default=None, help='最大展开深度，0 表示只输出根节点 (默认: 不限制)')
    tree_parser.add_argument('--label', default=None, help='输出文件标签 (默认: 文件名)')
    tree_parser.add_argument('--print-tree', action='store_true', help='在stdout中打印缩进调用树 (默认: False)')
    tree_parser.add_argument('--print-markdown', action='store_true',
                             help='是否在stdout中以markdown格式打印表格 (默认: False)')
    tree_parser.add_argument('--output-format', default='json,xlsx',
                             choices=['json', 'xlsx', 'json,xlsx'],
                             help='输出格式 (默认: json,xlsx)')
    tree_parser.add_argument('--output-dir', default='.', help='输出目录 (默认: 当前目录)')

    # stats 命令 - 汇总统计
    stats_parser = subparsers.add_parser('stats', help='打印汇总统计与时间分布')
    _add_filter_arguments(stats_parser)
    stats_parser.add_argument('--buckets', type=int, default=20, help='时间分布分桶数量 (默认: 20)')

    # addresses 命令 - 指令地址分布
    addresses_parser = subparsers.add_parser('addresses', help='查看调用路径上某个节点的指令地址分布')
    _add_filter_arguments(addresses_parser)
    addresses_parser.add_argument('--symbol-path', required=True,
                                  help='分号分隔的符号路径，例如 "main;foo"')
    addresses_parser.add_argument('--print-markdown', action='store_true',
                                  help='是否在stdout中以markdown格式打印表格 (默认: False)')

    return parser.parse_args(argv)


def main(argv=None):
    """主函数"""
    args = parse_arguments(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    if not args.command:
        print("错误: 请指定命令 (tree, stats, addresses)")
        print("使用 --help 查看帮助信息")
        return 1

    if args.command == 'tree':
        command = TreeCommand()
    elif args.command == 'stats':
        command = StatsCommand()
    elif args.command == 'addresses':
        command = AddressesCommand()
    else:
        print(f"错误: 未知命令: {args.command}")
        return 1
    return command.run(args)


if __name__ == "__main__":
    sys.exit(main())
