"""
调用树展示：生成表格行并输出为 JSON / XLSX / markdown
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import logging

import pandas as pd

from .profile import Profile
from .statistics import TimelineBucket
from .utils.tree_utils import format_symbol_path, iter_nodes
from .view.base import TreeTableModel

logger = logging.getLogger(__name__)


class CallTreePresenter:
    """调用树展示器"""

    def __init__(self, profile: Profile):
        self.profile = profile

    def build_rows(self, max_depth: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        将当前调用森林展开为按显示顺序排列的表格行

        Args:
            max_depth: 最大展开深度（根节点为 0），None 表示全部展开

        Returns:
            List[Dict[str, Any]]: 每个节点一行
        """
        rows = []
        for node, depth in iter_nodes(self.profile.roots, max_depth=max_depth):
            rows.append({
                'depth': depth,
                'call_stack': format_symbol_path(node.get_call_stack()),
                'symbol': node.symbol,
                'address': f"{node.address:#010x}",
                'offset': node.offset,
                'total_count': node.total_count,
                'self_count': node.self_count,
                'total_percent': round(self.profile.percentage(node.total_count), 2),
                'self_percent': round(self.profile.percentage(node.self_count), 2),
            })
        return rows

    def build_model_rows(self, model: TreeTableModel) -> List[Dict[str, Any]]:
        """将单层表格模型转换为行字典"""
        columns = model.column_names()
        return [dict(zip(columns, model.row(item))) for item in model.children()]

    def build_timeline_rows(self, buckets: Sequence[TimelineBucket]) -> List[Dict[str, Any]]:
        return [
            {
                'start': round(bucket.start, 3),
                'end': round(bucket.end, 3),
                'user': bucket.user_count,
                'kernel': bucket.kernel_count,
                'total': bucket.total_count,
            }
            for bucket in buckets
        ]

    def print_tree(self, max_depth: Optional[int] = None) -> None:
        """以缩进文本打印调用树"""
        for node, depth in iter_nodes(self.profile.roots, max_depth=max_depth):
            if self.profile.show_percentages:
                counts = (f"{self.profile.percentage(node.total_count):6.2f}% "
                          f"{self.profile.percentage(node.self_count):6.2f}%")
            else:
                counts = f"{node.total_count:8d} {node.self_count:8d}"
            print(f"{counts}  {'  ' * depth}{node.symbol}")

    def print_markdown_table(self, rows: List[Dict], title: str) -> None:
        """打印markdown格式的表格"""
        if not rows:
            print(f"# {title}\n\n没有数据可显示")
            return

        print(f"# {title}\n")

        columns = list(rows[0].keys())

        header = "| " + " | ".join(columns) + " |"
        separator = "| " + " | ".join(["---"] * len(columns)) + " |"
        print(header)
        print(separator)

        for row in rows:
            values = []
            for col in columns:
                value = row.get(col, "")
                # markdown 表格中的竖线需要转义
                if isinstance(value, str):
                    value = value.replace("|", "\\|")
                values.append(str(value))
            print("| " + " | ".join(values) + " |")

        print()

    def generate_base_name(self, label: Optional[str] = None) -> str:
        """
        根据标签和过滤状态生成输出文件名
        """
        name_parts = [label or "profile", "call_tree"]
        if self.profile.show_top_functions:
            name_parts.append("top")
        elif self.profile.is_inverted:
            name_parts.append("inverted")
        if self.profile.has_timestamp_filter_range:
            start, end = self.profile.timestamp_filter_range
            name_parts.append(f"ts_{start}_{end}")
        return "_".join(name_parts)

    def generate_output_files(self, rows: List[Dict], output_dir: str, base_name: str,
                              output_formats: Sequence[str] = ('json', 'xlsx')) -> List[Path]:
        """生成输出文件（JSON 和 XLSX）"""
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        generated_files = []

        if 'json' in output_formats:
            json_file = output_path / f"{base_name}.json"
            with open(json_file, 'w', encoding='utf-8') as f:
                json.dump(rows, f, indent=2, ensure_ascii=False)
            print(f"JSON 文件已生成: {json_file}")
            generated_files.append(json_file)

        if 'xlsx' in output_formats:
            if rows:
                df = pd.DataFrame(rows)
                try:
                    xlsx_file = output_path / f"{base_name}.xlsx"
                    df.to_excel(xlsx_file, index=False)
                    print(f"Excel 文件已生成: {xlsx_file}")
                    generated_files.append(xlsx_file)
                except ImportError:
                    logger.warning("缺少 Excel 写入引擎，改为输出 CSV")
                    csv_file = output_path / f"{base_name}.csv"
                    df.to_csv(csv_file, index=False, encoding='utf-8')
                    print(f"CSV 文件已生成: {csv_file}")
                    generated_files.append(csv_file)
            else:
                print("没有数据可以生成 Excel 文件")

        return generated_files
