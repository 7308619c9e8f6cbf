"""
调用树展示器单元测试
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import pandas as pd

from call_tree_tool.models import Event, Frame
from call_tree_tool.presenter import CallTreePresenter
from call_tree_tool.profile import Profile


def make_event(timestamp, *symbols):
    return Event(timestamp=timestamp, frames=tuple(Frame(s, 0x1000 * (i + 1), 0) for i, s in enumerate(symbols)))


class TestCallTreePresenter(unittest.TestCase):
    def setUp(self):
        self.profile = Profile([
            make_event(1, "main", "foo"),
            make_event(2, "main", "foo"),
            make_event(3, "main", "bar"),
        ])
        self.presenter = CallTreePresenter(self.profile)

    def test_build_rows(self):
        rows = self.presenter.build_rows()
        self.assertEqual([row['call_stack'] for row in rows], ["main", "main;foo", "main;bar"])
        self.assertEqual([row['depth'] for row in rows], [0, 1, 1])
        self.assertEqual(rows[0]['total_percent'], 100.0)
        self.assertEqual(rows[1]['self_count'], 2)
        self.assertEqual(rows[1]['total_percent'], 66.67)

    def test_build_rows_max_depth(self):
        rows = self.presenter.build_rows(max_depth=0)
        self.assertEqual([row['symbol'] for row in rows], ["main"])

    def test_base_name(self):
        self.assertEqual(self.presenter.generate_base_name("run"), "run_call_tree")
        self.profile.set_inverted(True)
        self.profile.set_timestamp_filter_range(1, 2)
        self.assertEqual(self.presenter.generate_base_name("run"), "run_call_tree_inverted_ts_1_2")

    def test_generate_output_files(self):
        rows = self.presenter.build_rows()
        with tempfile.TemporaryDirectory() as temp_dir, redirect_stdout(io.StringIO()):
            files = self.presenter.generate_output_files(rows, temp_dir, "run", ('json', 'xlsx'))
            self.assertEqual([f.suffix for f in files], [".json", ".xlsx"])

            with open(Path(temp_dir) / "run.json", encoding='utf-8') as f:
                self.assertEqual(json.load(f), rows)
            df = pd.read_excel(Path(temp_dir) / "run.xlsx")
            self.assertEqual(list(df['symbol']), ["main", "foo", "bar"])

    def test_print_markdown_table(self):
        output = io.StringIO()
        with redirect_stdout(output):
            self.presenter.print_markdown_table(self.presenter.build_rows(), "调用树")
            self.presenter.print_markdown_table([], "空表")
        text = output.getvalue()
        self.assertIn("# 调用树", text)
        self.assertIn("| depth | call_stack |", text)
        self.assertIn("| 1 | main;foo | foo |", text)
        self.assertIn("没有数据可显示", text)

    def test_print_tree(self):
        output = io.StringIO()
        with redirect_stdout(output):
            self.presenter.print_tree()
        lines = output.getvalue().splitlines()
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[1].endswith("  foo"))

    def test_timeline_rows(self):
        rows = self.presenter.build_timeline_rows(self.profile.timeline(2))
        self.assertEqual(sum(row['total'] for row in rows), 3)


if __name__ == '__main__':
    unittest.main()
