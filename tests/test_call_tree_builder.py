"""
调用树构建算法单元测试
"""

import unittest

from call_tree_tool.call_tree_builder import CallTreeBuilder, ProfileNode, build_call_tree
from call_tree_tool.filter_state import FilterState
from call_tree_tool.models import Event, EventKind, Frame

ADDRESSES = {"main": 0x1000, "foo": 0x2000, "bar": 0x3000, "f": 0x4000, "a": 0x5000, "b": 0x6000}


def make_event(timestamp, *symbols, kind=EventKind.SAMPLE, pointer=0):
    """symbols 从最外层到最内层排列"""
    frames = tuple(Frame(symbol=symbol, address=ADDRESSES.get(symbol, 0x9000), offset=0) for symbol in symbols)
    return Event(timestamp=timestamp, kind=kind, type=kind.value, pointer=pointer, frames=frames)


class TestCallTreeBuilder(unittest.TestCase):
    def setUp(self):
        self.events = [
            make_event(1, "main", "foo"),
            make_event(2, "main", "foo"),
            make_event(3, "main", "bar"),
        ]

    def test_normal_tree(self):
        result = build_call_tree(self.events)

        self.assertEqual(result.filtered_event_count, 3)
        self.assertEqual(len(result.roots), 1)
        main = result.roots[0]
        self.assertEqual(main.symbol, "main")
        self.assertEqual(main.total_count, 3)
        self.assertEqual(main.self_count, 0)

        self.assertEqual([child.symbol for child in main.children], ["foo", "bar"])
        foo, bar = main.children
        self.assertEqual((foo.total_count, foo.self_count), (2, 2))
        self.assertEqual((bar.total_count, bar.self_count), (1, 1))
        self.assertIs(foo.parent, main)
        self.assertIsNone(main.parent)
        self.assertTrue(main.is_root)
        self.assertFalse(foo.is_root)
        self.assertEqual(main.event_count, main.total_count)

    def test_inverted_tree(self):
        result = build_call_tree(self.events, FilterState(inverted=True))

        self.assertEqual([root.symbol for root in result.roots], ["foo", "bar"])
        foo, bar = result.roots
        self.assertEqual(foo.total_count, 2)
        self.assertEqual(bar.total_count, 1)
        # 最内层（正在执行的）帧在反转视图中是根节点
        self.assertEqual(foo.self_count, 2)
        self.assertEqual(bar.self_count, 1)

        self.assertEqual([child.symbol for child in foo.children], ["main"])
        self.assertEqual([child.symbol for child in bar.children], ["main"])
        self.assertEqual(foo.children[0].total_count, 2)
        self.assertEqual(foo.children[0].self_count, 0)

    def test_timestamp_range_excludes_event(self):
        result = build_call_tree(self.events, FilterState(timestamp_range=(1, 2)))

        self.assertEqual(result.filtered_event_count, 2)
        main = result.roots[0]
        self.assertEqual(main.total_count, 2)
        self.assertEqual([child.symbol for child in main.children], ["foo"])
        self.assertIsNone(main.find_child("bar"))

    def test_root_totals_sum_to_filtered_count(self):
        events = self.events + [make_event(4, "bar"), make_event(5, "a", "b", "a")]
        for inverted in (False, True):
            result = build_call_tree(events, FilterState(inverted=inverted))
            self.assertEqual(sum(root.total_count for root in result.roots), result.filtered_event_count)
            self.assertEqual(result.filtered_event_count, 5)

    def test_same_symbol_different_address_is_merged(self):
        # 子节点只按符号合并，地址与偏移不参与比较
        events = [
            Event(timestamp=1, frames=(Frame("main", 0x1000, 0), Frame("foo", 0x2000, 0))),
            Event(timestamp=2, frames=(Frame("main", 0x1004, 4), Frame("foo", 0x2008, 8))),
        ]
        result = build_call_tree(events)

        main = result.roots[0]
        self.assertEqual(len(main.children), 1)
        foo = main.children[0]
        self.assertEqual(foo.total_count, 2)
        self.assertEqual(foo.address, 0x2000)
        self.assertEqual(foo.timestamp, 1)
        self.assertEqual(foo.events_per_address, {0x2000: 1, 0x2008: 1})

    def test_recursion_descends_one_level_per_frame(self):
        result = build_call_tree([make_event(1, "main", "f", "f")])

        main = result.roots[0]
        outer_f = main.children[0]
        inner_f = outer_f.children[0]
        self.assertEqual(outer_f.symbol, "f")
        self.assertEqual(inner_f.symbol, "f")
        self.assertEqual((outer_f.total_count, outer_f.self_count), (1, 0))
        self.assertEqual((inner_f.total_count, inner_f.self_count), (1, 1))
        self.assertEqual(inner_f.get_call_stack(), ["main", "f", "f"])

    def test_top_functions_is_flat_and_deduplicated(self):
        events = [make_event(1, "main", "f", "f"), make_event(2, "main", "foo")]
        result = build_call_tree(events, FilterState(show_top_functions=True))

        self.assertEqual(result.filtered_event_count, 2)
        by_symbol = {root.symbol: root for root in result.roots}
        self.assertEqual(set(by_symbol), {"main", "f", "foo"})
        for root in result.roots:
            self.assertEqual(root.children, [])
            self.assertLessEqual(root.total_count, result.filtered_event_count)

        self.assertEqual(by_symbol["main"].total_count, 2)
        self.assertEqual(by_symbol["main"].self_count, 0)
        # 递归出现两次的 f 对同一个事件只计一次
        self.assertEqual(by_symbol["f"].total_count, 1)
        self.assertEqual(by_symbol["f"].self_count, 1)
        self.assertEqual(by_symbol["foo"].self_count, 1)
        self.assertEqual(result.roots[0].symbol, "main")

    def test_top_functions_ignores_inversion(self):
        events = [make_event(1, "main", "foo")]
        plain = build_call_tree(events, FilterState(show_top_functions=True))
        inverted = build_call_tree(events, FilterState(show_top_functions=True, inverted=True))
        self.assertEqual([r.to_dict() for r in plain.roots], [r.to_dict() for r in inverted.roots])

    def test_siblings_sorted_by_total_count_with_stable_ties(self):
        ties = build_call_tree([make_event(1, "main", "a"), make_event(2, "main", "b")])
        self.assertEqual([c.symbol for c in ties.roots[0].children], ["a", "b"])

        ordered = build_call_tree([
            make_event(1, "main", "a"),
            make_event(2, "main", "b"),
            make_event(3, "main", "b"),
        ])
        self.assertEqual([c.symbol for c in ordered.roots[0].children], ["b", "a"])

    def test_memory_events_only_count_live_allocations(self):
        events = [
            make_event(1, "main", "a", kind=EventKind.MALLOC, pointer=1),
            make_event(2, "main", "b", kind=EventKind.MALLOC, pointer=2),
            make_event(3, "main", "a", kind=EventKind.FREE, pointer=1),
            make_event(4, "main", "foo"),
        ]
        builder = CallTreeBuilder()

        full = builder.build(events, FilterState())
        self.assertEqual(full.filtered_event_count, 2)
        self.assertEqual({c.symbol for c in full.roots[0].children}, {"b", "foo"})

        # 窗口内 free 尚未发生，两个 malloc 都存活
        window = builder.build(events, FilterState(timestamp_range=(1, 2)))
        self.assertEqual(window.filtered_event_count, 2)

        with_free = builder.build(events, FilterState(timestamp_range=(1, 3)))
        self.assertEqual(with_free.filtered_event_count, 1)

    def test_events_without_frames_do_not_contribute(self):
        events = [Event(timestamp=1), make_event(2, "main")]
        result = build_call_tree(events)
        self.assertEqual(result.filtered_event_count, 1)
        self.assertEqual(result.roots[0].self_count, 1)

    def test_empty_log(self):
        result = build_call_tree([])
        self.assertEqual(result.roots, [])
        self.assertEqual(result.filtered_event_count, 0)

    def test_tree_statistics(self):
        builder = CallTreeBuilder()
        result = builder.build(self.events, FilterState())
        stats = builder.get_tree_statistics(result.roots)
        self.assertEqual(stats['total_trees'], 1)
        self.assertEqual(stats['total_nodes'], 3)
        self.assertEqual(stats['max_depth'], 1)


class TestProfileNode(unittest.TestCase):
    def test_add_child_rejects_second_parent(self):
        first = ProfileNode("a", 0, 0, 0)
        second = ProfileNode("b", 0, 0, 0)
        child = ProfileNode("c", 0, 0, 0)

        first.add_child(child)
        first.add_child(child)
        self.assertEqual(first.children, [child])
        with self.assertRaises(ValueError):
            second.add_child(child)

    def test_seen_event_markers(self):
        root = ProfileNode("main", 0, 0, 0)
        root.will_track_seen_events(3)
        self.assertFalse(root.has_seen_event(1))
        root.did_see_event(1)
        self.assertTrue(root.has_seen_event(1))
        self.assertFalse(root.has_seen_event(2))

    def test_depth_and_call_stack(self):
        root = ProfileNode("main", 0, 0, 0)
        child = root.find_or_create_child("foo", 0, 0, 0)
        grandchild = child.find_or_create_child("bar", 0, 0, 0)
        self.assertIs(root.find_or_create_child("foo", 1, 1, 1), child)
        self.assertEqual(grandchild.depth, 2)
        self.assertEqual(grandchild.get_call_stack(), ["main", "foo", "bar"])


if __name__ == '__main__':
    unittest.main()
