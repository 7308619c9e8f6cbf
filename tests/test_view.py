"""
视图模型单元测试
"""

import unittest

from call_tree_tool.models import UNKNOWN_SYMBOL, Event, Frame
from call_tree_tool.profile import Profile
from call_tree_tool.view import AddressHistogramModel, ProfileModel


class TestProfileModel(unittest.TestCase):
    def setUp(self):
        self.profile = Profile([
            Event(timestamp=1, frames=(Frame("main", 0x1000, 0), Frame("foo", 0x2000, 0))),
            Event(timestamp=2, frames=(Frame("main", 0x1004, 4), Frame("foo", 0x2008, 8))),
            Event(timestamp=3, frames=(Frame("main", 0x1000, 0), Frame("bar", 0x3000, 0))),
        ])
        self.model = self.profile.model()

    def test_hierarchy(self):
        self.assertIsInstance(self.model, ProfileModel)
        self.assertEqual(self.model.row_count(), 1)
        main = self.model.index(0)
        self.assertEqual(self.model.row_count(main), 2)
        foo = self.model.index(0, main)
        self.assertIs(self.model.parent_of(foo), main)
        self.assertEqual(self.model.row(foo), [2, 2, "foo", "0x00002000", 0])
        with self.assertRaises(IndexError):
            self.model.index(5)
        with self.assertRaises(IndexError):
            self.model.data(foo, 99)

    def test_percentage_columns(self):
        self.profile.set_show_percentages(True)
        main = self.model.index(0)
        self.assertEqual(self.model.column_name(0), "Total %")
        self.assertEqual(self.model.data(main, ProfileModel.TOTAL_COUNT), "100.00%")
        self.assertEqual(self.model.data(self.model.index(0, main), ProfileModel.SELF_COUNT), "66.67%")

    def test_model_follows_rebuilds(self):
        self.profile.set_show_top_functions(True)
        self.assertEqual(self.model.row_count(), 3)
        for row in range(self.model.row_count()):
            self.assertEqual(self.model.row_count(self.model.index(row)), 0)

    def test_address_histogram(self):
        self.profile.set_selected_path(["main", "foo"])
        model = self.profile.address_histogram_model()

        self.assertIsInstance(model, AddressHistogramModel)
        self.assertEqual(model.column_count(), 4)
        self.assertEqual(model.row_count(), 2)
        self.assertEqual(model.total_hits, 2)
        first, second = model.children()
        self.assertEqual((first.address, first.offset, first.hits), (0x2000, 0, 1))
        self.assertEqual((second.address, second.offset), (0x2008, 8))
        self.assertEqual(model.data(second, AddressHistogramModel.PERCENT), "50.00%")
        self.assertEqual(model.children(first), [])

    def test_address_histogram_for_placeholder_symbol(self):
        profile = Profile([
            Event(timestamp=1, frames=(Frame(UNKNOWN_SYMBOL, 0x5000, 0),)),
            Event(timestamp=2, frames=(Frame(UNKNOWN_SYMBOL, 0x100, 0),)),
        ])
        profile.set_selected_path([UNKNOWN_SYMBOL])
        model = profile.address_histogram_model()

        self.assertEqual([(hit.address, hit.offset) for hit in model.children()], [(0x100, None), (0x5000, None)])
        self.assertEqual(model.data(model.index(0), AddressHistogramModel.OFFSET), "")

    def test_address_histogram_for_node_without_hits(self):
        model = AddressHistogramModel(self.profile.roots[0])
        self.assertEqual(model.row_count(), 0)


if __name__ == '__main__':
    unittest.main()
