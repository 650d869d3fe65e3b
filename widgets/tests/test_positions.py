from types import SimpleNamespace

from django.test import SimpleTestCase

from widgets.positions import format_position, parse_position, sort_by_position


def _w(name, position):
    return SimpleNamespace(name=name, position=position)


class ParsePositionTests(SimpleTestCase):
    def test_plain_integer(self):
        self.assertEqual(parse_position("7"), 7)

    def test_leading_zero_equals_plain(self):
        self.assertEqual(parse_position("05"), parse_position("5"))

    def test_sign_and_whitespace(self):
        self.assertEqual(parse_position(" -3 "), -3)
        self.assertEqual(parse_position("+4"), 4)

    def test_garbage_is_zero(self):
        for value in ("abc", "", "1.5", "5a", "1_000", None, "٣"):
            with self.subTest(value=value):
                self.assertEqual(parse_position(value), 0)

    def test_out_of_int32_range_is_zero(self):
        self.assertEqual(parse_position("2147483647"), 2147483647)
        self.assertEqual(parse_position("2147483648"), 0)
        self.assertEqual(parse_position("-2147483649"), 0)

    def test_accepts_widget_like_objects(self):
        self.assertEqual(parse_position(_w("a", "12")), 12)

    def test_format_round_trips(self):
        self.assertEqual(parse_position(format_position(42)), 42)


class SortByPositionTests(SimpleTestCase):
    def test_ascending_by_integer_value(self):
        widgets = [_w("ten", "10"), _w("two", "2"), _w("one", "1")]
        self.assertEqual([w.name for w in sort_by_position(widgets)], ["one", "two", "ten"])

    def test_corrupt_position_sorts_first(self):
        widgets = [_w("b", "1"), _w("bad", "abc"), _w("c", "2")]
        self.assertEqual([w.name for w in sort_by_position(widgets)], ["bad", "b", "c"])

    def test_ties_keep_input_order(self):
        widgets = [_w("first", "05"), _w("second", "5"), _w("third", "5")]
        self.assertEqual([w.name for w in sort_by_position(widgets)], ["first", "second", "third"])
        self.assertEqual(
            [w.name for w in sort_by_position(widgets, descending=True)],
            ["first", "second", "third"],
        )

    def test_descending(self):
        widgets = [_w("one", "1"), _w("three", "3"), _w("two", "2")]
        self.assertEqual([w.name for w in sort_by_position(widgets, descending=True)], ["three", "two", "one"])
