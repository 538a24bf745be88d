import unittest

from marcscan.exceptions import InvalidQuery
from marcscan.query import Query, filter_record, parse_query
from marcscan.reader import decode_record

from marc_fixtures import SANDBURG_RECORD, build_record


class TestParseQuery(unittest.TestCase):
    def test_tag_only(self):
        self.assertEqual(parse_query("100"), Query("100", "*", "*", ""))

    def test_tag_and_codes(self):
        self.assertEqual(parse_query("245ac"), Query("245", "*", "*", "ac"))

    def test_indicators(self):
        self.assertEqual(parse_query("650|*0|x"), Query("650", "*", "0", "x"))
        self.assertEqual(parse_query("245|1 |"), Query("245", "1", " ", ""))

    def test_invalid(self):
        for text in ("", "24", "650|x", "650|*0", "650|*0|x|", "65|0|"):
            with self.subTest(text=text):
                with self.assertRaises(InvalidQuery):
                    parse_query(text)

    def test_invalid_query_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_query("1")


class TestFilter(unittest.TestCase):
    def setUp(self):
        self.record = decode_record(SANDBURG_RECORD)

    def test_filter(self):
        sfs = self.record.filter("260ac", "245a", "100")
        self.assertEqual(len(sfs), 3)
        self.assertEqual(" ".join(sfs[0]), "San Diego : c1993.")
        self.assertEqual(sfs[1], ["Arithmetic /"])
        self.assertEqual(sfs[2], ["Sandburg, Carl,", "1878-1967."])

    def test_filter_control_and_data_field(self):
        sfs = self.record.filter("001", "700e")
        self.assertEqual(len(sfs), 2)
        self.assertEqual(" ".join(sfs[0]) + " " + " ".join(sfs[1]), "   92005291  ill.")

    def test_filter_multiples(self):
        sfs = self.record.filter("650x")
        self.assertEqual(sfs, [["Juvenile poetry."], ["Poetry."]])

    def test_filter_indicators(self):
        self.assertEqual(self.record.filter("650|*0|x"), [["Juvenile poetry."]])
        self.assertEqual(self.record.filter("650| *|x"), [["Juvenile poetry."], ["Poetry."]])
        self.assertEqual(self.record.filter("650|1*|x"), [])

    def test_filter_indicators_without_codes(self):
        self.assertEqual(self.record.filter("650|*1|"), [["Arithmetic", "Poetry."]])

    def test_codes_keep_field_order(self):
        self.assertEqual(self.record.filter("260ca"), [["San Diego :", "c1993."]])

    def test_control_field_ignores_subfield_syntax(self):
        self.assertEqual(self.record.filter("003a", "003|12|b"), [["DLC"], ["DLC"]])

    def test_absent_codes_yield_no_group(self):
        self.assertEqual(self.record.filter("245z"), [])

    def test_missing_tag(self):
        self.assertEqual(self.record.filter("999"), [])

    def test_order_is_query_then_field(self):
        sfs = self.record.filter("650a", "245a", "650x")
        self.assertEqual(sfs, [["Arithmetic"], ["Arithmetic"], ["Arithmetic /"],
                               ["Juvenile poetry."], ["Poetry."]])

    def test_tag_is_exact(self):
        record = decode_record(build_record([('001', 'x'), ('650', ' ', '0', [('a', 'A')]),
                                             ('651', ' ', '0', [('a', 'B')])]))
        self.assertEqual(record.filter("650"), [["A"]])

    def test_filter_by_query_keeps_empty_slots(self):
        slots = self.record.filter_by_query("245a", "650x", "100")
        self.assertEqual(len(slots), 3)
        self.assertEqual(slots[0], [["Arithmetic /"]])
        self.assertEqual(slots[1], [["Juvenile poetry."], ["Poetry."]])

        record = decode_record(build_record([
            ('001', '1'),
            ('245', '1', '0', [('a', 'Title')]),
            ('650', ' ', '0', [('x', 'One')]),
            ('650', ' ', '1', [('x', 'Two')]),
        ]))
        slots = record.filter_by_query("245a", "650x", "100")
        self.assertEqual(slots, [[["Title"]], [["One"], ["Two"]], []])
        self.assertEqual(record.filter("245a", "650x", "100"), [["Title"], ["One"], ["Two"]])

    def test_accepts_parsed_queries(self):
        self.assertEqual(filter_record(self.record, parse_query("245c"), "010a"),
                         [["Carl Sandburg ; illustrated as an anamorphic adventure by Ted Rand."],
                          ["   92005291 "]])

    def test_invalid_query_raises(self):
        with self.assertRaises(InvalidQuery):
            self.record.filter("65")


if __name__ == '__main__':
    unittest.main()
