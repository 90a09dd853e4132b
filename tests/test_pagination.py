"""Unit tests for services.pagination: parameter clamping, metadata and search clauses."""

import unittest

from sqlalchemy.dialects import sqlite

from models.bank import Bank
from models.user import User
from services.pagination import (
    build_metadata,
    build_order_by,
    build_result,
    build_text_search_filter,
    MAX_OFFSET,
    parse_params,
)


class TestParseParams(unittest.TestCase):
    """parse_params never raises; bad input falls back to defaults."""

    def test_defaults(self) -> None:
        params = parse_params({})
        self.assertEqual(params.page, 1)
        self.assertEqual(params.limit, 10)
        self.assertEqual(params.skip, 0)
        self.assertEqual(params.sort_by, "createdAt")
        self.assertEqual(params.sort_order, "desc")

    def test_non_positive_or_garbage_page_becomes_one(self) -> None:
        for raw in ("0", "-3", "abc", None, 0, -1):
            with self.subTest(page=raw):
                self.assertEqual(parse_params({"page": raw}).page, 1)

    def test_limit_fallback_and_clamp(self) -> None:
        self.assertEqual(parse_params({"limit": "0"}).limit, 10)
        self.assertEqual(parse_params({"limit": "nope"}).limit, 10)
        self.assertEqual(parse_params({"limit": "1000"}).limit, 100)
        self.assertEqual(parse_params({"limit": 500}, max_limit=50).limit, 50)

    def test_leading_integer_is_used(self) -> None:
        self.assertEqual(parse_params({"limit": "12abc"}).limit, 12)
        self.assertEqual(parse_params({"page": "2.9"}).page, 2)

    def test_skip(self) -> None:
        params = parse_params({"page": "3", "limit": "20"})
        self.assertEqual(params.skip, 40)

    def test_huge_page_keeps_offset_in_range(self) -> None:
        for limit in ("1", "10", "100"):
            with self.subTest(limit=limit):
                params = parse_params({"page": "99999999999999999999", "limit": limit})
                self.assertLessEqual(params.skip, MAX_OFFSET)
                self.assertEqual(params.skip, (params.page - 1) * params.limit)
                self.assertGreater(params.page, 1)

    def test_sort_order_only_asc_or_desc(self) -> None:
        self.assertEqual(parse_params({"sort_order": "asc"}).sort_order, "asc")
        self.assertEqual(parse_params({"sort_order": "ASC"}).sort_order, "desc")
        self.assertEqual(parse_params({"sort_order": "sideways"}).sort_order, "desc")

    def test_sort_by_default_field(self) -> None:
        self.assertEqual(parse_params({}, default_sort_field="name").sort_by, "name")
        self.assertEqual(parse_params({"sort_by": "code"}, default_sort_field="name").sort_by, "code")


class TestMetadata(unittest.TestCase):

    def test_middle_page(self) -> None:
        meta = build_metadata(2, 10, 25)
        self.assertEqual(meta, {
            "page": 2, "limit": 10, "total": 25, "totalPages": 3, "hasNext": True, "hasPrev": True,
        })

    def test_empty_result(self) -> None:
        meta = build_metadata(1, 10, 0)
        self.assertEqual(meta["totalPages"], 0)
        self.assertFalse(meta["hasNext"])
        self.assertFalse(meta["hasPrev"])

    def test_last_page(self) -> None:
        meta = build_metadata(3, 10, 30)
        self.assertFalse(meta["hasNext"])
        self.assertTrue(meta["hasPrev"])

    def test_result_wraps_data(self) -> None:
        result = build_result(["a", "b"], 1, 2, 5)
        self.assertEqual(result["data"], ["a", "b"])
        self.assertEqual(result["pagination"]["totalPages"], 3)


class TestSearchAndOrder(unittest.TestCase):

    def _sql(self, clause) -> str:
        return str(clause.compile(dialect=sqlite.dialect()))

    def test_blank_term_gives_no_filter(self) -> None:
        self.assertIsNone(build_text_search_filter(None, [Bank.name]))
        self.assertIsNone(build_text_search_filter("   ", [Bank.name]))

    def test_or_of_lowercased_columns(self) -> None:
        sql = self._sql(build_text_search_filter("BCA", [Bank.name, Bank.code]))
        self.assertIn("lower(banks.name)", sql)
        self.assertIn("lower(banks.code)", sql)
        self.assertIn(" OR ", sql)

    def test_enum_column_is_cast_to_text(self) -> None:
        sql = self._sql(build_text_search_filter("admin", [User.role]))
        self.assertIn("CAST(users.role AS VARCHAR)", sql)

    def test_order_by_direction(self) -> None:
        self.assertIn("ASC", self._sql(build_order_by(Bank.name, "asc")))
        self.assertIn("DESC", self._sql(build_order_by(Bank.name, "desc")))


if __name__ == "__main__":
    unittest.main()
