"""Pagination arithmetic and page/limit parsing."""

from __future__ import annotations

from django.test import SimpleTestCase, override_settings

from posts.pagination import InvalidParameter, paginate, parse_page_params


class PaginateTests(SimpleTestCase):
    def test_twenty_items_nine_per_page(self):
        first = paginate(1, 9, 20)
        second = paginate(2, 9, 20)
        third = paginate(3, 9, 20)

        self.assertEqual(first.total_pages, 3)
        self.assertTrue(first.has_more)
        self.assertTrue(second.has_more)
        self.assertFalse(third.has_more)
        self.assertEqual((first.skip, second.skip, third.skip), (0, 9, 18))

    def test_page_past_the_end(self):
        result = paginate(7, 9, 20)
        self.assertEqual(result.skip, 54)
        self.assertEqual(result.total_pages, 3)
        self.assertFalse(result.has_more)

    def test_no_matches(self):
        result = paginate(1, 9, 0)
        self.assertEqual(result.total_pages, 0)
        self.assertFalse(result.has_more)

    def test_exact_multiple(self):
        self.assertEqual(paginate(1, 10, 20).total_pages, 2)
        self.assertFalse(paginate(2, 10, 20).has_more)

    def test_non_positive_limit_rejected(self):
        for limit in (0, -1):
            with self.assertRaises(InvalidParameter):
                paginate(1, limit, 20)

    def test_non_positive_page_rejected(self):
        with self.assertRaises(InvalidParameter):
            paginate(0, 9, 20)

    def test_metadata_omits_skip(self):
        self.assertEqual(
            paginate(2, 9, 20).as_metadata(),
            {"page": 2, "limit": 9, "total_count": 20, "total_pages": 3, "has_more": True},
        )


@override_settings(POSTS_PAGE_SIZE=9, POSTS_MAX_PAGE_SIZE=100)
class ParsePageParamsTests(SimpleTestCase):
    def test_defaults(self):
        self.assertEqual(parse_page_params({}), (1, 9))

    def test_numeric_values(self):
        self.assertEqual(parse_page_params({"page": "3", "limit": "5"}), (3, 5))

    def test_non_numeric_falls_back_to_defaults(self):
        self.assertEqual(parse_page_params({"page": "abc", "limit": "1.5"}), (1, 9))

    def test_limit_capped(self):
        self.assertEqual(parse_page_params({"limit": "5000"}), (1, 100))

    def test_zero_and_negative_pass_through(self):
        self.assertEqual(parse_page_params({"page": "0", "limit": "-2"}), (0, -2))
