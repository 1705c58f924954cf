from __future__ import annotations

import unittest
from unittest import mock

from headorder import HeadOrderer, ReorderOptions, reorder_head
from headorder.document import HeadDocument, HeadSpliceError
from headorder.ordering import STYLES_FIRST_CATALOG

PAGE = (
    "<!DOCTYPE html>\n"
    '<html lang="en">\n'
    "<head>\n"
    "  <title>X</title>\n"
    '  <meta charset="utf-8">\n'
    "</head>\n"
    "<body>\n"
    "  <p class=intro>Hi <br/> there</p>\n"
    "  <input disabled>\n"
    "</body>\n"
    "</html>\n"
)

REAL_WORLD_PAGE = (
    "<!doctype html>\n"
    "<html>\n"
    "<head>\n"
    '  <link rel="icon" href="/favicon.ico">\n'
    '  <script type="module" defer src="/app.js"></script>\n'
    '  <meta name="description" content="Demo">\n'
    '  <link rel="stylesheet" href="/main.css">\n'
    "  <!-- analytics -->\n"
    '  <script async src="https://stats.example/s.js"></script>\n'
    '  <link rel="preload" href="/font.woff2" as="font" crossorigin>\n'
    "  <title>Demo</title>\n"
    '  <meta name="viewport" content="width=device-width, initial-scale=1">\n'
    '  <link rel="preconnect" href="https://stats.example">\n'
    "  <style>body { margin: 0 }</style>\n"
    "  <script>window.dataLayer = [];</script>\n"
    '  <meta charset="utf-8">\n'
    "</head>\n"
    "<body><main>content</main></body>\n"
    "</html>\n"
)


class TestReorderHead(unittest.TestCase):
    def test_charset_outranks_title_and_body_is_untouched(self) -> None:
        self.assertEqual(
            reorder_head(PAGE),
            "<!DOCTYPE html>\n"
            '<html lang="en">\n'
            '<head><meta charset="utf-8"><title>X</title></head>\n'
            "<body>\n"
            "  <p class=intro>Hi <br/> there</p>\n"
            "  <input disabled>\n"
            "</body>\n"
            "</html>\n",
        )

    def test_stylesheet_before_deferred_script(self) -> None:
        html = '<head><script defer src="a.js"></script><link rel="stylesheet" href="b.css"></head>'
        self.assertEqual(
            reorder_head(html),
            '<head><link rel="stylesheet" href="b.css"><script defer src="a.js"></script></head>',
        )

    def test_preload_style_precedes_stylesheet(self) -> None:
        html = '<head><link rel="stylesheet" href="c.css"><link rel="preload" as="style" href="c.css"></head>'
        expected = '<head><link rel="preload" as="style" href="c.css"><link rel="stylesheet" href="c.css"></head>'
        self.assertEqual(reorder_head(html), expected)
        self.assertEqual(reorder_head(html, ReorderOptions(catalog=STYLES_FIRST_CATALOG)), expected)

    def test_other_meta_keeps_document_order(self) -> None:
        html = '<head><meta name="x" content="1"><title>T</title><meta name="x" content="2"></head>'
        self.assertEqual(
            reorder_head(html),
            '<head><title>T</title><meta name="x" content="1"><meta name="x" content="2"></head>',
        )

    def test_whitespace_nodes_removed(self) -> None:
        html = "<head>\n  <title>T</title>\n\n  <base href=\"/\">\n</head>"
        self.assertEqual(reorder_head(html), '<head><base href="/"><title>T</title></head>')

    def test_real_world_head(self) -> None:
        self.assertEqual(
            reorder_head(REAL_WORLD_PAGE),
            "<!doctype html>\n"
            "<html>\n"
            "<head>"
            '<meta charset="utf-8">'
            '<meta name="viewport" content="width=device-width, initial-scale=1">'
            "<title>Demo</title>"
            '<link rel="preconnect" href="https://stats.example">'
            "<script>window.dataLayer = [];</script>"
            "<style>body { margin: 0 }</style>"
            '<link rel="stylesheet" href="/main.css">'
            '<link rel="preload" href="/font.woff2" as="font" crossorigin>'
            '<script type="module" defer src="/app.js"></script>'
            '<script async src="https://stats.example/s.js"></script>'
            '<meta name="description" content="Demo">'
            '<link rel="icon" href="/favicon.ico">'
            "</head>\n"
            "<body><main>content</main></body>\n"
            "</html>\n",
        )

    def test_idempotent(self) -> None:
        for page in (PAGE, REAL_WORLD_PAGE):
            once = reorder_head(page)
            self.assertEqual(reorder_head(once), once)

    def test_no_head_is_a_no_op(self) -> None:
        html = "<!doctype html><p>fragment <b>only</b></p>"
        self.assertEqual(reorder_head(html), html)

    def test_empty_head(self) -> None:
        html = "<html><head>\n   \n</head><body></body></html>"
        self.assertEqual(reorder_head(html), "<html><head></head><body></body></html>")

    def test_content_is_not_rewritten(self) -> None:
        html = (
            "<head><title>A &amp; B é</title>"
            "<script>if (a < b && c) { go(); }</script>"
            "<style>p > a { color: red }</style>"
            '<meta charset="utf-8"></head>'
        )
        self.assertEqual(
            reorder_head(html),
            '<head><meta charset="utf-8"><title>A &amp; B é</title>'
            "<script>if (a < b && c) { go(); }</script>"
            "<style>p > a { color: red }</style></head>",
        )

    def test_upper_case_markup(self) -> None:
        html = '<HTML><HEAD><TITLE>X</TITLE><META CHARSET="utf-8"></HEAD><BODY></BODY></HTML>'
        self.assertEqual(
            reorder_head(html),
            '<HTML><HEAD><meta charset="utf-8"><title>X</title></HEAD><BODY></BODY></HTML>',
        )


class TestHeadOrderer(unittest.TestCase):
    def test_result_reports_counts_and_order(self) -> None:
        result = HeadOrderer().process(PAGE)
        self.assertTrue(result.head_found)
        self.assertTrue(result.changed)
        self.assertEqual(result.input_count, 5)
        self.assertEqual(result.output_count, 2)
        self.assertEqual(result.dropped_whitespace, 3)
        self.assertEqual(result.dropped_comments, 0)
        self.assertEqual(result.order, ["meta-charset", "title"])
        self.assertEqual(result.category_counts["meta-charset"]["count"], 1)
        self.assertEqual(result.category_counts["title"]["count_ratio"], 0.5)
        self.assertNotIn("skipped_reason", result.to_dict())

    def test_keep_comments_moves_them_last(self) -> None:
        html = '<head><!-- a --><title>X</title><!-- b --><meta charset="utf-8"></head>'
        orderer = HeadOrderer(ReorderOptions(drop_comments=False))
        result = orderer.process(html)
        self.assertEqual(
            result.html,
            '<head><meta charset="utf-8"><title>X</title><!-- a --><!-- b --></head>',
        )
        self.assertEqual(result.order, ["meta-charset", "title", "comment", "comment"])
        self.assertEqual(result.dropped_comments, 0)

    def test_comments_dropped_by_default(self) -> None:
        result = HeadOrderer().process("<head><!-- a --><title>X</title></head>")
        self.assertEqual(result.html, "<head><title>X</title></head>")
        self.assertEqual(result.dropped_comments, 1)

    def test_already_ordered_head_is_unchanged(self) -> None:
        html = '<head><meta charset="utf-8"><title>X</title></head><body></body>'
        result = HeadOrderer().process(html)
        self.assertFalse(result.changed)
        self.assertEqual(result.html, html)

    def test_no_head(self) -> None:
        result = HeadOrderer().process("<p>x</p>")
        self.assertFalse(result.head_found)
        self.assertFalse(result.changed)
        self.assertEqual(result.order, [])

    def test_head_without_end_tag_is_reordered(self) -> None:
        html = '<!doctype html><html><head><title>X</title><meta charset="utf-8"><body><p>x</p></body></html>'
        result = HeadOrderer().process(html)
        self.assertEqual(
            result.html,
            '<!doctype html><html><head><meta charset="utf-8"><title>X</title><body><p>x</p></body></html>',
        )
        self.assertTrue(result.changed)
        self.assertEqual(result.order, ["meta-charset", "title"])
        self.assertIsNone(result.skipped_reason)
        self.assertNotIn("skipped_reason", result.to_dict())

    def test_end_tag_inside_comment_does_not_leak(self) -> None:
        html = '<head><title>X</title><meta charset="utf-8"><!-- moved </head> here --></head><body></body>'
        self.assertEqual(reorder_head(html), '<head><meta charset="utf-8"><title>X</title></head><body></body>')

    def test_splice_failure_leaves_document_unchanged(self) -> None:
        html = '<head><title>X</title><meta charset="utf-8"></head>'
        failure = HeadSpliceError("No <head> start tag at offset 0")
        with mock.patch.object(HeadDocument, "serialize", side_effect=failure):
            with self.assertLogs("headorder.pipeline", level="WARNING"):
                result = HeadOrderer().process(html)
        self.assertEqual(result.html, html)
        self.assertFalse(result.changed)
        self.assertIn("skipped_reason", result.to_dict())

    def test_lxml_backend_serializes_whole_tree(self) -> None:
        html = '<html><head><title>X</title><meta charset="utf-8"></head><body><p>x</p></body></html>'
        output = HeadOrderer(parser="lxml").reorder_html(html)
        self.assertIn('<head><meta charset="utf-8"><title>X</title></head>', output)
        self.assertIn("<p>x</p>", output)


if __name__ == "__main__":
    unittest.main()
