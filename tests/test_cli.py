from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from headorder.cli import app

UNORDERED = '<html><head><title>A</title><style>p{}</style><script>x()</script><meta charset="utf-8"></head><body></body></html>'


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.page = self.root / "page.html"
        self.page.write_text(UNORDERED, encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_reorder_to_stdout(self) -> None:
        result = self.runner.invoke(app, ["reorder", str(self.page)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('<head><meta charset="utf-8"><title>A</title><script>x()</script><style>p{}</style></head>', result.output)
        self.assertEqual(self.page.read_text(encoding="utf-8"), UNORDERED)

    def test_reorder_with_styles_first_catalog_to_file(self) -> None:
        target = self.root / "out.html"
        result = self.runner.invoke(app, ["reorder", str(self.page), "--catalog", "styles-first", "-o", str(target)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            target.read_text(encoding="utf-8"),
            '<html><head><meta charset="utf-8"><title>A</title><style>p{}</style><script>x()</script></head><body></body></html>',
        )

    def test_reorder_in_place(self) -> None:
        result = self.runner.invoke(app, ["reorder", str(self.page), "--in-place"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(self.page.read_text(encoding="utf-8").startswith('<html><head><meta charset="utf-8">'))

    def test_unknown_catalog_is_rejected(self) -> None:
        result = self.runner.invoke(app, ["reorder", str(self.page), "--catalog", "random"])
        self.assertNotEqual(result.exit_code, 0)

    def test_classify_lists_categories(self) -> None:
        result = self.runner.invoke(app, ["classify", str(self.page)])
        self.assertEqual(result.exit_code, 0, result.output)
        header, *lines = [line.split("\t") for line in result.output.strip().splitlines()]
        self.assertEqual(header, ["position", "rank", "category", "node"])
        self.assertEqual(
            [(line[0], line[1], line[2]) for line in lines],
            [("1", "5", "title"), ("2", "9", "style"), ("3", "8", "script-inline-plain"), ("4", "1", "meta-charset")],
        )

    def test_classify_shows_comment_text(self) -> None:
        page = self.root / "commented.html"
        page.write_text("<head>\n  <!-- build\n 42 -->\n  <title>A</title>\n</head>", encoding="utf-8")
        result = self.runner.invoke(app, ["classify", str(page)])
        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.output.strip().splitlines()[1:]
        self.assertEqual(lines, ["1\t-\tcomment\t<!-- build 42 -->", "2\t5\ttitle\t<title>"])

    def test_classify_without_head_fails(self) -> None:
        fragment = self.root / "fragment.html"
        fragment.write_text("<p>x</p>", encoding="utf-8")
        result = self.runner.invoke(app, ["classify", str(fragment)])
        self.assertEqual(result.exit_code, 1)

    def test_batch_writes_reports(self) -> None:
        listing = self.root / "pages.txt"
        listing.write_text("page.html\n", encoding="utf-8")
        report_dir = self.root / "report"
        out_dir = self.root / "out"
        result = self.runner.invoke(
            app,
            ["batch", str(listing), "--output-dir", str(out_dir), "--report-dir", str(report_dir)],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        summary = json.loads((report_dir / "summary.json").read_text(encoding="utf-8"))
        self.assertEqual(summary["changed"], 1)
        self.assertTrue((report_dir / "results.csv").exists())
        self.assertTrue((report_dir / "results.json").exists())
        self.assertTrue((out_dir / "page.html").exists())

    def test_catalogs_lists_variants(self) -> None:
        result = self.runner.invoke(app, ["catalogs"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("scripts-first (default)", result.output)
        self.assertIn("styles-first", result.output)


if __name__ == "__main__":
    unittest.main()
