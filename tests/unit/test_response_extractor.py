import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from shopkeep.application.services.response_extractor import extract_json
from shopkeep.domain.errors import ExtractionError


class ResponseExtractorTests(unittest.TestCase):
    def test_raw_json(self) -> None:
        self.assertEqual({"a": 1}, extract_json('  {"a": 1}\n'))

    def test_tagged_fenced_block(self) -> None:
        raw = 'Here you go:\n```json\n{"a":1}\n```\nHope it helps!'
        self.assertEqual({"a": 1}, extract_json(raw))

    def test_untagged_fenced_block(self) -> None:
        raw = 'Sure!\n```\n{"selections": []}\n```'
        self.assertEqual({"selections": []}, extract_json(raw))

    def test_falls_through_bad_fence_to_braces(self) -> None:
        raw = 'Example:\n```text\nnot json\n```\nAnswer: {"a": 2} done'
        self.assertEqual({"a": 2}, extract_json(raw))

    def test_json_embedded_in_prose(self) -> None:
        self.assertEqual({"a": 1}, extract_json('prefix {"a":1} suffix'))

    def test_failure_keeps_raw_text(self) -> None:
        with self.assertRaises(ExtractionError) as ctx:
            extract_json("no json here")
        self.assertEqual("no json here", ctx.exception.raw_response)
        self.assertIn("no json here", str(ctx.exception))

    def test_unbalanced_braces_fail(self) -> None:
        with self.assertRaises(ExtractionError):
            extract_json('{"a": {"b": 1}')


if __name__ == "__main__":
    unittest.main()
