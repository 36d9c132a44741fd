"""Tests for the JSON Lines method cache."""

import json
import tempfile
import unittest
from pathlib import Path

from cache.method_cache import (
    CacheStats,
    decode_record,
    encode_record,
    iter_load_method_cache,
    load_method_cache,
    write_method_cache,
)
from docmodel.alias import MethodAlias
from docmodel.comment import PlainCommentParser, StructuredComment
from docmodel.container import Namespace
from docmodel.errors import UnsupportedFormatError
from docmodel.session import BuildSession


class TestMethodCache(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.cache_path = str(Path(self.tmpdir.name) / "nested" / "methods.jsonl")
        self.session = BuildSession()
        self.namespace = Namespace("Foo")

        each = self.session.new_method("def each; end", "each", container=self.namespace)
        each.comment = "# Iterates."
        each.block_params = "(x)"
        alias = MethodAlias(None, "each", "each_pair", "# Pairs.")
        alias.container = self.namespace
        each.add_alias(alias)

        build = self.session.new_method(None, None, container=self.namespace)
        build.call_seq = "Foo.build(x)"
        build.singleton = True
        build.visibility = "private"

        self.records = self.session.sorted_methods()

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_encode_record_is_json_safe(self) -> None:
        payload = encode_record(self.records[1], PlainCommentParser())
        text = json.dumps(payload)
        self.assertIn("__comment__", text)
        decoded = decode_record(json.loads(text))
        self.assertEqual(decoded[5], StructuredComment(("Iterates.",)))
        self.assertEqual(decoded[8], [["Foo#each_pair", StructuredComment(("Pairs.",))]])

    def test_decode_record_leaves_bad_shapes_alone(self) -> None:
        self.assertEqual(decode_record([1, 2]), [1, 2])
        self.assertEqual(decode_record({"a": 1}), {"a": 1})

    def test_write_then_load_round_trip(self) -> None:
        write_stats = write_method_cache(self.records, self.cache_path)
        self.assertEqual(write_stats.records_written, 2)
        self.assertEqual(write_stats.aliases_written, 1)

        loaded, stats = load_method_cache(self.cache_path, session=BuildSession(), strict=True)
        self.assertEqual(stats.records_loaded, 2)
        self.assertEqual(stats.aliases_loaded, 1)
        self.assertEqual([r.full_name for r in loaded], ["Foo::build", "Foo#each"])

        build, each = loaded
        self.assertEqual(build.name, "build")
        self.assertTrue(build.singleton)
        self.assertEqual(build.visibility, "private")
        self.assertEqual(build.call_seq, "Foo.build(x)")
        self.assertEqual(each.block_params, "(x)")
        self.assertEqual(each.comment, StructuredComment(("Iterates.",)))
        self.assertEqual(
            [(a.full_name, a.comment) for a in each.aliases],
            [("Foo#each_pair", StructuredComment(("Pairs.",)))],
        )
        self.assertIsNone(each.text)
        self.assertEqual([r.aref for r in loaded], ["M000000", "M000001"])

    def test_unsupported_version_skipped_when_not_strict(self) -> None:
        write_method_cache(self.records, self.cache_path)
        lines = Path(self.cache_path).read_text(encoding="utf-8").splitlines()
        bad = json.loads(lines[0])
        bad[0] = 7
        lines[0] = json.dumps(bad)
        Path(self.cache_path).write_text("\n".join(lines) + "\n\n", encoding="utf-8")

        stats = CacheStats()
        loaded = list(iter_load_method_cache(self.cache_path, strict=False, stats=stats))
        self.assertEqual(len(loaded), 1)
        self.assertEqual(stats.records_skipped, 1)

        with self.assertRaises(UnsupportedFormatError):
            list(iter_load_method_cache(self.cache_path, strict=True))

    def test_malformed_line(self) -> None:
        Path(self.cache_path).parent.mkdir(parents=True, exist_ok=True)
        Path(self.cache_path).write_text("{not json\n[0, \"x\"]\n", encoding="utf-8")

        loaded, stats = load_method_cache(self.cache_path, strict=False)
        self.assertEqual(loaded, [])
        self.assertEqual(stats.records_skipped, 2)

        with self.assertRaises(ValueError):
            load_method_cache(self.cache_path, strict=True)

    def test_object_line_is_skipped_alongside_good_line(self) -> None:
        good = json.dumps(encode_record(self.records[1], PlainCommentParser()))
        Path(self.cache_path).parent.mkdir(parents=True, exist_ok=True)
        Path(self.cache_path).write_text('{"bogus": 1}\n' + good + "\n", encoding="utf-8")

        session = BuildSession()
        loaded, stats = load_method_cache(self.cache_path, session=session, strict=False)
        self.assertEqual([r.full_name for r in loaded], ["Foo#each"])
        self.assertEqual(stats.records_loaded, 1)
        self.assertEqual(stats.records_skipped, 1)
        self.assertEqual(loaded[0].aref, "M000000")

        with self.assertRaises(ValueError):
            load_method_cache(self.cache_path, strict=True)

    def test_missing_cache_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            list(iter_load_method_cache("/definitely/missing.jsonl"))


if __name__ == "__main__":
    unittest.main()
