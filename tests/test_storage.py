"""
Unit tests for the persisted watch list.

Storage contract:
- Missing/invalid file -> empty set
- Only positive integers survive a load
- JSON schema: {"watched_crns": [ ... ]} sorted on save
"""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from ucmsched.storage import load_watched_crns, save_watched_crns


class TestStorage(unittest.TestCase):
    def test_load_missing_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            self.assertEqual(load_watched_crns(Path(d) / "missing.json"), set())

    def test_load_broken_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "watched_crns.json"
            p.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_watched_crns(p), set())
            p.write_text('{"watched_crns": "10163"}', encoding="utf-8")
            self.assertEqual(load_watched_crns(p), set())

    def test_save_and_load_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "watched_crns.json"
            save_watched_crns({10164, 10163}, p)
            self.assertEqual(load_watched_crns(p), {10163, 10164})

            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertEqual(data, {"watched_crns": [10163, 10164]})

    def test_invalid_entries_are_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "watched_crns.json"
            p.write_text('{"watched_crns": [10163, "10164", "abc", -1, true, null]}', encoding="utf-8")
            self.assertEqual(load_watched_crns(p), {10163, 10164})

    def test_default_path_uses_config_home(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with mock.patch.dict(os.environ, {"UCMSCHED_HOME": d}):
                save_watched_crns([10163])
                self.assertTrue((Path(d) / "watched_crns.json").exists())
                self.assertEqual(load_watched_crns(), {10163})


if __name__ == "__main__":
    unittest.main()
