#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import json
import tempfile
import unittest
from pathlib import Path

from stringpack.codes import CHAR_LTR, CHAR_POP, CHAR_RTL
from stringpack.decoder import decode_string_map
from stringpack.encoder import encode_string_map
from stringpack.stats import count_codes
from stringpack.strings import (
    StringFileError,
    add_directional_formatting,
    flatten_string_file,
    format_string_values,
    load_input,
    load_string_directory,
    load_string_table,
    parse_string_filename,
    string_namespace,
)


def _write_json(path: Path, data: object) -> None:
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


class StringFormattingTests(unittest.TestCase):
    def test_add_directional_formatting(self) -> None:
        self.assertEqual(add_directional_formatting("Hi", False), CHAR_LTR + "Hi" + CHAR_POP)
        self.assertEqual(add_directional_formatting("Hi", True), CHAR_RTL + "Hi" + CHAR_POP)
        self.assertEqual(add_directional_formatting("", True), "")

    def test_format_string_values_trims_before_wrapping(self) -> None:
        formatted = format_string_values({"a": "  padded\n", "b": "   "}, False)
        self.assertEqual(formatted, {"a": CHAR_LTR + "padded" + CHAR_POP, "b": ""})

    def test_flatten_nested_string_file(self) -> None:
        data = {
            "title": {"value": "T"},
            "a11y": {"value": "A", "nested": {"value": "N"}},
            "history": [1, 2],
            "empty": {"value": ""},
            "plain": "ignored",
        }
        self.assertEqual(flatten_string_file(data), {"title": "T", "a11y": "A", "a11y.nested": "N"})

    def test_flatten_rejects_non_string_value(self) -> None:
        with self.assertRaises(StringFileError):
            flatten_string_file({"x": {"value": 5}})

    def test_flatten_non_object(self) -> None:
        self.assertEqual(flatten_string_file(["x"]), {})

    def test_namespace(self) -> None:
        self.assertEqual(string_namespace("gravity-and-orbits"), "GRAVITY_AND_ORBITS")
        self.assertEqual(string_namespace("friction"), "FRICTION")

    def test_parse_string_filename(self) -> None:
        self.assertEqual(parse_string_filename("friction-strings_en.json"), ("friction", "en"))
        self.assertEqual(
            parse_string_filename("gravity-and-orbits-strings_zh_CN.json"),
            ("gravity-and-orbits", "zh_CN"),
        )
        self.assertIsNone(parse_string_filename("package.json"))
        self.assertIsNone(parse_string_filename("friction-strings_en.txt"))


class StringLoadingTests(unittest.TestCase):
    def test_load_string_directory(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write_json(root / "friction-strings_en.json", {"friction": {"title": {"value": " Friction "}}})
            _write_json(root / "friction-strings_ar.json", {"friction": {"title": {"value": "احتكاك"}}})
            _write_json(root / "package.json", {"name": "friction"})
            table = load_string_directory(td, rtl_locales=["ar"])

        self.assertEqual(
            table,
            {
                "ar": {"FRICTION/friction.title": CHAR_RTL + "احتكاك" + CHAR_POP},
                "en": {"FRICTION/friction.title": CHAR_LTR + "Friction" + CHAR_POP},
            },
        )
        stream = encode_string_map(table)
        counts = count_codes(stream)
        self.assertEqual(counts.get("add_string_ltr_pop"), 1)
        self.assertEqual(counts.get("add_string_rtl_pop"), 1)
        self.assertEqual(counts.get("push_slash"), 1)
        self.assertEqual(decode_string_map(stream), table)

    def test_load_string_directory_merges_repos(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write_json(root / "joist-strings_en.json", {"menu": {"value": "Menu"}})
            _write_json(root / "friction-strings_en.json", {"title": {"value": "Friction"}})
            table = load_string_directory(td)
        self.assertEqual(
            sorted(table["en"]),
            ["FRICTION/title", "JOIST/menu"],
        )

    def test_load_string_table(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "table.json"
            _write_json(path, {"en": {"k": "Hi"}, "fr": None, "de": {}})
            self.assertEqual(load_string_table(str(path)), {"en": {"k": "Hi"}, "de": {}})
            self.assertEqual(load_input(str(path)), {"en": {"k": "Hi"}, "de": {}})

    def test_load_string_table_rejects_bad_shapes(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "table.json"
            for bad in (["en"], {"en": ["k"]}, {"en": {"k": 1}}):
                _write_json(path, bad)
                with self.assertRaises(StringFileError):
                    load_string_table(str(path))
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(StringFileError):
                load_string_table(str(path))


if __name__ == "__main__":
    unittest.main()
