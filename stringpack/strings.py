#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Loading string tables for the codec.

Two input shapes are supported:
- a single JSON table file: {"en": {"KEY": "text"}, "fr": {...}}
- a directory of per-repo string files named `<repo>-strings_<locale>.json`,
  where each file is a (possibly nested) object with {"value": "..."} leaves.
  Keys become `<NAMESPACE>/<dotted.key>` and values are trimmed and wrapped
  with the LTR/RTL embedding marks for their locale.
"""

from __future__ import annotations

import json
import os
import re
from typing import Dict, Iterable, Optional, Tuple

from .codes import CHAR_LTR, CHAR_POP, CHAR_RTL, StringMapError

NAMESPACE_DIVIDER = "/"

_STRING_FILE_RE = re.compile(r"^(?P<repo>.+)-strings_(?P<locale>[A-Za-z]{2,3}(?:_[A-Za-z0-9]+)*)\.json$")


class StringFileError(StringMapError):
    pass


def add_directional_formatting(value: str, is_rtl: bool) -> str:
    if not value:
        return value
    return (CHAR_RTL if is_rtl else CHAR_LTR) + value + CHAR_POP


def flatten_string_file(data: object, key_so_far: str = "") -> Dict[str, str]:
    """Flatten nested string objects into {"a.b.c": value}.

    Non-object members (e.g. history lists in translated files) are skipped.
    An object counts as a string when it has a non-empty "value"; it may
    still hold nested strings.
    """
    out: Dict[str, str] = {}
    if not isinstance(data, dict):
        return out
    for key, obj in data.items():
        next_key = f"{key_so_far}.{key}" if key_so_far else key
        if not isinstance(obj, dict):
            continue
        value = obj.get("value")
        if value:
            if not isinstance(value, str):
                raise StringFileError(f"value should be a string for key {next_key}")
            out[next_key] = value
        if key != "value":
            out.update(flatten_string_file(obj, next_key))
    return out


def format_string_values(strings: Dict[str, str], is_rtl: bool) -> Dict[str, str]:
    # Trim before wrapping so the embedding marks hug the text.
    return {key: add_directional_formatting(value.strip(), is_rtl) for key, value in strings.items()}


def string_namespace(repo: str) -> str:
    return repo.upper().replace("-", "_")


def parse_string_filename(name: str) -> Optional[Tuple[str, str]]:
    m = _STRING_FILE_RE.match(name)
    if not m:
        return None
    return m.group("repo"), m.group("locale")


def _read_json(path: str) -> object:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise StringFileError(f"invalid JSON in {path}: {e}") from e


def load_string_directory(path: str, rtl_locales: Iterable[str] = ()) -> Dict[str, Dict[str, str]]:
    """Build map[locale]["NAMESPACE/key"] => text from the string files in `path`."""
    rtl = set(rtl_locales)
    table: Dict[str, Dict[str, str]] = {}
    for name in sorted(os.listdir(path)):
        parsed = parse_string_filename(name)
        if parsed is None:
            continue
        repo, locale = parsed
        strings = flatten_string_file(_read_json(os.path.join(path, name)))
        formatted = format_string_values(strings, locale in rtl)
        prefix = string_namespace(repo) + NAMESPACE_DIVIDER
        target = table.setdefault(locale, {})
        for key, value in formatted.items():
            target[prefix + key] = value
    return table


def load_string_table(path: str) -> Dict[str, Dict[str, str]]:
    """Read a JSON table file {locale: {key: text}}, checking its shape."""
    data = _read_json(path)
    if not isinstance(data, dict):
        raise StringFileError(f"{path}: top level must be an object of locales")
    table: Dict[str, Dict[str, str]] = {}
    for locale, strings in data.items():
        if strings is None:
            continue
        if not isinstance(strings, dict):
            raise StringFileError(f"{path}: strings for {locale!r} must be an object")
        for key, value in strings.items():
            if not isinstance(value, str):
                raise StringFileError(f"{path}: value for {locale} {key} must be a string")
        table[locale] = dict(strings)
    return table


def load_input(path: str, rtl_locales: Iterable[str] = ()) -> Dict[str, Dict[str, str]]:
    if os.path.isdir(path):
        return load_string_directory(path, rtl_locales)
    return load_string_table(path)
