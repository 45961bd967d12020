#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
stringpack package

Compact, exactly reversible encoding of multi-locale string tables
(map[locale][string_key] => text) into a single string. packStrings.py is
the command-line entrypoint; the codec and its helpers live here.

Usage:
    from stringpack import encode_string_map, decode_string_map

    stream = encode_string_map({"en": {"a.b": "Hello"}, "fr": {"a.b": "Bonjour"}})
    table = decode_string_map(stream)
"""

from __future__ import annotations

from .codes import (
    FALLBACK_LOCALE,
    MissingFallbackError,
    StringMapError,
    StringMapFormatError,
    StringMapSelfCheckError,
)
from .decoder import decode_string_map
from .encoder import encode_string_map

__version__ = "1.0.0"
__all__ = [
    "FALLBACK_LOCALE",
    "encode_string_map",
    "decode_string_map",
    "StringMapError",
    "StringMapFormatError",
    "StringMapSelfCheckError",
    "MissingFallbackError",
]
