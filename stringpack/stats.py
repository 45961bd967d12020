#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import bz2
import json
import lzma
import zlib
from typing import Dict, Mapping, Optional, Sequence

import zstandard

from .codes import ESCAPE, MAX_CONTROL_CODE_POINT, StringMapError, code_name
from .encoder import encode_string_map

CODEC_ZLIB = "zlib"
CODEC_BZ2 = "bz2"
CODEC_LZMA = "lzma"
CODEC_ZSTD = "zstd"
SUPPORTED_CODECS = (CODEC_ZLIB, CODEC_BZ2, CODEC_LZMA, CODEC_ZSTD)


def compressed_size(raw: bytes, codec: str) -> int:
    if codec == CODEC_ZLIB:
        return len(zlib.compress(raw, level=9))
    if codec == CODEC_BZ2:
        return len(bz2.compress(raw, compresslevel=9))
    if codec == CODEC_LZMA:
        return len(lzma.compress(raw, preset=9))
    if codec == CODEC_ZSTD:
        cctx = zstandard.ZstdCompressor(level=10)
        return len(cctx.compress(raw))
    raise StringMapError(f"unsupported codec: {codec}")


def count_codes(stream: str) -> Dict[str, int]:
    """Histogram of control codes in `stream`, by name. Escaped data is skipped."""
    counts: Dict[str, int] = {}
    i = 0
    n = len(stream)
    while i < n:
        ch = stream[i]
        if ch == ESCAPE:
            i += 2
            continue
        if ord(ch) <= MAX_CONTROL_CODE_POINT:
            name = code_name(ch)
            counts[name] = counts.get(name, 0) + 1
        i += 1
    return counts


def size_report(
    table: Mapping[str, Optional[Mapping[str, str]]],
    stream: Optional[str] = None,
    codecs: Sequence[str] = SUPPORTED_CODECS,
) -> Dict[str, object]:
    """Compare the compact stream against plain compact JSON of the same table.

    Purely diagnostic; sizes are UTF-8 bytes.
    """
    if stream is None:
        stream = encode_string_map(table)
    present = {locale: dict(strings) for locale, strings in table.items() if strings is not None}
    json_raw = json.dumps(present, ensure_ascii=False, separators=(",", ":"), sort_keys=True).encode("utf-8")
    encoded_raw = stream.encode("utf-8")

    json_bytes = len(json_raw)
    encoded_bytes = len(encoded_raw)
    if json_bytes > 0:
        gain_pct = ((json_bytes - encoded_bytes) / float(json_bytes)) * 100.0
    else:
        gain_pct = 0.0

    keys = set()
    for strings in present.values():
        keys.update(strings.keys())

    by_codec: Dict[str, Dict[str, int]] = {}
    for codec in codecs:
        by_codec[codec] = {
            "json": compressed_size(json_raw, codec),
            "encoded": compressed_size(encoded_raw, codec),
        }
    return {
        "locales": len(present),
        "keys": len(keys),
        "json_bytes": json_bytes,
        "encoded_bytes": encoded_bytes,
        "gain_pct": gain_pct,
        "codecs": by_codec,
    }
