#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import datetime as _dt
import json
import os
import sys
from typing import Dict, List, Optional

from stringpack import __version__ as VERSION
from stringpack.codes import StringMapError
from stringpack.config import load_config
from stringpack.decoder import decode_string_map
from stringpack.encoder import encode_string_map
from stringpack.stats import count_codes, size_report
from stringpack.strings import load_input

STREAM_SUFFIX = ".strmap"
DECODED_SUFFIX = ".decoded.json"

QUIET = False


# ----------------------------
# Utilities: time / output
# ----------------------------

def ts_now() -> str:
    return _dt.datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def out(msg: str) -> None:
    sys.stdout.write(msg + "\n")
    sys.stdout.flush()


def info(msg: str) -> None:
    if not QUIET:
        out(f"{ts_now()} {msg}")


def error(msg: str) -> None:
    out(f"{ts_now()} ERROR: {msg}")


def format_table(headers: List[str], rows: List[List[object]]) -> List[str]:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, v in enumerate(row):
            widths[i] = max(widths[i], len(str(v) if v is not None else "-"))
    lines = ["  " + "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))]
    lines.append("  " + "  ".join("-" * widths[i] for i in range(len(headers))))
    for row in rows:
        lines.append("  " + "  ".join((str(v) if v is not None else "-").ljust(widths[i]) for i, v in enumerate(row)))
    return lines


# ----------------------------
# Files
# ----------------------------

def default_output_path(input_path: str, decode: bool) -> str:
    base = input_path.rstrip("/\\")
    if decode:
        if base.endswith(STREAM_SUFFIX):
            base = base[: -len(STREAM_SUFFIX)]
        return base + DECODED_SUFFIX
    if base.endswith(".json"):
        base = base[: -len(".json")]
    return base + STREAM_SUFFIX


def write_text(path: str, text: str) -> None:
    # newline="" keeps END_STRING (\n) and ADD_STRING_RTL_POP (\r) untranslated.
    tmp = path + ".tmp"
    try:
        with open(tmp, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except (OSError, UnicodeError):
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    os.replace(tmp, path)


def read_stream(path: str) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


# ----------------------------
# Commands
# ----------------------------

def print_stats(table: Dict[str, Dict[str, str]], stream: str, codecs: List[str]) -> None:
    report = size_report(table, stream, codecs=codecs)
    out(f"Locales: {report['locales']}  Keys: {report['keys']}")
    out(f"JSON: {report['json_bytes']} bytes  Encoded: {report['encoded_bytes']} bytes  Gain: {report['gain_pct']:.1f}%")
    rows: List[List[object]] = []
    for codec, sizes in report["codecs"].items():  # type: ignore[union-attr]
        rows.append([codec, sizes["json"], sizes["encoded"]])
    if rows:
        out("")
        for line in format_table(["Codec", "JSON", "Encoded"], rows):
            out(line)
    counts = count_codes(stream)
    if counts:
        out("")
        code_rows: List[List[object]] = [[name, n] for name, n in sorted(counts.items())]
        for line in format_table(["Code", "Count"], code_rows):
            out(line)


def run_encode(args: argparse.Namespace, cfg: Dict[str, object]) -> int:
    table = load_input(args.input, cfg["rtl_locales"])  # type: ignore[arg-type]
    info(f"loaded {len(table)} locales from {args.input}")
    stream = encode_string_map(table)
    if args.stats:
        print_stats(table, stream, cfg["codecs"])  # type: ignore[arg-type]
        if not args.output:
            return 0
    output = args.output or default_output_path(args.input, decode=False)
    write_text(output, stream)
    info(f"encoded {len(stream)} code points -> {output}")
    return 0


def run_decode(args: argparse.Namespace, cfg: Dict[str, object]) -> int:
    stream = read_stream(args.input)
    table = decode_string_map(stream)
    info(f"decoded {len(table)} locales from {args.input}")
    if args.stats:
        print_stats(table, stream, cfg["codecs"])  # type: ignore[arg-type]
        if not args.output:
            return 0
    output = args.output or default_output_path(args.input, decode=True)
    indent = cfg.get("indent")
    write_text(output, json.dumps(table, ensure_ascii=False, indent=indent, sort_keys=True) + "\n")  # type: ignore[arg-type]
    info(f"wrote {output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    global QUIET

    ap = argparse.ArgumentParser(
        prog="packStrings.py",
        description="Encode a multi-locale string table into a compact string, or decode it back.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    ap.add_argument("input", nargs="?", help="JSON table file, string-file directory, or (with --decode) a stream file")
    ap.add_argument("-o", "--output", default=None, help=f"output file (default: INPUT with {STREAM_SUFFIX} or {DECODED_SUFFIX})")
    ap.add_argument("--decode", action="store_true", help="decode a stream file back into a JSON table")
    ap.add_argument("--stats", action="store_true", help="print a size report (writes output only with -o)")
    ap.add_argument("--config", default="packStrings.json", help="JSON config file (default: packStrings.json)")
    ap.add_argument("--rtl", action="append", default=None, metavar="LOCALE", help="right-to-left locale (repeatable, overrides config)")
    ap.add_argument("--quiet", action="store_true", help="less terminal output")
    ap.add_argument("--version", action="store_true", help="print version and exit")

    args = ap.parse_args(argv)

    if args.version:
        out(f"packStrings.py v{VERSION}")
        return 0
    if not args.input:
        error("INPUT is required")
        return 2
    if not os.path.exists(args.input):
        error(f"no such file or directory: {args.input}")
        return 2

    QUIET = bool(args.quiet)
    cfg, warnings = load_config(args.config)
    for w in warnings:
        out(f"{ts_now()} WARNING: {w}")
    if args.rtl:
        cfg["rtl_locales"] = list(args.rtl)

    try:
        if args.decode:
            return run_decode(args, cfg)
        return run_encode(args, cfg)
    except StringMapError as e:
        error(str(e))
        return 1
    except (OSError, UnicodeError) as e:
        error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
