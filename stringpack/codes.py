#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

PUSH_TOKEN = "\x01"  # push token
PUSH_TOKEN_SLASH = "\x02"  # push f"{token}/"
PUSH_TOKEN_DOT = "\x03"  # push f"{token}."
POP = "\x04"
POP_PUSH_TOKEN = "\x05"
POP_PUSH_TOKEN_SLASH = "\x06"
POP_PUSH_TOKEN_DOT = "\x07"
SWITCH_LOCALE = "\x08"
START_STRING = "\x09"
END_STRING = "\x0a"  # also fills in locales without an explicit value
ADD_STRING = "\x0b"
ADD_STRING_LTR_POP = "\x0c"  # value is f"{CHAR_LTR}{literal}{CHAR_POP}"
ADD_STRING_RTL_POP = "\x0d"  # value is f"{CHAR_RTL}{literal}{CHAR_POP}"
ADD_STRING_COPY_LAST = "\x0e"
ADD_LOCALE = "\x0f"  # header only
ESCAPE = "\x10"

MAX_CONTROL_CODE_POINT = 0x10

CONTROL_CODES: Tuple[str, ...] = (
    PUSH_TOKEN,
    PUSH_TOKEN_SLASH,
    PUSH_TOKEN_DOT,
    POP,
    POP_PUSH_TOKEN,
    POP_PUSH_TOKEN_SLASH,
    POP_PUSH_TOKEN_DOT,
    SWITCH_LOCALE,
    START_STRING,
    END_STRING,
    ADD_STRING,
    ADD_STRING_LTR_POP,
    ADD_STRING_RTL_POP,
    ADD_STRING_COPY_LAST,
    ADD_LOCALE,
    ESCAPE,
)

CODE_NAMES: Dict[str, str] = {
    PUSH_TOKEN: "push",
    PUSH_TOKEN_SLASH: "push_slash",
    PUSH_TOKEN_DOT: "push_dot",
    POP: "pop",
    POP_PUSH_TOKEN: "pop_push",
    POP_PUSH_TOKEN_SLASH: "pop_push_slash",
    POP_PUSH_TOKEN_DOT: "pop_push_dot",
    SWITCH_LOCALE: "switch_locale",
    START_STRING: "start_string",
    END_STRING: "end_string",
    ADD_STRING: "add_string",
    ADD_STRING_LTR_POP: "add_string_ltr_pop",
    ADD_STRING_RTL_POP: "add_string_rtl_pop",
    ADD_STRING_COPY_LAST: "add_string_copy_last",
    ADD_LOCALE: "add_locale",
    ESCAPE: "escape",
}

PUSH_CODES = (PUSH_TOKEN, PUSH_TOKEN_SLASH, PUSH_TOKEN_DOT)
POP_PUSH_CODES = (POP_PUSH_TOKEN, POP_PUSH_TOKEN_SLASH, POP_PUSH_TOKEN_DOT)

# Bidi embedding characters (LRE / RLE / PDF)
CHAR_LTR = "\u202a"
CHAR_RTL = "\u202b"
CHAR_POP = "\u202c"

FALLBACK_LOCALE = "en"


class StringMapError(ValueError):
    pass


class StringMapFormatError(StringMapError):
    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        if offset is not None:
            message = f"{message} (at code point {offset})"
        super().__init__(message)
        self.offset = offset


class StringMapSelfCheckError(StringMapError):
    def __init__(self, locale: str, key: str) -> None:
        super().__init__(f"string map encoding failed, mismatch at {locale} {key}")
        self.locale = locale
        self.key = key


class MissingFallbackError(StringMapError):
    def __init__(self, key: str) -> None:
        super().__init__(f"no {FALLBACK_LOCALE!r} value for string key {key!r}")
        self.key = key


def code_name(code: str) -> str:
    return CODE_NAMES.get(code, f"U+{ord(code):04X}" if len(code) == 1 else "unknown")


def escape_literal(text: str) -> str:
    """Escape every code point that could be read back as a control code.

    U+0000 is escaped as well: the reader stops on any unescaped code point <= 0x10.
    """
    out = []
    for ch in text:
        if ord(ch) <= MAX_CONTROL_CODE_POINT:
            out.append(ESCAPE)
        out.append(ch)
    return "".join(out)


def read_literal(chars: Sequence[str], index: int) -> Tuple[str, int]:
    """Read literal data starting at `index`.

    Returns (text, index of the first unescaped control code or len(chars)).
    """
    out = []
    n = len(chars)
    i = index
    while i < n:
        ch = chars[i]
        if ord(ch) > MAX_CONTROL_CODE_POINT:
            out.append(ch)
            i += 1
        elif ch == ESCAPE:
            if i + 1 >= n:
                raise StringMapFormatError("escape at end of stream", offset=i)
            out.append(chars[i + 1])
            i += 2
        else:
            break
    return "".join(out), i
