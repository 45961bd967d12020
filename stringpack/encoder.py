#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Compact encoding of map[locale][string_key] => text.

The stream is stateful and takes the approximate form of:

    ( ADD_LOCALE locale )+
    for each string key (sorted):
        ( POP | PUSH* token )*
        START_STRING
        for en and every locale with a non-en value (ordered by value):
            ( SWITCH_LOCALE locale )?
            ( ADD_STRING text | ADD_STRING_COPY_LAST )
        END_STRING

The string key is always "".join(stack). Locales without an explicit value
for a key get the English value at END_STRING. The last-used locale and the
last-written value carry over between keys, so a single translation often
needs no SWITCH_LOCALE and shared translations collapse to COPY_LAST.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Mapping, Optional, Tuple

from .codes import (
    ADD_LOCALE,
    ADD_STRING,
    ADD_STRING_COPY_LAST,
    ADD_STRING_LTR_POP,
    ADD_STRING_RTL_POP,
    CHAR_LTR,
    CHAR_POP,
    CHAR_RTL,
    END_STRING,
    FALLBACK_LOCALE,
    POP,
    POP_PUSH_TOKEN,
    POP_PUSH_TOKEN_DOT,
    POP_PUSH_TOKEN_SLASH,
    PUSH_TOKEN,
    PUSH_TOKEN_DOT,
    PUSH_TOKEN_SLASH,
    START_STRING,
    SWITCH_LOCALE,
    MissingFallbackError,
    StringMapError,
    StringMapSelfCheckError,
    escape_literal,
)
from .decoder import decode_string_map

StringTable = Mapping[str, Optional[Mapping[str, str]]]

# A 1-character shared prefix is not worth its own push/pop pair.
MIN_SHARED_PREFIX = 2


class LastOp(Enum):
    POP = "pop"
    OTHER = "other"


class EncoderState:
    """Output buffer plus the prefix stack and locale/value context.

    Every emission is one piece in `_pieces`, so a trailing POP can be
    replaced by a fused POP+PUSH code without scanning the output.
    """

    def __init__(self) -> None:
        self._pieces: List[str] = []
        self.stack: List[str] = []
        self.current_locale: Optional[str] = None
        self.current_value: Optional[str] = None
        self.last_op = LastOp.OTHER

    def key_prefix(self) -> str:
        return "".join(self.stack)

    def getvalue(self) -> str:
        return "".join(self._pieces)

    def _emit(self, code: str, literal: Optional[str] = None, op: LastOp = LastOp.OTHER) -> None:
        if literal is None:
            self._pieces.append(code)
        else:
            self._pieces.append(code + escape_literal(literal))
        self.last_op = op

    def add_locale(self, locale: str) -> None:
        self._emit(ADD_LOCALE, locale)

    def push(self, token: str) -> None:
        self.stack.append(token)
        fused = self.last_op is LastOp.POP
        if fused:
            self._pieces.pop()
        if token.endswith("/"):
            token = token[:-1]
            code = POP_PUSH_TOKEN_SLASH if fused else PUSH_TOKEN_SLASH
        elif token.endswith("."):
            token = token[:-1]
            code = POP_PUSH_TOKEN_DOT if fused else PUSH_TOKEN_DOT
        else:
            code = POP_PUSH_TOKEN if fused else PUSH_TOKEN
        self._emit(code, token)

    def pop(self) -> None:
        self.stack.pop()
        self._emit(POP, op=LastOp.POP)

    def start_string(self) -> None:
        self._emit(START_STRING)

    def end_string(self) -> None:
        self._emit(END_STRING)

    def switch_locale(self, locale: str) -> None:
        self.current_locale = locale
        self._emit(SWITCH_LOCALE, locale)

    def add_string_copy_last(self) -> None:
        self._emit(ADD_STRING_COPY_LAST)

    def add_string(self, value: str) -> None:
        self.current_value = value
        if value.startswith(CHAR_LTR) and value.endswith(CHAR_POP):
            self._emit(ADD_STRING_LTR_POP, value[1:-1])
        elif value.startswith(CHAR_RTL) and value.endswith(CHAR_POP):
            self._emit(ADD_STRING_RTL_POP, value[1:-1])
        else:
            self._emit(ADD_STRING, value)


def _match_length(a: str, b: str) -> int:
    i = 0
    n = min(len(a), len(b))
    while i < n and a[i] == b[i]:
        i += 1
    return i


def _collect(table: StringTable) -> Tuple[List[str], List[str]]:
    """Return (sorted locales, sorted string keys), validating the table."""
    if not isinstance(table, Mapping):
        raise StringMapError("string table must be a mapping")
    locales: List[str] = []
    keys = set()
    for locale, strings in table.items():
        if strings is None:
            continue
        if not isinstance(locale, str):
            raise StringMapError(f"locale must be str, got {type(locale).__name__}")
        if not isinstance(strings, Mapping):
            raise StringMapError(f"strings for {locale!r} must be a mapping")
        for key, value in strings.items():
            if not isinstance(key, str):
                raise StringMapError(f"string key must be str in {locale!r}")
            if not isinstance(value, str):
                raise StringMapError(f"value for {locale} {key} must be str")
            keys.add(key)
        locales.append(locale)
    fallback = table.get(FALLBACK_LOCALE) or {}
    string_keys = sorted(keys)
    for key in string_keys:
        if key not in fallback:
            raise MissingFallbackError(key)
    return sorted(locales), string_keys


def _encode_key(state: EncoderState, key: str, next_key: Optional[str]) -> None:
    while not key.startswith(state.key_prefix()):
        state.pop()

    # Whittled down as tokens are pushed; starts as the delta from the previous key.
    remainder = key[len(state.key_prefix()):]

    # Namespace, e.g. "FRICTION/"
    if "/" in remainder:
        token = remainder.split("/", 1)[0] + "/"
        state.push(token)
        remainder = remainder[len(token):]

    while "." in remainder:
        token = remainder.split(".", 1)[0] + "."
        state.push(token)
        remainder = remainder[len(token):]

    if next_key is not None:
        shared = _match_length(remainder, next_key[len(state.key_prefix()):])
        if shared >= MIN_SHARED_PREFIX:
            token = remainder[:shared]
            state.push(token)
            remainder = remainder[len(token):]

    if remainder:
        state.push(remainder)


def _encode_values(state: EncoderState, table: StringTable, locales: List[str], key: str) -> None:
    default_value = table[FALLBACK_LOCALE][key]  # type: ignore[index]

    entries: List[Tuple[str, str]] = []
    for locale in locales:
        if locale == FALLBACK_LOCALE:
            entries.append((locale, default_value))
            continue
        value = table[locale].get(key)  # type: ignore[union-attr]
        if value is not None and value != default_value:
            entries.append((locale, value))

    # Equal values become adjacent so they can use COPY_LAST.
    entries.sort(key=lambda entry: entry[1])

    state.start_string()
    for locale, value in entries:
        if locale != state.current_locale:
            state.switch_locale(locale)
        if value == state.current_value:
            state.add_string_copy_last()
        else:
            state.add_string(value)
    state.end_string()


def verify_round_trip(table: StringTable, stream: str) -> None:
    decoded = decode_string_map(stream)
    for locale, strings in table.items():
        if strings is None:
            continue
        decoded_strings = decoded.get(locale, {})
        for key, value in strings.items():
            if decoded_strings.get(key) != value:
                raise StringMapSelfCheckError(locale, key)


def encode_string_map(table: StringTable) -> str:
    """Encode map[locale][string_key] => text into a compact string.

    Raises MissingFallbackError when a key has no English value, and
    StringMapSelfCheckError if the output does not decode back to the input.
    """
    locales, string_keys = _collect(table)

    state = EncoderState()
    for locale in locales:
        state.add_locale(locale)

    for i, key in enumerate(string_keys):
        next_key = string_keys[i + 1] if i + 1 < len(string_keys) else None
        _encode_key(state, key, next_key)
        _encode_values(state, table, locales, key)

    stream = state.getvalue()
    verify_round_trip(table, stream)
    return stream
