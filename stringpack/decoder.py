#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Set

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
    POP_PUSH_CODES,
    POP_PUSH_TOKEN,
    POP_PUSH_TOKEN_DOT,
    POP_PUSH_TOKEN_SLASH,
    PUSH_CODES,
    PUSH_TOKEN,
    PUSH_TOKEN_DOT,
    PUSH_TOKEN_SLASH,
    START_STRING,
    SWITCH_LOCALE,
    StringMapFormatError,
    code_name,
    read_literal,
)

TOKEN_SUFFIX: Dict[str, str] = {
    PUSH_TOKEN: "",
    PUSH_TOKEN_SLASH: "/",
    PUSH_TOKEN_DOT: ".",
    POP_PUSH_TOKEN: "",
    POP_PUSH_TOKEN_SLASH: "/",
    POP_PUSH_TOKEN_DOT: ".",
}


class Phase(Enum):
    HEADER = "header"  # ADD_LOCALE only
    BETWEEN_KEYS = "between_keys"  # push/pop, START_STRING
    IN_STRING = "in_string"  # SWITCH_LOCALE, ADD_STRING*, END_STRING


class DecoderState:
    """Mirror of the encoder's state transitions; builds the string map."""

    def __init__(self) -> None:
        self.string_map: Dict[str, Dict[str, str]] = {}
        self.locales: List[str] = []
        self.stack: List[str] = []
        self.current_locale: Optional[str] = None
        self.current_value: Optional[str] = None  # for ADD_STRING_COPY_LAST
        self.fallback_value: Optional[str] = None  # English value of the open key
        self.seen_locales: Set[str] = set()
        self.string_key: Optional[str] = None
        self.phase = Phase.HEADER

    def _require(self, code: str, offset: int, *phases: Phase) -> None:
        if self.phase not in phases:
            raise StringMapFormatError(
                f"{code_name(code)} is not allowed in {self.phase.value}", offset=offset
            )

    def add_locale(self, locale: str, offset: int) -> None:
        self._require(ADD_LOCALE, offset, Phase.HEADER)
        if locale in self.string_map:
            raise StringMapFormatError(f"duplicate locale {locale!r}", offset=offset)
        self.string_map[locale] = {}
        self.locales.append(locale)

    def pop(self, offset: int) -> None:
        self._require(POP, offset, Phase.HEADER, Phase.BETWEEN_KEYS)
        if not self.stack:
            raise StringMapFormatError("pop from empty stack", offset=offset)
        self.stack.pop()
        self.phase = Phase.BETWEEN_KEYS

    def push(self, token: str, offset: int) -> None:
        self._require(PUSH_TOKEN, offset, Phase.HEADER, Phase.BETWEEN_KEYS)
        self.stack.append(token)
        self.phase = Phase.BETWEEN_KEYS

    def switch_locale(self, locale: str, offset: int) -> None:
        self._require(SWITCH_LOCALE, offset, Phase.IN_STRING)
        if locale not in self.string_map:
            raise StringMapFormatError(f"unknown locale {locale!r}", offset=offset)
        self.current_locale = locale

    def start_string(self, offset: int) -> None:
        self._require(START_STRING, offset, Phase.HEADER, Phase.BETWEEN_KEYS)
        self.seen_locales.clear()
        self.fallback_value = None
        self.string_key = "".join(self.stack)
        self.phase = Phase.IN_STRING

    def add_string(self, value: str, offset: int, code: str = ADD_STRING) -> None:
        self._require(code, offset, Phase.IN_STRING)
        locale = self.current_locale
        if locale is None:
            raise StringMapFormatError("string added before any locale switch", offset=offset)
        self.current_value = value
        self.string_map[locale][self.string_key] = value  # type: ignore[index]
        if locale == FALLBACK_LOCALE:
            self.fallback_value = value
        self.seen_locales.add(locale)

    def add_string_copy_last(self, offset: int) -> None:
        self._require(ADD_STRING_COPY_LAST, offset, Phase.IN_STRING)
        if self.current_value is None:
            raise StringMapFormatError("copy of last string before any string", offset=offset)
        self.add_string(self.current_value, offset, ADD_STRING_COPY_LAST)

    def end_string(self, offset: int) -> None:
        self._require(END_STRING, offset, Phase.IN_STRING)
        missing = [locale for locale in self.locales if locale not in self.seen_locales]
        if missing and self.fallback_value is None:
            raise StringMapFormatError(
                f"no {FALLBACK_LOCALE!r} value for {self.string_key!r}", offset=offset
            )
        for locale in missing:
            self.string_map[locale][self.string_key] = self.fallback_value  # type: ignore[index,assignment]
        self.phase = Phase.BETWEEN_KEYS

    def finish(self, offset: int) -> Dict[str, Dict[str, str]]:
        if self.phase is Phase.IN_STRING:
            raise StringMapFormatError("stream ends inside a string block", offset=offset)
        return self.string_map


def decode_string_map(stream: str) -> Dict[str, Dict[str, str]]:
    """Decode a compact stream back into map[locale][string_key] => text.

    Raises StringMapFormatError on any malformed or out-of-order input;
    nothing partial is returned.
    """
    if not isinstance(stream, str):
        raise StringMapFormatError("stream must be str")

    chars = list(stream)  # code points, never split surrogate pairs
    state = DecoderState()
    i = 0
    n = len(chars)
    while i < n:
        offset = i
        code = chars[i]
        i += 1
        if code in PUSH_CODES or code in POP_PUSH_CODES:
            if code in POP_PUSH_CODES:
                state.pop(offset)
            token, i = read_literal(chars, i)
            state.push(token + TOKEN_SUFFIX[code], offset)
        elif code == POP:
            state.pop(offset)
        elif code == SWITCH_LOCALE:
            locale, i = read_literal(chars, i)
            state.switch_locale(locale, offset)
        elif code == START_STRING:
            state.start_string(offset)
        elif code == END_STRING:
            state.end_string(offset)
        elif code == ADD_STRING:
            value, i = read_literal(chars, i)
            state.add_string(value, offset)
        elif code == ADD_STRING_LTR_POP:
            value, i = read_literal(chars, i)
            state.add_string(CHAR_LTR + value + CHAR_POP, offset, code)
        elif code == ADD_STRING_RTL_POP:
            value, i = read_literal(chars, i)
            state.add_string(CHAR_RTL + value + CHAR_POP, offset, code)
        elif code == ADD_STRING_COPY_LAST:
            state.add_string_copy_last(offset)
        elif code == ADD_LOCALE:
            locale, i = read_literal(chars, i)
            state.add_locale(locale, offset)
        else:
            raise StringMapFormatError(f"unrecognized code {code_name(code)}", offset=offset)
    return state.finish(n)
