#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import json
import os
from typing import Dict, List, Optional, Tuple

from .stats import SUPPORTED_CODECS

DEFAULTS: Dict[str, object] = {
    "rtl_locales": ["ar", "ar_SA", "fa", "he", "ur"],
    "codecs": list(SUPPORTED_CODECS),
    "indent": None,
}


def load_config(path: Optional[str]) -> Tuple[Dict[str, object], List[str]]:
    """Return (config, warnings). Missing or unusable files fall back to DEFAULTS."""
    cfg: Dict[str, object] = {k: (list(v) if isinstance(v, list) else v) for k, v in DEFAULTS.items()}
    warnings: List[str] = []
    if not path or not os.path.isfile(path):
        return cfg, warnings
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        warnings.append(f"config {path} ignored: {e}")
        return cfg, warnings
    if not isinstance(data, dict):
        warnings.append(f"config {path} ignored: top level must be an object")
        return cfg, warnings

    rtl = data.get("rtl_locales")
    if isinstance(rtl, list) and all(isinstance(x, str) for x in rtl):
        cfg["rtl_locales"] = list(rtl)
    elif rtl is not None:
        warnings.append("config: rtl_locales must be a list of strings")

    codecs = data.get("codecs")
    if isinstance(codecs, list):
        unknown = [c for c in codecs if c not in SUPPORTED_CODECS]
        if unknown:
            warnings.append(f"config: unknown codecs ignored: {', '.join(map(str, unknown))}")
        cfg["codecs"] = [c for c in codecs if c in SUPPORTED_CODECS]
    elif codecs is not None:
        warnings.append("config: codecs must be a list")

    indent = data.get("indent")
    if indent is None or (isinstance(indent, int) and not isinstance(indent, bool) and indent >= 0):
        cfg["indent"] = indent
    else:
        warnings.append("config: indent must be a non-negative integer or null")
    return cfg, warnings
