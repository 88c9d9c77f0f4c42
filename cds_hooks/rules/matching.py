# -*- coding: utf-8 -*-
"""
Name matching shared by all rule engines.

Names are reduced to lowercase alphanumeric tokens, then compared with a
substring test in either direction: "amoxicillin 500 mg" matches the table
token "amoxicillin", and the short order name "warfarin" matches a table
token such as "warfarinsodium".
"""

import re
from typing import Iterable, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]")

__all__ = ["normalize", "names_match", "first_match"]


def normalize(text: Optional[str]) -> str:
    return _NON_ALNUM.sub("", (text or "").lower())


def names_match(a: str, b: str) -> bool:
    """Either-direction substring test on already normalized tokens."""
    if not a or not b:
        return False
    return a in b or b in a


def first_match(token: str, candidates: Iterable[str]) -> Optional[str]:
    """First candidate (normalized) matching ``token``, or None."""
    for candidate in candidates:
        if names_match(token, normalize(candidate)):
            return candidate
    return None
