# -*- coding: utf-8 -*-
"""Configuration module for the CDS Hooks service."""

from .settings import settings
from .constants import (
    INDICATOR_CRITICAL,
    INDICATOR_WARNING,
    INDICATOR_INFO,
    INDICATOR_ORDER,
    SOURCE_LABELS,
    GUIDELINE_SOURCES,
)

__all__ = [
    "settings",
    "INDICATOR_CRITICAL",
    "INDICATOR_WARNING",
    "INDICATOR_INFO",
    "INDICATOR_ORDER",
    "SOURCE_LABELS",
    "GUIDELINE_SOURCES",
]
