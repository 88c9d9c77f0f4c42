# -*- coding: utf-8 -*-
"""Response assembly."""

from cds_hooks.assemblers.response import (
    ResponseAssembler,
    ResponseStats,
    create_response,
    assemble_response,
    create_empty_response,
    get_response_stats,
)

__all__ = [
    "ResponseAssembler",
    "ResponseStats",
    "create_response",
    "assemble_response",
    "create_empty_response",
    "get_response_stats",
]
