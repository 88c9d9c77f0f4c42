# -*- coding: utf-8 -*-
"""CDS Hooks clinical decision support service."""

__version__ = "1.0.0"
