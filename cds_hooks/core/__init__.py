# -*- coding: utf-8 -*-
"""Core models: wire format, requests and typed clinical records."""
