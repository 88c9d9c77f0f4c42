# -*- coding: utf-8 -*-
"""Utility helpers for the CDS Hooks service."""
