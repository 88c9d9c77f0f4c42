# -*- coding: utf-8 -*-
"""API routers."""
