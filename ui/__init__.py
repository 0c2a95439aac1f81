# -*- coding: utf-8 -*-
"""Presentation-side packages (UI-free wizard cores)."""
