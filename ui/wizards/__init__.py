# -*- coding: utf-8 -*-
"""Wizards: shared framework and concrete wizard cores."""
