# -*- coding: utf-8 -*-
"""
Document Management Console Application Core Module
"""

from .config import Config

__all__ = ["Config"]
