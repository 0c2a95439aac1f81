# -*- coding: utf-8 -*-
"""
Document Management Console Utility Module
"""

from .logger import get_logger, setup_logger
from .datetime_utils import parse_date, normalize_date, is_date_in_range, to_date_isoformat

__all__ = [
    "get_logger",
    "setup_logger",
    "parse_date",
    "normalize_date",
    "is_date_in_range",
    "to_date_isoformat",
]
