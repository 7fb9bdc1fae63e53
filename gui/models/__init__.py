# -*- coding: utf-8 -*-
"""
gui/models/__init__.py - Qt item models
"""

from gui.models.dat_table_model import DatTableModel, ColorCache

__all__ = [
    'DatTableModel',
    'ColorCache',
]
