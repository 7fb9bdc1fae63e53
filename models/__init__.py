# -*- coding: utf-8 -*-
"""
DatForge Models Package

Document tree produced by the parsers and the loaded-library wrapper.
LibraryModel lives in models.library_model (it depends on the parsers).
"""

from models.dat_document import DatDocument, DatClass, DatRow, FieldMap
from models.library import LibraryRef

__all__ = ['DatDocument', 'DatClass', 'DatRow', 'FieldMap', 'LibraryRef']
