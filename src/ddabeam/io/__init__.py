"""
Input/output of incident fields on dipoles.
"""

from .field_file import FIELD_HEADER, FieldReader, TextFieldReader, write_field

__all__ = [
    "FIELD_HEADER",
    "FieldReader",
    "TextFieldReader",
    "write_field",
]
