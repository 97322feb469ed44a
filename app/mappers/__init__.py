"""
app/mappers package marker.
"""

from app.mappers.column_mapper import ColumnMapper

__all__ = [
    "ColumnMapper",
]
