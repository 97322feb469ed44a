"""
app/parsers package marker.
"""

from app.parsers.file_parser import FileParser, detect_format

__all__ = [
    "FileParser",
    "detect_format",
]
