"""
app/validators package marker.
"""

from app.validators.record_validator import RecordValidator, parse_number
from app.validators.upload_validator import ALLOWED_EXTENSIONS, validate_upload

__all__ = [
    "ALLOWED_EXTENSIONS",
    "RecordValidator",
    "parse_number",
    "validate_upload",
]
