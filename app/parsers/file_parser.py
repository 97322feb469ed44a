"""
app/parsers/file_parser.py

Decodes uploaded files into ordered raw records.

Every format produces ``list[dict[str, str]]``: one mapping per data row,
keyed by the header names as they appear in the file (surrounding
whitespace removed), with trimmed string values.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

import pandas as pd

from app.domain.ingestion import RawRecord
from app.errors import ConfigurationError, ParseError

logger = logging.getLogger(__name__)

CSV_FORMAT = "csv"
JSON_FORMAT = "json"
XLSX_FORMAT = "xlsx"
XLS_FORMAT = "xls"

_FORMAT_BY_EXTENSION: dict[str, str] = {
    ".csv": CSV_FORMAT,
    ".json": JSON_FORMAT,
    ".xlsx": XLSX_FORMAT,
    ".xls": XLS_FORMAT,
}

_FORMAT_BY_CONTENT_TYPE: dict[str, str] = {
    "text/csv": CSV_FORMAT,
    "application/csv": CSV_FORMAT,
    "application/json": JSON_FORMAT,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": XLSX_FORMAT,
    "application/vnd.ms-excel": XLS_FORMAT,
}

_EXCEL_ENGINES: dict[str, str] = {
    XLSX_FORMAT: "openpyxl",
    XLS_FORMAT: "xlrd",
}


def detect_format(file_name: str | None, content_type: str | None = None) -> str:
    """
    Pick the decoder by file extension, then by declared content type.
    """

    extension = Path(file_name or "").suffix.lower()
    if extension in _FORMAT_BY_EXTENSION:
        return _FORMAT_BY_EXTENSION[extension]

    normalized_type = (content_type or "").split(";", 1)[0].strip().lower()
    if normalized_type in _FORMAT_BY_CONTENT_TYPE:
        return _FORMAT_BY_CONTENT_TYPE[normalized_type]

    raise ConfigurationError(
        f"File type '{extension or normalized_type or 'unknown'}' not supported. "
        f"Use: {', '.join(sorted(_FORMAT_BY_EXTENSION))}"
    )


class FileParser:
    """
    Stateless decoder for CSV, JSON and spreadsheet exports.
    """

    def parse(
        self,
        content: bytes,
        *,
        file_name: str | None = None,
        content_type: str | None = None,
    ) -> list[RawRecord]:
        file_format = detect_format(file_name, content_type)
        if file_format == CSV_FORMAT:
            records = self.parse_csv(content)
        elif file_format == JSON_FORMAT:
            records = self.parse_json(content)
        else:
            records = self.parse_spreadsheet(content, engine=_EXCEL_ENGINES[file_format])

        logger.info("Parsed %d records from %s file=%r", len(records), file_format, file_name)
        return records

    def parse_csv(self, content: bytes) -> list[RawRecord]:
        text = self._decode(content)
        reader = csv.reader(io.StringIO(text, newline=""), strict=True)

        try:
            headers: list[str] | None = None
            records: list[RawRecord] = []
            for row in reader:
                if self._is_blank_row(row):
                    continue
                if headers is None:
                    headers = self._normalize_headers(row, line=reader.line_num)
                    continue
                if len(row) != len(headers):
                    raise ParseError(
                        f"Expected {len(headers)} columns but found {len(row)}",
                        line=reader.line_num,
                    )
                records.append(
                    {header: value.strip() for header, value in zip(headers, row)}
                )
        except csv.Error as exc:
            raise ParseError(f"Invalid CSV format: {exc}", line=reader.line_num) from exc

        if headers is None:
            raise ParseError("CSV header row is missing.")
        return records

    def parse_json(self, content: bytes) -> list[RawRecord]:
        try:
            document = json.loads(self._decode(content))
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON: {exc.msg}", line=exc.lineno) from exc

        if isinstance(document, dict) and isinstance(document.get("data"), list):
            document = document["data"]
        if not isinstance(document, list):
            raise ParseError("JSON upload must be an array of objects or an object with a 'data' array.")

        records: list[RawRecord] = []
        for position, item in enumerate(document, start=1):
            if not isinstance(item, dict):
                raise ParseError(f"JSON element {position} is not an object.")
            record = {str(key).strip(): self._stringify(value) for key, value in item.items()}
            if self._is_blank_row(record.values()):
                continue
            records.append(record)
        return records

    def parse_spreadsheet(self, content: bytes, *, engine: str) -> list[RawRecord]:
        try:
            frame = pd.read_excel(
                io.BytesIO(content),
                sheet_name=0,
                header=None,
                dtype=str,
                keep_default_na=False,
                engine=engine,
            )
        except Exception as exc:  # noqa: BLE001 - engines raise assorted error types
            raise ParseError(f"Invalid spreadsheet: {exc}") from exc

        if frame.empty:
            return []

        # header=None keeps pandas from renaming duplicate headers to "SKU.1".
        rows = frame.itertuples(index=False, name=None)
        headers = self._normalize_headers([self._stringify(value) for value in next(rows)], line=1)
        records: list[RawRecord] = []
        for values in rows:
            row = [self._stringify(value) for value in values]
            if self._is_blank_row(row):
                continue
            records.append(dict(zip(headers, row)))
        return records

    @staticmethod
    def _decode(content: bytes) -> str:
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError("File must be UTF-8 encoded.") from exc

    @staticmethod
    def _normalize_headers(row: Sequence[str], *, line: int) -> list[str]:
        headers = [header.strip() for header in row]
        seen: set[str] = set()
        for position, header in enumerate(headers, start=1):
            if not header:
                raise ParseError(f"Header in column {position} is empty", line=line)
            if header in seen:
                raise ParseError(f"Duplicate column header '{header}'", line=line)
            seen.add(header)
        return headers

    @staticmethod
    def _is_blank_row(values: Iterable[str]) -> bool:
        return all(not str(value).strip() for value in values)

    @staticmethod
    def _stringify(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (dict, list)):
            return json.dumps(value, sort_keys=True)
        if isinstance(value, float) and pd.isna(value):
            return ""
        return str(value).strip()
