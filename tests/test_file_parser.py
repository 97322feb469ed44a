from __future__ import annotations

import io
import json

import pandas as pd
import pytest

from app.errors import ConfigurationError, ParseError
from app.parsers.file_parser import FileParser, detect_format


@pytest.fixture
def parser() -> FileParser:
    return FileParser()


def test_detect_format_prefers_extension() -> None:
    assert detect_format("export.CSV", "application/json") == "csv"
    assert detect_format("export.xlsx") == "xlsx"
    assert detect_format("export.xls") == "xls"
    assert detect_format("blob", "application/json; charset=utf-8") == "json"


def test_detect_format_rejects_unknown_type() -> None:
    with pytest.raises(ConfigurationError):
        detect_format("notes.txt", "text/plain")


def test_csv_trims_headers_and_values_and_skips_blank_rows(parser: FileParser) -> None:
    content = b" SKU , Location ID ,On Hand Qty\r\n A-1 , L1 , 10 \r\n\r\n,,\r\nA-2,L2,5\r\n"

    records = parser.parse(content, file_name="inventory.csv")

    assert records == [
        {"SKU": "A-1", "Location ID": "L1", "On Hand Qty": "10"},
        {"SKU": "A-2", "Location ID": "L2", "On Hand Qty": "5"},
    ]


def test_csv_handles_quoted_commas_and_bom(parser: FileParser) -> None:
    content = '\ufeffsku,reason\nA1,"damaged, water"\n'.encode("utf-8")

    records = parser.parse(content, file_name="adjustments.csv")

    assert records == [{"sku": "A1", "reason": "damaged, water"}]


def test_csv_header_only_yields_no_records(parser: FileParser) -> None:
    assert parser.parse_csv(b"sku,location\n") == []


def test_csv_column_count_mismatch_reports_line(parser: FileParser) -> None:
    content = b"sku,location,quantity\nA1,L1,3\nA2,L2\n"

    with pytest.raises(ParseError) as excinfo:
        parser.parse_csv(content)

    assert excinfo.value.line == 3
    assert "line 3" in excinfo.value.message


def test_csv_malformed_quoting_raises_parse_error(parser: FileParser) -> None:
    with pytest.raises(ParseError):
        parser.parse_csv(b'sku,location\n"A1"x,L1\n')


def test_csv_duplicate_header_raises_parse_error(parser: FileParser) -> None:
    with pytest.raises(ParseError) as excinfo:
        parser.parse_csv(b"sku,sku\nA1,A2\n")

    assert "Duplicate column header" in excinfo.value.message


def test_csv_non_utf8_raises_parse_error(parser: FileParser) -> None:
    with pytest.raises(ParseError):
        parser.parse_csv("sku\nÄ1\n".encode("utf-16"))


def test_json_array_and_data_wrapper(parser: FileParser) -> None:
    rows = [{"sku": "A1", "quantity": 4, "active": True}, {"sku": " A2 ", "quantity": None}]

    direct = parser.parse(json.dumps(rows).encode(), file_name="inv.json")
    wrapped = parser.parse(json.dumps({"data": rows}).encode(), file_name="inv.json")

    assert direct == wrapped
    assert direct == [
        {"sku": "A1", "quantity": "4", "active": "true"},
        {"sku": "A2", "quantity": ""},
    ]


def test_json_rejects_scalar_elements(parser: FileParser) -> None:
    with pytest.raises(ParseError):
        parser.parse_json(b'[{"sku": "A1"}, 3]')


def test_json_rejects_invalid_document(parser: FileParser) -> None:
    with pytest.raises(ParseError):
        parser.parse_json(b'{"sku": ')


def test_xlsx_reads_first_sheet_as_strings(parser: FileParser) -> None:
    buffer = io.BytesIO()
    frame = pd.DataFrame(
        {
            "SKU": ["A1", "A2", None],
            "On Hand Qty": ["10", "7", None],
        }
    )
    frame.to_excel(buffer, index=False, engine="openpyxl")

    records = parser.parse(buffer.getvalue(), file_name="inventory.xlsx")

    assert records == [
        {"SKU": "A1", "On Hand Qty": "10"},
        {"SKU": "A2", "On Hand Qty": "7"},
    ]


def test_corrupt_spreadsheet_raises_parse_error(parser: FileParser) -> None:
    with pytest.raises(ParseError):
        parser.parse(b"not really a workbook", file_name="inventory.xlsx")


def test_xlsx_duplicate_header_raises_parse_error(parser: FileParser) -> None:
    buffer = io.BytesIO()
    frame = pd.DataFrame([["SKU", "SKU"], ["A1", "A2"]])
    frame.to_excel(buffer, index=False, header=False, engine="openpyxl")

    with pytest.raises(ParseError) as excinfo:
        parser.parse(buffer.getvalue(), file_name="inventory.xlsx")

    assert "Duplicate column header 'SKU'" in excinfo.value.message
    assert excinfo.value.line == 1
