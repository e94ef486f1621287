"""
This module turns an uploaded delimited-text file into candidate student records.
"""
import logging
import os
import re

from mappings import HEADER_RULES, LOWERCASE_FIELDS, REQUIRED_FIELDS
from records import CandidateRecord

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = ('.xlsx', '.xls')
EXCEL_GUIDANCE = (
    "Excel file detected. Please save the sheet as CSV and upload it again "
    "(in Excel: File > Save As > CSV (Comma delimited))."
)


class UnsupportedFileTypeError(ValueError):
    """Raised for uploads whose format cannot be parsed."""


def sanitize_column_name(column_name):
    """
    Converts a header to lowercase and collapses runs of whitespace into underscores.
    """
    return re.sub(r'\s+', '_', str(column_name).strip().lower())


def match_header(header):
    """Returns the record field for a sanitized header, or None when no rule claims it."""
    for predicate, field_name in HEADER_RULES:
        if predicate(header):
            return field_name
    return None


def _unquote(value):
    # One leading and one trailing quote character, independently
    return re.sub(r'^["\']|["\']$', '', value.strip())


def parse_students_csv(text, delimiter=','):
    """
    Parses delimited text with one header line into CandidateRecords.

    Rows whose field count differs from the header are skipped, as are rows missing
    first name, last name, class or roll number. Returns an empty list when the
    text has fewer than two non-blank lines.
    """
    lines = [line for line in (text or '').split('\n') if line.strip()]
    if len(lines) < 2:
        return []

    headers = [sanitize_column_name(h) for h in lines[0].split(delimiter)]
    column_fields = [match_header(h) for h in headers]

    candidates = []
    for line in lines[1:]:
        values = [v.strip() for v in line.split(delimiter)]
        if len(values) != len(headers):
            continue

        row = {}
        for field_name, raw_value in zip(column_fields, values):
            if field_name is None:
                continue
            value = _unquote(raw_value)
            if field_name in LOWERCASE_FIELDS:
                value = value.lower()
            row[field_name] = value

        if not all(row.get(name) for name in REQUIRED_FIELDS):
            continue
        candidates.append(CandidateRecord(**row))

    return candidates


def read_upload(file_name, raw_bytes, delimiter=','):
    """
    Reads an uploaded file and returns its candidate records.

    Only CSV is parsed. Excel workbooks are recognised by extension and rejected
    with instructions for converting them.
    """
    file_extension = os.path.splitext(file_name or '')[1].lower()

    if file_extension in EXCEL_EXTENSIONS:
        raise UnsupportedFileTypeError(EXCEL_GUIDANCE)
    if file_extension != '.csv':
        raise UnsupportedFileTypeError("Unsupported file type. Please upload a CSV (.csv) file.")

    try:
        text = raw_bytes.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise ValueError("CSV file encoding is not supported. Please export as UTF-8.") from e

    candidates = parse_students_csv(text, delimiter=delimiter)
    logger.info("Parsed %d candidate records from %s", len(candidates), file_name)
    return candidates
