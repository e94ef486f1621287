"""
This module builds the student import template and exports persisted students
as JSON, CSV or an Excel workbook.
"""
import io
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from mappings import TEMPLATE_HEADERS, TEMPLATE_EXAMPLE_ROWS, EXPORT_COLUMNS
from records import STUDENT_KEY_PREFIX

TEMPLATE_FILENAME = 'student_import_template.csv'
CSV_MIMETYPE = 'text/csv'
JSON_MIMETYPE = 'application/json'
EXCEL_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


class UnsupportedFormatError(ValueError):
    """Raised when a template or export is requested in a format that is not implemented."""


@dataclass
class ExportResult:
    format: str
    content: Any
    count: int
    exported_at: str
    filename: str
    mimetype: str


def generate_template(fmt='csv'):
    """Returns the import template: the recognised header row plus two example students."""
    if (fmt or '').lower() != 'csv':
        raise UnsupportedFormatError(f"Unsupported template format: '{fmt}'. Only csv is available.")
    df = pd.DataFrame(TEMPLATE_EXAMPLE_ROWS, columns=TEMPLATE_HEADERS)
    return df.to_csv(index=False, lineterminator='\n')


def _to_frame(students):
    return pd.DataFrame(students, columns=EXPORT_COLUMNS).fillna('')


def _export_json(students):
    return students


def _export_csv(students):
    return _to_frame(students).to_csv(index=False, lineterminator='\n')


def _export_excel(students):
    df = _to_frame(students)
    output = io.BytesIO()

    with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
        df.to_excel(writer, index=False, sheet_name='Students')
        worksheet = writer.sheets['Students']

        for i, col in enumerate(df.columns):
            max_len = len(col) + 2
            worksheet.set_column(i, i, max_len)
    output.seek(0)
    return output.getvalue()


# format -> (writer, file extension, mimetype)
EXPORT_FORMATS = {
    'json': (_export_json, 'json', JSON_MIMETYPE),
    'csv': (_export_csv, 'csv', CSV_MIMETYPE),
    'excel': (_export_excel, 'xlsx', EXCEL_MIMETYPE),
    'xlsx': (_export_excel, 'xlsx', EXCEL_MIMETYPE),
}


def export_students(store, fmt, student_ids=None):
    """
    Serialises persisted students in the requested format.

    Args:
        store: Key-value store offering scan_prefix.
        fmt (str): One of 'json', 'csv', 'excel' or 'xlsx'.
        student_ids (list): Optional allow-list of record ids. None exports everyone;
            an empty list exports no one.

    Returns:
        ExportResult

    Raises:
        UnsupportedFormatError: for any other format. There is no fallback format.
        ValueError: if student_ids is given but is not a list of ids.
    """
    normalized = (fmt or '').strip().lower()
    if normalized not in EXPORT_FORMATS:
        supported = ', '.join(sorted(EXPORT_FORMATS))
        raise UnsupportedFormatError(f"Unsupported export format: '{fmt}'. Supported formats: {supported}.")
    writer, extension, mimetype = EXPORT_FORMATS[normalized]

    students = store.scan_prefix(STUDENT_KEY_PREFIX)
    if student_ids is not None:
        if not isinstance(student_ids, (list, tuple, set)):
            raise ValueError("filters.students must be a list of student ids")
        allowed = {i for i in student_ids if isinstance(i, str)}
        students = [s for s in students if s.get('id') in allowed]

    now = datetime.now(timezone.utc)
    return ExportResult(
        format=normalized,
        content=writer(students),
        count=len(students),
        exported_at=now.isoformat(),
        filename=f"students_{now.date().isoformat()}.{extension}",
        mimetype=mimetype,
    )
