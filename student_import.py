"""
This module persists candidate student records into the key-value store.

The import is best-effort: every record is attempted, and a failure on one
record (missing fields, a duplicate identity key, or any error while building
or writing it) is reported for that record without stopping the rest of the
batch.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from records import STUDENT_KEY_PREFIX, StudentRecord, identity_key_for

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    file_name: Optional[str] = None
    imported_records: List[dict] = field(default_factory=list)
    failed_records: List[dict] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def imported(self):
        return len(self.imported_records)

    @property
    def failed(self):
        return len(self.failed_records)

    @property
    def success(self):
        # Any imported record makes the call a success, even alongside failures
        return self.imported > 0

    @property
    def message(self):
        if not self.success:
            return "Failed to import any students"
        message = f"Successfully imported {self.imported} students"
        if self.failed:
            message += f", {self.failed} failed"
        return message

    def fail(self, candidate, reason):
        self.failed_records.append(candidate.to_dict())
        self.errors.append(reason)

    def to_json(self):
        return {
            'success': self.success,
            'imported': self.imported,
            'failed': self.failed,
            'message': self.message,
            'fileName': self.file_name,
            'importedRecords': self.imported_records,
            'failedRecords': self.failed_records,
            'errors': self.errors,
        }


def import_students(store, candidates, file_name=None, email_domain='school.edu', default_nationality='Indian'):
    """
    Persists each candidate as a StudentRecord under 'student:<id>'.

    Required fields and identity keys are checked again here against the live
    store, since its contents may have changed after validation. Keys of records
    imported earlier in the same call count as taken.

    Note: there is no compare-and-swap on the store, so two imports running at the
    same time can both accept the same identity key.

    Args:
        store: Key-value store offering get/set/delete/scan_prefix.
        candidates (list): CandidateRecords in input order.
        file_name (str): Name of the uploaded file, for logging and the report.
        email_domain (str): Domain for generated fallback email addresses.
        default_nationality (str): Nationality applied when none is supplied.

    Returns:
        ImportReport
    """
    report = ImportReport(file_name=file_name)
    taken_keys = {identity_key_for(student) for student in store.scan_prefix(STUDENT_KEY_PREFIX)}

    for candidate in candidates:
        if not candidate.first_name or not candidate.last_name:
            report.fail(candidate, f"Missing name for student: {json.dumps(candidate.to_dict())}")
            continue

        if not candidate.class_name or not candidate.roll_number:
            report.fail(candidate, f"Missing class/roll number for {candidate.first_name} {candidate.last_name}")
            continue

        key = identity_key_for(candidate)
        if key in taken_keys:
            report.fail(
                candidate,
                f"Duplicate roll number: {candidate.roll_number} in class "
                f"{candidate.class_name}-{candidate.section or 'A'}"
            )
            continue

        try:
            student = StudentRecord.from_candidate(
                candidate, email_domain=email_domain, default_nationality=default_nationality
            )
            store.set(student.key, student.to_dict())
        except Exception as e:
            logger.exception("Could not persist %s", candidate.display_name)
            report.fail(candidate, f"Failed to import {candidate.display_name}: {e}")
            continue

        taken_keys.add(key)
        report.imported_records.append(student.to_dict())

    logger.info(
        "Import completed - File: %s, Imported: %d, Failed: %d",
        file_name, report.imported, report.failed
    )
    return report
