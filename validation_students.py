"""
This module contains the validation applied to a batch of candidate student records before they are imported.
"""
import re
from dataclasses import dataclass, field
from typing import List

from records import identity_key_for

DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^\d{10,}$')
ALLOWED_GENDERS = {'male', 'female', 'other'}


@dataclass
class ValidationReport:
    total_records: int = 0
    valid_records: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self):
        return not self.errors

    @property
    def invalid_records(self):
        return self.total_records - self.valid_records

    @property
    def message(self):
        if self.valid:
            return f"All {self.total_records} records are valid and ready for import"
        return f"Found {len(self.errors)} errors in {self.invalid_records} records"

    def to_json(self):
        return {
            'valid': self.valid,
            'totalRecords': self.total_records,
            'validRecords': self.valid_records,
            'invalidRecords': self.invalid_records,
            'errors': self.errors,
            'warnings': self.warnings,
            'message': self.message,
        }


def _is_valid_phone(number):
    return bool(PHONE_PATTERN.match(re.sub(r'[\s-]', '', number)))


def _check_record(record, row_number, existing_keys, batch_keys):
    """
    Checks a single candidate.

    Returns:
        tuple: (errors, warnings) as lists of row-scoped messages.
    """
    errors = []
    warnings = []
    prefix = f"Row {row_number}:"

    # --- 1. Required fields ---
    if not record.first_name:
        errors.append(f"{prefix} First name is required")
    if not record.last_name:
        errors.append(f"{prefix} Last name is required")
    if not record.class_name:
        errors.append(f"{prefix} Class is required")
    if not record.roll_number:
        errors.append(f"{prefix} Roll number is required")

    # --- 2. Fields that fall back to a default on import ---
    if not record.parent_name:
        warnings.append(f"{prefix} Parent name is missing (will use default)")
    if not record.parent_phone:
        warnings.append(f"{prefix} Parent phone is missing (will use default)")

    # --- 3. Duplicate check against the store and against earlier rows ---
    if record.class_name and record.roll_number:
        key = identity_key_for(record)
        location = f"{record.class_name}-{record.section or 'A'}"
        if key in existing_keys:
            errors.append(f"{prefix} Duplicate roll number {record.roll_number} in class {location}")
        elif key in batch_keys:
            errors.append(
                f"{prefix} Duplicate roll number {record.roll_number} in class {location} "
                f"(appears earlier in this file)"
            )
        batch_keys.add(key)

    # --- 4. Format checks ---
    if record.date_of_birth and not DATE_PATTERN.match(record.date_of_birth):
        warnings.append(f"{prefix} Date of birth should be in YYYY-MM-DD format")

    if record.email and not EMAIL_PATTERN.match(record.email):
        warnings.append(f"{prefix} Invalid email format for student email")

    if record.phone and not _is_valid_phone(record.phone):
        warnings.append(f"{prefix} Student phone should be at least 10 digits")
    if record.parent_phone and not _is_valid_phone(record.parent_phone):
        warnings.append(f"{prefix} Parent phone should be at least 10 digits")

    if record.gender and record.gender.lower() not in ALLOWED_GENDERS:
        warnings.append(f"{prefix} Gender should be Male, Female, or Other")

    return errors, warnings


def validate_students(candidates, existing):
    """
    Validates a batch of candidate records against structural rules and the
    already persisted students.

    Errors exclude a record from the valid count; warnings never do. The batch
    as a whole is valid only when no record has an error.

    Args:
        candidates (list): CandidateRecords in file order (row 2 is the first one).
        existing (list): Persisted student dicts, as read from the store.

    Returns:
        ValidationReport
    """
    report = ValidationReport(total_records=len(candidates))
    existing_keys = {identity_key_for(student) for student in existing}
    batch_keys = set()

    for index, record in enumerate(candidates):
        errors, warnings = _check_record(record, index + 2, existing_keys, batch_keys)
        report.warnings.extend(warnings)
        if errors:
            report.errors.extend(errors)
        else:
            report.valid_records += 1

    return report
