"""
Record types passed between the parser, validator, importer and exporter, and
the identity key that decides whether two students are the same.
"""
import random
import time
import uuid
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Optional

from mappings import (
    WIRE_KEYS, DEFAULT_SECTION, DEFAULT_PARENT_NAME, DEFAULT_PARENT_PHONE, DEFAULT_GENDER,
    DEFAULT_FEE_CATEGORY, DEFAULT_STATUS, BLANK_DEFAULT_FIELDS
)

STUDENT_KEY_PREFIX = 'student:'


def _clean(value):
    """Trims a raw value; None and blank strings both mean 'not supplied'."""
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def build_identity_key(class_name, section, roll_number):
    """
    Canonical duplicate-detection key: class-section-roll, lower-cased.
    A missing section counts as the default section 'A'.
    """
    section = _clean(section) or DEFAULT_SECTION
    return f"{_clean(class_name) or ''}-{section}-{_clean(roll_number) or ''}".lower()


def identity_key_for(record):
    """Identity key of a CandidateRecord, a StudentRecord or a stored record dict."""
    if isinstance(record, dict):
        return build_identity_key(record.get('class'), record.get('section'), record.get('rollNumber'))
    return build_identity_key(record.class_name, record.section, record.roll_number)


def student_key(student_id):
    return f"{STUDENT_KEY_PREFIX}{student_id}"


@dataclass
class CandidateRecord:
    """An unvalidated student row. A field left as None was not supplied by the source."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    roll_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    blood_group: Optional[str] = None
    nationality: Optional[str] = None
    religion: Optional[str] = None
    house: Optional[str] = None
    transport_route: Optional[str] = None
    previous_school: Optional[str] = None
    medical_conditions: Optional[str] = None
    emergency_contact: Optional[str] = None
    student_id: Optional[str] = None
    academic_year: Optional[str] = None
    fee_category: Optional[str] = None
    status: Optional[str] = None
    admission_date: Optional[str] = None

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, _clean(getattr(self, f.name)))

    @classmethod
    def from_dict(cls, data):
        """Builds a candidate from a camelCase payload; unknown keys are ignored."""
        data = data or {}
        return cls(**{name: data.get(wire_key) for name, wire_key in WIRE_KEYS.items()})

    def to_dict(self):
        return {
            WIRE_KEYS[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @property
    def display_name(self):
        return f"{self.first_name or 'Unknown'} {self.last_name or 'Student'}"


def _generate_student_code():
    return f"STU{int(time.time() * 1000)}{random.randint(0, 999):03d}"


@dataclass
class StudentRecord:
    """A persisted student: identified, timestamped and with every optional field defaulted."""
    id: str
    student_id: str
    first_name: str
    last_name: str
    class_name: str
    section: str
    roll_number: str
    date_of_birth: str
    gender: str
    parent_name: str
    parent_phone: str
    parent_email: str
    email: str
    phone: str
    address: str
    blood_group: str
    nationality: str
    religion: str
    house: str
    transport_route: str
    previous_school: str
    medical_conditions: str
    emergency_contact: str
    academic_year: str
    fee_category: str
    status: str
    admission_date: str
    created_at: str
    updated_at: str

    @classmethod
    def from_candidate(cls, candidate, email_domain='school.edu', default_nationality='Indian', now=None):
        """
        Applies the documented defaults to a validated candidate.

        Args:
            candidate (CandidateRecord): The record to persist. First name, last name,
                class and roll number must already be present.
            email_domain (str): Domain used to build a fallback email address.
            default_nationality (str): Nationality used when the source leaves it out.
            now (datetime): Import timestamp; defaults to the current UTC time.

        Returns:
            StudentRecord: A new record with a fresh id.
        """
        now = now or datetime.now(timezone.utc)
        timestamp = now.isoformat()

        values = {name: getattr(candidate, name) or '' for name in BLANK_DEFAULT_FIELDS}
        email = candidate.email or f"{candidate.first_name.lower()}.{candidate.last_name.lower()}@{email_domain}"

        return cls(
            id=str(uuid.uuid4()),
            student_id=candidate.student_id or _generate_student_code(),
            first_name=candidate.first_name,
            last_name=candidate.last_name,
            class_name=candidate.class_name,
            section=candidate.section or DEFAULT_SECTION,
            roll_number=candidate.roll_number,
            gender=candidate.gender or DEFAULT_GENDER,
            parent_name=candidate.parent_name or DEFAULT_PARENT_NAME,
            parent_phone=candidate.parent_phone or DEFAULT_PARENT_PHONE,
            email=email,
            nationality=candidate.nationality or default_nationality,
            emergency_contact=candidate.emergency_contact or candidate.parent_phone or DEFAULT_PARENT_PHONE,
            academic_year=candidate.academic_year or str(now.year),
            fee_category=candidate.fee_category or DEFAULT_FEE_CATEGORY,
            status=candidate.status or DEFAULT_STATUS,
            admission_date=candidate.admission_date or now.date().isoformat(),
            created_at=timestamp,
            updated_at=timestamp,
            **values
        )

    @property
    def key(self):
        return student_key(self.id)

    def to_dict(self):
        data = {'id': self.id}
        for f in fields(self):
            if f.name in ('id', 'created_at', 'updated_at'):
                continue
            data[WIRE_KEYS[f.name]] = getattr(self, f.name)
        data['created_at'] = self.created_at
        data['updated_at'] = self.updated_at
        return data
