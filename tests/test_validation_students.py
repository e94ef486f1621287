import pytest

from student_parser import parse_students_csv
from validation_students import validate_students


def test_all_valid_records(make_candidate):
    candidates = [make_candidate(roll_number="101"), make_candidate(first_name="Amy", roll_number="102")]
    report = validate_students(candidates, [])

    assert report.valid is True
    assert report.valid_records == 2
    assert report.invalid_records == 0
    assert report.errors == []
    assert report.message == "All 2 records are valid and ready for import"


def test_duplicate_within_batch_is_one_error(make_candidate):
    candidates = [make_candidate(), make_candidate(first_name="Jane", section="a")]
    report = validate_students(candidates, [])

    assert report.valid is False
    assert len(report.errors) == 1
    assert report.errors[0].startswith("Row 3: Duplicate roll number 101 in class 10-a")
    assert "earlier in this file" in report.errors[0]
    assert report.valid_records == 1
    assert report.invalid_records == 1


def test_duplicate_against_existing_students(make_candidate):
    existing = [{"id": "1", "class": "10", "section": "a", "rollNumber": "101"}]
    report = validate_students([make_candidate(section="A")], existing)

    assert report.valid is False
    assert report.errors == ["Row 2: Duplicate roll number 101 in class 10-A"]


def test_existing_student_without_section_uses_default(make_candidate):
    existing = [{"id": "1", "class": "10", "rollNumber": "101"}]
    report = validate_students([make_candidate(section=None)], existing)
    assert report.errors == ["Row 2: Duplicate roll number 101 in class 10-A"]


def test_missing_required_fields_are_row_scoped_errors(make_candidate):
    candidates = [
        make_candidate(roll_number="1"),
        make_candidate(first_name=None, last_name=None, roll_number="2"),
        make_candidate(class_name=None, roll_number=None),
    ]
    report = validate_students(candidates, [])

    assert report.errors == [
        "Row 3: First name is required",
        "Row 3: Last name is required",
        "Row 4: Class is required",
        "Row 4: Roll number is required",
    ]
    assert report.total_records == 3
    assert report.valid_records == 1
    assert report.message == "Found 4 errors in 2 records"


def test_one_bad_row_makes_batch_invalid(make_candidate):
    candidates = [make_candidate(roll_number=str(n)) for n in range(1, 6)]
    candidates[2] = make_candidate(class_name=None, roll_number="3")
    report = validate_students(candidates, [])

    assert report.valid is False
    assert report.valid_records == 4


def test_warnings_do_not_block(make_candidate):
    candidate = make_candidate(
        parent_name=None,
        parent_phone=None,
        date_of_birth="15/05/2008",
        email="not-an-email",
        phone="12345",
        gender="unknown",
    )
    report = validate_students([candidate], [])

    assert report.valid is True
    assert report.valid_records == 1
    assert report.warnings == [
        "Row 2: Parent name is missing (will use default)",
        "Row 2: Parent phone is missing (will use default)",
        "Row 2: Date of birth should be in YYYY-MM-DD format",
        "Row 2: Invalid email format for student email",
        "Row 2: Student phone should be at least 10 digits",
        "Row 2: Gender should be Male, Female, or Other",
    ]


@pytest.mark.parametrize("phone, warns", [
    ("9876543210", False),
    ("98765 43210", False),
    ("98765-43210", False),
    ("+91 98765 43210", True),
    ("98765-4321", True),
])
def test_parent_phone_digit_check(make_candidate, phone, warns):
    report = validate_students([make_candidate(parent_phone=phone)], [])
    assert ("Row 2: Parent phone should be at least 10 digits" in report.warnings) is warns


@pytest.mark.parametrize("gender", ["Male", "female", "OTHER"])
def test_known_genders_do_not_warn(make_candidate, gender):
    assert validate_students([make_candidate(gender=gender)], []).warnings == []


def test_well_formed_optional_fields_do_not_warn(make_candidate):
    candidate = make_candidate(date_of_birth="2008-05-15", email="john.doe@school.edu", phone="9876543211")
    assert validate_students([candidate], []).warnings == []


def test_report_json_shape(make_candidate):
    data = validate_students([make_candidate()], []).to_json()
    assert set(data) == {"valid", "totalRecords", "validRecords", "invalidRecords", "errors", "warnings", "message"}


def test_end_to_end_example(spec_example_csv):
    candidates = parse_students_csv(spec_example_csv)
    report = validate_students(candidates, [])

    assert report.valid is False
    assert report.valid_records == 1
    assert len(report.errors) == 1
    assert "Row 3: Duplicate roll number 101 in class 10-A" in report.errors[0]
