from datetime import datetime, timezone

from records import CandidateRecord, StudentRecord, build_identity_key, identity_key_for, student_key


def test_identity_key_is_case_insensitive():
    assert build_identity_key("10", "A", "101") == build_identity_key("10", "a", "101")
    assert build_identity_key("X-Science", "b", "R7") == build_identity_key("x-science", "B", "r7")


def test_identity_key_distinguishes_section_class_and_roll():
    key = build_identity_key("10", "A", "101")
    assert key != build_identity_key("10", "B", "101")
    assert key != build_identity_key("11", "A", "101")
    assert key != build_identity_key("10", "A", "102")


def test_identity_key_defaults_missing_section():
    assert build_identity_key("10", None, "101") == "10-a-101"
    assert build_identity_key("10", "  ", "101") == build_identity_key("10", "A", "101")


def test_identity_key_for_accepts_candidates_and_stored_dicts():
    candidate = CandidateRecord(first_name="John", last_name="Doe", class_name="10", roll_number="101")
    stored = {"class": "10", "section": "a", "rollNumber": 101}
    assert identity_key_for(candidate) == identity_key_for(stored) == "10-a-101"


def test_candidate_from_dict_cleans_values():
    candidate = CandidateRecord.from_dict({
        "firstName": "  John ",
        "lastName": "Doe",
        "class": 10,
        "rollNumber": 101,
        "section": "",
        "parentName": "   ",
        "unknownField": "ignored",
    })
    assert candidate.first_name == "John"
    assert candidate.class_name == "10"
    assert candidate.roll_number == "101"
    assert candidate.section is None
    assert candidate.parent_name is None
    assert candidate.to_dict() == {"firstName": "John", "lastName": "Doe", "class": "10", "rollNumber": "101"}


def test_candidate_display_name_placeholders():
    assert CandidateRecord(first_name="Amy").display_name == "Amy Student"
    assert CandidateRecord().display_name == "Unknown Student"


def test_student_record_applies_defaults():
    now = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)
    candidate = CandidateRecord(first_name="John", last_name="Doe", class_name="10", roll_number="101")

    student = StudentRecord.from_candidate(candidate, now=now)

    assert student.id
    assert student.student_id.startswith("STU")
    assert student.section == "A"
    assert student.parent_name == "Not Provided"
    assert student.parent_phone == "0000000000"
    assert student.emergency_contact == "0000000000"
    assert student.gender == "other"
    assert student.nationality == "Indian"
    assert student.email == "john.doe@school.edu"
    assert student.academic_year == "2024"
    assert student.admission_date == "2024-06-01"
    assert student.fee_category == "regular"
    assert student.status == "active"
    assert student.phone == ""
    assert student.medical_conditions == ""
    assert student.created_at == student.updated_at == now.isoformat()


def test_student_record_keeps_supplied_values():
    candidate = CandidateRecord(
        first_name="Jane", last_name="Smith", class_name="9", section="C", roll_number="12",
        parent_phone="9876543210", gender="female", email="jane@example.org", status="inactive",
        student_id="STU-001", nationality="Kenyan",
    )
    student = StudentRecord.from_candidate(candidate, email_domain="example.org", default_nationality="Indian")

    assert student.section == "C"
    assert student.emergency_contact == "9876543210"
    assert student.gender == "female"
    assert student.email == "jane@example.org"
    assert student.status == "inactive"
    assert student.student_id == "STU-001"
    assert student.nationality == "Kenyan"


def test_student_record_ids_are_unique():
    candidate = CandidateRecord(first_name="John", last_name="Doe", class_name="10", roll_number="101")
    ids = {StudentRecord.from_candidate(candidate).id for _ in range(20)}
    assert len(ids) == 20


def test_student_record_to_dict_uses_store_keys():
    candidate = CandidateRecord(first_name="John", last_name="Doe", class_name="10", roll_number="101")
    student = StudentRecord.from_candidate(candidate)
    data = student.to_dict()

    assert data["id"] == student.id
    assert data["class"] == "10"
    assert data["rollNumber"] == "101"
    assert "created_at" in data and "updated_at" in data
    assert student.key == student_key(student.id) == f"student:{student.id}"
    assert identity_key_for(data) == identity_key_for(candidate)
