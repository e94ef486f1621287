"""
Column mappings for the student import file.

HEADER_RULES is evaluated top to bottom against each normalized header and the
first matching rule decides the record field. The order matters: a header such
as 'parent_first_name' is claimed by the first-name rule before the parent-name
rule ever sees it.
"""

HEADER_RULES = [
    (lambda h: 'first' in h and 'name' in h, 'first_name'),
    (lambda h: 'last' in h and 'name' in h, 'last_name'),
    (lambda h: h in ('class', 'grade'), 'class_name'),
    (lambda h: h == 'section', 'section'),
    (lambda h: 'roll' in h, 'roll_number'),
    (lambda h: 'birth' in h or h == 'dob', 'date_of_birth'),
    (lambda h: h == 'gender', 'gender'),
    (lambda h: 'parent' in h and 'name' in h, 'parent_name'),
    (lambda h: 'parent' in h and 'phone' in h, 'parent_phone'),
    (lambda h: h == 'email', 'email'),
    (lambda h: h == 'address', 'address'),
    (lambda h: h == 'phone', 'phone'),
    # Extra template columns; none of these headers match a rule above
    (lambda h: 'parent' in h and 'email' in h, 'parent_email'),
    (lambda h: 'blood' in h, 'blood_group'),
    (lambda h: h == 'nationality', 'nationality'),
    (lambda h: h == 'religion', 'religion'),
    (lambda h: h == 'house', 'house'),
    (lambda h: 'transport' in h, 'transport_route'),
    (lambda h: 'previous' in h and 'school' in h, 'previous_school'),
    (lambda h: 'medical' in h, 'medical_conditions'),
]

# Fields whose values are lower-cased while mapping
LOWERCASE_FIELDS = {'gender'}

# A row is only turned into a candidate when all of these are present
REQUIRED_FIELDS = ('first_name', 'last_name', 'class_name', 'roll_number')

TEMPLATE_HEADERS = [
    'First Name', 'Last Name', 'Class', 'Section', 'Roll Number', 'Date of Birth', 'Gender',
    'Parent Name', 'Parent Phone', 'Parent Email', 'Email', 'Phone', 'Address', 'Blood Group',
    'Nationality', 'Religion', 'House', 'Transport Route', 'Previous School', 'Medical Conditions',
]

TEMPLATE_EXAMPLE_ROWS = [
    ['John', 'Doe', '10', 'A', '101', '2008-05-15', 'Male', 'Jane Doe', '9876543210',
     'janedoe@email.com', 'john.doe@school.edu', '9876543211', '123 Main St City', 'O+',
     'Indian', 'Christian', 'Red House', 'Route 1', 'ABC School', 'None'],
    ['Jane', 'Smith', '10', 'B', '102', '2008-07-20', 'Female', 'Bob Smith', '9876543220',
     'bobsmith@email.com', 'jane.smith@school.edu', '9876543221', '456 Oak Ave City', 'A+',
     'Indian', 'Hindu', 'Blue House', 'Route 2', 'XYZ School', 'Asthma'],
]

# Record field name -> key used on the wire and in the store
WIRE_KEYS = {
    'first_name': 'firstName',
    'last_name': 'lastName',
    'class_name': 'class',
    'section': 'section',
    'roll_number': 'rollNumber',
    'date_of_birth': 'dateOfBirth',
    'gender': 'gender',
    'parent_name': 'parentName',
    'parent_phone': 'parentPhone',
    'parent_email': 'parentEmail',
    'email': 'email',
    'phone': 'phone',
    'address': 'address',
    'blood_group': 'bloodGroup',
    'nationality': 'nationality',
    'religion': 'religion',
    'house': 'house',
    'transport_route': 'transportRoute',
    'previous_school': 'previousSchool',
    'medical_conditions': 'medicalConditions',
    'emergency_contact': 'emergencyContact',
    'student_id': 'studentId',
    'academic_year': 'academicYear',
    'fee_category': 'feeCategory',
    'status': 'status',
    'admission_date': 'admissionDate',
}

DEFAULT_SECTION = 'A'
DEFAULT_PARENT_NAME = 'Not Provided'
DEFAULT_PARENT_PHONE = '0000000000'
DEFAULT_GENDER = 'other'
DEFAULT_FEE_CATEGORY = 'regular'
DEFAULT_STATUS = 'active'

# Optional fields stored as an empty string when the source leaves them out
BLANK_DEFAULT_FIELDS = (
    'phone', 'date_of_birth', 'address', 'parent_email', 'blood_group', 'religion',
    'medical_conditions', 'previous_school', 'house', 'transport_route',
)

EXPORT_COLUMNS = [
    'id', 'studentId', 'firstName', 'lastName', 'class', 'section', 'rollNumber', 'dateOfBirth',
    'gender', 'email', 'phone', 'address', 'parentName', 'parentPhone', 'parentEmail',
    'emergencyContact', 'bloodGroup', 'nationality', 'religion', 'house', 'transportRoute',
    'previousSchool', 'medicalConditions', 'academicYear', 'feeCategory', 'status',
    'admissionDate', 'created_at', 'updated_at',
]
