from flask import Flask, request, jsonify, make_response
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
import logging

import config
from records import CandidateRecord, STUDENT_KEY_PREFIX
from student_parser import read_upload
from validation_students import validate_students
from student_import import import_students
from student_export import generate_template, export_students, TEMPLATE_FILENAME, CSV_MIMETYPE

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app, expose_headers=['Content-Disposition', 'X-Export-Count', 'X-Exported-At'])
app.config['MAX_CONTENT_LENGTH'] = config.MAX_UPLOAD_BYTES
app.config['KV_STORE'] = config.create_store()


def get_store():
    """Returns the key-value store the app was configured with."""
    return app.config['KV_STORE']


def _format_size(num_bytes):
    if num_bytes >= 1024 * 1024:
        return f'{num_bytes / (1024 * 1024):g}MB'
    if num_bytes >= 1024:
        return f'{num_bytes / 1024:g}KB'
    return f'{num_bytes} bytes'


@app.errorhandler(RequestEntityTooLarge)
def file_too_large(_):
    return jsonify({'error': f'File size must be less than {_format_size(config.MAX_UPLOAD_BYTES)}'}), 413


def _json_body():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _candidates_from_payload(payload):
    students = payload.get('students')
    if not isinstance(students, list):
        return None
    return [CandidateRecord.from_dict(s if isinstance(s, dict) else {}) for s in students]


@app.route('/students/upload', methods=['POST'])
def upload_students():
    """
    Parses an uploaded CSV file into candidate records and validates them,
    without persisting anything.
    """
    try:
        file = request.files.get('file')
        if not file or not file.filename:
            return jsonify({'error': 'No file uploaded'}), 400

        candidates = read_upload(file.filename, file.read(), delimiter=config.CSV_DELIMITER)
        if not candidates:
            return jsonify({'error': 'No valid student data found in the file'}), 400

        report = validate_students(candidates, get_store().scan_prefix(STUDENT_KEY_PREFIX))

        return jsonify({
            'fileName': file.filename,
            'count': len(candidates),
            'students': [c.to_dict() for c in candidates],
            'validation': report.to_json()
        }), 200

    except HTTPException:
        raise
    except ValueError as ve:
        logger.info("Upload rejected: %s", ve)
        return jsonify({'error': str(ve)}), 400
    except Exception as e:
        logger.exception("Error reading uploaded file")
        return jsonify({'error': str(e)}), 500


@app.route('/students/validate-import', methods=['POST'])
def validate_import():
    """Validates candidate records against required fields and existing students."""
    try:
        candidates = _candidates_from_payload(_json_body())
        if candidates is None:
            return jsonify({
                'valid': False,
                'message': 'Invalid data format',
                'errors': ['Expected an array of student objects']
            }), 400

        report = validate_students(candidates, get_store().scan_prefix(STUDENT_KEY_PREFIX))
        return jsonify(report.to_json()), 200

    except Exception as e:
        logger.exception("Validation error")
        return jsonify({'valid': False, 'message': f'Validation failed: {e}', 'error': str(e)}), 500


@app.route('/students/import', methods=['POST'])
def import_students_route():
    """
    Persists candidate records. Each record succeeds or fails on its own; the
    call reports success when at least one record was imported.
    """
    try:
        payload = _json_body()
        candidates = _candidates_from_payload(payload)
        if not candidates:
            return jsonify({
                'success': False,
                'imported': 0,
                'failed': 0,
                'message': 'No valid student data provided'
            }), 400

        report = import_students(
            get_store(),
            candidates,
            file_name=payload.get('fileName'),
            email_domain=config.SCHOOL_EMAIL_DOMAIN,
            default_nationality=config.DEFAULT_NATIONALITY
        )
        return jsonify(report.to_json()), 200

    except Exception as e:
        logger.exception("Import endpoint error")
        return jsonify({
            'success': False,
            'imported': 0,
            'failed': 0,
            'message': f'Import failed: {e}',
            'error': str(e)
        }), 500


@app.route('/students/import-template', methods=['GET'])
def download_import_template():
    """Returns the CSV template for the student import as a file download."""
    try:
        response = make_response(generate_template('csv'))
        response.headers['Content-Type'] = CSV_MIMETYPE
        response.headers['Content-Disposition'] = f'attachment; filename="{TEMPLATE_FILENAME}"'
        return response

    except Exception as e:
        logger.exception("Error generating import template")
        return jsonify({'error': str(e)}), 500


@app.route('/students/export', methods=['POST'])
def export_students_route():
    """
    Exports persisted students. JSON is returned inline with a count and
    timestamp; CSV and Excel are returned as file downloads.
    """
    try:
        payload = _json_body()
        filters = payload.get('filters') or {}
        if not isinstance(filters, dict):
            return jsonify({'error': 'filters must be an object'}), 400
        student_ids = filters.get('students')
        if student_ids is not None and not isinstance(student_ids, list):
            return jsonify({'error': 'filters.students must be a list of student ids'}), 400

        result = export_students(get_store(), payload.get('format'), student_ids)

        if result.format == 'json':
            return jsonify({
                'format': result.format,
                'data': result.content,
                'count': result.count,
                'exportedAt': result.exported_at
            }), 200

        response = make_response(result.content)
        response.headers['Content-Type'] = result.mimetype
        response.headers['Content-Disposition'] = f'attachment; filename="{result.filename}"'
        response.headers['X-Export-Count'] = str(result.count)
        response.headers['X-Exported-At'] = result.exported_at
        return response

    except ValueError as ve:
        return jsonify({'error': str(ve)}), 400
    except Exception as e:
        logger.exception("Error exporting students")
        return jsonify({'error': str(e)}), 500


if __name__ == '__main__':
    app.run(debug=True)
