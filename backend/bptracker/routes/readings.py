"""
Reading API routes.
"""
import logging
from datetime import date, time
from flask import Blueprint, request, jsonify, Response, current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from bptracker import db
from bptracker.models import BloodPressureReading
from bptracker.utils.datetime_format import get_normalizer
from bptracker.utils.errors import ValidationError, DuplicateReadingError
from bptracker.utils.event_logger import log_event
from bptracker.utils.export import generate_readings_csv, generate_readings_pdf
from bptracker.utils.history import ReadingHistory
from bptracker.utils.validators import validate_reading, validate_reading_update, validate_filter_range

logger = logging.getLogger(__name__)

readings_bp = Blueprint('readings', __name__)

DATE_FORMAT_HINT = 'Please enter date in dd/mm/yyyy format (e.g., 29/10/2025)'
TIME_FORMAT_HINT = 'Please enter time in HH:MM format (e.g., 08:30)'

# client_ref is a BIGINT column
CLIENT_REF_MIN = -2 ** 63
CLIENT_REF_MAX = 2 ** 63 - 1


def _load_history():
    """Query readings for the fromDate/toDate args. Raises ValidationError."""
    normalizer = get_normalizer()
    from_date, to_date = validate_filter_range(
        request.args.get('fromDate'), request.args.get('toDate'), normalizer)
    readings = BloodPressureReading.in_range(from_date, to_date).all()
    return ReadingHistory(readings, normalizer, from_date, to_date)


def _ensure_slot_free(reading_date, reading_time, exclude_id=None):
    """Reject a second reading at the same date and time when uniqueness is enforced."""
    if not current_app.config.get('ENFORCE_UNIQUE_READING_TIME', True):
        return
    existing = BloodPressureReading.find_at(reading_date, reading_time, exclude_id=exclude_id)
    if existing:
        raise DuplicateReadingError(
            reading_date.isoformat(), reading_time.strftime('%H:%M:%S'), existing.id)


def _stamp_suffix():
    return get_normalizer().now().strftime('%Y%m%d_%H%M%S')


@readings_bp.route('/readings', methods=['GET'])
def list_readings():
    """Return readings newest first, optionally within an inclusive date range."""
    try:
        history = _load_history()
    except ValidationError as e:
        return jsonify({'error': e.message}), 400

    readings_out = []
    for reading, shown in history.rows():
        rd = reading.to_dict()
        rd['display'] = shown
        readings_out.append(rd)

    return jsonify(readings_out), 200


@readings_bp.route('/readings/default-window', methods=['GET'])
def default_window():
    """The filter window the list page starts with."""
    from_date, to_date = get_normalizer().default_filter_window(
        days=current_app.config['DEFAULT_FILTER_DAYS'])
    return jsonify({'fromDate': from_date, 'toDate': to_date}), 200


@readings_bp.route('/readings/<int:id>', methods=['GET'])
def get_reading(id):
    reading = db.session.get(BloodPressureReading, id)
    if not reading:
        return jsonify({'error': 'Reading not found'}), 404

    history = ReadingHistory([reading], get_normalizer())
    rd = reading.to_dict()
    rd['display'] = history.display_row(reading)
    return jsonify(rd), 200


@readings_bp.route('/readings', methods=['POST'])
def create_reading():
    """Record a reading. Date and time default to now in the configured zone."""
    data = request.get_json()
    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'Request body is required'}), 400

    errors = validate_reading(data)
    if errors:
        return jsonify({'error': errors}), 400

    # A client-generated id only identifies a re-post of the same submission
    client_ref = data.get('id')
    if client_ref is not None:
        try:
            client_ref = int(client_ref)
        except (ValueError, TypeError):
            return jsonify({'error': 'id must be an integer'}), 400
        if not CLIENT_REF_MIN <= client_ref <= CLIENT_REF_MAX:
            return jsonify({'error': 'id is out of range'}), 400
        existing = BloodPressureReading.find_by_client_ref(client_ref)
        if existing:
            return jsonify({
                'message': 'Reading already recorded',
                'id': existing.id,
                'reading': existing.to_dict(),
            }), 200

    normalizer = get_normalizer()
    now_date, now_time = normalizer.storage_stamp()
    try:
        input_date = normalizer.parse_display_date(data['inputDate']) if data.get('inputDate') else now_date
    except ValidationError:
        return jsonify({'error': DATE_FORMAT_HINT}), 400
    try:
        input_time = normalizer.parse_display_time(data['inputTime']) if data.get('inputTime') else now_time
    except ValidationError:
        return jsonify({'error': TIME_FORMAT_HINT}), 400

    reading_date = date.fromisoformat(input_date)
    reading_time = time.fromisoformat(input_time)
    try:
        _ensure_slot_free(reading_date, reading_time)
    except DuplicateReadingError as e:
        return jsonify({'error': e.message, 'existingId': e.existing_id}), 409

    reading = BloodPressureReading(
        client_ref=client_ref,
        systolic=int(data['upperPressure']),
        diastolic=int(data['lowerPressure']),
        pulse=int(data['pulseRate']),
        reading_date=reading_date,
        reading_time=reading_time,
    )
    db.session.add(reading)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Reading conflicts with an existing reading'}), 409
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error adding reading')
        return jsonify({'error': 'Failed to add reading'}), 500

    log_event('CREATE', 'reading', resource_id=str(reading.id),
              details={'date': input_date, 'time': input_time})

    return jsonify({
        'message': 'Reading added successfully',
        'id': reading.id,
        'reading': reading.to_dict(),
    }), 201


@readings_bp.route('/readings/<int:id>', methods=['PUT'])
def update_reading(id):
    """Edit any of pressures, pulse, date and time. id and createdAt are fixed."""
    reading = db.session.get(BloodPressureReading, id)
    if not reading:
        return jsonify({'error': 'Reading not found'}), 404

    data = request.get_json()
    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'Request body is required'}), 400

    errors = validate_reading_update(data, reading)
    if errors:
        return jsonify({'error': errors}), 400

    normalizer = get_normalizer()
    reading_date = reading.reading_date
    reading_time = reading.reading_time

    # A date we cannot read must block the save, never fall back to a guess
    if 'inputDate' in data:
        try:
            reading_date = normalizer.to_date(data['inputDate'])
        except ValidationError:
            return jsonify({'error': DATE_FORMAT_HINT}), 400
    if 'inputTime' in data:
        try:
            reading_time = time.fromisoformat(normalizer.parse_display_time(data['inputTime']))
        except ValidationError:
            return jsonify({'error': TIME_FORMAT_HINT}), 400

    try:
        _ensure_slot_free(reading_date, reading_time, exclude_id=reading.id)
    except DuplicateReadingError as e:
        return jsonify({'error': e.message, 'existingId': e.existing_id}), 409

    changed = {}
    updates = {
        'systolic': int(data.get('upperPressure', reading.systolic)),
        'diastolic': int(data.get('lowerPressure', reading.diastolic)),
        'pulse': int(data.get('pulseRate', reading.pulse)),
        'reading_date': reading_date,
        'reading_time': reading_time,
    }
    for field, value in updates.items():
        if getattr(reading, field) != value:
            changed[field] = str(value)
            setattr(reading, field, value)

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error updating reading %s', id)
        return jsonify({'error': 'Failed to update reading'}), 500

    log_event('UPDATE', 'reading', resource_id=str(id), details={'changed': changed})

    return jsonify({
        'message': 'Reading updated successfully',
        'reading': reading.to_dict(),
    }), 200


@readings_bp.route('/readings/<int:id>', methods=['DELETE'])
def delete_reading(id):
    reading = db.session.get(BloodPressureReading, id)
    if not reading:
        return jsonify({'error': 'Reading not found'}), 404

    db.session.delete(reading)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Error deleting reading %s', id)
        return jsonify({'error': 'Failed to delete reading'}), 500

    log_event('DELETE', 'reading', resource_id=str(id))

    return jsonify({'message': 'Reading deleted successfully'}), 200


@readings_bp.route('/readings/export.csv', methods=['GET'])
def export_readings():
    """Export the (optionally filtered) readings to CSV."""
    try:
        history = _load_history()
    except ValidationError as e:
        return jsonify({'error': e.message}), 400

    csv_output = generate_readings_csv(history)

    log_event('EXPORT', 'readings_csv',
              details={'count': len(history), 'from_date': history.from_date, 'to_date': history.to_date})

    return Response(
        csv_output.getvalue(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename=readings_export_{_stamp_suffix()}.csv'}
    )


@readings_bp.route('/readings/print', methods=['GET'])
def print_readings():
    """Render the (optionally filtered) readings as a printable PDF sheet."""
    try:
        history = _load_history()
    except ValidationError as e:
        return jsonify({'error': e.message}), 400

    if history.is_empty:
        return jsonify({'error': 'No records to print'}), 404

    pdf_output = generate_readings_pdf(history, printed_at=get_normalizer().now())

    log_event('EXPORT', 'readings_pdf',
              details={'count': len(history), 'from_date': history.from_date, 'to_date': history.to_date})

    return Response(
        pdf_output.getvalue(),
        mimetype='application/pdf',
        headers={'Content-Disposition': f'inline; filename=blood_pressure_records_{_stamp_suffix()}.pdf'}
    )
