import os

from flask import Blueprint, Flask, current_app, jsonify, render_template, request

from app_models import db
from balance import summarize
from config import config_by_name
from errors import DuplicateAdmission, NotFound, register_error_handlers
from forms import validate_payment, validate_student
from health import health_bp
from security import init_security
from storage import create_storage

api = Blueprint('api', __name__)


def get_storage():
    """The storage backend chosen for the running app"""
    return current_app.extensions['fee_storage']


def request_payload():
    return request.get_json(silent=True)


# Students
@api.route('/students')
def list_students():
    students = get_storage().list_students()
    return jsonify([student.to_dict() for student in students])


@api.route('/students/<student_id>')
def get_student(student_id):
    student = get_storage().get_student_with_balance(student_id)
    if student is None:
        raise NotFound("Student not found")
    return jsonify(student.to_dict())


@api.route('/students', methods=['POST'])
def create_student():
    data = validate_student(request_payload())
    storage = get_storage()

    # Check if this admission number already exists
    if storage.get_student_by_admission_no(data['admission_no']) is not None:
        raise DuplicateAdmission()

    student = storage.create_student(data)
    current_app.logger.info("Student %s added with admission number %s", student.id, student.admission_no)
    return jsonify(student.to_dict()), 201


@api.route('/students/<student_id>', methods=['PUT'])
def update_student(student_id):
    data = validate_student(request_payload(), partial=True)
    student = get_storage().update_student(student_id, data)
    if student is None:
        raise NotFound("Student not found")
    return jsonify(student.to_dict())


@api.route('/students/<student_id>', methods=['DELETE'])
def delete_student(student_id):
    if not get_storage().delete_student(student_id):
        raise NotFound("Student not found")
    current_app.logger.info("Student %s and related payment records deleted", student_id)
    return '', 204


@api.route('/students/<student_id>/payments')
def list_student_payments(student_id):
    payments = get_storage().list_payments_by_student(student_id)
    return jsonify([payment.to_dict() for payment in payments])


# Payments
@api.route('/payments')
def list_payments():
    payments = get_storage().list_payments()
    return jsonify([payment.to_dict() for payment in payments])


@api.route('/payments', methods=['POST'])
def create_payment():
    data = validate_payment(request_payload())
    storage = get_storage()

    if storage.get_student(data['student_id']) is None:
        raise NotFound("Student not found")

    payment = storage.create_payment(data)
    current_app.logger.info("Payment %s recorded for student %s (installment %s, %s)",
                            payment.id, payment.student_id, payment.installment, payment.payment_mode)
    return jsonify(payment.to_dict()), 201


@api.route('/payments/<payment_id>/receipt')
def payment_receipt(payment_id):
    """Printable fee receipt for a single payment"""
    storage = get_storage()
    payment = storage.get_payment(payment_id)
    if payment is None:
        raise NotFound("Payment not found")
    student = storage.get_student_with_balance(payment.student_id)
    if student is None:
        raise NotFound("Student not found")

    # Only the fee components actually paid are listed, numbered in order
    particulars = [
        (label, amount) for label, amount in (
            ('Tuition Fee', payment.tuition_fee_paid),
            ('Books Fee', payment.books_fee_paid),
            ('Exam Fee', payment.exam_fee_paid),
        ) if amount > 0
    ]

    return render_template(
        'receipt.html',
        school_name=current_app.config['SCHOOL_NAME'],
        school_address=current_app.config['SCHOOL_ADDRESS'],
        student=student.student,
        payment=payment,
        particulars=particulars,
        total_amount=payment.total_amount(),
        balance=student.balance,
    )


@api.route('/summary')
def fee_summary():
    storage = get_storage()
    return jsonify(summarize(storage.list_students(), storage.list_payments()))


# Custom Jinja2 filter for number formatting with commas
def comma_filter(value):
    """Format whole amounts with comma separators"""
    try:
        return "{:,}".format(int(value))
    except (ValueError, TypeError):
        return value


def create_app(config_name=None, **overrides):
    """Application factory; the storage backend is fixed here for the app's lifetime"""
    config_name = config_name or os.environ.get('FLASK_ENV', 'development')
    if config_name not in config_by_name:
        raise ValueError(f"Unknown configuration {config_name!r}; expected one of {', '.join(config_by_name)}")
    config_class = config_by_name[config_name]

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.config.update(overrides)
    app.logger.setLevel(app.config['LOG_LEVEL'])
    config_class.init_app(app)

    init_security(app)
    register_error_handlers(app)
    app.add_template_filter(comma_filter, 'comma')

    app.extensions['fee_storage'] = create_storage(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(api)
    # The browser UI calls the same routes under /api
    app.register_blueprint(api, url_prefix='/api', name='api_prefixed')
    return app


def init_database(app):
    """Create the tables when the app uses the relational backend"""
    if 'sqlalchemy' not in app.extensions:
        app.logger.info("In-memory storage configured; no tables to create")
        return
    with app.app_context():
        db.create_all()
    app.logger.info("Database tables created")


def main():
    app = create_app()
    init_database(app)

    # This block is for local development only.
    # In production, a WSGI server like Gunicorn (see gunicorn_config.py) is used.
    port = int(os.environ.get('PORT', 5001))
    app.logger.info("Starting local development server at http://127.0.0.1:%s", port)
    app.run(host='127.0.0.1', port=port, debug=app.config['DEBUG'])


if __name__ == '__main__':
    main()
