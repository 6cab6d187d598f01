import pytest

from app import create_app
from app_models import db


def make_app(backend):
    if backend == 'database':
        return create_app('testing', DATABASE_URL='sqlite://')
    return create_app('testing')


@pytest.fixture(params=['memory', 'database'])
def app(request):
    app = make_app(request.param)
    with app.app_context():
        if request.param == 'database':
            db.create_all()
        yield app
        if request.param == 'database':
            db.session.remove()
            db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    return app.extensions['fee_storage']


@pytest.fixture
def student_payload():
    return {
        'admissionNo': 'A-101',
        'studentName': 'Ravi Kumar',
        'parentName': 'Suresh Kumar',
        'class': '5',
        'totalFee': 15000,
        'booksFee': 2700,
        'examFee': 0,
    }


def student_data(admission_no='A-101', **fields):
    data = {
        'admission_no': admission_no,
        'student_name': 'Ravi Kumar',
        'parent_name': 'Suresh Kumar',
        'class_name': '5th',
    }
    data.update(fields)
    return data


def payment_data(student_id, **fields):
    data = {
        'student_id': student_id,
        'installment': 1,
        'payment_mode': 'Cash',
    }
    data.update(fields)
    return data
