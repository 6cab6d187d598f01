from datetime import datetime

import pytest
from flask import Flask

from conftest import payment_data, student_data
from storage import DatabaseStorage, MemStorage, create_storage, normalize_payment, normalize_student


def test_normalize_student_applies_defaults():
    values = normalize_student(student_data(), '2025-2026')
    assert values['total_fee'] == 0
    assert values['books_fee'] == 0
    assert values['exam_fee'] == 0
    assert values['academic_year'] == '2025-2026'


def test_normalize_student_keeps_given_values():
    values = normalize_student(student_data(total_fee=900, academic_year='2024-2025'), '2025-2026')
    assert values['total_fee'] == 900
    assert values['academic_year'] == '2024-2025'


def test_normalize_payment_defaults_date_to_now():
    before = datetime.utcnow()
    values = normalize_payment(payment_data('s1'))
    assert before <= values['date'] <= datetime.utcnow()
    assert values['tuition_fee_paid'] == values['books_fee_paid'] == values['exam_fee_paid'] == 0


def test_create_storage_without_database_url_is_in_memory():
    app = Flask(__name__)
    app.config.update(CURRENT_ACADEMIC_YEAR='2025-2026', DATABASE_URL=None)
    assert isinstance(create_storage(app), MemStorage)


def test_create_storage_with_database_url_uses_database():
    app = Flask(__name__)
    app.config.update(CURRENT_ACADEMIC_YEAR='2025-2026', DATABASE_URL='sqlite://')
    assert isinstance(create_storage(app), DatabaseStorage)
    assert app.config['SQLALCHEMY_DATABASE_URI'] == 'sqlite://'


def test_create_and_get_student(storage):
    student = storage.create_student(student_data(total_fee=15000))

    assert student.id
    assert storage.get_student(student.id).admission_no == 'A-101'
    assert storage.get_student(student.id).total_fee == 15000
    assert storage.get_student(student.id).academic_year == '2025-2026'


def test_missing_student_is_none(storage):
    assert storage.get_student('no-such-id') is None
    assert storage.get_student_by_admission_no('A-999') is None
    assert storage.get_student_with_balance('no-such-id') is None


def test_student_ids_are_unique(storage):
    first = storage.create_student(student_data('A-1'))
    second = storage.create_student(student_data('A-2'))
    assert first.id != second.id


def test_get_student_by_admission_no(storage):
    created = storage.create_student(student_data('A-7'))
    storage.create_student(student_data('A-8'))
    assert storage.get_student_by_admission_no('A-7').id == created.id


def test_update_student_merges_fields(storage):
    student = storage.create_student(student_data(total_fee=1000, books_fee=200))

    updated = storage.update_student(student.id, {'books_fee': 350, 'class_name': '6th'})

    assert updated.id == student.id
    assert updated.books_fee == 350
    assert updated.class_name == '6th'
    assert updated.total_fee == 1000
    assert updated.student_name == 'Ravi Kumar'


def test_update_student_cannot_change_identifier(storage):
    student = storage.create_student(student_data())
    updated = storage.update_student(student.id, {'id': 'other', 'exam_fee': 10})
    assert updated.id == student.id
    assert storage.get_student('other') is None


def test_update_missing_student_is_none(storage):
    assert storage.update_student('no-such-id', {'exam_fee': 10}) is None


def test_payments_by_student_are_ordered_by_date(storage):
    student = storage.create_student(student_data())
    other = storage.create_student(student_data('A-102'))
    storage.create_payment(payment_data(student.id, date=datetime(2025, 8, 1), installment=3))
    storage.create_payment(payment_data(student.id, date=datetime(2025, 6, 1), installment=1))
    storage.create_payment(payment_data(other.id, date=datetime(2025, 5, 1)))
    storage.create_payment(payment_data(student.id, date=datetime(2025, 7, 1), installment=2))

    payments = storage.list_payments_by_student(student.id)

    assert [p.installment for p in payments] == [1, 2, 3]
    assert len(storage.list_payments()) == 4


def test_create_payment_defaults(storage):
    student = storage.create_student(student_data())
    payment = storage.create_payment(payment_data(student.id, tuition_fee_paid=500))

    assert payment.id
    assert payment.tuition_fee_paid == 500
    assert payment.books_fee_paid == 0
    assert payment.exam_fee_paid == 0
    assert isinstance(payment.date, datetime)
    assert storage.get_payment(payment.id).id == payment.id


def test_get_student_with_balance(storage):
    student = storage.create_student(student_data(total_fee=15000, books_fee=2700, exam_fee=0))
    storage.create_payment(payment_data(student.id, tuition_fee_paid=5000, books_fee_paid=2700))

    result = storage.get_student_with_balance(student.id)

    assert result.total_paid == 7700
    assert result.balance == 10000


def test_list_students_includes_balances(storage):
    paid = storage.create_student(student_data('A-1', total_fee=100))
    storage.create_student(student_data('A-2', total_fee=300))
    storage.create_payment(payment_data(paid.id, tuition_fee_paid=100))

    balances = {s.student.admission_no: s.balance for s in storage.list_students()}

    assert balances == {'A-1': 0, 'A-2': 300}


def test_delete_student_cascades_to_payments(storage):
    student = storage.create_student(student_data())
    keep = storage.create_student(student_data('A-102'))
    for installment in (1, 2, 3):
        storage.create_payment(payment_data(student.id, installment=installment, tuition_fee_paid=100))
    kept_payment = storage.create_payment(payment_data(keep.id))

    assert storage.delete_student(student.id) is True

    assert storage.get_student(student.id) is None
    assert storage.list_payments_by_student(student.id) == []
    assert [p.id for p in storage.list_payments()] == [kept_payment.id]
    assert storage.delete_student(student.id) is False


def test_delete_missing_student(storage):
    assert storage.delete_student('no-such-id') is False


def test_create_student_does_not_check_uniqueness():
    storage = MemStorage('2025-2026')
    storage.create_student(student_data('A-1'))
    storage.create_student(student_data('A-1'))
    assert len(storage.list_raw_students()) == 2


def test_database_faults_propagate(app, storage):
    if not isinstance(storage, DatabaseStorage):
        pytest.skip("database backend only")
    from sqlalchemy.exc import IntegrityError

    storage.create_student(student_data('A-1'))
    with pytest.raises(IntegrityError):
        storage.create_student(student_data('A-1'))
    # Session is usable again after the rollback
    assert storage.get_student_by_admission_no('A-1') is not None
