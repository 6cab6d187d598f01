"""
Storage backends for students and payments.

Two implementations share one contract: ``MemStorage`` keeps records in
process memory, ``DatabaseStorage`` persists them through Flask-SQLAlchemy.
``create_storage`` picks one when the app is created.

Lookups return ``None`` for a missing record. Database faults propagate.
"""
from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from app_models import Payment, Student, db, generate_id
from balance import StudentWithBalance, calculate_balance

STUDENT_FIELDS = ('admission_no', 'student_name', 'parent_name', 'class_name',
                  'total_fee', 'books_fee', 'exam_fee', 'academic_year')
PAYMENT_FIELDS = ('student_id', 'date', 'tuition_fee_paid', 'books_fee_paid',
                  'exam_fee_paid', 'installment', 'payment_mode')


def normalize_student(data, academic_year):
    """Fill defaults for omitted optional student fields"""
    values = {name: data.get(name) for name in STUDENT_FIELDS}
    for fee in ('total_fee', 'books_fee', 'exam_fee'):
        if values[fee] is None:
            values[fee] = 0
    if not values['academic_year']:
        values['academic_year'] = academic_year
    return values


def normalize_payment(data):
    """Fill defaults for omitted optional payment fields"""
    values = {name: data.get(name) for name in PAYMENT_FIELDS}
    for paid in ('tuition_fee_paid', 'books_fee_paid', 'exam_fee_paid'):
        if values[paid] is None:
            values[paid] = 0
    if values['date'] is None:
        values['date'] = datetime.utcnow()
    return values


def student_updates(data):
    """Fields of a partial update that may be merged onto a student"""
    return {name: value for name, value in data.items() if name in STUDENT_FIELDS}


class FeeStorage(ABC):
    """Persistence operations used by the API"""

    def __init__(self, academic_year):
        self.academic_year = academic_year

    @abstractmethod
    def get_student(self, student_id):
        pass

    @abstractmethod
    def get_student_by_admission_no(self, admission_no):
        pass

    @abstractmethod
    def list_raw_students(self):
        pass

    @abstractmethod
    def create_student(self, data):
        pass

    @abstractmethod
    def update_student(self, student_id, data):
        pass

    @abstractmethod
    def delete_student(self, student_id):
        pass

    @abstractmethod
    def list_payments(self):
        pass

    @abstractmethod
    def list_payments_by_student(self, student_id):
        pass

    @abstractmethod
    def get_payment(self, payment_id):
        pass

    @abstractmethod
    def create_payment(self, data):
        pass

    def list_students(self):
        """All students with their balances, in no particular order"""
        return [
            StudentWithBalance(student, calculate_balance(student, self.list_payments_by_student(student.id)))
            for student in self.list_raw_students()
        ]

    def get_student_with_balance(self, student_id):
        student = self.get_student(student_id)
        if student is None:
            return None
        payments = self.list_payments_by_student(student_id)
        return StudentWithBalance(student, calculate_balance(student, payments))


class MemStorage(FeeStorage):
    """Keeps records in dictionaries; contents are lost on restart"""

    name = 'memory'

    def __init__(self, academic_year):
        super().__init__(academic_year)
        self.students = {}
        self.payments = {}

    def get_student(self, student_id):
        return self.students.get(student_id)

    def get_student_by_admission_no(self, admission_no):
        for student in self.students.values():
            if student.admission_no == admission_no:
                return student
        return None

    def list_raw_students(self):
        return list(self.students.values())

    def create_student(self, data):
        student = Student(id=generate_id(), **normalize_student(data, self.academic_year))
        self.students[student.id] = student
        return student

    def update_student(self, student_id, data):
        student = self.students.get(student_id)
        if student is None:
            return None
        for name, value in student_updates(data).items():
            setattr(student, name, value)
        return student

    def delete_student(self, student_id):
        for payment in self.list_payments_by_student(student_id):
            del self.payments[payment.id]
        return self.students.pop(student_id, None) is not None

    def list_payments(self):
        return list(self.payments.values())

    def list_payments_by_student(self, student_id):
        payments = [p for p in self.payments.values() if p.student_id == student_id]
        return sorted(payments, key=lambda p: p.date)

    def get_payment(self, payment_id):
        return self.payments.get(payment_id)

    def create_payment(self, data):
        payment = Payment(id=generate_id(), **normalize_payment(data))
        self.payments[payment.id] = payment
        return payment


class DatabaseStorage(FeeStorage):
    """Persists records in the ``students`` and ``payments`` tables"""

    name = 'database'

    def __init__(self, academic_year):
        super().__init__(academic_year)
        self.session = db.session

    def commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def get_student(self, student_id):
        return self.session.get(Student, student_id)

    def get_student_by_admission_no(self, admission_no):
        return self.session.execute(
            db.select(Student).filter_by(admission_no=admission_no)
        ).scalars().first()

    def list_raw_students(self):
        return self.session.execute(db.select(Student)).scalars().all()

    def create_student(self, data):
        student = Student(id=generate_id(), **normalize_student(data, self.academic_year))
        self.session.add(student)
        self.commit()
        return student

    def update_student(self, student_id, data):
        student = self.get_student(student_id)
        if student is None:
            return None
        for name, value in student_updates(data).items():
            setattr(student, name, value)
        self.commit()
        return student

    def delete_student(self, student_id):
        # Payments and the student are removed in separate commits, not atomically
        self.session.execute(db.delete(Payment).where(Payment.student_id == student_id))
        self.commit()
        student = self.get_student(student_id)
        if student is None:
            return False
        self.session.delete(student)
        self.commit()
        return True

    def list_payments(self):
        return self.session.execute(db.select(Payment)).scalars().all()

    def list_payments_by_student(self, student_id):
        return self.session.execute(
            db.select(Payment).filter_by(student_id=student_id).order_by(Payment.date)
        ).scalars().all()

    def get_payment(self, payment_id):
        return self.session.get(Payment, payment_id)

    def create_payment(self, data):
        payment = Payment(id=generate_id(), **normalize_payment(data))
        self.session.add(payment)
        self.commit()
        return payment


def create_storage(app):
    """Build the storage backend for ``app`` from its configuration"""
    academic_year = app.config['CURRENT_ACADEMIC_YEAR']
    if app.config.get('DATABASE_URL'):
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['DATABASE_URL']
        db.init_app(app)
        storage = DatabaseStorage(academic_year)
    else:
        storage = MemStorage(academic_year)
    app.logger.info("Using %s storage", storage.name)
    return storage
