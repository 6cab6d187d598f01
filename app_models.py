import uuid
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def generate_id():
    return str(uuid.uuid4())


# Database Models
class Student(db.Model):
    __tablename__ = 'students'

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    admission_no = db.Column(db.Text, nullable=False, unique=True)
    student_name = db.Column(db.Text, nullable=False)
    parent_name = db.Column(db.Text, nullable=False)
    class_name = db.Column('class', db.Text, nullable=False)  # e.g. LKG, UKG, 1st, 2nd
    total_fee = db.Column(db.Integer, nullable=False, default=0)  # Tuition
    books_fee = db.Column(db.Integer, nullable=False, default=0)
    exam_fee = db.Column(db.Integer, nullable=False, default=0)
    academic_year = db.Column(db.Text, nullable=False)

    def total_fees(self):
        """Sum of all fee components owed for the year"""
        return self.total_fee + self.books_fee + self.exam_fee

    def to_dict(self):
        return {
            'id': self.id,
            'admissionNo': self.admission_no,
            'studentName': self.student_name,
            'parentName': self.parent_name,
            'class': self.class_name,
            'totalFee': self.total_fee,
            'booksFee': self.books_fee,
            'examFee': self.exam_fee,
            'academicYear': self.academic_year,
        }

    def __repr__(self):
        return f'<Student {self.admission_no}>'


class Payment(db.Model):
    __tablename__ = 'payments'

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    student_id = db.Column(db.String(36), db.ForeignKey('students.id'), nullable=False, index=True)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    tuition_fee_paid = db.Column(db.Integer, nullable=False, default=0)
    books_fee_paid = db.Column(db.Integer, nullable=False, default=0)
    exam_fee_paid = db.Column(db.Integer, nullable=False, default=0)
    installment = db.Column(db.Integer, nullable=False)
    payment_mode = db.Column(db.Text, nullable=False)  # Cash, UPI, Card, Cheque, Bank Transfer

    def total_amount(self):
        """Amount collected by this payment across all fee components"""
        return self.tuition_fee_paid + self.books_fee_paid + self.exam_fee_paid

    def to_dict(self):
        return {
            'id': self.id,
            'studentId': self.student_id,
            'date': self.date.isoformat(),
            'tuitionFeePaid': self.tuition_fee_paid,
            'booksFeePaid': self.books_fee_paid,
            'examFeePaid': self.exam_fee_paid,
            'installment': self.installment,
            'paymentMode': self.payment_mode,
        }

    def __repr__(self):
        return f'<Payment {self.id} installment={self.installment}>'
