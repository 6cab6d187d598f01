"""
Balance calculation for students.

Balances are projected from a student's fee components and the payments
recorded against them. Nothing here is stored or mutated.
"""
from collections import namedtuple

FeeBalance = namedtuple('FeeBalance', ['total_paid', 'balance'])


def calculate_balance(student, payments):
    """Return the FeeBalance of ``student`` given its ``payments``.

    The balance goes negative when a student has overpaid.
    """
    total_paid = sum(payment.total_amount() for payment in payments)
    return FeeBalance(total_paid, student.total_fees() - total_paid)


class StudentWithBalance:
    """A student record together with its computed balance"""

    def __init__(self, student, fee_balance):
        self.student = student
        self.total_paid = fee_balance.total_paid
        self.balance = fee_balance.balance

    def to_dict(self):
        data = self.student.to_dict()
        data['totalPaid'] = self.total_paid
        data['balance'] = self.balance
        return data


def summarize(students, payments, recent=5):
    """Dashboard totals across all students"""
    latest = sorted(payments, key=lambda p: p.date, reverse=True)[:recent]
    return {
        'totalStudents': len(students),
        'totalFees': sum(s.student.total_fees() for s in students),
        'totalCollected': sum(s.total_paid for s in students),
        'totalOutstanding': sum(s.balance for s in students),
        'studentsWithBalance': sum(1 for s in students if s.balance > 0),
        'recentPayments': [p.to_dict() for p in latest],
    }
