"""
Validation of API request bodies.

Bodies arrive as JSON objects with camelCase keys. They are translated to the
snake_case field names used by the models and validated with WTForms.
"""
import json
import re
from datetime import timezone

from werkzeug.datastructures import MultiDict
from wtforms import DateTimeField, Form, IntegerField, StringField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional

from errors import ValidationFailed

STUDENT_KEYS = {
    'admissionNo': 'admission_no',
    'studentName': 'student_name',
    'parentName': 'parent_name',
    'class': 'class_name',
    'totalFee': 'total_fee',
    'booksFee': 'books_fee',
    'examFee': 'exam_fee',
    'academicYear': 'academic_year',
}

PAYMENT_KEYS = {
    'studentId': 'student_id',
    'date': 'date',
    'tuitionFeePaid': 'tuition_fee_paid',
    'booksFeePaid': 'books_fee_paid',
    'examFeePaid': 'exam_fee_paid',
    'installment': 'installment',
    'paymentMode': 'payment_mode',
}

# Accepts what browsers send from Date.toISOString() and date inputs
DATE_FORMATS = [
    '%Y-%m-%dT%H:%M:%S.%f%z',
    '%Y-%m-%dT%H:%M:%S%z',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M',
    '%Y-%m-%d',
]

# Amounts and installments are stored in 32-bit integer columns
MAX_INTEGER = 2147483647

_ORDINAL_CLASS = re.compile(r'^(\d+)\s*(st|nd|rd|th)?$', re.IGNORECASE)


def ordinal(number):
    if 10 <= number % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(number % 10, 'th')
    return f'{number}{suffix}'


def normalize_class_name(label):
    """Give numeric class names their ordinal suffix ("1" -> "1st", "12TH" -> "12th").

    Named classes such as LKG or UKG are only stripped.
    """
    if label is None:
        return label
    label = label.strip()
    match = _ORDINAL_CLASS.match(label)
    if not match or int(match.group(1)) == 0:
        return label
    return ordinal(int(match.group(1)))


def strip(value):
    return value.strip() if isinstance(value, str) else value


def to_naive_utc(value):
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class StudentForm(Form):
    admission_no = StringField('Admission number', [DataRequired()], filters=[strip])
    student_name = StringField('Student name', [DataRequired()], filters=[strip])
    parent_name = StringField('Parent name', [DataRequired()], filters=[strip])
    class_name = StringField('Class', [DataRequired()], filters=[normalize_class_name])
    total_fee = IntegerField('Tuition fee', [Optional(), NumberRange(min=0, max=MAX_INTEGER)])
    books_fee = IntegerField('Books fee', [Optional(), NumberRange(min=0, max=MAX_INTEGER)])
    exam_fee = IntegerField('Exam fee', [Optional(), NumberRange(min=0, max=MAX_INTEGER)])
    academic_year = StringField('Academic year', [Optional()], filters=[strip])


class PaymentForm(Form):
    student_id = StringField('Student', [DataRequired()], filters=[strip])
    date = DateTimeField('Date', [Optional()], format=DATE_FORMATS, filters=[to_naive_utc])
    tuition_fee_paid = IntegerField('Tuition fee paid', [Optional(), NumberRange(min=0, max=MAX_INTEGER)])
    books_fee_paid = IntegerField('Books fee paid', [Optional(), NumberRange(min=0, max=MAX_INTEGER)])
    exam_fee_paid = IntegerField('Exam fee paid', [Optional(), NumberRange(min=0, max=MAX_INTEGER)])
    installment = IntegerField('Installment', [InputRequired(), NumberRange(min=1, max=MAX_INTEGER)])
    payment_mode = StringField('Payment mode', [DataRequired()], filters=[strip])


def to_formdata(payload, keys):
    """Translate a JSON object into form data keyed by field name"""
    if not isinstance(payload, dict):
        raise ValidationFailed("Request body must be a JSON object")
    formdata = MultiDict()
    for key, name in keys.items():
        value = payload.get(key)
        if value is None:
            continue
        if isinstance(value, (list, dict)):
            raise ValidationFailed(f"{key}: Expected a single value")
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        formdata[name] = value if isinstance(value, str) else json.dumps(value)
    return formdata


def error_message(form):
    messages = []
    for name, errors in form.errors.items():
        label = form[name].label.text
        messages.append(f"{label}: {' '.join(errors)}")
    return '; '.join(messages)


def validate(form_class, payload, keys, partial=False):
    formdata = to_formdata(payload, keys)
    form = form_class(formdata=formdata)
    if partial:
        for name in list(form._fields):
            if name not in formdata:
                delattr(form, name)
    if not form.validate():
        raise ValidationFailed(error_message(form))
    # Blank optional fields are left to the storage defaults
    return {name: value for name, value in form.data.items() if value is not None and value != ''}


def validate_student(payload, partial=False):
    """Validated student fields from a request body.

    With ``partial`` only the keys present in the body are validated and
    returned, for updates.
    """
    return validate(StudentForm, payload, STUDENT_KEYS, partial)


def validate_payment(payload):
    return validate(PaymentForm, payload, PAYMENT_KEYS)
