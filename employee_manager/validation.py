"""Form validation for employee records.

Every field is checked even when an earlier one already failed, so the form
can show all problems in one go. Values are validated unescaped; markup
escaping is left to the templates.
"""
import enum
import re
from dataclasses import dataclass, field
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

FIELDS = ('name', 'email', 'phone', 'address')

# Backslashes plus C0 control characters, keeping tab, LF and CR
_ESCAPE_CHARS = re.compile(r'[\\\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')
_PHONE = re.compile(r'[0-9]{10}')

NAME_LENGTH = (2, 50)
ADDRESS_LENGTH = (5, 200)


class ErrorKind(enum.Enum):
    REQUIRED_FIELD = 'required_field'
    LENGTH_OUT_OF_RANGE = 'length_out_of_range'
    INVALID_FORMAT = 'invalid_format'


@dataclass(frozen=True)
class FieldError:
    field: str
    kind: ErrorKind
    message: str
    minimum: Optional[int] = None
    maximum: Optional[int] = None


@dataclass(frozen=True)
class CleanRecord:
    name: str
    email: str
    phone: str
    address: str

    def as_params(self):
        """Positional parameters in column order: name, email, phone, address."""
        return (self.name, self.email, self.phone, self.address)


@dataclass
class ValidationResult:
    record: Optional[CleanRecord] = None
    errors: List[FieldError] = field(default_factory=list)
    values: dict = field(default_factory=dict)

    @property
    def ok(self):
        return self.record is not None

    @property
    def messages(self):
        return [error.message for error in self.errors]


def normalize(value):
    """Drop escape-sequence characters and surrounding whitespace."""
    if value is None:
        return ''
    return _ESCAPE_CHARS.sub('', str(value)).strip()


def _is_email(value):
    try:
        validate_email(value, check_deliverability=False, allow_smtputf8=False)
    except EmailNotValidError:
        return False
    return True


def _check_length(field_name, value, label, bounds):
    low, high = bounds
    if low <= len(value) <= high:
        return None
    return FieldError(field_name, ErrorKind.LENGTH_OUT_OF_RANGE,
                      f"{label} must be between {low} and {high} characters",
                      minimum=low, maximum=high)


def check_name(value):
    if not value:
        return FieldError('name', ErrorKind.REQUIRED_FIELD, "Name is required")
    return _check_length('name', value, "Name", NAME_LENGTH)


def check_email(value):
    if not value:
        return FieldError('email', ErrorKind.REQUIRED_FIELD, "Email is required")
    if not _is_email(value):
        return FieldError('email', ErrorKind.INVALID_FORMAT, "Invalid email format")
    return None


def check_phone(value):
    if not value:
        return FieldError('phone', ErrorKind.REQUIRED_FIELD, "Phone number is required")
    if not _PHONE.fullmatch(value):
        return FieldError('phone', ErrorKind.INVALID_FORMAT, "Phone number must be 10 digits")
    return None


def check_address(value):
    if not value:
        return FieldError('address', ErrorKind.REQUIRED_FIELD, "Address is required")
    return _check_length('address', value, "Address", ADDRESS_LENGTH)


CHECKS = (
    ('name', check_name),
    ('email', check_email),
    ('phone', check_phone),
    ('address', check_address),
)


def validate(raw):
    """Normalize and check a submitted employee form.

    `raw` is any mapping (a Flask `request.form` works); missing keys count
    as empty. Returns a ValidationResult holding either a CleanRecord or the
    errors in field order, never both.
    """
    values = {name: normalize(raw.get(name, '')) for name in FIELDS}

    errors = []
    for name, check in CHECKS:
        error = check(values[name])
        if error is not None:
            errors.append(error)

    if errors:
        return ValidationResult(errors=errors, values=values)
    return ValidationResult(record=CleanRecord(**values), values=values)
