import re

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
NAME_PATTERN = re.compile(r'^[a-zA-Z\s]+$')
REGISTRATION_NUMBER_PATTERN = re.compile(r'^[0-9]{4}-[A-Z]{2,4}-[0-9]{3}$')
MAX_NAME_LENGTH = 50


def normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized:
        raise ValueError('Email is required.')
    if not EMAIL_PATTERN.match(normalized):
        raise ValueError('Please enter a valid email address.')
    return normalized


def normalize_person_name(value: str, field_label: str) -> str:
    normalized = ' '.join(value.split())
    if not normalized:
        raise ValueError(f'{field_label} is required.')
    if len(normalized) > MAX_NAME_LENGTH:
        raise ValueError(f'{field_label} cannot exceed {MAX_NAME_LENGTH} characters.')
    if not NAME_PATTERN.match(normalized):
        raise ValueError(f'{field_label} can only contain letters.')
    return normalized


def normalize_registration_number(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().upper()
    if not normalized:
        return None
    if not REGISTRATION_NUMBER_PATTERN.match(normalized):
        raise ValueError('Registration number must be in format: YYYY-DEPT-###')
    return normalized
