from pwdlib import PasswordHash
from pwdlib.exceptions import PwdlibError

password_hash = PasswordHash.recommended()  # argon2id

SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;:',.<>?/"
MIN_PASSWORD_LENGTH = 8
PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters and contain at least one uppercase letter, "
    "one lowercase letter, one number and one special character"
)


def hash_password(password: str) -> str:
    return password_hash.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    if not password or not hashed_password:
        return False
    try:
        return password_hash.verify(password, hashed_password)
    except PwdlibError:
        return False


def meets_strength_policy(password: str | None) -> bool:
    if not password or not password.strip() or len(password) < MIN_PASSWORD_LENGTH:
        return False

    has_upper = any(ch.isupper() for ch in password)
    has_lower = any(ch.islower() for ch in password)
    has_digit = any(ch.isdigit() for ch in password)
    has_special = any(ch in SPECIAL_CHARACTERS for ch in password)

    return has_upper and has_lower and has_digit and has_special
