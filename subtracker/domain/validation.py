"""Field rules for user accounts, evaluated before any write."""

from __future__ import annotations

from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

from ..core.errors import FieldViolation

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8
# bcrypt only accepts this many bytes.
PASSWORD_MAX_BYTES = 72


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_user(name: Optional[str], email: Optional[str], password: Optional[str]) -> List[FieldViolation]:
    """Return every violated rule for a sign-up payload; an empty list means valid."""
    violations: List[FieldViolation] = []

    clean_name = (name or "").strip()
    if not clean_name:
        violations.append(FieldViolation("name", "Username is required."))
    elif not NAME_MIN_LENGTH <= len(clean_name) <= NAME_MAX_LENGTH:
        violations.append(
            FieldViolation(
                "name",
                f"Username must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters.",
            )
        )

    clean_email = normalize_email(email or "")
    if not clean_email:
        violations.append(FieldViolation("email", "Email is required."))
    else:
        try:
            validate_email(clean_email, check_deliverability=False)
        except EmailNotValidError:
            violations.append(FieldViolation("email", "Please enter valid email address."))

    if not password:
        violations.append(FieldViolation("password", "Password is required."))
    elif len(password) < PASSWORD_MIN_LENGTH:
        violations.append(
            FieldViolation("password", f"Password must be at least {PASSWORD_MIN_LENGTH} characters.")
        )
    elif len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        violations.append(
            FieldViolation("password", f"Password must be at most {PASSWORD_MAX_BYTES} bytes.")
        )

    return violations
