"""Column validators that report on values without changing them."""

from __future__ import annotations

import re
from typing import Any, Sequence

from insightdash.schemas.cleaning import EmailCheck, EmailValidationReport

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))


def validate_email_column(rows: Sequence[dict[str, Any]], column: str) -> EmailValidationReport:
    """Check every non-empty cell of ``column`` against a basic address shape."""
    details = []
    for row in rows:
        value = row.get(column)
        if value is None or value == "":
            continue
        email = str(value)
        valid = is_valid_email(email)
        details.append(
            EmailCheck(
                email=email,
                valid=valid,
                suggestion=None if valid else "Check email format",
            )
        )

    valid_count = sum(1 for check in details if check.valid)
    return EmailValidationReport(
        valid_count=valid_count,
        invalid_count=len(details) - valid_count,
        details=details,
    )
