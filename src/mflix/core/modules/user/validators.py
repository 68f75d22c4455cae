from typing import Any

from mflix.errors import ValidationError


def validate_credentials(email: Any, password: Any) -> tuple[str, str]:
    """Validate that both credentials are present.

    Raises:
        ValidationError: If either value is missing, empty or not a string
    """
    if not email or not password or not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("Missing credentials")
    return email, password
