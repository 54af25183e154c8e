"""Input checks run before any comment API call."""

from portal.domain.error import ValidationError

MAX_TEXT_LENGTH = 10000


def clean_text(text: str) -> str:
    """Trim comment text, rejecting empty and oversized input.

    Raises:
        ValidationError: If the trimmed text is empty or too long
    """
    cleaned = text.strip()
    if not cleaned:
        raise ValidationError("Comment text cannot be empty")
    if len(cleaned) > MAX_TEXT_LENGTH:
        raise ValidationError(
            f"Comment text cannot exceed {MAX_TEXT_LENGTH} characters"
        )
    return cleaned
