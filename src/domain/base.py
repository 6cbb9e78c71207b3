from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns of the tables."""
    return datetime.now(UTC).replace(tzinfo=None)


def normalize_email(email: str) -> str:
    """Emails are stored and looked up lower-cased without surrounding blanks."""
    return email.strip().lower()
