from typing import Iterable, Optional, Set

def normalize_email(email: Optional[str]) -> Optional[str]:
    """Join key between Zoom and CRM emails: trimmed and lowercased"""
    if email is None:
        return None
    normalized = email.strip().lower()
    return normalized or None

def normalize_emails(emails: Iterable[Optional[str]]) -> Set[str]:
    """Normalize a batch of emails, dropping blanks"""
    result = set()
    for email in emails:
        normalized = normalize_email(email)
        if normalized:
            result.add(normalized)
    return result
