"""Email address validation and normalization."""

from shared.errors import ValidationError

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def _invalid(email: str) -> ValidationError:
    return ValidationError(f"Invalid email address: {email!r}", {"email": ["invalid"]})


def normalize_email(email: str) -> str:
    """Return the lower-cased address, or raise ``ValidationError``.

    Enforces structural validity: exactly one @, non-empty local and domain
    parts, a dotted domain, no consecutive dots, no forbidden characters.
    """
    email = (email or "").strip()

    if not email or any(ch in email for ch in (" ", "\t", "\n")):
        raise _invalid(email)

    if email.count("@") != 1:
        raise _invalid(email)

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        raise _invalid(email)

    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        raise _invalid(email)

    for label in domain_part.split("."):
        if label.startswith("-") or label.endswith("-"):
            raise _invalid(email)

    if "." not in domain_part:
        raise _invalid(email)

    if ".." in local_part or ".." in domain_part:
        raise _invalid(email)

    if any(forbidden in email for forbidden in _FORBIDDEN):
        raise _invalid(email)

    return email.lower()
