"""Validation of table/column names before they are spliced into SQL text.

Values never go through here: they are always bound as parameters.
"""

import re

from core.errors import ValidationError


# PostgreSQL truncates identifiers longer than NAMEDATALEN - 1
MAX_IDENTIFIER_LENGTH = 63

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# "integer", "character varying(255)", "numeric(10, 2)", "text[]",
# "timestamp(3) with time zone"
TYPE_MODIFIER = r"(\(\s*\d+\s*(,\s*\d+\s*)?\))?"
TYPE_NAME_RE = re.compile(
    r"^[A-Za-z][A-Za-z0-9_]*" + TYPE_MODIFIER
    + r"( [A-Za-z][A-Za-z0-9_]*)*" + TYPE_MODIFIER
    + r"(\[\])?$"
)


def validate_identifier(name: str) -> str:
    """Return name unchanged if it is a safe identifier, else raise ValidationError."""
    if not isinstance(name, str) or not name:
        raise ValidationError("Identifier must be a non-empty string")
    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise ValidationError(
            f"Identifier too long ({len(name)} > {MAX_IDENTIFIER_LENGTH}): {name[:20]}..."
        )
    if not IDENTIFIER_RE.match(name):
        raise ValidationError(f"Invalid identifier: {name!r}")
    return name


def quote_identifier(name: str) -> str:
    """Validate and double-quote an identifier for use in SQL text."""
    return f'"{validate_identifier(name)}"'


def validate_type_name(type_name: str) -> str:
    """Return a declared column type (stripped) if it matches the allow-list."""
    if not isinstance(type_name, str) or not type_name.strip():
        raise ValidationError("Column type is required")
    cleaned = type_name.strip()
    if not TYPE_NAME_RE.match(cleaned):
        raise ValidationError(f"Invalid column type: {type_name!r}")
    return cleaned
