"""Error taxonomy for the data-access layer."""

import psycopg
import psycopg.errors


class DataAccessError(Exception):
    """Base class for failures reported by the data-access layer."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(DataAccessError):
    """A table or record does not exist."""

    status_code = 404


class ValidationError(DataAccessError):
    """Input rejected before any statement was sent to the database."""

    status_code = 400


class ConflictError(DataAccessError):
    """Duplicate table or identifier, as reported by the database."""

    status_code = 409


class ExecutionError(DataAccessError):
    """Any other database failure (malformed SQL, constraint violation...)."""

    status_code = 400


def translate_db_error(exc: psycopg.Error) -> DataAccessError:
    """Map a psycopg error to the data-access taxonomy.

    The database's own message is kept verbatim as the error detail.
    """
    detail = str(exc).strip() or exc.__class__.__name__
    if isinstance(
        exc,
        (psycopg.errors.DuplicateTable, psycopg.errors.DuplicateObject, psycopg.errors.UniqueViolation),
    ):
        return ConflictError(detail)
    if isinstance(exc, psycopg.errors.UndefinedTable):
        return NotFoundError(detail)
    return ExecutionError(detail)
