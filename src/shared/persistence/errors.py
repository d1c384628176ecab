"""Translation of database driver errors into domain errors."""

from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError

from shared.errors import Conflict, LockTimeout, TransientStorageError

LOCK_NOT_AVAILABLE = "55P03"
QUERY_CANCELED = "57014"
RETRYABLE_SQLSTATES = frozenset({"40P01", "40001"})


def sqlstate(exc: DBAPIError) -> str | None:
    """SQLSTATE of the underlying driver error (psycopg2 ``pgcode``, psycopg ``sqlstate``)."""
    orig = exc.orig
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


@contextmanager
def translate_db_errors():
    try:
        yield
    except IntegrityError as exc:
        raise Conflict("Record conflicts with existing data", {"reason": str(exc.orig)}) from exc
    except DBAPIError as exc:
        code = sqlstate(exc)
        if code in (LOCK_NOT_AVAILABLE, QUERY_CANCELED):
            raise LockTimeout() from exc
        if code in RETRYABLE_SQLSTATES:
            raise TransientStorageError(str(exc.orig)) from exc
        raise
