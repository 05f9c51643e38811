"""
Document-store primitives on top of SQLAlchemy.

A collection is an ORM model and a document is one row. Array fields are
JSON lists that are only ever rewritten whole, with the two mutation
operators the application relies on:

- ``array_union``: append each value that is not already present;
- ``array_remove``: drop every element equal to one of the values.

Both compare whole elements by value, so removing a record only works when
the caller holds an exact copy of the stored one. A stale copy removes
nothing and raises nothing.
"""
import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits


def new_document_id(length: int = 20) -> str:
    """Random alphanumeric id, same shape as store-assigned document ids."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def iso_now() -> str:
    """Current UTC time as an ISO-8601 string with microsecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def array_union(current: Optional[Iterable[Any]], *values: Any) -> List[Any]:
    result = list(current or [])
    for value in values:
        if value not in result:
            result.append(value)
    return result


def array_remove(current: Optional[Iterable[Any]], *values: Any) -> List[Any]:
    return [item for item in (current or []) if item not in values]


def get_collection(db: Session, model, *order_by) -> list:
    """Read every document of a collection."""
    query = db.query(model)
    if order_by:
        query = query.order_by(*order_by)
    return query.all()


def get_document(db: Session, model, doc_id: str, for_update: bool = False):
    """
    Fetch one document by primary key.

    With ``for_update`` the row is locked for the rest of the transaction on
    backends that support ``SELECT ... FOR UPDATE`` (SQLite ignores it).
    """
    query = db.query(model).filter(model.__mapper__.primary_key[0] == doc_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def write_array(document, field: str, values: List[Any]) -> None:
    """Replace an array field; JSON columns do not track in-place mutation."""
    setattr(document, field, values)
    flag_modified(document, field)


def array_union_write(db: Session, document, field: str, *values: Any) -> int:
    """Union ``values`` into ``document.field``. Returns how many were added."""
    before = list(getattr(document, field) or [])
    after = array_union(before, *values)
    write_array(document, field, after)
    db.commit()
    added = len(after) - len(before)
    logger.debug(f"array_union {document.__tablename__}.{field}: added={added}")
    return added


def array_remove_write(db: Session, document, field: str, *values: Any) -> int:
    """Remove ``values`` from ``document.field``. Returns how many were removed."""
    before = list(getattr(document, field) or [])
    after = array_remove(before, *values)
    write_array(document, field, after)
    db.commit()
    removed = len(before) - len(after)
    if not removed:
        logger.debug(f"array_remove {document.__tablename__}.{field}: no element matched")
    return removed
