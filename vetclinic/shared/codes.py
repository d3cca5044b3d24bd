"""Human-readable record codes (XA001, KH001, HS001, ...)"""

import logging
from typing import Callable, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

ADDRESS_PREFIX = "XA"
CUSTOMER_PREFIX = "KH"
PET_PREFIX = "HS"

# Attempts before a code clash with a concurrent insert is given up on
CODE_ATTEMPTS = 3

T = TypeVar("T")


def next_code(db: Session, column, prefix: str, width: int = 3) -> str:
    """Next sequential code after the highest existing one with ``prefix``"""
    last = (
        db.query(column)
        .filter(column.like(f"{prefix}%"))
        # Longer codes are numerically larger once the counter outgrows the padding
        .order_by(func.length(column).desc(), column.desc())
        .first()
    )

    number = 1
    if last:
        try:
            number = int(last[0][len(prefix):]) + 1
        except ValueError:
            number = db.query(func.count(column)).scalar() + 1
    return f"{prefix}{number:0{width}d}"


def _code_taken(db: Session, column, code: str) -> bool:
    return db.query(column).filter(column == code).first() is not None


def insert_with_code(db: Session, column, prefix: str, build: Callable[[str], T]) -> T:
    """
    Add the record(s) built for a fresh code and commit.

    ``build(code)`` adds everything to the session and returns the main record.
    When a concurrent insert took the same code first the transaction is rolled
    back and retried with the next code. Any other integrity error is re-raised.
    """
    attempt = 0
    while True:
        attempt += 1
        code = next_code(db, column, prefix)
        try:
            record = build(code)
            db.commit()
        except IntegrityError:
            db.rollback()
            if attempt == CODE_ATTEMPTS or not _code_taken(db, column, code):
                raise
            logger.warning(f"⚠️ Code {code} was taken by a concurrent insert, retrying")
            continue
        db.refresh(record)
        return record
