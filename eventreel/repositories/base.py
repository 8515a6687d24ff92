"""Shared persistence error translation for repositories."""

import functools
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eventreel.results import AppError, Result, failure

logger = logging.getLogger(__name__)


class Repository:
    """Base class holding the session a repository works in."""

    def __init__(self, db: Session) -> None:
        self.db = db


def db_errors(func: Callable[..., Result[Any]]) -> Callable[..., Result[Any]]:
    """Roll back and turn SQLAlchemy errors into DatabaseError failures.

    The message is the driver's own text (e.g. the violated constraint).
    """

    @functools.wraps(func)
    def wrapper(self: Repository, *args: Any, **kwargs: Any) -> Result[Any]:
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self.db.rollback()
            message = str(getattr(e, "orig", None) or e)
            logger.error("%s failed: %s", func.__qualname__, message)
            return failure(AppError.database(message))

    return wrapper
