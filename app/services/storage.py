from sqlalchemy.orm import Session
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Iterable, List, Optional, Sequence, Tuple
import logging

from app.services.exceptions import StorageError

logger = logging.getLogger(__name__)


class StorageQuery:
    """
    Read-only query gateway over a SQLAlchemy session.

    Every method issues exactly one statement. Criteria are SQLAlchemy
    boolean clauses and are combined with AND. ``include`` takes loader
    options (``selectinload``/``joinedload``) so related rows come back in
    bounded batches instead of one query per row.

    No method takes a lock. Driver failures are logged with full detail and
    re-raised as StorageError, which aborts the calling operation.
    """

    def __init__(self, db: Session):
        self.db = db

    def count(self, model, *criteria) -> int:
        """Count rows of ``model`` matching all criteria."""
        stmt = select(func.count()).select_from(model).where(*criteria)
        return self._run(lambda: self.db.scalar(stmt), "count", model) or 0

    def find(
        self,
        model,
        *criteria,
        order_by: Sequence = (),
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        include: Iterable = (),
    ) -> List[Any]:
        """
        Fetch rows of ``model`` matching all criteria.

        Args:
            model: Mapped class to select
            criteria: Boolean clauses, ANDed together
            order_by: Ordering clauses
            limit: Maximum number of rows
            offset: Rows to skip
            include: Loader options for related rows

        Returns:
            List of model instances
        """
        stmt = select(model).where(*criteria).order_by(*order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        stmt = stmt.options(*include)
        return self._run(lambda: list(self.db.scalars(stmt).all()), "find", model)

    def find_by_id(self, model, entity_id: int, include: Iterable = ()) -> Optional[Any]:
        """Fetch a single row by primary key, or None."""
        stmt = select(model).where(model.id == entity_id).options(*include)
        return self._run(lambda: self.db.scalars(stmt).first(), "find_by_id", model)

    def find_windowed(
        self,
        model,
        partition_column,
        parent_ids: Sequence[int],
        order_by: Sequence,
        limit: int,
        offset: int = 0,
        include: Iterable = (),
    ) -> List[Any]:
        """
        Fetch the same (offset, limit) window for each parent in one statement.

        Rows are numbered per parent with ``row_number()`` so every parent
        gets its own window; a busy parent never eats into another parent's
        rows.

        Args:
            model: Mapped child class
            partition_column: Child column referencing the parent
            parent_ids: Parents whose windows are wanted
            order_by: Ordering inside each parent
            limit: Rows per parent
            offset: Rows skipped per parent
            include: Loader options for related rows

        Returns:
            Child rows grouped by parent, each group in window order
        """
        if not parent_ids:
            return []

        row_position = func.row_number().over(
            partition_by=partition_column, order_by=list(order_by)
        ).label("row_position")
        numbered = (
            select(model.id.label("id"), row_position)
            .where(partition_column.in_(parent_ids))
            .subquery()
        )
        stmt = (
            select(model)
            .join(numbered, model.id == numbered.c.id)
            .where(numbered.c.row_position > offset, numbered.c.row_position <= offset + limit)
            .order_by(partition_column, numbered.c.row_position)
            .options(*include)
        )
        return self._run(lambda: list(self.db.scalars(stmt).all()), "find_windowed", model)

    def count_grouped(
        self,
        column,
        *criteria,
        limit: Optional[int] = None,
    ) -> List[Tuple[Any, int]]:
        """
        Count rows per distinct value of ``column``.

        Groups are ordered by count descending, then by key ascending, so
        equal counts always come back in the same order.

        Returns:
            List of (key, count) tuples
        """
        occurrences = func.count().label("occurrences")
        stmt = (
            select(column, occurrences)
            .where(*criteria)
            .group_by(column)
            .order_by(occurrences.desc(), column.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        rows = self._run(lambda: self.db.execute(stmt).all(), "count_grouped", column)
        return [(key, count) for key, count in rows]

    def _run(self, read, operation: str, target):
        try:
            return read()
        except SQLAlchemyError as e:
            logger.error(f"Storage {operation} failed for {target}: {e}", exc_info=True)
            raise StorageError(detail="Storage query failed") from e
