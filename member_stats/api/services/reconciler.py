"""
Child collection reconciliation.

Synchronizes a persisted collection (e.g. the develop items of one
DevelopStats row) with the collection a client submitted:

- a persisted id missing from the submission is deleted
- a submitted item carrying an id updates that row
- a submitted item without an id is inserted under the parent

Items without an id are never matched against existing rows by content.
The caller owns the transaction; nothing here commits.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple
import logging

from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from member_stats.api.models.audit import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcilePlan:
    """The three disjoint outcomes of diffing existing ids against a submission."""
    delete_ids: Tuple[int, ...]
    updates: Tuple[Tuple[int, Any], ...]
    inserts: Tuple[Any, ...]

    @property
    def is_empty(self) -> bool:
        return not (self.delete_ids or self.updates or self.inserts)


def plan_reconciliation(existing_ids: Iterable[int], desired: Sequence[Any]) -> ReconcilePlan:
    """
    Diff persisted ids against desired items.

    Args:
        existing_ids: Ids of the rows currently stored under the parent
        desired: Submitted items; each exposes an `id` attribute (None for new)

    Returns:
        ReconcilePlan. Update ids are not checked against `existing_ids`;
        an unknown id surfaces as a storage error when the plan is applied.
        If an id is submitted twice the last occurrence wins.
    """
    desired_by_id: Dict[int, Any] = {}
    inserts: List[Any] = []
    for item in desired:
        if item.id is None:
            inserts.append(item)
        else:
            desired_by_id[item.id] = item

    delete_ids = tuple(
        row_id for row_id in dict.fromkeys(existing_ids) if row_id not in desired_by_id
    )
    return ReconcilePlan(
        delete_ids=delete_ids,
        updates=tuple(desired_by_id.items()),
        inserts=tuple(inserts),
    )


class ItemReconciler:
    """
    Applies a ReconcilePlan for one child model.

    Args:
        session: Session whose transaction the writes join
        model: ORM class of the child rows
        parent_key: Name of the child's foreign key column to the parent
    """

    def __init__(self, session: AsyncSession, model: type, parent_key: str):
        self.session = session
        self.model = model
        self.parent_key = parent_key

    async def reconcile(
        self,
        existing: Sequence[Any],
        desired: Sequence[Any],
        parent_id: int,
        actor: str,
    ) -> List[int]:
        """
        Make the rows under `parent_id` match `desired`.

        Deletions are flushed before any update or insert so that a storage
        level uniqueness rule never sees the old and new rows together.

        Args:
            existing: Rows currently persisted under the parent
            desired: Submitted items (payload models with `id` and `values()`)
            parent_id: Primary key of the parent row
            actor: Handle or subject stamped into the audit columns

        Returns:
            Row ids in the order of `desired` (generated ids for inserts)

        Raises:
            NoResultFound: If a submitted id is not a row under this parent
        """
        rows_by_id = {row.id: row for row in existing}
        plan = plan_reconciliation(rows_by_id.keys(), desired)
        now = utcnow()

        for row_id in plan.delete_ids:
            await self.session.delete(rows_by_id[row_id])
        if plan.delete_ids:
            await self.session.flush()

        for row_id, item in plan.updates:
            row = rows_by_id.get(row_id)
            if row is None:
                raise NoResultFound(f"{self.model.__name__} {row_id} not found")
            for key, value in item.values().items():
                setattr(row, key, value)
            row.updated_by = actor
            row.updated_at = now

        created = []
        for item in plan.inserts:
            row = self.model(
                **item.values(),
                **{self.parent_key: parent_id},
                created_by=actor,
                created_at=now,
            )
            self.session.add(row)
            created.append(row)

        await self.session.flush()

        logger.debug(
            f"Reconciled {self.model.__name__} under {self.parent_key}={parent_id}: "
            f"{len(plan.delete_ids)} deleted, {len(plan.updates)} updated, "
            f"{len(plan.inserts)} inserted"
        )

        new_ids = iter(row.id for row in created)
        return [item.id if item.id is not None else next(new_ids) for item in desired]
