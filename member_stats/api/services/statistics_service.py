"""
Statistics service.

Reads and writes a member's current statistics and rating history. Writes
run as one transaction per request: nested track blocks are created in
place, and child collections are synchronized through ItemReconciler.
"""
from typing import Any, Dict, List, Optional, Sequence
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from member_stats.api.exceptions import BadRequestError, ForbiddenError, NotFoundError
from member_stats.api.models import (
    CopilotStats,
    DataScienceHistoryEntry,
    DataScienceStats,
    DesignStats,
    DesignStatsItem,
    DevelopHistoryEntry,
    DevelopStats,
    DevelopStatsItem,
    MarathonStats,
    Member,
    MemberHistoryStats,
    MemberStats,
    SrmChallengeDetail,
    SrmDivisionStats,
    SrmStats,
)
from member_stats.api.models.audit import utcnow
from member_stats.api.repositories import HistoryStatsRepository, MemberRepository, MemberStatsRepository
from member_stats.api.schemas.requests import (
    DataScienceTrackPayload,
    HistoryStatsPayload,
    MemberStatsPayload,
    SrmPayload,
)
from member_stats.api.services.group_access import GroupAccessResolver
from member_stats.api.services.query_params import parse_comma_separated, parse_group_ids
from member_stats.api.services.reconciler import ItemReconciler
from member_stats.api.services.response_builder import build_stats_history_response, build_stats_response
from member_stats.auth import AuthUser, can_manage_member
from member_stats.core.config import PUBLIC_GROUP_ID, STATISTICS_SECURE_FIELDS
from member_stats.core.database import atomic

logger = logging.getLogger(__name__)

# Top-level keys a caller may request through `fields`.
MEMBER_STATS_FIELDS = (
    "userId", "groupId", "handle", "handleLower", "maxRating", "challenges", "wins",
    "DEVELOP", "DESIGN", "DATA_SCIENCE", "COPILOT",
    "createdAt", "updatedAt", "createdBy", "updatedBy",
)

HISTORY_STATS_FIELDS = (
    "userId", "groupId", "handle", "handleLower", "DEVELOP", "DATA_SCIENCE",
    "createdAt", "updatedAt", "createdBy", "updatedBy",
)


def strip_secure_fields(document: Dict[str, Any], secure_fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """Drop the audit fields hidden from callers who cannot manage the member."""
    hidden = set(STATISTICS_SECURE_FIELDS if secure_fields is None else secure_fields)
    return {key: value for key, value in document.items() if key not in hidden}


def _stamp(row: Any, values: Dict[str, Any], actor: str) -> None:
    for key, value in values.items():
        setattr(row, key, value)
    row.updated_by = actor
    row.updated_at = utcnow()


# =============================================================================
# NESTED CREATES
# =============================================================================

def _new_track(model: type, item_model: type, payload, actor: str):
    block = model(**payload.values("items"), created_by=actor)
    block.items = [item_model(**item.values(), created_by=actor) for item in payload.items or []]
    return block


def _new_srm(payload: SrmPayload, actor: str) -> SrmStats:
    srm = SrmStats(**payload.values("challenge_details", "divisions"), created_by=actor)
    srm.challenge_details = [
        SrmChallengeDetail(**detail.values(), created_by=actor)
        for detail in payload.challenge_details or []
    ]
    srm.divisions = [
        SrmDivisionStats(**division.values(), created_by=actor)
        for division in payload.divisions or []
    ]
    return srm


def _new_data_science(payload: DataScienceTrackPayload, actor: str) -> DataScienceStats:
    data_science = DataScienceStats(**payload.values("srm", "marathon"), created_by=actor)
    if payload.srm is not None:
        data_science.srm = _new_srm(payload.srm, actor)
    if payload.marathon is not None:
        data_science.marathon = MarathonStats(**payload.marathon.values(), created_by=actor)
    return data_science


def _scope(payload) -> Dict[str, Any]:
    """group_id / is_private columns for a new record."""
    if payload.group_id is not None:
        return {"group_id": payload.group_id, "is_private": True}
    return {"group_id": None, "is_private": bool(payload.is_private)}


class StatisticsService:
    """
    Service for member statistics and rating history.

    Args:
        db: Request-scoped database session
        group_resolver: Decides which group records a caller may read
    """

    def __init__(self, db: AsyncSession, group_resolver: Optional[GroupAccessResolver] = None):
        self.db = db
        self.group_resolver = group_resolver or GroupAccessResolver()
        self.members = MemberRepository(db)
        self.stats = MemberStatsRepository(db)
        self.history = HistoryStatsRepository(db)

    def _report_group_id(self, record: Any) -> Optional[int]:
        """The public record is reported under the public group id."""
        return record.group_id if record.is_private else PUBLIC_GROUP_ID

    async def _get_manageable_member(self, user: AuthUser, handle: str, action: str, what: str) -> Member:
        member = await self.members.get_by_handle(handle)
        if not can_manage_member(user, member):
            logger.warning(f"{user.actor} denied {action} of {what} for {member.handle}")
            raise ForbiddenError(f"You are not allowed to {action} the member {what}.")
        return member

    async def _read(self, repo, builder, user, handle, fields_value, group_ids_value, allowed_fields):
        fields = parse_comma_separated(fields_value, allowed_fields)
        requested = parse_group_ids(group_ids_value)
        member = await self.members.get_by_handle(handle)
        group_ids = await self.group_resolver.allowed_group_ids(user, member, requested)

        results = []
        for group_id in group_ids:
            if group_id == self.group_resolver.public_group_id:
                record = await repo.find_public(member.user_id)
            else:
                record = await repo.find_private(member.user_id, group_id)
            if record is not None:
                results.append(builder(member, record, fields, group_id))

        if not can_manage_member(user, member):
            results = [strip_secure_fields(document) for document in results]
        return results

    # =========================================================================
    # MEMBER STATS
    # =========================================================================

    async def get_member_stats(
        self,
        user: Optional[AuthUser],
        handle: str,
        fields: Optional[str] = None,
        group_ids: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get a member's statistics, one document per visible group.

        Args:
            user: Caller, or None when anonymous
            handle: Member handle
            fields: Comma separated top-level keys to keep
            group_ids: Comma separated group ids to read

        Returns:
            Stats documents, in group order; groups without a record are skipped

        Raises:
            NotFoundError: Unknown handle
            BadRequestError: Malformed `fields` or `group_ids`
        """
        return await self._read(
            self.stats, build_stats_response, user, handle, fields, group_ids, MEMBER_STATS_FIELDS,
        )

    async def create_member_stats(self, user: AuthUser, handle: str, payload: MemberStatsPayload) -> Dict[str, Any]:
        """
        Create the statistics record of a member for one group scope.

        Raises:
            NotFoundError: Unknown handle
            ForbiddenError: Caller cannot manage the member
            BadRequestError: A record already exists for this scope
        """
        member = await self._get_manageable_member(user, handle, "create", "statistics")
        if await self.stats.find_by_scope(member.user_id, payload.group_id) is not None:
            raise BadRequestError("Member statistics already exist for this group.")

        actor = user.actor
        record = MemberStats(
            user_id=member.user_id,
            challenges=payload.challenges,
            wins=payload.wins,
            member_rating_id=payload.max_rating_id,
            created_by=actor,
            **_scope(payload),
        )
        if payload.develop is not None:
            record.develop = _new_track(DevelopStats, DevelopStatsItem, payload.develop, actor)
        if payload.design is not None:
            record.design = _new_track(DesignStats, DesignStatsItem, payload.design, actor)
        if payload.data_science is not None:
            record.data_science = _new_data_science(payload.data_science, actor)
        if payload.copilot is not None:
            record.copilot = CopilotStats(**payload.copilot.values(), created_by=actor)

        async with atomic(self.db):
            self.db.add(record)
            await self.db.flush()
            record_id = record.id

        logger.info(f"Created member stats {record_id} for {member.handle} by {actor}")
        record = await self.stats.reload(record_id)
        return build_stats_response(member, record, group_id=self._report_group_id(record))

    async def update_member_stats(self, user: AuthUser, handle: str, payload: MemberStatsPayload) -> Dict[str, Any]:
        """
        Partially update a member's statistics.

        Scalars the client sent are written; track blocks missing on the
        stored record are created; develop items, design items and SRM
        challenge details/divisions are reconciled against the submission.
        Everything commits together or not at all.

        Raises:
            NotFoundError: Unknown handle, no record for the scope, or a
                submitted item id that does not belong to the record
            ForbiddenError: Caller cannot manage the member
        """
        member = await self._get_manageable_member(user, handle, "update", "statistics")
        record = await self.stats.find_by_scope(member.user_id, payload.group_id)
        if record is None:
            raise NotFoundError("Member statistics not found")

        actor = user.actor
        async with atomic(self.db):
            values = payload.values("group_id", "is_private", "max_rating_id",
                                    "develop", "design", "data_science", "copilot")
            if "max_rating_id" in payload.model_fields_set:
                values["member_rating_id"] = payload.max_rating_id
            _stamp(record, values, actor)

            if payload.develop is not None:
                await self._sync_track(record, "develop", DevelopStats, DevelopStatsItem,
                                       "develop_stats_id", payload.develop, actor)
            if payload.design is not None:
                await self._sync_track(record, "design", DesignStats, DesignStatsItem,
                                       "design_stats_id", payload.design, actor)
            if payload.data_science is not None:
                await self._sync_data_science(record, payload.data_science, actor)
            if payload.copilot is not None:
                if record.copilot is None:
                    record.copilot = CopilotStats(**payload.copilot.values(), created_by=actor)
                else:
                    _stamp(record.copilot, payload.copilot.values(), actor)
            await self.db.flush()

        logger.info(f"Updated member stats {record.id} for {member.handle} by {actor}")
        record = await self.stats.reload(record.id)
        return build_stats_response(member, record, group_id=self._report_group_id(record))

    async def _sync_track(self, record, attr, model, item_model, parent_key, payload, actor):
        block = getattr(record, attr)
        if block is None:
            setattr(record, attr, _new_track(model, item_model, payload, actor))
            return
        _stamp(block, payload.values("items"), actor)
        await ItemReconciler(self.db, item_model, parent_key).reconcile(
            block.items, payload.items or [], block.id, actor,
        )

    async def _sync_data_science(self, record: MemberStats, payload: DataScienceTrackPayload, actor: str):
        data_science = record.data_science
        if data_science is None:
            record.data_science = _new_data_science(payload, actor)
            return
        _stamp(data_science, payload.values("srm", "marathon"), actor)

        if payload.srm is not None:
            srm = data_science.srm
            if srm is None:
                data_science.srm = _new_srm(payload.srm, actor)
            else:
                _stamp(srm, payload.srm.values("challenge_details", "divisions"), actor)
                await ItemReconciler(self.db, SrmChallengeDetail, "srm_stats_id").reconcile(
                    srm.challenge_details, payload.srm.challenge_details or [], srm.id, actor,
                )
                await ItemReconciler(self.db, SrmDivisionStats, "srm_stats_id").reconcile(
                    srm.divisions, payload.srm.divisions or [], srm.id, actor,
                )

        if payload.marathon is not None:
            if data_science.marathon is None:
                data_science.marathon = MarathonStats(**payload.marathon.values(), created_by=actor)
            else:
                _stamp(data_science.marathon, payload.marathon.values(), actor)

    # =========================================================================
    # HISTORY STATS
    # =========================================================================

    async def get_history_stats(
        self,
        user: Optional[AuthUser],
        handle: str,
        fields: Optional[str] = None,
        group_ids: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Get a member's rating history, one document per visible group."""
        return await self._read(
            self.history, build_stats_history_response, user, handle, fields, group_ids,
            HISTORY_STATS_FIELDS,
        )

    async def create_history_stats(self, user: AuthUser, handle: str, payload: HistoryStatsPayload) -> Dict[str, Any]:
        """
        Create the rating history record of a member for one group scope.

        Raises:
            NotFoundError: Unknown handle
            ForbiddenError: Caller cannot manage the member
            BadRequestError: A record already exists for this scope
        """
        member = await self._get_manageable_member(user, handle, "create", "history statistics")
        if await self.history.find_by_scope(member.user_id, payload.group_id) is not None:
            raise BadRequestError("Member history statistics already exist for this group.")

        actor = user.actor
        record = MemberHistoryStats(user_id=member.user_id, created_by=actor, **_scope(payload))
        record.develop = [
            DevelopHistoryEntry(**entry.values(), created_by=actor) for entry in payload.develop or []
        ]
        record.data_science = [
            DataScienceHistoryEntry(**entry.values(), created_by=actor) for entry in payload.data_science or []
        ]

        async with atomic(self.db):
            self.db.add(record)
            await self.db.flush()
            record_id = record.id

        logger.info(f"Created history stats {record_id} for {member.handle} by {actor}")
        record = await self.history.reload(record_id)
        return build_stats_history_response(member, record, group_id=self._report_group_id(record))

    async def update_history_stats(self, user: AuthUser, handle: str, payload: HistoryStatsPayload) -> Dict[str, Any]:
        """
        Reconcile a member's rating history against the submission.

        The submission is the whole history: a collection left out of the
        payload is treated as empty, so its stored entries are deleted.

        Raises:
            NotFoundError: Unknown handle, no record for the scope, or a
                submitted entry id that does not belong to the record
            ForbiddenError: Caller cannot manage the member
        """
        member = await self._get_manageable_member(user, handle, "update", "history statistics")
        record = await self.history.find_by_scope(member.user_id, payload.group_id)
        if record is None:
            raise NotFoundError("Member history statistics not found")

        actor = user.actor
        async with atomic(self.db):
            _stamp(record, {}, actor)
            await ItemReconciler(self.db, DevelopHistoryEntry, "history_stats_id").reconcile(
                record.develop, payload.develop or [], record.id, actor,
            )
            await ItemReconciler(self.db, DataScienceHistoryEntry, "history_stats_id").reconcile(
                record.data_science, payload.data_science or [], record.id, actor,
            )
            await self.db.flush()

        logger.info(f"Updated history stats {record.id} for {member.handle} by {actor}")
        record = await self.history.reload(record.id)
        return build_stats_history_response(member, record, group_id=self._report_group_id(record))
