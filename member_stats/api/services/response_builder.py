"""
Response shaping for member statistics.

Turns persisted rows into the nested documents clients consume. Every
builder here is pure: it reads ORM rows that are already loaded, never
touches the session and never mutates its inputs.

Field selection goes through FieldMap allow-lists. Each map is validated
against its model's table when this module is imported, so a misspelled
column fails at startup rather than on a request.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from pydantic.alias_generators import to_camel

from member_stats.api.models import (
    CopilotStats,
    DataScienceHistoryEntry,
    DesignStatsItem,
    DevelopHistoryEntry,
    DevelopStatsItem,
    MarathonStats,
    MaxRating,
    SrmChallengeDetail,
    SrmDivisionStats,
    SrmStats,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Upper bounds (exclusive) of each rating color band.
RATING_COLORS: Tuple[Tuple[float, str], ...] = (
    (900, "#9D9FA0"),            # grey
    (1200, "#69C329"),           # green
    (1500, "#616BD5"),           # blue
    (2200, "#FCD617"),           # yellow
    (float("inf"), "#EF3A3A"),   # red
)


def to_number(value: Any) -> Optional[int]:
    """Wide integer to a plain int; None stays None."""
    if value is None:
        return None
    return int(value)


def to_epoch_ms(value: Optional[datetime]) -> Optional[int]:
    """Datetime to epoch milliseconds; naive values are read as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def get_rating_color(rating: Optional[float]) -> str:
    """Display color for a rating."""
    r = float(rating or 0)
    for limit, color in RATING_COLORS:
        if r < limit:
            return color
    return "black"


@dataclass(frozen=True)
class FieldMap:
    """
    Allow-list of model attributes copied into a response object.

    Keys in the output are the camelCase form of the attribute names.
    Attributes listed in `wide` are 64-bit columns normalized to int.
    """
    model: type
    attrs: Tuple[str, ...]
    wide: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        columns = set(self.model.__table__.columns.keys())
        unknown = [a for a in (*self.attrs, *self.wide) if a not in columns]
        if unknown:
            raise AttributeError(f"{self.model.__name__} has no columns {unknown}")

    def pick(self, row: Any) -> Dict[str, Any]:
        result = {}
        for attr in self.attrs:
            value = getattr(row, attr)
            result[to_camel(attr)] = to_number(value) if attr in self.wide else value
        return result


MAX_RATING_FIELDS = FieldMap(MaxRating, ("rating", "track", "sub_track"))

DESIGN_ITEM_FIELDS = FieldMap(
    DesignStatsItem,
    ("name", "num_inquiries", "submissions", "passed_screening", "avg_placement",
     "screening_success_rate", "submission_rate", "win_percent"),
    wide=frozenset(("num_inquiries", "submissions", "passed_screening")),
)

DEVELOP_SUBMISSION_FIELDS = FieldMap(
    DevelopStatsItem,
    ("appeal_success_rate", "min_score", "avg_placement", "review_success_rate",
     "max_score", "avg_score", "screening_success_rate", "submission_rate", "win_percent",
     "num_inquiries", "submissions", "passed_screening", "passed_review", "appeals"),
    wide=frozenset(("num_inquiries", "submissions", "passed_screening", "passed_review", "appeals")),
)

DEVELOP_RANK_FIELDS = FieldMap(
    DevelopStatsItem,
    ("overall_percentile", "active_rank", "overall_country_rank", "reliability", "rating",
     "min_rating", "volatility", "overall_school_rank", "overall_rank", "active_school_rank",
     "active_country_rank", "max_rating", "active_percentile"),
)

COPILOT_FIELDS = FieldMap(
    CopilotStats,
    ("contests", "projects", "failures", "reposts", "active_contests", "active_projects",
     "fulfillment"),
)

SRM_RANK_FIELDS = FieldMap(
    SrmStats,
    ("rating", "percentile", "rank", "country_rank", "school_rank", "volatility",
     "maximum_rating", "minimum_rating", "default_language", "competitions"),
)

SRM_CHALLENGE_DETAIL_FIELDS = FieldMap(
    SrmChallengeDetail, ("challenges", "level_name", "failed_challenges"),
)

SRM_DIVISION_FIELDS = FieldMap(
    SrmDivisionStats,
    ("problems_submitted", "problems_sys_by_test", "problems_failed", "level_name"),
)

MARATHON_RANK_FIELDS = FieldMap(
    MarathonStats,
    ("rating", "competitions", "avg_rank", "avg_num_submissions", "best_rank",
     "top_five_finishes", "top_ten_finishes", "rank", "percentile", "volatility",
     "minimum_rating", "maximum_rating", "country_rank", "school_rank", "default_language"),
)

DEVELOP_HISTORY_FIELDS = FieldMap(
    DevelopHistoryEntry, ("challenge_name", "new_rating", "challenge_id"),
    wide=frozenset(("challenge_id",)),
)

DATA_SCIENCE_HISTORY_FIELDS = FieldMap(
    DataScienceHistoryEntry, ("challenge_name", "rating", "placement", "percentile", "challenge_id"),
    wide=frozenset(("challenge_id",)),
)

DIVISION_NAMES = ("division1", "division2")
DATA_SCIENCE_SUBTRACKS = ("SRM", "MARATHON_MATCH")


def select_fields(document: Dict[str, Any], fields: Optional[Iterable[str]]) -> Dict[str, Any]:
    """Keep only the top-level keys named in `fields` (all keys if None)."""
    if fields is None:
        return document
    allowed = set(fields)
    return {key: value for key, value in document.items() if key in allowed}


def _audit(record: Any) -> Dict[str, Any]:
    return {
        "createdAt": to_epoch_ms(record.created_at),
        "updatedAt": to_epoch_ms(record.updated_at),
        "createdBy": record.created_by,
        "updatedBy": record.updated_by,
    }


def _totals(block: Any) -> Dict[str, Any]:
    return {
        "challenges": to_number(block.challenges),
        "wins": to_number(block.wins),
        "mostRecentSubmission": to_epoch_ms(block.most_recent_submission),
        "mostRecentEventDate": to_epoch_ms(block.most_recent_event_date),
    }


def _design_subtrack(item: DesignStatsItem) -> Dict[str, Any]:
    return {
        **DESIGN_ITEM_FIELDS.pick(item),
        **_totals(item),
        "id": item.sub_track_id,
    }


def _develop_subtrack(item: DevelopStatsItem) -> Dict[str, Any]:
    return {
        **_totals(item),
        "id": item.sub_track_id,
        "name": item.name,
        "submissions": DEVELOP_SUBMISSION_FIELDS.pick(item),
        "rank": DEVELOP_RANK_FIELDS.pick(item),
    }


def _srm(srm: SrmStats) -> Dict[str, Any]:
    result = {
        **_totals(srm),
        "mostRecentEventName": srm.most_recent_event_name,
        "rank": SRM_RANK_FIELDS.pick(srm),
    }
    if srm.challenge_details:
        result["challengeDetails"] = [SRM_CHALLENGE_DETAIL_FIELDS.pick(d) for d in srm.challenge_details]
    for division in DIVISION_NAMES:
        rows = [d for d in srm.divisions if d.division_name == division]
        if rows:
            result[division] = [SRM_DIVISION_FIELDS.pick(d) for d in rows]
    return result


def _marathon(marathon: MarathonStats) -> Dict[str, Any]:
    return {
        **_totals(marathon),
        "mostRecentEventName": marathon.most_recent_event_name,
        "rank": MARATHON_RANK_FIELDS.pick(marathon),
    }


def build_stats_response(
    member: Any,
    stats: Any,
    fields: Optional[Sequence[str]] = None,
    group_id: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the member stats document.

    Args:
        member: Member row (with max_rating loaded)
        stats: MemberStats row with its track blocks loaded
        fields: Optional allow-list of top-level keys
        group_id: Group id to report instead of the stored one
            (the public record is reported under the public group id)

    Returns:
        Stats document
    """
    item: Dict[str, Any] = {
        "userId": to_number(member.user_id),
        "groupId": to_number(group_id if group_id is not None else stats.group_id),
        "handle": member.handle,
        "handleLower": member.handle_lower,
        "challenges": stats.challenges,
        "wins": stats.wins,
    }

    max_rating = member.max_rating
    if max_rating is not None:
        item["maxRating"] = {
            **MAX_RATING_FIELDS.pick(max_rating),
            "ratingColor": max_rating.rating_color or get_rating_color(max_rating.rating),
        }

    if stats.design is not None:
        item["DESIGN"] = {
            **_totals(stats.design),
            "subTracks": [_design_subtrack(t) for t in stats.design.items],
        }

    if stats.develop is not None:
        item["DEVELOP"] = {
            **_totals(stats.develop),
            "subTracks": [_develop_subtrack(t) for t in stats.develop.items],
        }

    if stats.copilot is not None:
        item["COPILOT"] = COPILOT_FIELDS.pick(stats.copilot)

    data_science = stats.data_science
    if data_science is not None:
        item["DATA_SCIENCE"] = {
            **_totals(data_science),
            "mostRecentEventName": data_science.most_recent_event_name,
        }
        if data_science.srm is not None:
            item["DATA_SCIENCE"]["SRM"] = _srm(data_science.srm)
        if data_science.marathon is not None:
            item["DATA_SCIENCE"]["MARATHON_MATCH"] = _marathon(data_science.marathon)

    item.update(_audit(stats))
    return select_fields(item, fields)


def build_stats_history_response(
    member: Any,
    history: Any,
    fields: Optional[Sequence[str]] = None,
    group_id: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the rating history document.

    DEVELOP entries are grouped by subtrack id in first-seen order.
    DATA_SCIENCE entries are split into SRM and MARATHON_MATCH; entries with
    any other subtrack are not reported. Entries keep their stored order and
    nothing is re-sorted by date.
    """
    item: Dict[str, Any] = {
        "userId": to_number(member.user_id),
        "groupId": to_number(group_id if group_id is not None else history.group_id),
        "handle": member.handle,
        "handleLower": member.handle_lower,
    }

    if history.develop:
        subtracks: Dict[int, Dict[str, Any]] = {}
        for entry in history.develop:
            group = subtracks.get(entry.sub_track_id)
            if group is None:
                group = subtracks[entry.sub_track_id] = {
                    "id": entry.sub_track_id,
                    "name": entry.sub_track,
                    "history": [],
                }
            group["history"].append({
                **DEVELOP_HISTORY_FIELDS.pick(entry),
                "ratingDate": to_epoch_ms(entry.rating_date),
            })
        item["DEVELOP"] = {"subTracks": list(subtracks.values())}

    if history.data_science:
        data_science: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
        for sub_track in DATA_SCIENCE_SUBTRACKS:
            entries = [e for e in history.data_science if e.sub_track == sub_track]
            if entries:
                data_science[sub_track] = {"history": [
                    {**DATA_SCIENCE_HISTORY_FIELDS.pick(e), "date": to_epoch_ms(e.date)}
                    for e in entries
                ]}
        item["DATA_SCIENCE"] = data_science

    item.update(_audit(history))
    return select_fields(item, fields)


def build_member_skills(member_skills: Sequence[Any]) -> List[Dict[str, Any]]:
    """Build the skills list of a member."""
    result = []
    for member_skill in member_skills:
        skill = member_skill.skill
        entry: Dict[str, Any] = {
            "id": str(skill.id),
            "name": skill.name,
            "category": {"id": str(skill.category.id), "name": skill.category.name},
        }
        if member_skill.display_mode is not None:
            entry["displayMode"] = {
                "id": str(member_skill.display_mode.id),
                "name": member_skill.display_mode.name,
            }
        if member_skill.levels:
            entry["levels"] = [
                {
                    "id": str(level.skill_level.id),
                    "name": level.skill_level.name,
                    "description": level.skill_level.description,
                }
                for level in member_skill.levels
            ]
        result.append(entry)
    return result
