"""Exercise grouping: supersets, circuits, drop-sets, bi-sets and tri-sets.

Grouped exercises share a ``group_id``, a kind and an inter-group rest.
Members always occupy consecutive overall ordinals; ``materialize`` relies
on that to collapse them into one execution unit in a single pass.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from coachplan.errors import NotFoundError, ValidationError
from coachplan.extensions import db
from coachplan.models import Exercise, WeeklyPlan
from coachplan.models.plan_exercise import GROUP_KINDS
from coachplan.services.common import atomic, get_or_404, resequence

log = logging.getLogger(__name__)

EXACT_MEMBERS = {"biset": 2, "triset": 3}


def min_members(kind):
    if kind in EXACT_MEMBERS:
        return EXACT_MEMBERS[kind]
    return 1 if kind == "none" else 2


@dataclass
class SingleUnit:
    exercise: Exercise

    @property
    def key(self):
        return f"exercise:{self.exercise.id}"

    @property
    def ordinal(self):
        return self.exercise.ordinal

    def to_dict(self):
        return {
            "type": "exercise",
            "key": self.key,
            "ordinal": self.ordinal,
            "exercise": self.exercise.to_dict(),
        }


@dataclass
class GroupUnit:
    group_id: str
    kind: str
    rest_seconds: Optional[int]
    members: List[Exercise] = field(default_factory=list)

    @property
    def key(self):
        return f"group:{self.group_id}"

    @property
    def ordinal(self):
        return min(m.ordinal for m in self.members)

    @property
    def completed(self):
        return all(m.completed for m in self.members)

    def to_dict(self):
        return {
            "type": "group",
            "key": self.key,
            "group_id": self.group_id,
            "kind": self.kind,
            "ordinal": self.ordinal,
            "rest_seconds": self.rest_seconds,
            "completed": self.completed,
            "members": [m.to_dict() for m in self.members],
        }


def live_exercises(plan_id):
    return (
        Exercise.query
        .filter(Exercise.plan_id == plan_id, Exercise.deleted_at.is_(None))
        .order_by(Exercise.ordinal, Exercise.group_ordinal, Exercise.id)
        .all()
    )


def group_members(group_id):
    return (
        Exercise.query
        .filter(Exercise.group_id == group_id, Exercise.deleted_at.is_(None))
        .order_by(Exercise.group_ordinal, Exercise.ordinal)
        .all()
    )


def _validate_kind(kind, count):
    if kind not in GROUP_KINDS:
        raise ValidationError(f"Unknown grouping kind '{kind}'")
    if kind in EXACT_MEMBERS and count != EXACT_MEMBERS[kind]:
        raise ValidationError(f"A {kind} needs exactly {EXACT_MEMBERS[kind]} exercises")
    if count < min_members(kind):
        raise ValidationError(f"A {kind} group needs at least {min_members(kind)} exercises")


def _validate_rest(rest_seconds):
    if rest_seconds is not None and rest_seconds < 0:
        raise ValidationError("Rest between groups cannot be negative")


def _assign(members, group_id, kind, rest_seconds):
    for index, member in enumerate(members):
        member.group_id = group_id
        member.group_kind = kind
        member.group_ordinal = index
        member.group_rest_seconds = rest_seconds


def create_group(plan_id, member_ids, kind, rest_seconds=None):
    """Group ``member_ids`` of one plan, in the given order.

    Members are placed contiguously starting where the earliest of them
    sat, and the plan's overall ordinals are re-sequenced 0..n-1.
    """
    get_or_404(WeeklyPlan, plan_id, "Plan")
    member_ids = list(member_ids or [])
    if len(set(member_ids)) != len(member_ids):
        raise ValidationError("Selected exercises contain duplicates")
    _validate_kind(kind, len(member_ids))
    _validate_rest(rest_seconds)

    found = {
        e.id: e for e in Exercise.query.filter(
            Exercise.id.in_(member_ids), Exercise.deleted_at.is_(None)
        )
    }
    missing = [i for i in member_ids if i not in found]
    foreign = [i for i, e in found.items() if e.plan_id != plan_id]
    grouped = [i for i, e in found.items() if e.group_id is not None]
    if missing or foreign or grouped:
        raise ValidationError(
            "Selected exercises are not valid for grouping",
            {"missing": missing, "other_plan": sorted(foreign), "already_grouped": sorted(grouped)},
        )

    members = [found[i] for i in member_ids]
    ordered = live_exercises(plan_id)
    member_set = set(member_ids)
    anchor = min(index for index, e in enumerate(ordered) if e.id in member_set)
    insert_at = sum(1 for e in ordered[:anchor] if e.id not in member_set)
    others = [e for e in ordered if e.id not in member_set]

    group_id = str(uuid.uuid4())
    with atomic():
        resequence(others[:insert_at] + members + others[insert_at:])
        _assign(members, group_id, kind, rest_seconds)

    log.info("Created %s group %s on plan %s with %d exercises", kind, group_id, plan_id, len(members))
    return GroupUnit(group_id, kind, rest_seconds, members)


def dissolve_group(group_id):
    """Ungroup every member; overall ordinals stay untouched.

    An unknown group is a no-op so duplicated client calls stay harmless.
    Returns the number of exercises released.
    """
    members = Exercise.query.filter_by(group_id=group_id).all()
    if not members:
        log.debug("Dissolve of unknown group %s ignored", group_id)
        return 0
    with atomic():
        for member in members:
            member.clear_group()
    log.info("Dissolved group %s (%d exercises)", group_id, len(members))
    return len(members)


def update_group(group_id, kind=None, rest_seconds=None):
    members = group_members(group_id)
    if not members:
        raise NotFoundError(f"Group {group_id} not found")
    if kind is not None:
        _validate_kind(kind, len(members))
    _validate_rest(rest_seconds)
    with atomic():
        for member in members:
            if kind is not None:
                member.group_kind = kind
            if rest_seconds is not None:
                member.group_rest_seconds = rest_seconds
    return GroupUnit(group_id, members[0].group_kind, members[0].group_rest_seconds, members)


def add_to_group(group_id, exercise_id):
    """Append an ungrouped exercise of the same plan as the group's last member."""
    members = group_members(group_id)
    if not members:
        raise NotFoundError(f"Group {group_id} not found")
    exercise = get_or_404(Exercise, exercise_id, "Exercise")
    head = members[0]
    if exercise.is_deleted or exercise.plan_id != head.plan_id or exercise.group_id is not None:
        raise ValidationError("Exercise cannot join this group")
    limit = EXACT_MEMBERS.get(head.group_kind)
    if limit is not None and len(members) + 1 > limit:
        raise ValidationError(f"A {head.group_kind} holds exactly {limit} exercises")

    ordered = [e for e in live_exercises(head.plan_id) if e.id != exercise.id]
    last = max(ordered.index(m) for m in members)
    ordered.insert(last + 1, exercise)
    with atomic():
        resequence(ordered)
        members.append(exercise)
        _assign(members, group_id, head.group_kind, head.group_rest_seconds)
    return GroupUnit(group_id, head.group_kind, head.group_rest_seconds, members)


def detach(exercise):
    """Take ``exercise`` out of its group without committing.

    Remaining members get dense within-group ordinals again and the released
    exercise is moved right after them, so the group stays contiguous. A
    group left below its kind's minimum size is dissolved.
    """
    group_id = exercise.group_id
    if group_id is None:
        return
    kind = exercise.group_kind
    exercise.clear_group()
    remaining = [m for m in group_members(group_id) if m.id != exercise.id]
    if len(remaining) < max(min_members(kind), 2) or kind in EXACT_MEMBERS:
        for member in remaining:
            member.clear_group()
        log.info("Group %s dissolved after losing a member", group_id)
        return
    for index, member in enumerate(remaining):
        member.group_ordinal = index

    ordered = [e for e in live_exercises(exercise.plan_id) if e.id != exercise.id]
    last = max(ordered.index(m) for m in remaining)
    ordered.insert(last + 1, exercise)
    resequence(ordered)


def remove_from_group(exercise_id):
    exercise = get_or_404(Exercise, exercise_id, "Exercise")
    with atomic():
        detach(exercise)
    return exercise


def materialize(plan_id):
    """Collapse the plan's exercise rows into ordered execution units.

    Single linear pass over live rows by overall ordinal: two or more
    consecutive rows sharing a group id become one ``GroupUnit``; every
    other row becomes a ``SingleUnit``.
    """
    get_or_404(WeeklyPlan, plan_id, "Plan")
    rows = live_exercises(plan_id)
    units = []
    i = 0
    while i < len(rows):
        row = rows[i]
        j = i
        if row.group_id is not None:
            while j + 1 < len(rows) and rows[j + 1].group_id == row.group_id:
                j += 1
        if j > i:
            members = sorted(rows[i:j + 1], key=lambda e: (e.group_ordinal or 0, e.ordinal))
            units.append(GroupUnit(row.group_id, row.group_kind, row.group_rest_seconds, members))
        else:
            units.append(SingleUnit(row))
        i = j + 1
    return units


def reorder_exercises(plan_id, unit_keys):
    """Reorder execution units; a group always moves as a whole.

    ``unit_keys`` must be exactly the keys ``materialize`` currently
    returns (``exercise:<id>`` / ``group:<id>``).
    """
    units = {}
    for unit in materialize(plan_id):
        rows = unit.members if isinstance(unit, GroupUnit) else [unit.exercise]
        units.setdefault(unit.key, []).extend(rows)

    unit_keys = list(unit_keys or [])
    if len(unit_keys) != len(set(unit_keys)) or set(unit_keys) != set(units):
        log.warning("Rejected exercise reorder on plan %s", plan_id)
        raise ValidationError(
            "Reorder must list every exercise unit of the plan exactly once",
            {"expected": sorted(units), "received": unit_keys},
        )

    ordered = []
    for key in unit_keys:
        ordered.extend(units[key])
    with atomic():
        resequence(ordered)
    log.info("Reordered %d exercise units on plan %s", len(unit_keys), plan_id)
    return materialize(plan_id)
