"""Weekly plan store: per client, per week, per day training assignments."""
import logging
import uuid
from collections import defaultdict

from sqlalchemy import func

from coachplan.errors import NotFoundError, ValidationError
from coachplan.extensions import db
from coachplan.models import Block, Exercise, LibraryExercise, PlanTemplate, WeeklyPlan
from coachplan.models.plan_block import BLOCK_POSITIONS
from coachplan.services import block_presets, grouping, weeks
from coachplan.services.blocks import partition
from coachplan.services.common import atomic, get_or_404, next_ordinal, resequence
from coachplan.utils.dates import is_week_start, parse_date, utcnow

log = logging.getLogger(__name__)

EXERCISE_FIELDS = ("name", "video_url", "sets", "reps", "load", "rest_seconds", "notes", "library_exercise_id")


def _check_week(start):
    try:
        start = parse_date(start)
    except ValueError:
        raise ValidationError("Week start must be a date in YYYY-MM-DD format")
    if not is_week_start(start):
        raise ValidationError("Week start must be a Monday")
    return start


def _check_day(day):
    if not isinstance(day, int) or not 0 <= day <= 6:
        raise ValidationError("Day of week must be between 0 (Monday) and 6 (Sunday)")
    return day


def _next_day_ordinal(client_id, trainer_id, start, day):
    current = (
        db.session.query(func.max(WeeklyPlan.day_ordinal))
        .filter_by(client_id=client_id, trainer_id=trainer_id, week_start=start, day_of_week=day)
        .scalar()
    )
    return 0 if current is None else current + 1


def get_plan(plan_id):
    return get_or_404(WeeklyPlan, plan_id, "Plan")


def create_plan(client_id, trainer_id, week_start, day_of_week, name=None, notes=None):
    start = _check_week(week_start)
    _check_day(day_of_week)
    plan = WeeklyPlan(
        client_id=client_id,
        trainer_id=trainer_id,
        week_start=start,
        day_of_week=day_of_week,
        day_ordinal=_next_day_ordinal(client_id, trainer_id, start, day_of_week),
        name=name,
        notes=notes,
        completed=False,
    )
    with atomic() as session:
        session.add(plan)
    log.info("Created plan %s for client %s on %s day %s", plan.id, client_id, start, day_of_week)
    return plan


def list_week(client_id, week_start, trainer_id=None):
    """Plans of one week keyed by day of week, each day ordered by day ordinal."""
    start = _check_week(week_start)
    query = WeeklyPlan.query.filter_by(client_id=client_id, week_start=start)
    if trainer_id is not None:
        query = query.filter_by(trainer_id=trainer_id)
    days = defaultdict(list)
    for plan in query.order_by(WeeklyPlan.day_of_week, WeeklyPlan.day_ordinal).all():
        days[plan.day_of_week].append(plan)
    return dict(days)


def update_plan(plan_id, **changes):
    plan = get_plan(plan_id)
    unknown = set(changes) - {"name", "notes"}
    if unknown:
        raise ValidationError(f"Cannot update plan fields: {', '.join(sorted(unknown))}")
    with atomic():
        for key, value in changes.items():
            setattr(plan, key, value)
    return plan


def set_plan_completed(plan_id, completed):
    plan = get_plan(plan_id)
    with atomic():
        plan.completed = bool(completed)
    return plan


def delete_plan(plan_id):
    plan = get_plan(plan_id)
    with atomic() as session:
        session.delete(plan)
    log.info("Deleted plan %s", plan_id)


# Exercises

def _library_defaults(library_exercise_id, fields):
    entry = get_or_404(LibraryExercise, library_exercise_id, "Library exercise")
    fields.setdefault("name", entry.name)
    fields.setdefault("video_url", entry.video_url)
    fields.setdefault("sets", entry.default_sets)
    fields.setdefault("reps", entry.default_reps)
    return fields


def add_exercise(plan_id, **fields):
    get_plan(plan_id)
    unknown = set(fields) - set(EXERCISE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown exercise fields: {', '.join(sorted(unknown))}")
    fields = {k: v for k, v in fields.items() if v is not None}
    if fields.get("library_exercise_id") is not None:
        _library_defaults(fields["library_exercise_id"], fields)
    if not fields.get("name"):
        raise ValidationError("Exercise name is required")

    exercise = Exercise(
        plan_id=plan_id,
        ordinal=next_ordinal(grouping.live_exercises(plan_id)),
        completed=False,
        **fields,
    )
    with atomic() as session:
        session.add(exercise)
    return exercise


def update_exercise(exercise_id, **changes):
    exercise = get_or_404(Exercise, exercise_id, "Exercise")
    unknown = set(changes) - set(EXERCISE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot update exercise fields: {', '.join(sorted(unknown))}")
    if "name" in changes and not changes["name"]:
        raise ValidationError("Exercise name is required")
    with atomic():
        for key, value in changes.items():
            setattr(exercise, key, value)
    return exercise


def record_executed_load(exercise_id, load):
    exercise = get_or_404(Exercise, exercise_id, "Exercise")
    with atomic():
        exercise.executed_load = load
    return exercise


def soft_delete_exercise(exercise_id, now=None):
    exercise = get_or_404(Exercise, exercise_id, "Exercise")
    if exercise.is_deleted:
        return exercise
    with atomic():
        grouping.detach(exercise)
        exercise.deleted_at = now or utcnow()
        resequence([e for e in grouping.live_exercises(exercise.plan_id) if e.id != exercise.id])
    log.info("Soft-deleted exercise %s of plan %s", exercise.id, exercise.plan_id)
    return exercise


def restore_exercise(exercise_id):
    exercise = get_or_404(Exercise, exercise_id, "Exercise")
    if not exercise.is_deleted:
        return exercise
    with atomic():
        exercise.ordinal = next_ordinal(grouping.live_exercises(exercise.plan_id))
        exercise.deleted_at = None
    return exercise


def plan_detail(plan_id):
    from coachplan.services import blocks

    plan = get_plan(plan_id)
    organized = blocks.list_organized(plan_id)
    return {
        "plan": plan.to_dict(),
        "blocks": {
            "start": [blocks.describe(b) for b in organized["start"]],
            "end": [blocks.describe(b) for b in organized["end"]],
            "summary": organized["summary"],
        },
        "units": [unit.to_dict() for unit in grouping.materialize(plan_id)],
    }


# Copying content between templates and plans

def _copy_content(plan, blocks, exercises):
    """Add copies of template/plan blocks and exercises to ``plan``.

    Ordinals are re-sequenced per partition and group ids are remapped so
    that copied groups never share an id with their source.
    """
    by_position = defaultdict(list)
    for block in sorted(blocks, key=lambda b: (b.ordinal or 0, b.id)):
        by_position[block.position].append(block)
    for position in BLOCK_POSITIONS:
        for ordinal, source in enumerate(by_position.get(position, [])):
            db.session.add(Block(
                plan_id=plan.id,
                type=source.type,
                position=position,
                ordinal=ordinal,
                name=source.name,
                description=source.description,
                estimated_minutes=source.estimated_minutes,
                config=block_presets.hydrate_config(source.type, source.name, source.config),
                required=getattr(source, "required", False) or False,
                completed=False,
            ))

    group_map = {}
    ordered = sorted(exercises, key=lambda e: (e.ordinal or 0, e.group_ordinal or 0, e.id))
    for ordinal, source in enumerate(ordered):
        group_id = None
        if source.group_id:
            group_id = group_map.setdefault(source.group_id, str(uuid.uuid4()))
        db.session.add(Exercise(
            plan_id=plan.id,
            library_exercise_id=source.library_exercise_id,
            name=source.name,
            video_url=source.video_url,
            sets=source.sets,
            reps=source.reps,
            load=source.load,
            rest_seconds=source.rest_seconds,
            notes=source.notes,
            ordinal=ordinal,
            group_id=group_id,
            group_kind=source.group_kind if group_id else "none",
            group_ordinal=source.group_ordinal if group_id else None,
            group_rest_seconds=source.group_rest_seconds if group_id else None,
            completed=False,
        ))


def apply_template(template_id, client_id, trainer_id, days, week_start=None, replace_existing=True):
    """Instantiate a template into one plan per requested day of a week.

    The week defaults to the client's active week. With
    ``replace_existing`` the first plan already on a day is reused and its
    content replaced; otherwise a new plan is appended to that day.
    """
    template = get_or_404(PlanTemplate, template_id, "Template")
    days = list(days or [])
    if not days or len(set(days)) != len(days):
        raise ValidationError("Choose at least one day, each only once")
    for day in days:
        _check_day(day)
    start = _check_week(week_start) if week_start else weeks.get_active_week(client_id, trainer_id)

    created = []
    with atomic() as session:
        for day in sorted(days):
            plan = None
            if replace_existing:
                plan = (
                    WeeklyPlan.query
                    .filter_by(client_id=client_id, trainer_id=trainer_id, week_start=start, day_of_week=day)
                    .order_by(WeeklyPlan.day_ordinal)
                    .first()
                )
            if plan is not None:
                Block.query.filter_by(plan_id=plan.id).delete()
                Exercise.query.filter_by(plan_id=plan.id).delete()
                plan.completed = False
            else:
                plan = WeeklyPlan(
                    client_id=client_id,
                    trainer_id=trainer_id,
                    week_start=start,
                    day_of_week=day,
                    day_ordinal=_next_day_ordinal(client_id, trainer_id, start, day),
                    completed=False,
                )
                session.add(plan)
                session.flush()
            plan.template_id = template.id
            plan.name = template.name
            plan.notes = template.description
            _copy_content(plan, template.blocks, template.exercises)
            created.append(plan)
    log.info("Applied template %s to client %s, week %s, days %s", template.id, client_id, start, days)
    return created


def copy_week(client_id, trainer_id, source_week, target_week):
    source_start = _check_week(source_week)
    target_start = _check_week(target_week)
    if source_start == target_start:
        raise ValidationError("Source and target weeks must differ")
    sources = (
        WeeklyPlan.query
        .filter_by(client_id=client_id, trainer_id=trainer_id, week_start=source_start)
        .order_by(WeeklyPlan.day_of_week, WeeklyPlan.day_ordinal)
        .all()
    )
    if not sources:
        raise NotFoundError(f"No plans in week {source_start}")

    copies = []
    with atomic() as session:
        for source in sources:
            plan = WeeklyPlan(
                client_id=client_id,
                trainer_id=trainer_id,
                template_id=source.template_id,
                week_start=target_start,
                day_of_week=source.day_of_week,
                day_ordinal=_next_day_ordinal(client_id, trainer_id, target_start, source.day_of_week),
                name=source.name,
                notes=source.notes,
                completed=False,
            )
            session.add(plan)
            session.flush()
            live_blocks = [b for position in BLOCK_POSITIONS for b in partition(source.id, position)]
            _copy_content(plan, live_blocks, grouping.live_exercises(source.id))
            copies.append(plan)
    log.info("Copied %d plans of client %s from %s to %s", len(copies), client_id, source_start, target_start)
    return copies
