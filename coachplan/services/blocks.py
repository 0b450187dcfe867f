"""Block organizer: warm-up/cardio/stretch/other segments of a plan.

Blocks live in two independent partitions per plan, ``start`` (before the
exercise body) and ``end`` (after it). Live ordinals in each partition are
kept dense 0..n-1 by every operation here.
"""
import logging
from collections import Counter

from marshmallow import ValidationError as SchemaError

from coachplan.errors import NotFoundError, ValidationError
from coachplan.models import Block, TemplateBlock, WeeklyPlan
from coachplan.models.plan_block import BLOCK_POSITIONS, BLOCK_TYPES
from coachplan.schemas.block_config import format_cardio_intensity, load_block_config
from coachplan.services import block_presets
from coachplan.services.common import atomic, get_or_404, next_ordinal, resequence
from coachplan.utils.dates import utcnow

log = logging.getLogger(__name__)


def _check_position(position):
    if position not in BLOCK_POSITIONS:
        raise ValidationError(f"Block position must be one of {', '.join(BLOCK_POSITIONS)}")


def _check_type(block_type):
    if block_type not in BLOCK_TYPES:
        raise ValidationError(f"Block type must be one of {', '.join(BLOCK_TYPES)}")


def validate_config(block_type, config):
    try:
        return load_block_config(block_type, config)
    except SchemaError as err:
        raise ValidationError(f"Invalid configuration for {block_type} block", err.messages)


def partition(plan_id, position):
    return (
        Block.query
        .filter(Block.plan_id == plan_id, Block.position == position, Block.deleted_at.is_(None))
        .order_by(Block.ordinal, Block.id)
        .all()
    )


def describe(block):
    data = block.to_dict()
    if block.type == "cardio":
        data["intensity_label"] = format_cardio_intensity(block.config)
    return data


def list_organized(plan_id):
    """Live blocks split by position, each sorted by ordinal, plus a summary."""
    get_or_404(WeeklyPlan, plan_id, "Plan")
    organized = {position: partition(plan_id, position) for position in BLOCK_POSITIONS}
    every = organized["start"] + organized["end"]
    organized["summary"] = {
        "count": len(every),
        "completed": sum(1 for b in every if b.completed),
        "total_estimated_minutes": sum(b.estimated_minutes or 0 for b in every),
        "by_type": dict(Counter(b.type for b in every)),
    }
    return organized


def _append(plan_id, position, **fields):
    block = Block(
        plan_id=plan_id,
        position=position,
        ordinal=next_ordinal(partition(plan_id, position)),
        completed=False,
        **fields,
    )
    with atomic() as session:
        session.add(block)
    log.info("Added %s block %s to plan %s (%s)", block.type, block.id, plan_id, position)
    return block


def create_block(plan_id, type, position, name, description=None,
                 estimated_minutes=None, config=None, required=False):
    get_or_404(WeeklyPlan, plan_id, "Plan")
    _check_type(type)
    _check_position(position)
    return _append(
        plan_id, position,
        type=type,
        name=name,
        description=description,
        estimated_minutes=estimated_minutes if estimated_minutes is not None else 10,
        required=required,
        config=validate_config(type, config),
    )


def instantiate_from_template(plan_id, template_block_id, position=None):
    """Copy a template block into the plan, appended to ``position``."""
    get_or_404(WeeklyPlan, plan_id, "Plan")
    source = get_or_404(TemplateBlock, template_block_id, "Template block")
    position = position or source.position
    _check_position(position)
    return _append(
        plan_id, position,
        type=source.type,
        name=source.name,
        description=source.description,
        estimated_minutes=source.estimated_minutes,
        config=block_presets.hydrate_config(source.type, source.name, source.config),
    )


def instantiate_preset(plan_id, preset_id, position="start"):
    get_or_404(WeeklyPlan, plan_id, "Plan")
    preset = block_presets.get_preset(preset_id)
    if preset is None:
        raise NotFoundError(f"Block preset {preset_id} not found")
    _check_position(position)
    return _append(
        plan_id, position,
        type=preset["type"],
        name=preset["name"],
        description=preset["description"],
        estimated_minutes=preset["estimated_minutes"],
        config=preset["config"],
    )


def update_block(block_id, **changes):
    block = get_or_404(Block, block_id, "Block")
    allowed = {"name", "description", "estimated_minutes", "required", "config"}
    unknown = set(changes) - allowed
    if unknown:
        raise ValidationError(f"Cannot update block fields: {', '.join(sorted(unknown))}")
    if "config" in changes:
        changes["config"] = validate_config(block.type, changes["config"])
    with atomic():
        for key, value in changes.items():
            setattr(block, key, value)
    return block


def reorder(plan_id, position, ordered_ids):
    """Assign ordinals 0..n-1 in the given order, all rows or none.

    ``ordered_ids`` must be exactly the live block ids of the partition.
    """
    get_or_404(WeeklyPlan, plan_id, "Plan")
    _check_position(position)
    current = {b.id: b for b in partition(plan_id, position)}
    ordered_ids = list(ordered_ids or [])
    if len(ordered_ids) != len(set(ordered_ids)) or set(ordered_ids) != set(current):
        log.warning("Rejected block reorder on plan %s (%s)", plan_id, position)
        raise ValidationError(
            "Block order must list every block of this section exactly once",
            {"expected": sorted(current), "received": ordered_ids},
        )
    with atomic():
        resequence([current[i] for i in ordered_ids])
    return [current[i] for i in ordered_ids]


def mark_completed(block_id, completed, now=None):
    block = get_or_404(Block, block_id, "Block")
    with atomic():
        if completed and not block.completed:
            block.completed_at = now or utcnow()
        elif not completed:
            block.completed_at = None
        block.completed = bool(completed)
    return block


def soft_delete(block_id, now=None):
    block = get_or_404(Block, block_id, "Block")
    if block.is_deleted:
        return block
    with atomic():
        block.deleted_at = now or utcnow()
        resequence([b for b in partition(block.plan_id, block.position) if b.id != block.id])
    log.info("Soft-deleted block %s of plan %s", block.id, block.plan_id)
    return block


def restore(block_id):
    block = get_or_404(Block, block_id, "Block")
    if not block.is_deleted:
        return block
    with atomic():
        block.ordinal = next_ordinal(partition(block.plan_id, block.position))
        block.deleted_at = None
    return block


def get_block(block_id):
    """Fetch a block by id, soft-deleted ones included."""
    return get_or_404(Block, block_id, "Block")
