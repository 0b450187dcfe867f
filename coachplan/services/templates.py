"""Reusable plan templates, organized in per-trainer folders."""
import logging
import uuid

from coachplan.errors import ConflictError, ValidationError
from coachplan.extensions import db
from coachplan.models import PlanTemplate, TemplateBlock, TemplateExercise, TemplateFolder, WeeklyPlan
from coachplan.models.plan_block import BLOCK_POSITIONS, BLOCK_TYPES
from coachplan.services import grouping
from coachplan.services.blocks import partition, validate_config
from coachplan.services.common import atomic, get_or_404, next_ordinal

log = logging.getLogger(__name__)


# Folders

def create_folder(trainer_id, name, parent_id=None):
    if not name or not name.strip():
        raise ValidationError("Folder name is required")
    if parent_id is not None:
        parent = get_or_404(TemplateFolder, parent_id, "Folder")
        if parent.trainer_id != trainer_id:
            raise ValidationError("Parent folder belongs to another trainer")
    folder = TemplateFolder(trainer_id=trainer_id, name=name.strip(), parent_id=parent_id)
    with atomic() as session:
        session.add(folder)
    return folder


def list_folders(trainer_id):
    return TemplateFolder.query.filter_by(trainer_id=trainer_id).order_by(TemplateFolder.name).all()


# Templates

def create_template(trainer_id, name, description=None, category=None, folder_id=None):
    if not name or not name.strip():
        raise ValidationError("Template name is required")
    if folder_id is not None:
        folder = get_or_404(TemplateFolder, folder_id, "Folder")
        if folder.trainer_id != trainer_id:
            raise ValidationError("Folder belongs to another trainer")
    template = PlanTemplate(
        trainer_id=trainer_id,
        name=name.strip(),
        description=description,
        category=category,
        folder_id=folder_id,
    )
    with atomic() as session:
        session.add(template)
    log.info("Trainer %s created template %s", trainer_id, template.id)
    return template


def get_template(template_id):
    return get_or_404(PlanTemplate, template_id, "Template")


def list_templates(trainer_id, folder_id=None, category=None):
    query = PlanTemplate.query.filter_by(trainer_id=trainer_id)
    if folder_id is not None:
        query = query.filter_by(folder_id=folder_id)
    if category:
        query = query.filter_by(category=category)
    return query.order_by(PlanTemplate.name).all()


def update_template(template_id, **changes):
    template = get_template(template_id)
    unknown = set(changes) - {"name", "description", "category", "folder_id"}
    if unknown:
        raise ValidationError(f"Cannot update template fields: {', '.join(sorted(unknown))}")
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValidationError("Template name is required")
    with atomic():
        for key, value in changes.items():
            setattr(template, key, value)
    return template


def delete_template(template_id):
    template = get_template(template_id)
    in_use = WeeklyPlan.query.filter_by(template_id=template.id).count()
    if in_use:
        raise ConflictError(
            "Template is referenced by existing plans",
            {"plans": in_use},
        )
    with atomic() as session:
        session.delete(template)
    log.info("Deleted template %s", template_id)


def add_template_block(template_id, type, position, name, description=None,
                       estimated_minutes=None, config=None):
    template = get_template(template_id)
    if type not in BLOCK_TYPES:
        raise ValidationError(f"Block type must be one of {', '.join(BLOCK_TYPES)}")
    if position not in BLOCK_POSITIONS:
        raise ValidationError(f"Block position must be one of {', '.join(BLOCK_POSITIONS)}")
    block = TemplateBlock(
        template_id=template.id,
        type=type,
        position=position,
        ordinal=next_ordinal([b for b in template.blocks if b.position == position]),
        name=name,
        description=description,
        estimated_minutes=estimated_minutes,
        config=validate_config(type, config),
    )
    with atomic() as session:
        session.add(block)
    return block


def add_template_exercise(template_id, name, **fields):
    template = get_template(template_id)
    if not name:
        raise ValidationError("Exercise name is required")
    exercise = TemplateExercise(
        template_id=template.id,
        name=name,
        ordinal=next_ordinal(template.exercises),
        **fields,
    )
    with atomic() as session:
        session.add(exercise)
    return exercise


def save_plan_as_template(plan_id, trainer_id, name, description=None, category=None, folder_id=None):
    """Snapshot a plan's live blocks and exercises into a new template.

    Groups keep their structure under fresh template-local ids.
    """
    plan = get_or_404(WeeklyPlan, plan_id, "Plan")
    template = PlanTemplate(
        trainer_id=trainer_id,
        name=name or plan.name or "Untitled template",
        description=description if description is not None else plan.notes,
        category=category,
        folder_id=folder_id,
    )
    group_map = {}
    with atomic() as session:
        session.add(template)
        session.flush()
        for position in BLOCK_POSITIONS:
            for block in partition(plan.id, position):
                session.add(TemplateBlock(
                    template_id=template.id,
                    type=block.type,
                    position=position,
                    ordinal=block.ordinal,
                    name=block.name,
                    description=block.description,
                    estimated_minutes=block.estimated_minutes,
                    config=block.config,
                ))
        for exercise in grouping.live_exercises(plan.id):
            group_id = None
            if exercise.group_id:
                group_id = group_map.setdefault(exercise.group_id, str(uuid.uuid4()))
            session.add(TemplateExercise(
                template_id=template.id,
                library_exercise_id=exercise.library_exercise_id,
                name=exercise.name,
                video_url=exercise.video_url,
                sets=exercise.sets,
                reps=exercise.reps,
                load=exercise.load,
                rest_seconds=exercise.rest_seconds,
                notes=exercise.notes,
                ordinal=exercise.ordinal,
                group_id=group_id,
                group_kind=exercise.group_kind if group_id else "none",
                group_ordinal=exercise.group_ordinal if group_id else None,
                group_rest_seconds=exercise.group_rest_seconds if group_id else None,
            ))
    db.session.refresh(template)
    log.info("Saved plan %s as template %s", plan_id, template.id)
    return template
