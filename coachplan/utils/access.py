"""Ownership checks used by the HTTP layer before calling services."""
from coachplan.errors import ForbiddenError, NotFoundError
from coachplan.models import Block, Exercise, PlanTemplate, TemplateFolder, User, WeeklyPlan, WorkoutSession
from coachplan.services.common import get_or_404
from coachplan.services.grouping import group_members


def _plan_visible_to(plan, user):
    if user.role == "admin":
        return True
    if user.role == "trainer":
        return plan.trainer_id == user.id
    return plan.client_id == user.id


def owned_plan(plan_id, user):
    plan = get_or_404(WeeklyPlan, plan_id, "Plan")
    if not _plan_visible_to(plan, user):
        raise ForbiddenError("You do not have access to this plan")
    return plan


def owned_block(block_id, user):
    block = get_or_404(Block, block_id, "Block")
    owned_plan(block.plan_id, user)
    return block


def owned_exercise(exercise_id, user):
    exercise = get_or_404(Exercise, exercise_id, "Exercise")
    owned_plan(exercise.plan_id, user)
    return exercise


def owned_group(group_id, user):
    members = group_members(group_id)
    if not members:
        raise NotFoundError(f"Group {group_id} not found")
    owned_plan(members[0].plan_id, user)
    return members


def owned_session(session_id, user):
    session = get_or_404(WorkoutSession, session_id, "Session")
    if user.role == "client" and session.client_id != user.id:
        raise ForbiddenError("You do not have access to this session")
    if user.role == "trainer" and session.trainer_id != user.id:
        raise ForbiddenError("You do not have access to this session")
    return session


def owned_template(template_id, user):
    template = get_or_404(PlanTemplate, template_id, "Template")
    if user.role != "admin" and template.trainer_id != user.id:
        raise ForbiddenError("You do not have access to this template")
    return template


def owned_folder(folder_id, user):
    folder = get_or_404(TemplateFolder, folder_id, "Folder")
    if user.role != "admin" and folder.trainer_id != user.id:
        raise ForbiddenError("You do not have access to this folder")
    return folder


def client_account(client_id):
    user = get_or_404(User, client_id, "Client")
    if not user.is_client or not user.is_active:
        raise NotFoundError(f"Client {client_id} not found")
    return user
