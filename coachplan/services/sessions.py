"""Session execution tracker.

States: not_started -> running <-> paused -> finished, with ``abandoned``
as the terminal state for sessions given up on or left open too long.
Elapsed time excludes paused time; rest is logged as intervals, at most
one open per session.
"""
import logging
from collections import defaultdict
from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from coachplan.errors import ConflictError, NotFoundError, ValidationError
from coachplan.extensions import db
from coachplan.models import Exercise, RestInterval, WeeklyPlan, WorkoutSession
from coachplan.models.rest_interval import REST_KINDS
from coachplan.models.workout_session import ACTIVE_STATUSES
from coachplan.services.common import atomic, get_or_404
from coachplan.utils.dates import seconds_between, utcnow

log = logging.getLogger(__name__)


def get_session(session_id):
    return get_or_404(WorkoutSession, session_id, "Session")


def get_active_session(plan_id, client_id):
    return (
        WorkoutSession.query
        .filter(
            WorkoutSession.plan_id == plan_id,
            WorkoutSession.client_id == client_id,
            WorkoutSession.status.in_(ACTIVE_STATUSES),
        )
        .order_by(WorkoutSession.started_at.desc())
        .first()
    )


def list_sessions(plan_id):
    return (
        WorkoutSession.query
        .filter_by(plan_id=plan_id)
        .order_by(WorkoutSession.started_at.desc())
        .all()
    )


def open_rest(session):
    return next((r for r in session.rest_intervals if r.ended_at is None), None)


def elapsed_seconds(session, now=None):
    """Clock time since start, minus time spent paused."""
    if session.started_at is None:
        return 0
    if session.ended_at is not None:
        end = session.ended_at
    elif session.status == "paused" and session.paused_at is not None:
        end = session.paused_at
    else:
        end = now or utcnow()
    return max(0, seconds_between(session.started_at, end) - (session.paused_seconds or 0))


def start(plan_id, client_id, now=None):
    plan = get_or_404(WeeklyPlan, plan_id, "Plan")
    if plan.client_id != client_id:
        raise ValidationError("This plan is not assigned to the client")
    existing = get_active_session(plan_id, client_id)
    if existing is not None:
        log.warning("Client %s tried to start a second session on plan %s", client_id, plan_id)
        raise ConflictError(
            "Another session is already active for this workout",
            {"session_id": existing.id},
        )

    session = WorkoutSession(
        plan_id=plan_id,
        client_id=client_id,
        trainer_id=plan.trainer_id,
        status="running",
        started_at=now or utcnow(),
        paused_seconds=0,
        rest_seconds=0,
    )
    try:
        db.session.add(session)
        db.session.commit()
    except IntegrityError:
        # Another device won the race between the check above and the insert.
        db.session.rollback()
        raise ConflictError("Another session is already active for this workout")
    log.info("Session %s started on plan %s by client %s", session.id, plan_id, client_id)
    return session


def pause(session_id, now=None):
    session = get_session(session_id)
    if session.status != "running":
        raise ConflictError(f"Cannot pause a session that is {session.status}")
    with atomic():
        session.paused_at = now or utcnow()
        session.status = "paused"
    return session


def _close_pause(session, now):
    session.paused_seconds = (session.paused_seconds or 0) + seconds_between(session.paused_at, now)
    session.paused_at = None
    session.status = "running"


def resume(session_id, now=None):
    session = get_session(session_id)
    if session.status != "paused":
        raise ConflictError(f"Cannot resume a session that is {session.status}")
    with atomic():
        _close_pause(session, now or utcnow())
    return session


def _close_rest(session, now):
    interval = open_rest(session)
    if interval is None:
        return None
    interval.ended_at = now
    interval.duration_seconds = seconds_between(interval.started_at, now)
    session.rest_seconds = (session.rest_seconds or 0) + interval.duration_seconds
    return interval


def _terminate(session, status, now):
    if session.status == "paused":
        _close_pause(session, now)
    _close_rest(session, now)
    session.ended_at = now
    session.status = status
    session.duration_seconds = elapsed_seconds(session)


def finish(session_id, notes=None, complete_plan=False, now=None):
    """Finalize a running or paused session.

    A paused session is resumed first so the open pause is accounted for;
    an open rest interval is closed. ``complete_plan`` lets the caller flip
    the plan-level completion flag in the same transaction.
    """
    session = get_session(session_id)
    if session.status not in ACTIVE_STATUSES:
        raise ConflictError(f"Cannot finish a session that is {session.status}")
    now = now or utcnow()
    with atomic():
        _terminate(session, "finished", now)
        if notes is not None:
            session.notes = notes
        if complete_plan:
            session.plan.completed = True
    log.info(
        "Session %s finished: %ss elapsed, %ss paused, %ss resting",
        session.id, session.duration_seconds, session.paused_seconds, session.rest_seconds,
    )
    return session


def abandon(session_id, now=None):
    session = get_session(session_id)
    if session.status not in ACTIVE_STATUSES:
        raise ConflictError(f"Cannot abandon a session that is {session.status}")
    with atomic():
        _terminate(session, "abandoned", now or utcnow())
    log.info("Session %s abandoned", session.id)
    return session


def expire_stale_sessions(max_age_hours, now=None):
    """Abandon sessions left running or paused longer than ``max_age_hours``."""
    now = now or utcnow()
    cutoff = now - timedelta(hours=max_age_hours)
    stale = (
        WorkoutSession.query
        .filter(WorkoutSession.status.in_(ACTIVE_STATUSES), WorkoutSession.started_at < cutoff)
        .all()
    )
    if not stale:
        return 0
    with atomic():
        for session in stale:
            _terminate(session, "abandoned", now)
    log.info("Expired %d stale sessions older than %sh", len(stale), max_age_hours)
    return len(stale)


def log_rest_start(session_id, kind, now=None):
    if kind not in REST_KINDS:
        raise ValidationError(f"Rest kind must be one of {', '.join(REST_KINDS)}")
    session = get_session(session_id)
    if session.status not in ACTIVE_STATUSES:
        raise ConflictError(f"Cannot rest on a session that is {session.status}")
    if open_rest(session) is not None:
        raise ConflictError("A rest interval is already running")

    interval = RestInterval(session_id=session.id, kind=kind, started_at=now or utcnow())
    try:
        db.session.add(interval)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("A rest interval is already running")
    return interval


def log_rest_end(session_id, now=None):
    """Close the open rest interval, if any.

    Returns the closed interval, or None when nothing was open; duplicate
    end signals from a flaky client are not errors.
    """
    session = get_session(session_id)
    if open_rest(session) is None:
        log.debug("No open rest on session %s; end ignored", session_id)
        return None
    with atomic():
        interval = _close_rest(session, now or utcnow())
    return interval


def mark_exercise_completed(exercise_id, completed, now=None):
    exercise = get_or_404(Exercise, exercise_id, "Exercise")
    if exercise.is_deleted:
        raise NotFoundError(f"Exercise {exercise_id} not found")
    with atomic():
        if completed and not exercise.completed:
            exercise.completed_at = now or utcnow()
        elif not completed:
            exercise.completed_at = None
        exercise.completed = bool(completed)
    return exercise


def session_summary(session_id, now=None):
    """Clock-based totals next to totals recomputed from rest records.

    The session keeps its own running rest total; the rest-interval rows
    are the cross-check. Any difference is reported, never resolved here.
    """
    session = get_session(session_id)
    now = now or utcnow()
    elapsed = elapsed_seconds(session, now)

    closed = [r for r in session.rest_intervals if r.ended_at is not None]
    current = open_rest(session)
    by_kind = defaultdict(int)
    for interval in closed:
        by_kind[interval.kind] += interval.duration_seconds or 0
    recomputed = sum(by_kind.values())
    open_seconds = seconds_between(current.started_at, now) if current else 0

    discrepancy = (session.rest_seconds or 0) - recomputed
    issues = []
    if discrepancy:
        issues.append("rest_total_mismatch")
    if recomputed + open_seconds > elapsed:
        issues.append("rest_exceeds_elapsed")
    if session.status == "finished" and session.duration_seconds not in (None, elapsed):
        issues.append("duration_mismatch")
    if issues:
        log.warning("Session %s totals disagree: %s", session.id, ", ".join(issues))

    return {
        "session_id": session.id,
        "plan_id": session.plan_id,
        "status": session.status,
        "started_at": session.started_at.isoformat() if session.started_at else None,
        "ended_at": session.ended_at.isoformat() if session.ended_at else None,
        "elapsed_seconds": elapsed,
        "paused_seconds": session.paused_seconds or 0,
        "rest_seconds": session.rest_seconds or 0,
        "rest_seconds_from_intervals": recomputed,
        "rest_seconds_by_kind": dict(by_kind),
        "open_rest_seconds": open_seconds,
        "active_seconds": max(0, elapsed - recomputed - open_seconds),
        "rest_count": len(session.rest_intervals),
        "discrepancy_seconds": discrepancy,
        "issues": issues,
    }
