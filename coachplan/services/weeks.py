"""Active-week pointer: which week's plans count as "this week" for a client.

The pointer only moves when set or advanced explicitly, so a client can
stay on an unfinished week after the calendar has rolled over.
"""
import logging
from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from coachplan.errors import ValidationError
from coachplan.extensions import db
from coachplan.models import ActiveWeek
from coachplan.utils.dates import is_week_start, parse_date, week_start

log = logging.getLogger(__name__)


def _pointer(client_id, trainer_id=None):
    query = ActiveWeek.query.filter_by(client_id=client_id)
    if trainer_id is not None:
        query = query.filter_by(trainer_id=trainer_id)
    return query.order_by(ActiveWeek.updated_at.desc(), ActiveWeek.id.desc()).first()


def get_active_week(client_id, trainer_id=None, today=None):
    """Pointed week start, or the Monday of ``today``'s week when unset."""
    pointer = _pointer(client_id, trainer_id)
    if pointer is not None:
        return pointer.week_start
    return week_start(today)


def set_active_week(client_id, trainer_id, start):
    try:
        start = parse_date(start)
    except ValueError:
        raise ValidationError("Week start must be a date in YYYY-MM-DD format")
    if not is_week_start(start):
        raise ValidationError("Week start must be a Monday")

    pointer = _pointer(client_id, trainer_id)
    if pointer is None:
        pointer = ActiveWeek(client_id=client_id, trainer_id=trainer_id, week_start=start)
        db.session.add(pointer)
    else:
        pointer.week_start = start
    try:
        db.session.commit()
    except IntegrityError:
        # Concurrent first write for the same (client, trainer): update theirs.
        db.session.rollback()
        pointer = _pointer(client_id, trainer_id)
        pointer.week_start = start
        db.session.commit()
    log.info("Active week for client %s (trainer %s) set to %s", client_id, trainer_id, start)
    return pointer


def advance_week(client_id, trainer_id, weeks=1, today=None):
    current = get_active_week(client_id, trainer_id, today=today)
    return set_active_week(client_id, trainer_id, current + timedelta(weeks=weeks))
