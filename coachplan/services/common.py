from contextlib import contextmanager

from coachplan.errors import NotFoundError
from coachplan.extensions import db


@contextmanager
def atomic():
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def get_or_404(model, object_id, label=None):
    obj = db.session.get(model, object_id) if object_id is not None else None
    if obj is None:
        raise NotFoundError(f"{label or model.__name__} {object_id} not found")
    return obj


def next_ordinal(rows):
    """Ordinal for a row appended after ``rows``: current max + 1, or 0 if empty."""
    ordinals = [r.ordinal for r in rows if r.ordinal is not None]
    return max(ordinals) + 1 if ordinals else 0


def resequence(rows):
    for index, row in enumerate(rows):
        row.ordinal = index
    return rows
