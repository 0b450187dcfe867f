from coachplan.models import LibraryExercise


def search_library(query=None, category=None, limit=50):
    q = LibraryExercise.query.filter(LibraryExercise.is_active.is_(True))
    if query:
        q = q.filter(LibraryExercise.name.ilike(f"%{query.strip()}%"))
    if category:
        q = q.filter(LibraryExercise.category == category)
    return q.order_by(LibraryExercise.name).limit(limit).all()
