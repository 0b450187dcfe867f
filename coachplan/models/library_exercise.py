from coachplan.extensions import db
from coachplan.utils.dates import utcnow


class LibraryExercise(db.Model):
    """Shared exercise-library entry used to enrich plan exercises."""
    __tablename__ = "library_exercises"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text)
    video_url = db.Column(db.String(255))

    category = db.Column(db.String(50))  # strength, cardio, mobility...
    muscle_groups = db.Column(db.JSON)   # ["chest", "triceps"]
    equipment_needed = db.Column(db.JSON)

    default_sets = db.Column(db.Integer, default=3)
    default_reps = db.Column(db.String(20), default="10")

    is_active = db.Column(db.Boolean, default=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (
        db.Index("idx_library_exercises_category", "category"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "video_url": self.video_url,
            "category": self.category,
            "muscle_groups": self.muscle_groups or [],
            "equipment_needed": self.equipment_needed or [],
            "default_sets": self.default_sets,
            "default_reps": self.default_reps,
            "is_active": self.is_active,
        }

    def __repr__(self):
        return f"<LibraryExercise {self.name}>"
