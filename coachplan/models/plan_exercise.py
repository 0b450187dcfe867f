from coachplan.extensions import db
from coachplan.utils.dates import utcnow

GROUP_KINDS = ("none", "superset", "circuit", "dropset", "biset", "triset")
GROUP_KINDS_SQL = "('none','superset','circuit','dropset','biset','triset')"


class Exercise(db.Model):
    __tablename__ = "plan_exercises"

    id = db.Column(db.Integer, primary_key=True)
    plan_id = db.Column(db.Integer, db.ForeignKey("weekly_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    library_exercise_id = db.Column(db.Integer, db.ForeignKey("library_exercises.id"), nullable=True)

    name = db.Column(db.String(150), nullable=False)
    video_url = db.Column(db.String(255))
    sets = db.Column(db.Integer)
    reps = db.Column(db.String(20))          # "8-12", "30s", ...
    load = db.Column(db.String(30))          # prescribed by the trainer
    executed_load = db.Column(db.String(30))  # what the client actually lifted
    rest_seconds = db.Column(db.Integer, default=0)
    notes = db.Column(db.Text)
    ordinal = db.Column(db.Integer, nullable=False, default=0)

    group_id = db.Column(db.String(36), nullable=True, index=True)
    group_kind = db.Column(db.String(20), nullable=False, default="none")
    group_ordinal = db.Column(db.Integer, nullable=True)
    group_rest_seconds = db.Column(db.Integer, nullable=True)

    completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    deleted_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    plan = db.relationship("WeeklyPlan", back_populates="exercises")
    library_entry = db.relationship("LibraryExercise")

    __table_args__ = (
        db.CheckConstraint(f"group_kind IN {GROUP_KINDS_SQL}", name="check_exercise_group_kind"),
        db.Index("idx_plan_exercises_plan_ordinal", "plan_id", "ordinal"),
    )

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def clear_group(self):
        self.group_id = None
        self.group_kind = "none"
        self.group_ordinal = None
        self.group_rest_seconds = None

    def to_dict(self):
        return {
            "id": self.id,
            "plan_id": self.plan_id,
            "library_exercise_id": self.library_exercise_id,
            "name": self.name,
            "video_url": self.video_url,
            "sets": self.sets,
            "reps": self.reps,
            "load": self.load,
            "executed_load": self.executed_load,
            "rest_seconds": self.rest_seconds,
            "notes": self.notes,
            "ordinal": self.ordinal,
            "group_id": self.group_id,
            "group_kind": self.group_kind,
            "group_ordinal": self.group_ordinal,
            "group_rest_seconds": self.group_rest_seconds,
            "completed": self.completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    def __repr__(self):
        return f"<Exercise {self.name}#{self.ordinal}>"
