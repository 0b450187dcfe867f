from coachplan.extensions import db
from coachplan.models.plan_exercise import GROUP_KINDS_SQL


class TemplateExercise(db.Model):
    __tablename__ = "template_exercises"

    id = db.Column(db.Integer, primary_key=True)
    template_id = db.Column(db.Integer, db.ForeignKey("plan_templates.id", ondelete="CASCADE"), nullable=False, index=True)
    library_exercise_id = db.Column(db.Integer, db.ForeignKey("library_exercises.id"), nullable=True)

    name = db.Column(db.String(150), nullable=False)
    video_url = db.Column(db.String(255))
    sets = db.Column(db.Integer)
    reps = db.Column(db.String(20))
    load = db.Column(db.String(30))
    rest_seconds = db.Column(db.Integer, default=0)
    notes = db.Column(db.Text)
    ordinal = db.Column(db.Integer, nullable=False, default=0)

    # Group ids here are template-local; they are remapped when a template is applied.
    group_id = db.Column(db.String(36), nullable=True)
    group_kind = db.Column(db.String(20), nullable=False, default="none")
    group_ordinal = db.Column(db.Integer, nullable=True)
    group_rest_seconds = db.Column(db.Integer, nullable=True)

    template = db.relationship("PlanTemplate", back_populates="exercises")

    __table_args__ = (
        db.CheckConstraint(f"group_kind IN {GROUP_KINDS_SQL}", name="check_template_exercise_group_kind"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "template_id": self.template_id,
            "library_exercise_id": self.library_exercise_id,
            "name": self.name,
            "video_url": self.video_url,
            "sets": self.sets,
            "reps": self.reps,
            "load": self.load,
            "rest_seconds": self.rest_seconds,
            "notes": self.notes,
            "ordinal": self.ordinal,
            "group_id": self.group_id,
            "group_kind": self.group_kind,
            "group_ordinal": self.group_ordinal,
            "group_rest_seconds": self.group_rest_seconds,
        }
