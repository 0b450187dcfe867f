from coachplan.extensions import db
from coachplan.utils.dates import utcnow


class WeeklyPlan(db.Model):
    """One day's training assignment for one client in one week."""
    __tablename__ = "weekly_plans"

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    template_id = db.Column(db.Integer, db.ForeignKey("plan_templates.id"), nullable=True)

    week_start = db.Column(db.Date, nullable=False)
    day_of_week = db.Column(db.Integer, nullable=False)  # 0 = Monday
    day_ordinal = db.Column(db.Integer, nullable=False, default=0)

    name = db.Column(db.String(150))
    notes = db.Column(db.Text)
    completed = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    client = db.relationship("User", foreign_keys=[client_id])
    trainer = db.relationship("User", foreign_keys=[trainer_id])
    template = db.relationship("PlanTemplate")

    blocks = db.relationship("Block", back_populates="plan", cascade="all, delete-orphan")
    exercises = db.relationship("Exercise", back_populates="plan", cascade="all, delete-orphan")
    sessions = db.relationship("WorkoutSession", back_populates="plan", cascade="all, delete-orphan")

    __table_args__ = (
        db.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="check_plan_day_of_week"),
        db.UniqueConstraint(
            "client_id", "trainer_id", "week_start", "day_of_week", "day_ordinal",
            name="uq_weekly_plan_slot",
        ),
        db.Index("idx_weekly_plans_client_week", "client_id", "week_start"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "client_id": self.client_id,
            "trainer_id": self.trainer_id,
            "template_id": self.template_id,
            "week_start": self.week_start.isoformat() if self.week_start else None,
            "day_of_week": self.day_of_week,
            "day_ordinal": self.day_ordinal,
            "name": self.name,
            "notes": self.notes,
            "completed": self.completed,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<WeeklyPlan {self.client_id} {self.week_start} d{self.day_of_week}#{self.day_ordinal}>"
