from coachplan.extensions import db
from coachplan.utils.dates import utcnow

SESSION_STATUSES = ("not_started", "running", "paused", "finished", "abandoned")
ACTIVE_STATUSES = ("running", "paused")


class WorkoutSession(db.Model):
    """One timed execution attempt of a weekly plan."""
    __tablename__ = "workout_sessions"

    id = db.Column(db.Integer, primary_key=True)
    plan_id = db.Column(db.Integer, db.ForeignKey("weekly_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    status = db.Column(db.String(20), nullable=False, default="not_started")
    started_at = db.Column(db.DateTime)
    ended_at = db.Column(db.DateTime)
    paused_at = db.Column(db.DateTime)        # set only while paused
    paused_seconds = db.Column(db.Integer, nullable=False, default=0)
    rest_seconds = db.Column(db.Integer, nullable=False, default=0)
    duration_seconds = db.Column(db.Integer)  # clock elapsed, stored on finish
    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=utcnow)

    plan = db.relationship("WeeklyPlan", back_populates="sessions")
    client = db.relationship("User", foreign_keys=[client_id])
    rest_intervals = db.relationship(
        "RestInterval",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="RestInterval.started_at",
    )

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('not_started','running','paused','finished','abandoned')",
            name="check_session_status",
        ),
        # At most one running/paused session per (client, plan).
        db.Index(
            "uq_workout_sessions_active",
            "client_id", "plan_id",
            unique=True,
            postgresql_where=db.text("status IN ('running','paused')"),
            sqlite_where=db.text("status IN ('running','paused')"),
        ),
    )

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES

    def to_dict(self):
        return {
            "id": self.id,
            "plan_id": self.plan_id,
            "client_id": self.client_id,
            "status": self.status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "paused_at": self.paused_at.isoformat() if self.paused_at else None,
            "paused_seconds": self.paused_seconds,
            "rest_seconds": self.rest_seconds,
            "duration_seconds": self.duration_seconds,
            "notes": self.notes,
        }

    def __repr__(self):
        return f"<WorkoutSession {self.id} plan={self.plan_id} {self.status}>"
