from coachplan.extensions import db
from coachplan.utils.dates import utcnow

REST_KINDS = ("between_sets", "between_groups")


class RestInterval(db.Model):
    __tablename__ = "rest_intervals"

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = db.Column(
        db.String(20),
        db.CheckConstraint("kind IN ('between_sets','between_groups')", name="check_rest_kind"),
        nullable=False,
    )
    started_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    ended_at = db.Column(db.DateTime, nullable=True)
    duration_seconds = db.Column(db.Integer, nullable=True)

    session = db.relationship("WorkoutSession", back_populates="rest_intervals")

    __table_args__ = (
        # At most one open interval per session.
        db.Index(
            "uq_rest_intervals_open",
            "session_id",
            unique=True,
            postgresql_where=db.text("ended_at IS NULL"),
            sqlite_where=db.text("ended_at IS NULL"),
        ),
    )

    @property
    def is_open(self):
        return self.ended_at is None

    def to_dict(self):
        return {
            "id": self.id,
            "session_id": self.session_id,
            "kind": self.kind,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_seconds": self.duration_seconds,
        }
