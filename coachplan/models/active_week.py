from coachplan.extensions import db
from coachplan.utils.dates import utcnow


class ActiveWeek(db.Model):
    """Per (client, trainer) pointer to the week considered "current"."""
    __tablename__ = "active_weeks"

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    week_start = db.Column(db.Date, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.UniqueConstraint("client_id", "trainer_id", name="uq_active_week_client_trainer"),
    )

    def to_dict(self):
        return {
            "client_id": self.client_id,
            "trainer_id": self.trainer_id,
            "week_start": self.week_start.isoformat(),
        }
