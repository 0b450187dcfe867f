from coachplan.extensions import db
from coachplan.utils.dates import utcnow

BLOCK_TYPES = ("warmup", "cardio", "stretch", "other")
BLOCK_POSITIONS = ("start", "end")

BLOCK_TYPES_SQL = "('warmup','cardio','stretch','other')"
BLOCK_POSITIONS_SQL = "('start','end')"


class Block(db.Model):
    """Non-exercise segment placed before or after the exercise body of a plan."""
    __tablename__ = "plan_blocks"

    id = db.Column(db.Integer, primary_key=True)
    plan_id = db.Column(db.Integer, db.ForeignKey("weekly_plans.id", ondelete="CASCADE"), nullable=False, index=True)

    type = db.Column(db.String(20), nullable=False)
    position = db.Column(db.String(10), nullable=False, default="start")
    ordinal = db.Column(db.Integer, nullable=False, default=0)

    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    estimated_minutes = db.Column(db.Integer, default=10)
    required = db.Column(db.Boolean, default=False)
    config = db.Column(db.JSON)

    completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    deleted_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    plan = db.relationship("WeeklyPlan", back_populates="blocks")

    __table_args__ = (
        db.CheckConstraint(f"type IN {BLOCK_TYPES_SQL}", name="check_block_type"),
        db.CheckConstraint(f"position IN {BLOCK_POSITIONS_SQL}", name="check_block_position"),
        db.Index("idx_plan_blocks_partition", "plan_id", "position", "ordinal"),
    )

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def to_dict(self):
        return {
            "id": self.id,
            "plan_id": self.plan_id,
            "type": self.type,
            "position": self.position,
            "ordinal": self.ordinal,
            "name": self.name,
            "description": self.description,
            "estimated_minutes": self.estimated_minutes,
            "required": self.required,
            "config": self.config,
            "completed": self.completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
        }

    def __repr__(self):
        return f"<Block {self.type}:{self.position}#{self.ordinal}>"
