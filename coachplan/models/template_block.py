from coachplan.extensions import db
from coachplan.models.plan_block import BLOCK_TYPES_SQL, BLOCK_POSITIONS_SQL


class TemplateBlock(db.Model):
    __tablename__ = "template_blocks"

    id = db.Column(db.Integer, primary_key=True)
    template_id = db.Column(db.Integer, db.ForeignKey("plan_templates.id", ondelete="CASCADE"), nullable=False, index=True)

    type = db.Column(db.String(20), nullable=False)
    position = db.Column(db.String(10), nullable=False, default="start")
    ordinal = db.Column(db.Integer, nullable=False, default=0)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    estimated_minutes = db.Column(db.Integer)
    config = db.Column(db.JSON)

    template = db.relationship("PlanTemplate", back_populates="blocks")

    __table_args__ = (
        db.CheckConstraint(f"type IN {BLOCK_TYPES_SQL}", name="check_template_block_type"),
        db.CheckConstraint(f"position IN {BLOCK_POSITIONS_SQL}", name="check_template_block_position"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "template_id": self.template_id,
            "type": self.type,
            "position": self.position,
            "ordinal": self.ordinal,
            "name": self.name,
            "description": self.description,
            "estimated_minutes": self.estimated_minutes,
            "config": self.config,
        }
