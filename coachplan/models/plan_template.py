from coachplan.extensions import db
from coachplan.utils.dates import utcnow


class PlanTemplate(db.Model):
    __tablename__ = "plan_templates"

    id = db.Column(db.Integer, primary_key=True)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    folder_id = db.Column(db.Integer, db.ForeignKey("template_folders.id"), nullable=True, index=True)

    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.String(50))
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    trainer = db.relationship("User", back_populates="templates")
    folder = db.relationship("TemplateFolder", back_populates="templates")
    blocks = db.relationship(
        "TemplateBlock",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="TemplateBlock.ordinal",
    )
    exercises = db.relationship(
        "TemplateExercise",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="TemplateExercise.ordinal",
    )

    def to_dict(self, include_children=False):
        data = {
            "id": self.id,
            "trainer_id": self.trainer_id,
            "folder_id": self.folder_id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_children:
            data["blocks"] = [b.to_dict() for b in self.blocks]
            data["exercises"] = [e.to_dict() for e in self.exercises]
        return data

    def __repr__(self):
        return f"<PlanTemplate {self.name}>"
