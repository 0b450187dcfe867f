from coachplan.extensions import db
from coachplan.utils.dates import utcnow


class TemplateFolder(db.Model):
    __tablename__ = "template_folders"

    id = db.Column(db.Integer, primary_key=True)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    parent_id = db.Column(db.Integer, db.ForeignKey("template_folders.id"), nullable=True)
    name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    parent = db.relationship("TemplateFolder", remote_side=[id], backref="children")
    templates = db.relationship("PlanTemplate", back_populates="folder", lazy="dynamic")

    def to_dict(self):
        return {
            "id": self.id,
            "trainer_id": self.trainer_id,
            "parent_id": self.parent_id,
            "name": self.name,
        }
