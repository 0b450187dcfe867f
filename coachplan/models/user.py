from coachplan.extensions import db
from coachplan.utils.dates import utcnow

USERS_TABLE = "users"

ROLES = ("admin", "trainer", "client")


class User(db.Model):
    __tablename__ = USERS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    role = db.Column(
        db.String(20),
        db.CheckConstraint("role IN ('admin','trainer','client')", name="check_user_role"),
        nullable=False,
        index=True,
    )
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    templates = db.relationship("PlanTemplate", back_populates="trainer", lazy="dynamic")

    @property
    def is_trainer(self):
        return self.role == "trainer"

    @property
    def is_client(self):
        return self.role == "client"

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "is_active": self.is_active,
        }

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
