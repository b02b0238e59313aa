# tiklive/models/user.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from ..extensions import db


USER_TYPES = ("influencer", "company", "admin")

ADMIN_PERMISSIONS = (
    "user_management",
    "task_management",
    "system_settings",
    "data_analytics",
    "content_moderation",
)


# ------- Auth identity -------

class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255))

    # active|suspended
    status = db.Column(db.String(20), default="active", index=True)

    is_email_verified = db.Column(db.Boolean, default=False)
    last_login_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    profile = db.relationship(
        "UserProfile",
        backref="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    influencer = db.relationship(
        "Influencer",
        backref="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    company = db.relationship(
        "Company",
        backref="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    permissions = db.relationship(
        "AdminPermission",
        foreign_keys="AdminPermission.admin_id",
        backref="admin",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    # --- Auth helpers ---
    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    # --- Convenience flags ---
    @property
    def is_suspended(self) -> bool:
        return self.status == "suspended"

    @property
    def user_type(self):
        return self.profile.user_type if self.profile else None

    @property
    def is_admin(self) -> bool:
        return self.user_type == "admin"

    @property
    def permission_names(self) -> list[str]:
        return sorted(p.permission_name for p in self.permissions)

    def has_permission(self, name: str) -> bool:
        return self.is_admin and name in self.permission_names

    def mark_login(self):
        self.last_login_at = datetime.utcnow()

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "status": self.status,
            "is_email_verified": bool(self.is_email_verified),
            "user_type": self.user_type,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class UserProfile(db.Model):
    """Classifies an identity as influencer, company or admin."""
    __tablename__ = "user_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False, index=True)
    user_type = db.Column(db.String(20), nullable=False, index=True)  # influencer|company|admin
    phone = db.Column(db.String(50))
    avatar_url = db.Column(db.String(512))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_type": self.user_type,
            "phone": self.phone,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class AdminPermission(db.Model):
    __tablename__ = "admin_permissions"

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    permission_name = db.Column(db.String(64), nullable=False)
    granted_by = db.Column(db.Integer, db.ForeignKey("users.id"))
    granted_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("admin_id", "permission_name", name="uq_admin_permission"),
    )
