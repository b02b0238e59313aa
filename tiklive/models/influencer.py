# tiklive/models/influencer.py
from datetime import datetime
from ..extensions import db


def normalize_tags(values) -> list[str]:
    """Categories and tags are unordered sets; store them deduplicated and sorted."""
    if not values:
        return []
    if isinstance(values, str):
        values = values.split(",")
    return sorted({str(v).strip() for v in values if str(v).strip()})


class Influencer(db.Model):
    __tablename__ = "influencers"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False, index=True)

    nickname = db.Column(db.String(120), nullable=False)
    real_name = db.Column(db.String(120))
    tiktok_account = db.Column(db.String(120))
    tiktok_url = db.Column(db.String(512))
    bio = db.Column(db.Text)
    location = db.Column(db.String(120))
    avatar_url = db.Column(db.String(512))
    id_card_photo_url = db.Column(db.String(512))

    categories = db.Column(db.JSON, default=list)
    tags = db.Column(db.JSON, default=list)

    hourly_rate = db.Column(db.Float, default=0.0)
    experience_years = db.Column(db.Integer, default=0)

    # Aggregates
    followers_count = db.Column(db.Integer, default=0)
    rating = db.Column(db.Float, default=0.0, index=True)
    total_reviews = db.Column(db.Integer, default=0)
    total_live_count = db.Column(db.Integer, default=0)
    avg_views = db.Column(db.Integer, default=0)

    # Vetting, only changed by admins
    is_verified = db.Column(db.Boolean, default=False, index=True)
    is_approved = db.Column(db.Boolean, default=False, index=True)
    status = db.Column(db.String(20), default="active", index=True)  # active|inactive|suspended

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    applications = db.relationship(
        "TaskApplication",
        back_populates="influencer",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def summary(self):
        return {
            "id": self.id,
            "nickname": self.nickname,
            "avatar_url": self.avatar_url,
            "rating": self.rating or 0.0,
            "total_reviews": self.total_reviews or 0,
            "hourly_rate": self.hourly_rate or 0.0,
        }

    def to_dict(self):
        return {
            **self.summary(),
            "user_id": self.user_id,
            "real_name": self.real_name,
            "tiktok_account": self.tiktok_account,
            "tiktok_url": self.tiktok_url,
            "bio": self.bio,
            "location": self.location,
            "categories": normalize_tags(self.categories),
            "tags": normalize_tags(self.tags),
            "experience_years": self.experience_years or 0,
            "followers_count": self.followers_count or 0,
            "total_live_count": self.total_live_count or 0,
            "avg_views": self.avg_views or 0,
            "is_verified": bool(self.is_verified),
            "is_approved": bool(self.is_approved),
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
