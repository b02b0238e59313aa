# tiklive/models/video.py
from datetime import datetime
from ..extensions import db


class VideoCategory(db.Model):
    __tablename__ = "video_categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.String(255))
    sort_order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "sort_order": self.sort_order or 0,
            "is_active": bool(self.is_active),
        }


class Video(db.Model):
    """Showcase video displayed on the home page and the video gallery."""
    __tablename__ = "videos"

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey("video_categories.id"), index=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    video_url = db.Column(db.String(512))
    poster_url = db.Column(db.String(512))
    duration = db.Column(db.String(20))

    influencer_name = db.Column(db.String(120))
    influencer_avatar = db.Column(db.String(512))
    influencer_rating = db.Column(db.Float, default=0.0)

    views_count = db.Column(db.Integer, default=0)
    likes_count = db.Column(db.Integer, default=0)
    comments_count = db.Column(db.Integer, default=0)
    shares_count = db.Column(db.Integer, default=0)
    tags = db.Column(db.JSON, default=list)

    is_featured = db.Column(db.Boolean, default=False, index=True)
    is_active = db.Column(db.Boolean, default=True, index=True)
    sort_order = db.Column(db.Integer, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = db.relationship("VideoCategory", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "category_id": self.category_id,
            "title": self.title,
            "description": self.description,
            "video_url": self.video_url,
            "poster_url": self.poster_url,
            "duration": self.duration,
            "influencer_name": self.influencer_name,
            "influencer_avatar": self.influencer_avatar,
            "influencer_rating": self.influencer_rating or 0.0,
            "views_count": self.views_count or 0,
            "likes_count": self.likes_count or 0,
            "comments_count": self.comments_count or 0,
            "shares_count": self.shares_count or 0,
            "tags": list(self.tags or []),
            "is_featured": bool(self.is_featured),
            "is_active": bool(self.is_active),
            "sort_order": self.sort_order or 0,
            "category": (
                {"name": self.category.name, "description": self.category.description}
                if self.category else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def related_summary(self):
        return {
            "id": self.id,
            "title": self.title,
            "poster_url": self.poster_url,
            "duration": self.duration,
            "views_count": self.views_count or 0,
            "likes_count": self.likes_count or 0,
            "influencer_name": self.influencer_name,
            "influencer_avatar": self.influencer_avatar,
            "category": {"name": self.category.name} if self.category else None,
        }
