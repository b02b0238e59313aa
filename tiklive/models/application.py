# tiklive/models/application.py
from datetime import datetime
from ..extensions import db


class TaskApplication(db.Model):
    __tablename__ = "task_applications"

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey("tasks.id"), nullable=False, index=True)
    influencer_id = db.Column(db.Integer, db.ForeignKey("influencers.id"), nullable=False, index=True)

    message = db.Column(db.Text)
    proposed_rate = db.Column(db.Float)
    status = db.Column(db.String(20), default="pending", index=True)  # pending|accepted|refused|withdrawn

    applied_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    responded_at = db.Column(db.DateTime)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    task = db.relationship("Task", back_populates="applications")
    influencer = db.relationship("Influencer", back_populates="applications")

    __table_args__ = (
        db.UniqueConstraint("task_id", "influencer_id", name="uq_task_application_pair"),
    )

    def to_dict(self, with_influencer=True):
        data = {
            "id": self.id,
            "task_id": self.task_id,
            "influencer_id": self.influencer_id,
            "status": self.status,
            "proposed_rate": self.proposed_rate,
            "message": self.message,
            "applied_at": self.applied_at.isoformat() if self.applied_at else None,
            "responded_at": self.responded_at.isoformat() if self.responded_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if with_influencer:
            data["influencer"] = self.influencer.summary() if self.influencer else None
        return data
