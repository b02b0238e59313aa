# tiklive/models/task.py
from datetime import datetime
from ..extensions import db


TASK_STATUSES = ("open", "in_progress", "completed", "cancelled")


class TaskCategory(db.Model):
    __tablename__ = "task_categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.String(255))
    icon = db.Column(db.String(120))
    sort_order = db.Column(db.Integer, default=0, index=True)
    is_active = db.Column(db.Boolean, default=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "sort_order": self.sort_order or 0,
            "is_active": bool(self.is_active),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id"), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey("task_categories.id"), index=True)

    title = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text)
    product_name = db.Column(db.String(200))
    requirements = db.Column(db.JSON, default=list)

    budget_min = db.Column(db.Float, default=0.0)
    budget_max = db.Column(db.Float, default=0.0)
    live_date = db.Column(db.DateTime, index=True)
    duration_hours = db.Column(db.Float, default=2)
    location = db.Column(db.String(120))

    status = db.Column(db.String(20), default="open", index=True)  # open|in_progress|completed|cancelled
    is_urgent = db.Column(db.Boolean, default=False)
    max_applicants = db.Column(db.Integer, default=1)
    current_applicants = db.Column(db.Integer, default=0)
    views_count = db.Column(db.Integer, default=0)

    selected_influencer_id = db.Column(db.Integer, db.ForeignKey("influencers.id"), index=True)

    # Advance payment / settlement
    is_advance_paid = db.Column(db.Boolean, default=False)
    paid_amount = db.Column(db.Float)
    is_settled = db.Column(db.Boolean, default=False)
    settlement_amount = db.Column(db.Float)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = db.relationship("Company", back_populates="tasks")
    category = db.relationship("TaskCategory", lazy="joined")
    selected_influencer = db.relationship("Influencer", foreign_keys=[selected_influencer_id])

    applications = db.relationship(
        "TaskApplication",
        back_populates="task",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="TaskApplication.applied_at.desc()",
    )

    def to_dict(self, with_relations=True):
        data = {
            "id": self.id,
            "company_id": self.company_id,
            "category_id": self.category_id,
            "title": self.title,
            "description": self.description,
            "product_name": self.product_name,
            "requirements": list(self.requirements or []),
            "budget_min": self.budget_min or 0.0,
            "budget_max": self.budget_max or 0.0,
            "live_date": self.live_date.isoformat() if self.live_date else None,
            "duration_hours": self.duration_hours,
            "location": self.location,
            "status": self.status,
            "is_urgent": bool(self.is_urgent),
            "max_applicants": self.max_applicants or 0,
            "current_applicants": self.current_applicants or 0,
            "views_count": self.views_count or 0,
            "selected_influencer_id": self.selected_influencer_id,
            "is_advance_paid": bool(self.is_advance_paid),
            "paid_amount": self.paid_amount,
            "is_settled": bool(self.is_settled),
            "settlement_amount": self.settlement_amount,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if with_relations:
            c = self.company
            data["company"] = {"company_name": c.company_name, "logo_url": c.logo_url} if c else None
            data["category"] = {"name": self.category.name} if self.category else None
        return data
