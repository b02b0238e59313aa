# tiklive/models/admin.py
from datetime import datetime, date
from ..extensions import db


class AdminLog(db.Model):
    __tablename__ = "admin_logs"

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True)
    action_type = db.Column(db.String(50), nullable=False, index=True)
    target_type = db.Column(db.String(50))
    target_id = db.Column(db.Integer)
    description = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.action_type,
            "description": self.description or "",
            "target_type": self.target_type,
            "target_id": self.target_id,
            "timestamp": self.created_at.isoformat() if self.created_at else None,
            "user": self.admin_id,
        }


class SystemStats(db.Model):
    __tablename__ = "system_stats"

    id = db.Column(db.Integer, primary_key=True)
    stat_date = db.Column(db.Date, default=date.today, unique=True, index=True)

    total_users = db.Column(db.Integer, default=0)
    total_influencers = db.Column(db.Integer, default=0)
    total_companies = db.Column(db.Integer, default=0)
    total_tasks = db.Column(db.Integer, default=0)
    total_applications = db.Column(db.Integer, default=0)
    daily_new_users = db.Column(db.Integer, default=0)
    daily_new_tasks = db.Column(db.Integer, default=0)
    daily_revenue = db.Column(db.Float, default=0.0)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "stat_date": self.stat_date.isoformat() if self.stat_date else None,
            "totalUsers": self.total_users or 0,
            "totalInfluencers": self.total_influencers or 0,
            "totalCompanies": self.total_companies or 0,
            "totalTasks": self.total_tasks or 0,
            "totalApplications": self.total_applications or 0,
            "dailyNewUsers": self.daily_new_users or 0,
            "dailyNewTasks": self.daily_new_tasks or 0,
            "totalRevenue": self.daily_revenue or 0.0,
        }
