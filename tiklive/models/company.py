# tiklive/models/company.py
from datetime import datetime
from ..extensions import db


class Company(db.Model):
    __tablename__ = "companies"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False, index=True)

    company_name = db.Column(db.String(255), nullable=False, index=True)
    contact_person = db.Column(db.String(120))
    contact_phone = db.Column(db.String(50))
    contact_email = db.Column(db.String(255))
    business_license = db.Column(db.String(255))
    industry = db.Column(db.String(120))
    company_size = db.Column(db.String(50))
    website = db.Column(db.String(255))
    description = db.Column(db.Text)
    logo_url = db.Column(db.String(512))

    is_verified = db.Column(db.Boolean, default=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tasks = db.relationship(
        "Task",
        back_populates="company",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Task.created_at.desc()",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "company_name": self.company_name,
            "contact_person": self.contact_person,
            "contact_phone": self.contact_phone,
            "contact_email": self.contact_email,
            "business_license": self.business_license,
            "industry": self.industry,
            "company_size": self.company_size,
            "website": self.website,
            "description": self.description,
            "logo_url": self.logo_url,
            "is_verified": bool(self.is_verified),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
