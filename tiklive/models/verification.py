# tiklive/models/verification.py
from datetime import datetime
from ..extensions import db


class VerificationCode(db.Model):
    __tablename__ = "verification_codes"

    id = db.Column(db.Integer, primary_key=True)
    channel = db.Column(db.String(10), nullable=False, index=True)  # email|sms
    target = db.Column(db.String(255), nullable=False, index=True)  # email address or phone number
    purpose = db.Column(db.String(30), default="signup")
    code_hash = db.Column(db.String(255), nullable=False)

    attempts = db.Column(db.Integer, default=0)
    expires_at = db.Column(db.DateTime, nullable=False)
    consumed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    @property
    def is_expired(self) -> bool:
        return datetime.utcnow() > self.expires_at

