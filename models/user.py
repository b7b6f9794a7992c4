# --- models/user.py ---
from models import db, BIGINT
from datetime import datetime


class AppUser(db.Model):
    __tablename__ = "users"

    id = db.Column(BIGINT, primary_key=True, autoincrement=True)
    firebase_id = db.Column(db.String(64), unique=True, index=True)
    first_name = db.Column(db.String(255), nullable=False)
    last_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    country_code = db.Column(db.String(10))
    phone_number = db.Column(db.String(30))
    role = db.Column(db.String(50), default="customer", index=True)
    active = db.Column(db.Boolean, default=False)
    zone_id = db.Column(db.String(64))
    # JSON list of addresses, each may carry a zoneId
    shipping_address = db.Column(db.Text)
    profile_picture_url = db.Column(db.String(512))
    provider = db.Column(db.String(20), default="email")
    app_identifier = db.Column(db.String(20), default="web")
    wallet_amount = db.Column(db.Numeric(10, 2), default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self):
        return f"<AppUser id={self.firebase_id} role={self.role}>"
