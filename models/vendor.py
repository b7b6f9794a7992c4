from datetime import datetime

from models import db


class Vendor(db.Model):
    """Restaurant or mart. Legacy JSON blobs are stored as text."""

    __tablename__ = "vendors"

    id = db.Column(db.String(64), primary_key=True)
    title = db.Column(db.String(255), nullable=False, default="")
    description = db.Column(db.Text)
    author = db.Column(db.String(64))
    zone_id = db.Column(db.String(64), index=True)
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    location = db.Column(db.String(255))
    phonenumber = db.Column(db.String(30))
    photo = db.Column(db.String(512))
    photos = db.Column(db.Text)
    v_type = db.Column(db.String(20))
    publish = db.Column(db.Boolean, nullable=True)
    # raw manual override, may hold legacy values such as "0" or "false"
    is_open = db.Column(db.String(10), nullable=True)
    working_hours = db.Column(db.Text)
    category_ids = db.Column(db.Text)
    category_title = db.Column(db.Text)
    cuisine_title = db.Column(db.String(255))
    restaurant_slug = db.Column(db.String(255))
    zone_slug = db.Column(db.String(255))
    reviews_count = db.Column(db.Integer, default=0)
    reviews_sum = db.Column(db.Float, default=0)
    restaurant_cost = db.Column(db.String(20))
    admin_commission = db.Column(db.Text)
    enabled_dive_in_future = db.Column(db.Boolean, default=False)
    special_discount_enable = db.Column(db.Boolean, default=False)
    dine_in_active = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def manual_open_flag(self) -> bool:
        from app.services.opening_hours import normalize_manual_flag
        return normalize_manual_flag(self.is_open)

    @property
    def working_hours_list(self):
        from app.services.opening_hours import decode_working_hours
        return decode_working_hours(self.working_hours)

    @property
    def category_id_list(self):
        from app.utils.coerce import decode_json_list
        return decode_json_list(self.category_ids)


class VendorCategory(db.Model):
    __tablename__ = "vendor_categories"

    id = db.Column(db.String(64), primary_key=True)
    restaurant_id = db.Column(db.String(255), index=True)
    title = db.Column(db.String(255), nullable=False, default="")
    description = db.Column(db.Text)
    photo = db.Column(db.String(512))
    publish = db.Column(db.Boolean, default=True)
    show_in_homepage = db.Column(db.Boolean, default=False)
    v_type = db.Column(db.String(20))

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title or "",
            "photo": self.photo or "",
            "show_in_homepage": bool(self.show_in_homepage),
            "publish": bool(self.publish),
            "description": self.description or "",
            "vType": self.v_type,
        }


class SubscriptionHistory(db.Model):
    __tablename__ = "subscription_history"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    subscription_plan = db.Column(db.Text)
    expiry_date = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
