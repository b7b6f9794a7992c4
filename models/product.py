from datetime import datetime

from models import db


class VendorProduct(db.Model):
    __tablename__ = "vendor_products"

    id = db.Column(db.String(64), primary_key=True)
    vendor_id = db.Column(db.String(64), db.ForeignKey("vendors.id"), index=True)
    vendor_title = db.Column(db.String(255))
    category_id = db.Column(db.String(64), index=True)
    category_title = db.Column(db.String(255))
    name = db.Column(db.String(255), nullable=False, default="")
    description = db.Column(db.Text)
    # prices are kept as text, legacy rows contain "120", "120.00" or "Rs 120"
    price = db.Column(db.String(32))
    dis_price = db.Column(db.String(32))
    quantity = db.Column(db.Integer)
    publish = db.Column(db.Boolean, nullable=True)
    is_available = db.Column(db.Boolean, default=True)
    veg = db.Column(db.Boolean, default=False)
    nonveg = db.Column(db.Boolean, default=False)
    takeaway_option = db.Column(db.Boolean, default=False)
    photo = db.Column(db.String(512))
    photos = db.Column(db.Text)
    add_ons_title = db.Column(db.Text)
    add_ons_price = db.Column(db.Text)
    item_attribute = db.Column(db.Text)
    product_specification = db.Column(db.Text)
    reviews_count = db.Column(db.Integer, default=0)
    reviews_sum = db.Column(db.Float, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    vendor = db.relationship("Vendor", backref=db.backref("products", lazy=True))


class Promotion(db.Model):
    __tablename__ = "promotions"

    id = db.Column(db.String(64), primary_key=True)
    product_id = db.Column(db.String(64), index=True)
    # vendor id or vendor title, both occur in stored data
    restaurant_id = db.Column(db.String(255), index=True)
    special_price = db.Column(db.String(32))
    item_limit = db.Column(db.Integer)
    start_time = db.Column(db.DateTime, nullable=True)
    end_time = db.Column(db.DateTime, nullable=True)
    is_available = db.Column(db.Boolean, default=True)


class Coupon(db.Model):
    __tablename__ = "coupons"

    id = db.Column(db.String(64), primary_key=True)
    restaurant_id = db.Column(db.String(64), index=True)
    code = db.Column(db.String(64), nullable=False)
    description = db.Column(db.Text)
    discount = db.Column(db.String(32))
    discount_type = db.Column(db.String(20))
    image = db.Column(db.String(512))
    is_enabled = db.Column(db.Boolean, default=True)
    is_public = db.Column(db.Boolean, default=True)
    expires_at = db.Column(db.DateTime)

    def to_dict(self):
        return {
            "id": self.id,
            "resturant_id": self.restaurant_id,
            "code": self.code,
            "description": self.description,
            "discount": self.discount,
            "discountType": self.discount_type,
            "image": self.image,
            "isEnabled": bool(self.is_enabled),
            "isPublic": bool(self.is_public),
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
        }
