from models import db


class MartCategory(db.Model):
    __tablename__ = "mart_categories"

    id = db.Column(db.String(64), primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    photo = db.Column(db.String(512))
    publish = db.Column(db.Boolean, default=True)
    category_order = db.Column(db.Integer, default=0)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "photo": self.photo,
            "publish": bool(self.publish),
            "category_order": self.category_order,
        }


class MartSubcategory(db.Model):
    __tablename__ = "mart_subcategories"

    id = db.Column(db.String(64), primary_key=True)
    parent_category_id = db.Column(db.String(64), db.ForeignKey("mart_categories.id"))
    title = db.Column(db.String(255), nullable=False)
    photo = db.Column(db.String(512))
    publish = db.Column(db.Boolean, default=True)
    subcategory_order = db.Column(db.Integer, default=0)

    category = db.relationship("MartCategory", backref=db.backref("subcategories", lazy=True))


class MartItem(db.Model):
    __tablename__ = "mart_items"

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    keywords = db.Column(db.Text)
    price = db.Column(db.Integer, default=0)
    dis_price = db.Column(db.Integer)
    vendor_id = db.Column(db.String(64))
    vendor_title = db.Column(db.String(255))
    category_id = db.Column(db.String(64))
    category_title = db.Column(db.String(255))
    subcategory_id = db.Column(db.String(64))
    subcategory_title = db.Column(db.String(255))
    photo = db.Column(db.String(512))
    publish = db.Column(db.Boolean, default=True)
    is_available = db.Column(db.Boolean, default=True)
    veg = db.Column(db.Boolean, default=False)
    nonveg = db.Column(db.Boolean, default=False)
    is_best_seller = db.Column(db.Boolean, default=False)
    is_trending = db.Column(db.Boolean, default=False)
    is_feature = db.Column(db.Boolean, default=False)
    is_new = db.Column(db.Boolean, default=False)
    is_spotlight = db.Column(db.Boolean, default=False)
    quantity = db.Column(db.Integer)
    rating = db.Column(db.Float)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "disPrice": self.dis_price,
            "vendorID": self.vendor_id,
            "vendorTitle": self.vendor_title,
            "categoryID": self.category_id,
            "categoryTitle": self.category_title,
            "subcategoryID": self.subcategory_id,
            "subcategoryTitle": self.subcategory_title,
            "photo": self.photo,
            "publish": bool(self.publish),
            "isAvailable": bool(self.is_available),
            "veg": bool(self.veg),
            "nonveg": bool(self.nonveg),
            "isBestSeller": bool(self.is_best_seller),
            "isTrending": bool(self.is_trending),
            "isFeature": bool(self.is_feature),
            "isNew": bool(self.is_new),
            "isSpotlight": bool(self.is_spotlight),
            "quantity": self.quantity,
            "rating": self.rating,
        }
