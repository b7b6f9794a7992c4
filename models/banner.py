from models import db


class MenuItemBanner(db.Model):
    __tablename__ = "menu_items"

    id = db.Column(db.String(64), primary_key=True)
    title = db.Column(db.String(255))
    photo = db.Column(db.String(512))
    position = db.Column(db.String(20), index=True)  # top, middle, bottom
    is_publish = db.Column(db.Boolean, default=True)
    set_order = db.Column(db.Integer, default=0)
    zone_id = db.Column(db.String(64), nullable=True)
    zone_title = db.Column(db.String(255), nullable=True)
    redirect_type = db.Column(db.String(50), nullable=True)
    redirect_id = db.Column(db.String(64), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title or "",
            "photo": self.photo or "",
            "position": self.position or "",
            "is_publish": bool(self.is_publish),
            "set_order": int(self.set_order or 0),
            "zoneId": self.zone_id,
            "zoneTitle": self.zone_title,
            "redirect_type": self.redirect_type,
            "redirect_id": self.redirect_id,
        }
