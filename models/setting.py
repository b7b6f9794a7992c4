import json
import logging

from models import db


class Setting(db.Model):
    """Named configuration document, ``fields`` is a JSON object."""

    __tablename__ = "settings"

    id = db.Column(db.Integer, primary_key=True)
    document_name = db.Column(db.String(100), unique=True, nullable=False)
    fields = db.Column(db.Text)

    def decoded_fields(self) -> dict:
        if not self.fields:
            return {}
        try:
            data = json.loads(self.fields)
        except (TypeError, ValueError):
            logging.warning("Invalid JSON in settings document %s", self.document_name)
            return {}
        return data if isinstance(data, dict) else {}

    @classmethod
    def find(cls, document_name: str):
        return cls.query.filter_by(document_name=document_name).first()

    @classmethod
    def get_by_document(cls, document_name: str) -> dict:
        rec = cls.find(document_name)
        return rec.decoded_fields() if rec else {}

    @classmethod
    def update_by_document(cls, document_name: str, fields: dict) -> "Setting":
        rec = cls.find(document_name)
        if rec is None:
            rec = cls(document_name=document_name)
            db.session.add(rec)
        rec.fields = json.dumps(fields)
        return rec

    @classmethod
    def get_field(cls, document_name: str, field_name: str, default=None):
        return cls.get_by_document(document_name).get(field_name, default)

    @classmethod
    def set_field(cls, document_name: str, field_name: str, value) -> "Setting":
        fields = cls.get_by_document(document_name)
        fields[field_name] = value
        return cls.update_by_document(document_name, fields)


class Currency(db.Model):
    __tablename__ = "currencies"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(10), nullable=False)
    name = db.Column(db.String(100))
    symbol = db.Column(db.String(10))
    symbol_at_right = db.Column(db.Boolean, default=False)
    decimal_digits = db.Column(db.Integer, default=2)
    is_active = db.Column(db.Boolean, default=False)


class VendorAttribute(db.Model):
    __tablename__ = "vendor_attributes"

    id = db.Column(db.String(64), primary_key=True)
    title = db.Column(db.String(255), nullable=False)

    def to_dict(self):
        return {"id": self.id, "title": self.title}


class Zone(db.Model):
    __tablename__ = "zone"

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    publish = db.Column(db.Boolean, default=True)
