from models import db


class CacheEntry(db.Model):
    """Row of the database-backed response cache."""

    __tablename__ = "cache"

    key = db.Column(db.String(255), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    # unix timestamp, 0 means no expiry
    expiration = db.Column(db.Integer, nullable=False, default=0)
