import json
import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import db
from models.vendor import Vendor

ALL_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
ALWAYS_OPEN = json.dumps([
    {"day": day, "timeslot": [{"from": "00:00", "to": "23:59"}]} for day in ALL_DAYS
])


@pytest.fixture(scope='session')
def app_instance():
    os.environ.setdefault('APP_ENV', 'testing')
    os.environ.setdefault('CACHE_DRIVER', 'memory')
    from app import create_app
    from app.config import TestingConfig
    app = create_app(TestingConfig)
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI='sqlite:///:memory:',
        SQLALCHEMY_TRACK_MODIFICATIONS=False
    )
    return app


@pytest.fixture(scope='function')
def app(app_instance):
    from app.cache import get_cache
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        get_cache().flush()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture
def make_vendor(app):
    def _make(vendor_id, **fields):
        fields.setdefault("title", f"Vendor {vendor_id}")
        fields.setdefault("zone_id", "zone-1")
        fields.setdefault("latitude", 17.385)
        fields.setdefault("longitude", 78.4867)
        fields.setdefault("publish", True)
        fields.setdefault("v_type", "restaurant")
        fields.setdefault("working_hours", ALWAYS_OPEN)
        vendor = Vendor(id=vendor_id, **fields)
        db.session.add(vendor)
        db.session.commit()
        return vendor
    return _make
