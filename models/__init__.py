from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()

# Re-export common models for convenience
from .vendor import Vendor, VendorCategory, SubscriptionHistory  # noqa: F401,E402
from .product import VendorProduct, Promotion, Coupon  # noqa: F401,E402
from .setting import Setting, Currency, VendorAttribute, Zone  # noqa: F401,E402
from .user import AppUser  # noqa: F401,E402
from .order import RestaurantOrder  # noqa: F401,E402
from .wallet import WalletTransaction, Payout, DriverPayout  # noqa: F401,E402
from .banner import MenuItemBanner  # noqa: F401,E402
from .mart import MartItem, MartCategory, MartSubcategory  # noqa: F401,E402
from .cache import CacheEntry  # noqa: F401,E402
