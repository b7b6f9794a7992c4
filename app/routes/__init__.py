from .restaurants import restaurants_bp
from .products import products_bp
from .vendors import vendors_bp
from .catalog import categories_bp, banners_bp
from .search import search_bp
from .settings import settings_bp
from .cache import cache_bp
from .admin import admin_bp


__all__ = [
    'restaurants_bp',
    'products_bp',
    'vendors_bp',
    'categories_bp',
    'banners_bp',
    'search_bp',
    'settings_bp',
    'cache_bp',
    'admin_bp',
]
