from app.routes import (
    restaurants_bp,
    products_bp,
    vendors_bp,
    categories_bp,
    banners_bp,
    search_bp,
    settings_bp,
    cache_bp,
    admin_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API prefix."""
    app.register_blueprint(restaurants_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(vendors_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(banners_bp)
    app.register_blueprint(search_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(cache_bp)
    app.register_blueprint(admin_bp)
