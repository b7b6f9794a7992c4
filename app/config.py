import os


def _env_flag(name, default="0"):
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    JSON_SORT_KEYS = False
    JSON_AS_ASCII = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "1")
    SEARCH_LIMIT_PER_IP = os.getenv("SEARCH_LIMIT_PER_IP", "60 per minute")
    CACHE_FLUSH_LIMIT_PER_IP = os.getenv("CACHE_FLUSH_LIMIT_PER_IP", "10 per minute")

    CACHE_DRIVER = os.getenv("CACHE_DRIVER", "file")
    CACHE_PREFIX = os.getenv("CACHE_PREFIX", "jippymart_cache:")
    CACHE_FILE_PATH = os.getenv("CACHE_FILE_PATH", os.path.join("storage", "cache"))
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    CATALOG_CACHE_TTL = int(os.getenv("CATALOG_CACHE_TTL", 86400))
    NEAREST_CACHE_TTL = int(os.getenv("NEAREST_CACHE_TTL", 300))

    REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "Asia/Kolkata")
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "jippymart-backend")
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv(
        "OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces"
    )
    EXPOSE_ERROR_DETAILS = _env_flag("EXPOSE_ERROR_DETAILS")
    CELERY_TASK_ALWAYS_EAGER = _env_flag("CELERY_TASK_ALWAYS_EAGER")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///dev.db")
    EXPOSE_ERROR_DETAILS = _env_flag("EXPOSE_ERROR_DETAILS", "1")


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    CACHE_DRIVER = os.getenv("CACHE_DRIVER", "memory")
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "0")
    CELERY_TASK_ALWAYS_EAGER = True


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    CACHE_DRIVER = os.getenv("CACHE_DRIVER", "redis")

    @staticmethod
    def validate():
        missing = []
        if not os.getenv("SECRET_KEY"):
            missing.append("SECRET_KEY")
        if not os.getenv("DATABASE_URL"):
            missing.append("DATABASE_URL")
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )


def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
