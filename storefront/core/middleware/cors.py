"""Dynamic CORS origin validation configuration."""

import re

from storefront.core.config import settings

# Production pattern: merchant storefront subdomains
ALLOWED_ORIGIN_PATTERN = re.compile(r"^https://([a-z0-9-]+\.)?storefront\.app$")


def get_cors_config() -> dict:
    """Return CORS middleware kwargs for FastAPI."""
    config = {
        "allow_origins": settings.allowed_origins_list,
        "allow_credentials": False,
        "allow_methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        "allow_headers": [
            "Content-Type",
            "X-Request-Id",
        ],
    }
    if settings.ENVIRONMENT != "development":
        config["allow_origin_regex"] = ALLOWED_ORIGIN_PATTERN.pattern
    return config


def validate_origin(origin: str) -> bool:
    """Validate an origin against the allowlist (for production use)."""
    if origin in settings.allowed_origins_list:
        return True
    return settings.ENVIRONMENT != "development" and bool(ALLOWED_ORIGIN_PATTERN.match(origin))
