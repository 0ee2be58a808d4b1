"""
Environment Configuration Utility

Provides environment detection and storage policy enforcement.

ENVIRONMENT values:
- production: Snapshots must be durable (no in-memory store)
- development: Any snapshot backend allowed
- test: Any snapshot backend allowed
"""
import os
import logging

# Valid environment values
VALID_ENVIRONMENTS = {"production", "development", "test"}

# Get current environment (default to development for safety)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "development").lower()

# Validate environment value
if ENVIRONMENT not in VALID_ENVIRONMENTS:
    logging.warning(f"Invalid ENVIRONMENT '{ENVIRONMENT}', defaulting to 'development'")
    ENVIRONMENT = "development"


def allow_ephemeral_storage() -> bool:
    """
    Check if the in-memory snapshot store may be used.

    Production must keep the user's last form across restarts.
    """
    return ENVIRONMENT in {"development", "test"}


def get_cors_origins() -> list:
    return [origin.strip() for origin in os.environ.get(
        'CORS_ORIGINS', 'http://localhost:3000').split(',') if origin.strip()]


# Log environment on module load
logging.info(f"Environment: {ENVIRONMENT} | Ephemeral storage allowed: {allow_ephemeral_storage()}")
