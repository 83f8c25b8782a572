"""Configuration loader for the registration server"""

import os
from pathlib import Path

from dotenv import load_dotenv

project_dir = Path(__file__).parent.parent.parent
env_path = project_dir / ".env"

# Load .env file if it exists. For local development only.
if env_path.exists():
    load_dotenv(env_path)

# Configuration dictionary - set once at initialization
config = {
    "port": int(os.getenv("PORT", "3000")),
    "frontend_url": os.getenv("FRONTEND_URL", "http://localhost:3000"),
    "admin_token": os.getenv("ADMIN_TOKEN"),
    "discord_webhook_url": os.getenv("DISCORD_WEBHOOK_URL"),
    # Per-attempt bound on the webhook HTTP call, in seconds
    "webhook_timeout_seconds": float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "5")),
    "database_url": os.getenv("DATABASE_URL", "sqlite:///./registrations.db"),
    "environment": os.getenv("ENVIRONMENT", "production"),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    # Stored registrations allowed per client IP per hour. 0 disables the limit.
    "registration_rate_limit": int(os.getenv("REGISTRATION_RATE_LIMIT", "3")),
    # Requests allowed per client IP per window on every route. 0 disables the limit.
    "global_rate_limit": int(os.getenv("GLOBAL_RATE_LIMIT", "100")),
    "global_rate_limit_window_seconds": float(
        os.getenv("GLOBAL_RATE_LIMIT_WINDOW_SECONDS", "900")
    ),
    "trusted_proxies": os.getenv("TRUSTED_PROXIES", "127.0.0.1"),
    # Optional directory holding the static registration page
    "static_dir": os.getenv("STATIC_DIR"),
    "shutdown_grace_seconds": float(os.getenv("SHUTDOWN_GRACE_SECONDS", "30")),
}
