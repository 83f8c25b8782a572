"""Test-specific configuration for registration server tests"""

# Overrides passed to create_app; nothing here touches the real environment
test_config = {
    "admin_token": "test-admin-token",
    "discord_webhook_url": "https://discord.test/api/webhooks/1234/secret",
    "environment": "test",
    "frontend_url": "http://localhost:3000",
    "log_level": "INFO",
    "registration_rate_limit": 0,
    "global_rate_limit": 0,
    "shutdown_grace_seconds": 1.0,
    "static_dir": None,
}

ADMIN_HEADERS = {"Authorization": f"Bearer {test_config['admin_token']}"}
