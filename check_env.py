#!/usr/bin/env python3
"""Helper script to check the .env file and the settings the API will start with."""

from pathlib import Path
import sys

ENV_TEMPLATE = """# Storage backend: memory, file or supabase
DELIVERY_STORAGE_BACKEND=file
DELIVERY_DATA_ROOT=./data

# Shared secret for admin endpoints (X-Admin-Token header). Admin routes are blocked when unset.
# Generate one with: python -c "import secrets; print(secrets.token_urlsafe(32))"
# DELIVERY_ADMIN_TOKEN=

# Error responses include tracebacks outside production
DELIVERY_ENVIRONMENT=development
DELIVERY_LOG_LEVEL=INFO

# Supabase (only used with DELIVERY_STORAGE_BACKEND=supabase)
# Get these from: https://supabase.com/dashboard → Your Project → Settings → API
# DELIVERY_SUPABASE_URL=https://your-project-id.supabase.co
# DELIVERY_SUPABASE_KEY=your-service-role-key-here

# DELIVERY_FRONTEND_ALLOWED_ORIGINS - Leave commented to use defaults
# JSON array format: ["http://localhost:3000","https://shop.example.com"]
"""

SECRET_KEYS = ("DELIVERY_ADMIN_TOKEN", "DELIVERY_SUPABASE_KEY")
# Well-known values that must never guard the admin endpoints
PLACEHOLDER_TOKENS = {"change-me", "changeme", "secret", "admin", "your-admin-token"}
MIN_TOKEN_LENGTH = 16


def _mask(value: str) -> str:
    if len(value) > 12:
        return value[:4] + "..." + value[-4:]
    return "***"


def admin_token_problem(token: str | None) -> str | None:
    if not token:
        return "DELIVERY_ADMIN_TOKEN is not set; admin endpoints will reject every request"
    if token.strip().lower() in PLACEHOLDER_TOKENS:
        return "DELIVERY_ADMIN_TOKEN is a placeholder value; set a random secret"
    if len(token) < MIN_TOKEN_LENGTH:
        return f"DELIVERY_ADMIN_TOKEN is shorter than {MIN_TOKEN_LENGTH} characters"
    return None


def _print_env_file(env_file: Path) -> None:
    print(f"✅ Found .env file at: {env_file}")
    print("-" * 60)
    for line in env_file.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() in SECRET_KEYS and value.strip():
            print(f"{key}={_mask(value.strip())}")
        else:
            print(line)
    print("-" * 60)
    print()


def main(project_root: Path | None = None) -> int:
    project_root = project_root or Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Delivery Service Area API configuration check")
    print("=" * 60)
    print()

    if not env_file.exists():
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"❌ .env file NOT found, created a template at: {env_file}")
        print("⚠️  Edit it, then run this script again.")
        return 1

    _print_env_file(env_file)

    sys.path.insert(0, str(project_root / "src"))
    try:
        from service_areas.config import settings
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return 1

    problems: list[str] = []
    print(f"Storage backend: {settings.storage_backend}")
    if settings.storage_backend == "file":
        print(f"Data root: {settings.data_root}")
    if settings.storage_backend == "supabase" and not (settings.supabase_url and settings.supabase_key):
        problems.append("Supabase backend selected but DELIVERY_SUPABASE_URL / DELIVERY_SUPABASE_KEY are missing")
    token_problem = admin_token_problem(settings.admin_token)
    if token_problem:
        problems.append(token_problem)
    else:
        print(f"Admin token: {_mask(settings.admin_token)}")
    print(f"Environment: {settings.environment} (error details {'hidden' if settings.is_production else 'shown'})")
    print(f"Bulk validation limit: {settings.max_bulk_addresses} addresses")
    print()

    if problems:
        print("=" * 60)
        for problem in problems:
            print(f"❌ {problem}")
        print("=" * 60)
        return 1

    print("=" * 60)
    print("✅ SUCCESS: configuration looks complete")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
