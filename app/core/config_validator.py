import os
import sys
from typing import TypedDict


def _validate_database_url(value: str) -> bool:
    valid_schemes = ("postgresql+asyncpg:", "sqlite+aiosqlite:")
    return value.startswith(valid_schemes)


def _validate_sentry_dsn(value: str) -> bool:
    return value.startswith("https://")


def _validate_debug_setting(value: str, environment: str) -> bool:
    return value.lower() != "true" if environment == "production" else True


def _validate_auto_create_setting(value: str, environment: str) -> bool:
    return value.lower() != "true" if environment == "production" else True


class ValidationResult(TypedDict):
    environment: str
    errors: list[str]
    warnings: list[str]
    valid: bool


class EnvironmentValidator:

    REQUIRED_SETTINGS: dict[str, dict[str, object]] = {
        "DATABASE_URL": {
            "description": "Database connection URL",
            "validation": _validate_database_url,
            "error": "DATABASE_URL must start with postgresql+asyncpg:// or sqlite+aiosqlite:///",
        }
    }

    PRODUCTION_REQUIRED: dict[str, dict[str, object]] = {
        "SENTRY_DSN": {
            "description": "Error monitoring DSN",
            "validation": _validate_sentry_dsn,
            "error": "SENTRY_DSN should be configured for production monitoring",
        }
    }

    SECURITY_CHECKS: dict[str, dict[str, object]] = {
        "DEBUG": {
            "description": "Debug mode setting",
            "validation": _validate_debug_setting,
            "error": "DEBUG must be false in production environment",
        },
        "DB_AUTO_CREATE": {
            "description": "Create tables at startup",
            "validation": _validate_auto_create_setting,
            "error": "DB_AUTO_CREATE should be false in production, run alembic instead",
        },
    }

    NUMERIC_SETTINGS: dict[str, tuple[int, int]] = {
        "RATE_LIMIT_PER_MINUTE": (1, 10000),
    }

    @classmethod
    def validate_environment(cls) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []
        environment = os.getenv("ENVIRONMENT", "development").lower()

        for setting, config in cls.REQUIRED_SETTINGS.items():
            value = os.getenv(setting)
            if not value:
                errors.append(f"❌ {setting} is required: {config['description']}")
                continue
            validation_func = config.get("validation")
            if callable(validation_func):
                if not validation_func(value):
                    errors.append(f"❌ {setting}: {config['error']}")
            else:
                errors.append(f"❌ {setting}: Invalid validation configuration")

        if environment == "production":
            for setting, config in cls.PRODUCTION_REQUIRED.items():
                value = os.getenv(setting)
                validation_func = config.get("validation")
                if not value or (
                    callable(validation_func) and not validation_func(value)
                ):
                    warnings.append(f"⚠️ {setting}: {config['error']}")

        for setting, config in cls.SECURITY_CHECKS.items():
            value = os.getenv(setting, "")
            validation_func = config.get("validation")
            if callable(validation_func):
                if not validation_func(value, environment):
                    if environment == "production":
                        errors.append(f"❌ {setting}: {config['error']}")
                    else:
                        warnings.append(f"⚠️ {setting}: {config['error']}")

        for setting, (min_val, max_val) in cls.NUMERIC_SETTINGS.items():
            value = os.getenv(setting)
            if value:
                try:
                    num_value = int(value)
                    if not (min_val <= num_value <= max_val):
                        warnings.append(
                            f"⚠️ {setting} should be between {min_val} and {max_val}"
                        )
                except ValueError:
                    warnings.append(f"⚠️ {setting} should be a number")

        return ValidationResult(
            environment=environment,
            errors=errors,
            warnings=warnings,
            valid=len(errors) == 0,
        )

    @classmethod
    def validate_or_exit(cls) -> None:
        skip_validation = (
            os.getenv("SKIP_CONFIG_VALIDATION", "").lower() == "true"
            or "alembic" in sys.argv[0]
            or any("alembic" in arg for arg in sys.argv)
        )

        if skip_validation:
            print("🔧 Skipping configuration validation for migration tool")
            return

        result = cls.validate_environment()

        print("🔧 Environment Configuration Validation")
        print("=" * 50)
        print(f"Environment: {result['environment'].upper()}")

        if result["warnings"]:
            print("\n⚠️ WARNINGS:")
            for warning in result["warnings"]:
                print(f"  {warning}")

        if result["errors"]:
            print("\n❌ CRITICAL ERRORS:")
            for error in result["errors"]:
                print(f"  {error}")

            print("\n💡 To fix these issues:")
            print("  1. Copy .env.example to .env")
            print("  2. Set DATABASE_URL to a postgresql+asyncpg or sqlite+aiosqlite URL")
            print("\nApplication cannot start with configuration errors.")
            sys.exit(1)

        print("✅ Configuration valid")
