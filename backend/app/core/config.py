import os


def GetEnv(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def GetIntEnv(name: str, default: int) -> int:
    raw = GetEnv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def GetBoolEnv(name: str, default: bool = False) -> bool:
    raw = GetEnv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y", "on"}


class PantrySettings:
    def __init__(self) -> None:
        self.PriceLookupConcurrency = max(1, GetIntEnv("PRICE_LOOKUP_CONCURRENCY", 4))
        self.RunMigrationsOnStartup = GetBoolEnv("RUN_MIGRATIONS_ON_STARTUP", False)
        self.AllowedOrigins = [
            origin.strip()
            for origin in (GetEnv("ALLOWED_ORIGINS", "") or "").split(",")
            if origin.strip()
        ]


def LoadSettings() -> PantrySettings:
    return PantrySettings()
