from app.core.config import GetBoolEnv, GetIntEnv, LoadSettings


def test_settings_defaults(monkeypatch):
    for name in ("PRICE_LOOKUP_CONCURRENCY", "RUN_MIGRATIONS_ON_STARTUP", "ALLOWED_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    settings = LoadSettings()

    assert settings.PriceLookupConcurrency == 4
    assert settings.RunMigrationsOnStartup is False
    assert settings.AllowedOrigins == []


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PRICE_LOOKUP_CONCURRENCY", "0")
    monkeypatch.setenv("RUN_MIGRATIONS_ON_STARTUP", "yes")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, ,https://b.example")

    settings = LoadSettings()

    assert settings.PriceLookupConcurrency == 1
    assert settings.RunMigrationsOnStartup is True
    assert settings.AllowedOrigins == ["https://a.example", "https://b.example"]


def test_env_helpers_fall_back_on_bad_values(monkeypatch):
    monkeypatch.setenv("SOME_INT", "many")
    monkeypatch.setenv("SOME_FLAG", "   ")

    assert GetIntEnv("SOME_INT", 7) == 7
    assert GetBoolEnv("SOME_FLAG", True) is True
