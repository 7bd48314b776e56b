import pytest

from storefront.core.config import DEFAULT_CONFIG_PATH, StorefrontConfig

ENV_VARS = ["SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_KEY", "DATABASE_URL", "STOREFRONT_SESSION_FILE"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_shipped_defaults():
    config = StorefrontConfig.from_yaml(DEFAULT_CONFIG_PATH)
    assert config.cart_max_retries == 5
    assert config.search_debounce_ms == 500
    assert config.price_ceiling == 10_000_000
    assert config.currency_symbol == "₦"


def test_yaml_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "backend:\n"
        "  supabase_url: https://shop.supabase.co\n"
        "  request_timeout: 3\n"
        "cart:\n"
        "  max_retries: 2\n"
        "presentation:\n"
        "  currency_symbol: $\n"
        "session:\n"
        f"  file: {tmp_path / 'session.json'}\n"
    )
    config = StorefrontConfig.from_yaml(path)
    assert config.supabase_url == "https://shop.supabase.co"
    assert config.request_timeout == 3.0
    assert config.cart_max_retries == 2
    assert config.currency_symbol == "$"
    assert config.session_file == str(tmp_path / "session.json")


def test_missing_file_uses_defaults(tmp_path):
    config = StorefrontConfig.from_yaml(tmp_path / "absent.yaml")
    assert config.database_url == ""
    assert config.cart_max_retries == 5


def test_environment_wins(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("backend:\n  supabase_url: https://from-yaml.supabase.co\n  supabase_key: yaml-key\n")
    monkeypatch.setenv("SUPABASE_URL", "https://from-env.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")

    config = StorefrontConfig.from_yaml(path)
    assert config.supabase_url == "https://from-env.supabase.co"
    assert config.supabase_key == "service-key"
    assert config.database_url == "sqlite://"
