from revops_lens.config.providers import HttpSessionProvider, get_session
from revops_lens.config.settings import ApiConfig, ListViewConfig, SearchConfig, Settings, get_settings


def test_defaults():
    settings = Settings.from_env()
    assert settings.api.timeout_seconds == 30.0
    assert settings.cache.stale_time_seconds == 1800
    assert settings.search.debounce_ms == 300
    assert settings.lists.default_sort_direction == "DESC"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REVOPS_API_BASE_URL", "https://crm.example.com")
    monkeypatch.setenv("REVOPS_API_RETRY_STATUSES", "[503]")
    monkeypatch.setenv("REVOPS_SEARCH_DEBOUNCE_MS", "150")
    monkeypatch.setenv("REVOPS_LIST_ACCOUNT_DEFAULT_SORT", "Name")

    assert ApiConfig().base_url == "https://crm.example.com"
    assert ApiConfig().retry_statuses == [503]
    assert SearchConfig().debounce_ms == 150
    assert ListViewConfig().account_default_sort == "Name"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_session_carries_retry_policy_and_cookie():
    config = ApiConfig(max_retries=3, session_cookie="s3cret", verify_ssl=False)
    provider = HttpSessionProvider(config)

    session = provider.get_session()
    retry = session.get_adapter("https://crm.example.com").max_retries

    assert provider.get_session() is session
    assert retry.total == 3
    assert 503 in retry.status_forcelist
    assert retry.allowed_methods == frozenset(["GET"])
    assert session.cookies.get("connect.sid") == "s3cret"
    assert session.verify is False

    provider.close()
    assert provider.get_session() is not session


def test_get_session_builds_a_fresh_configured_session():
    config = ApiConfig(session_cookie="abc")
    first = get_session(config)
    assert first is not get_session(config)
    assert first.headers["Content-Type"] == "application/json"
    assert first.cookies.get("connect.sid") == "abc"
