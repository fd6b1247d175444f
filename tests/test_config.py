"""
Hedge Layer CLI - Configuration Tests
"""

import json
import os
import stat

from hedgelayer.config import (
    DEFAULT_API_URL,
    Config,
    clear_config,
    config_path,
    is_valid_token,
    load_config,
    resolve_api_url,
    resolve_token,
    save_config,
)

from tests.helpers import TEST_TOKEN


class TestConfigStore:
    """Tests for loading and saving the config file."""

    def test_path_honours_env(self, isolated_config):
        assert config_path() == isolated_config / "config.json"

    def test_missing_file_yields_defaults(self):
        assert load_config() == Config(api_url=DEFAULT_API_URL, token=None)

    def test_round_trip(self):
        save_config(Config(api_url="https://staging.hedgelayer.ai", token=TEST_TOKEN))

        assert load_config() == Config(api_url="https://staging.hedgelayer.ai", token=TEST_TOKEN)

    def test_file_format(self):
        path = save_config(Config(token=TEST_TOKEN))

        assert json.loads(path.read_text()) == {"api_url": DEFAULT_API_URL, "token": TEST_TOKEN}

    def test_file_is_private(self):
        path = save_config(Config(token=TEST_TOKEN))

        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_file_created_owner_only(self, monkeypatch):
        """The file is opened with 0600 so the token is never world-readable."""
        modes = []
        real_open = os.open

        def recording_open(path, flags, mode=0o777):
            modes.append(mode)
            return real_open(path, flags, mode)

        monkeypatch.setattr(os, "open", recording_open)

        save_config(Config(token=TEST_TOKEN))

        assert modes == [0o600]

    def test_existing_loose_file_is_narrowed(self, isolated_config):
        isolated_config.mkdir(parents=True)
        path = isolated_config / "config.json"
        path.write_text("{}")
        path.chmod(0o644)

        save_config(Config(token=TEST_TOKEN))

        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert load_config().token == TEST_TOKEN

    def test_corrupt_file_yields_defaults(self, isolated_config):
        isolated_config.mkdir(parents=True)
        (isolated_config / "config.json").write_text("{not json")

        assert load_config() == Config()

    def test_non_object_yields_defaults(self, isolated_config):
        isolated_config.mkdir(parents=True)
        (isolated_config / "config.json").write_text("[1, 2]")

        assert load_config() == Config()

    def test_clear(self):
        save_config(Config(token=TEST_TOKEN))

        assert clear_config() is True
        assert not config_path().exists()
        assert clear_config() is False


class TestResolution:
    """Tests for token and URL precedence."""

    def test_token_explicit_wins(self, monkeypatch):
        monkeypatch.setenv("HEDGELAYER_TOKEN", "hl_env")
        assert resolve_token("hl_arg", Config(token="hl_file")) == "hl_arg"

    def test_token_env_over_file(self, monkeypatch):
        monkeypatch.setenv("HEDGELAYER_TOKEN", "hl_env")
        assert resolve_token(None, Config(token="hl_file")) == "hl_env"

    def test_token_from_file(self):
        save_config(Config(token=TEST_TOKEN))
        assert resolve_token() == TEST_TOKEN

    def test_no_token(self):
        assert resolve_token() is None

    def test_url_precedence(self, monkeypatch):
        config = Config(api_url="https://file.example")
        assert resolve_api_url(None, config) == "https://file.example"

        monkeypatch.setenv("HEDGELAYER_API_URL", "https://env.example")
        assert resolve_api_url(None, config) == "https://env.example"
        assert resolve_api_url("https://arg.example", config) == "https://arg.example"

    def test_url_trailing_slash_removed(self):
        assert resolve_api_url("http://localhost:3000/") == "http://localhost:3000"


class TestTokenFormat:
    def test_valid(self):
        assert is_valid_token(TEST_TOKEN)

    def test_wrong_prefix(self):
        assert not is_valid_token("sk_" + "a" * 40)

    def test_wrong_length(self):
        assert not is_valid_token("hl_short")
