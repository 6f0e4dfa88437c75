"""
Tests for fbupload.auth.credentials module.

Tests credential resolution including:
- Environment variable naming
- Explicit entries
- .env file loading
- Missing credentials
"""

from __future__ import annotations

import os

import pytest

from fbupload.auth.credentials import Credential, CredentialStore
from fbupload.exceptions import CredentialNotFoundError
from fbupload.results import ErrorKind


@pytest.fixture
def isolated_env(monkeypatch):
    """Give each test a private copy of os.environ."""
    monkeypatch.setattr(os, "environ", dict(os.environ))
    return os.environ


class TestCredential:
    """Tests for the Credential value type."""

    def test_repr_hides_password(self):
        """Test that the password never shows up in repr()."""
        cred = Credential(username="deploy", password="s3cret")

        assert "s3cret" not in repr(cred)
        assert "deploy" in repr(cred)


class TestCredentialStore:
    """Tests for resolving credential identifiers."""

    def test_env_key_normalization(self):
        """Test that ids are upper-cased and non-alphanumerics replaced."""
        store = CredentialStore(load_env_file=False)

        assert store.env_keys("deploy-bot.prod") == (
            "FB_DEPLOY_BOT_PROD_USERNAME",
            "FB_DEPLOY_BOT_PROD_PASSWORD",
        )

    def test_resolve_from_environment(self, isolated_env):
        """Test that username and password come from the environment."""
        isolated_env["FB_DEPLOY_BOT_USERNAME"] = "bot"
        isolated_env["FB_DEPLOY_BOT_PASSWORD"] = "pw"
        store = CredentialStore(load_env_file=False)

        assert store.resolve("deploy-bot") == Credential("bot", "pw")

    def test_custom_prefix(self, isolated_env):
        """Test that a custom prefix is honored."""
        isolated_env["FILES_CI_USERNAME"] = "ci"
        isolated_env["FILES_CI_PASSWORD"] = "pw"
        store = CredentialStore(env_prefix="FILES_", load_env_file=False)

        assert store.resolve("ci").username == "ci"

    def test_explicit_entries_take_precedence(self, isolated_env):
        """Test that explicit entries are consulted before the environment."""
        isolated_env["FB_CI_USERNAME"] = "from-env"
        isolated_env["FB_CI_PASSWORD"] = "pw"
        store = CredentialStore(entries={"ci": ("explicit", "pw2")}, load_env_file=False)

        assert store.resolve("ci") == Credential("explicit", "pw2")

    def test_empty_password_allowed(self, isolated_env):
        """Test that an explicitly empty password still resolves."""
        isolated_env["FB_CI_USERNAME"] = "ci"
        isolated_env["FB_CI_PASSWORD"] = ""
        store = CredentialStore(load_env_file=False)

        assert store.resolve("ci").password == ""

    def test_dotenv_file_loaded_from_cwd(self, isolated_env, tmp_test_dir, monkeypatch):
        """Test that a .env file in the working directory is loaded."""
        (tmp_test_dir / ".env").write_text(
            "FB_DOTENV_USERNAME=envuser\nFB_DOTENV_PASSWORD=envpass\n"
        )
        monkeypatch.chdir(tmp_test_dir)

        store = CredentialStore()

        assert store.resolve("dotenv") == Credential("envuser", "envpass")

    def test_unknown_id_raises(self, isolated_env):
        """Test that an unknown id raises CredentialNotFoundError."""
        store = CredentialStore(load_env_file=False)

        with pytest.raises(CredentialNotFoundError, match="FB_NOPE_USERNAME") as exc_info:
            store.resolve("nope")

        assert exc_info.value.kind is ErrorKind.CREDENTIAL_NOT_FOUND

    def test_missing_password_raises(self, isolated_env):
        """Test that a username without a password is not a credential."""
        isolated_env["FB_HALF_USERNAME"] = "half"
        store = CredentialStore(load_env_file=False)

        with pytest.raises(CredentialNotFoundError):
            store.resolve("half")

    def test_empty_id_raises(self):
        """Test that an empty id is rejected."""
        store = CredentialStore(load_env_file=False)

        with pytest.raises(CredentialNotFoundError, match="no credential id"):
            store.resolve("")
