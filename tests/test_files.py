"""
Tests for secret files and generated secrets modules.
"""
import pytest

import gitops_secrets
from gitops_secrets import (
    ConfigurationError,
    DecryptionError,
    FormatError,
    Secrets,
    SecretsFileError,
)
from gitops_secrets.conf import MASTER_KEY_ENV, SECRETS_DIR_ENV
from gitops_secrets.files import render_module

from conftest import OTHER_MASTER_KEY, SECRETS


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch, master_key_env, fast_kdf):
    """Run every test from an empty directory with a master key set."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(SECRETS_DIR_ENV, raising=False)
    return tmp_path.resolve()


class TestEncryptToFile:

    def test_default_path(self, workdir):
        path = gitops_secrets.encrypt_to_file(SECRETS)
        assert path == workdir / ".secrets" / ".secrets.enc"
        assert path.read_text(encoding="utf-8").startswith("base64:1000:")
        assert gitops_secrets.decrypt_from_file() == SECRETS

    def test_custom_path(self, workdir):
        gitops_secrets.encrypt_to_file(SECRETS, path="config/custom.enc")
        assert (workdir / "config" / "custom.enc").is_file()
        payload = gitops_secrets.decrypt_from_file("config/custom.enc")
        assert isinstance(payload, Secrets)
        assert payload == SECRETS

    def test_secrets_dir_from_environment(self, workdir, monkeypatch):
        monkeypatch.setenv(SECRETS_DIR_ENV, str(workdir / "vault"))
        path = gitops_secrets.encrypt_to_file(SECRETS)
        assert path.parent == workdir / "vault"
        assert gitops_secrets.decrypt_from_file() == SECRETS

    def test_populate_env(self):
        gitops_secrets.encrypt_to_file(SECRETS)
        environ = {}
        payload = gitops_secrets.decrypt_from_file()
        assert "API_KEY" not in environ
        payload.populate_env(environ)
        assert environ["API_KEY"] == SECRETS["API_KEY"]


class TestDecryptFromFileErrors:
    """Vault errors keep their type and gain the file path."""

    def test_missing_file(self, workdir):
        with pytest.raises(SecretsFileError) as exc:
            gitops_secrets.decrypt_from_file("missing.enc")
        assert exc.value.path == str(workdir / "missing.enc")
        assert "missing.enc" in str(exc.value)

    def test_corrupted_file(self, workdir):
        (workdir / "bad.enc").write_text("garbage", encoding="utf-8")
        with pytest.raises(FormatError) as exc:
            gitops_secrets.decrypt_from_file("bad.enc")
        assert exc.value.path == str(workdir / "bad.enc")

    def test_wrong_key(self, workdir, monkeypatch):
        path = gitops_secrets.encrypt_to_file(SECRETS)
        monkeypatch.setenv(MASTER_KEY_ENV, OTHER_MASTER_KEY)
        with pytest.raises(DecryptionError) as exc:
            gitops_secrets.decrypt_from_file()
        assert exc.value.path == str(path)
        assert str(path) in str(exc.value)

    def test_missing_master_key(self, monkeypatch):
        gitops_secrets.encrypt_to_file(SECRETS)
        monkeypatch.delenv(MASTER_KEY_ENV)
        with pytest.raises(ConfigurationError):
            gitops_secrets.decrypt_from_file()

    def test_unwritable_path(self, workdir):
        (workdir / "blocker").write_text("", encoding="utf-8")
        with pytest.raises(SecretsFileError, match="Unable to write secrets"):
            gitops_secrets.encrypt_to_file(SECRETS, path="blocker/secrets.enc")


class TestBuild:

    def test_default_module(self, workdir):
        path = gitops_secrets.build(SECRETS)
        assert path == workdir / ".secrets" / "secrets_enc.py"
        assert gitops_secrets.load_secrets() == SECRETS

    def test_loader_format(self):
        source = gitops_secrets.build(SECRETS).read_text(encoding="utf-8")
        assert source.startswith("# This file was auto-generated by gitops-secrets")
        assert "from gitops_secrets import load_secrets_from_cipher" in source
        assert 'CIPHER_TEXT = "base64:1000:' in source
        assert "def load_secrets():" in source

    def test_cipher_text_only_format(self):
        source = gitops_secrets.build(SECRETS, cipher_text_only=True).read_text(encoding="utf-8")
        assert "CIPHER_TEXT" in source
        assert "load_secrets" not in source
        assert "import" not in source

    def test_cipher_text_only_still_loads(self):
        gitops_secrets.build(SECRETS, cipher_text_only=True)
        assert gitops_secrets.load_secrets() == SECRETS

    def test_custom_path(self, workdir):
        gitops_secrets.build(SECRETS, path="app/secrets_module.py")
        secrets = gitops_secrets.load_secrets(workdir / "app" / "secrets_module.py")
        assert secrets == SECRETS
        environ = {}
        secrets.populate_env(environ)
        assert environ == SECRETS

    def test_rendered_modules_compile(self):
        for cipher_only in (False, True):
            compile(render_module("base64:1:AA==:AA==:AA==", cipher_only), "<secrets>", "exec")

    def test_missing_module(self):
        with pytest.raises(SecretsFileError, match="not found"):
            gitops_secrets.load_secrets()

    def test_module_without_cipher_text(self, workdir):
        (workdir / "empty.py").write_text("VALUE = 1\n", encoding="utf-8")
        with pytest.raises(SecretsFileError, match="CIPHER_TEXT"):
            gitops_secrets.load_secrets("empty.py")

    def test_wrong_key_carries_module_path(self, monkeypatch):
        path = gitops_secrets.build(SECRETS)
        monkeypatch.setenv(MASTER_KEY_ENV, OTHER_MASTER_KEY)
        with pytest.raises(DecryptionError) as exc:
            gitops_secrets.load_secrets()
        assert exc.value.path == str(path)
