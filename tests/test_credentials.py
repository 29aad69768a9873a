"""Tests for reading the administrator secret files."""

import pytest

from jenkins_bootstrap.credentials import AdminCredentials, load_admin_credentials, read_secret_file
from jenkins_bootstrap.utils import BootstrapError, MissingCredentialError


def test_value_is_trimmed(tmp_path):
    path = tmp_path / "user"
    path.write_text("  admin\n")
    assert read_secret_file(path) == "admin"


def test_inner_whitespace_is_kept(tmp_path):
    path = tmp_path / "pass"
    path.write_text("correct horse battery\n")
    assert read_secret_file(path) == "correct horse battery"


def test_missing_file(tmp_path):
    with pytest.raises(MissingCredentialError) as exc_info:
        read_secret_file(tmp_path / "nope")
    assert exc_info.value.path == tmp_path / "nope"
    assert "not found" in exc_info.value.reason
    assert "Missing credential material" in str(exc_info.value)


@pytest.mark.parametrize("content", ["", "\n", "   \t\n"])
def test_empty_file(tmp_path, content):
    path = tmp_path / "user"
    path.write_text(content)
    with pytest.raises(MissingCredentialError, match="empty"):
        read_secret_file(path)


def test_directory_is_unreadable(tmp_path):
    with pytest.raises(MissingCredentialError, match="unreadable"):
        read_secret_file(tmp_path)


def test_missing_credential_is_bootstrap_error(tmp_path):
    with pytest.raises(BootstrapError):
        read_secret_file(tmp_path / "nope")


def test_load_admin_credentials(secret_files, config):
    secret_files("admin\n", "s3cret\n")
    creds = load_admin_credentials(config)
    assert creds == AdminCredentials("admin", "s3cret")
    assert "s3cret" not in repr(creds)


def test_load_admin_credentials_missing_password(secret_files, config):
    secret_files("admin", None)
    with pytest.raises(MissingCredentialError) as exc_info:
        load_admin_credentials(config)
    assert exc_info.value.path.name == "jenkins-pass"
