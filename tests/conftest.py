import pytest

from jenkins_bootstrap.config import get_config, reset_config

ENV_VARS = [
    "JENKINS_HOME",
    "JENKINS_INIT_DIR",
    "JENKINS_ADMIN_USER_FILE",
    "JENKINS_ADMIN_PASSWORD_FILE",
    "JENKINS_ADMIN_USER_SECRET",
    "JENKINS_ADMIN_PASSWORD_SECRET",
    "JENKINS_RUN_SETUP_WIZARD",
    "JENKINS_PORT",
    "JENKINS_AGENT_PORT",
    "JENKINS_URL",
    "JENKINS_PLUGINS_FILE",
    "JENKINS_IMAGE",
    "JENKINS_STACK_NAME",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def secret_files(tmp_path, monkeypatch):
    """Write the two secret files and point the config at them."""
    secrets_dir = tmp_path / "secrets"
    secrets_dir.mkdir()
    user_file = secrets_dir / "jenkins-user"
    password_file = secrets_dir / "jenkins-pass"

    def write(user="admin\n", password="admin\n"):
        if user is not None:
            user_file.write_text(user)
        elif user_file.exists():
            user_file.unlink()
        if password is not None:
            password_file.write_text(password)
        elif password_file.exists():
            password_file.unlink()
        return user_file, password_file

    monkeypatch.setenv("JENKINS_ADMIN_USER_FILE", str(user_file))
    monkeypatch.setenv("JENKINS_ADMIN_PASSWORD_FILE", str(password_file))
    return write


@pytest.fixture
def home(tmp_path, monkeypatch):
    path = tmp_path / "jenkins_home"
    monkeypatch.setenv("JENKINS_HOME", str(path))
    return path


@pytest.fixture
def config():
    return get_config()
