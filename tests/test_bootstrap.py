"""Tests for the bootstrap provisioner and the controller lifecycle."""

import json

import pytest

from jenkins_bootstrap.bootstrap import bootstrap, build_registry, provision_admin
from jenkins_bootstrap.init_hooks import HookRegistry
from jenkins_bootstrap.instance import InstallState, JenkinsInstance
from jenkins_bootstrap.security import AuthorizationStrategy
from jenkins_bootstrap.utils import BootstrapError, MissingCredentialError


def test_admin_is_provisioned(secret_files, home):
    secret_files("admin\n", "admin\n")
    instance = bootstrap()

    assert instance.install_state is InstallState.READY
    assert instance.users.usernames() == ["admin"]
    assert instance.users.authenticate("admin", "admin")
    assert instance.authorization is AuthorizationStrategy.FULL_CONTROL_ONCE_LOGGED_IN
    assert instance.allow_anonymous_read is False
    assert instance.agent_to_controller_security is False
    assert instance.setup_wizard_completed is True
    assert instance.has_full_control("admin")


def test_whitespace_is_trimmed(secret_files, home):
    secret_files("  admin\n", "\tpa ss\n\n")
    instance = bootstrap()
    assert instance.users.usernames() == ["admin"]
    assert instance.users.authenticate("admin", "pa ss")
    assert not instance.users.authenticate("admin", "\tpa ss\n\n")


def test_state_is_persisted_without_clear_text(secret_files, home):
    secret_files("admin", "hunter2")
    bootstrap()

    state_file = home / JenkinsInstance.STATE_FILE
    content = state_file.read_text()
    assert "hunter2" not in content
    data = json.loads(content)
    assert data["install_state"] == "READY"
    assert data["provisioned_admin"] == "admin"
    assert state_file.stat().st_mode & 0o777 == 0o600


def test_rerun_is_idempotent(secret_files, home):
    secret_files("admin", "admin")
    bootstrap()
    first = json.loads((home / JenkinsInstance.STATE_FILE).read_text())

    instance = bootstrap()
    second = json.loads((home / JenkinsInstance.STATE_FILE).read_text())

    assert instance.install_state is InstallState.READY
    assert len(instance.users) == 1
    assert first == second


def test_restart_applies_rotated_secret(secret_files, home):
    secret_files("admin", "old")
    bootstrap()
    secret_files("admin", "new")
    instance = bootstrap()
    assert instance.users.usernames() == ["admin"]
    assert instance.users.authenticate("admin", "new")
    assert not instance.users.authenticate("admin", "old")


def test_changed_identifier_replaces_previous_admin(secret_files, home):
    secret_files("admin", "pw")
    bootstrap()
    secret_files("root", "pw")
    instance = bootstrap()
    assert instance.users.usernames() == ["root"]
    assert instance.provisioned_admin == "root"


@pytest.mark.parametrize("user, password", [(None, "admin"), ("admin", None), ("", "admin"), ("admin", " \n")])
def test_missing_material_aborts_startup(secret_files, home, user, password):
    secret_files(user, password)
    with pytest.raises(MissingCredentialError):
        bootstrap()
    assert not (home / JenkinsInstance.STATE_FILE).exists()


def test_failed_restart_keeps_previous_state(secret_files, home):
    secret_files("admin", "admin")
    bootstrap()
    before = (home / JenkinsInstance.STATE_FILE).read_text()

    secret_files("admin", None)
    with pytest.raises(MissingCredentialError):
        bootstrap()
    assert (home / JenkinsInstance.STATE_FILE).read_text() == before


def test_failed_start_rolls_back_in_memory_changes(secret_files, home, config):
    secret_files("admin", "admin")
    instance = JenkinsInstance(home)
    registry = HookRegistry(config)
    registry.add(provision_admin, order=0)

    def boom(context):
        raise RuntimeError("later hook failed")

    registry.add(boom, order=1)

    with pytest.raises(RuntimeError):
        instance.start(registry)
    assert instance.install_state is InstallState.UNINITIALIZED
    assert len(instance.users) == 0
    assert instance.authorization is AuthorizationStrategy.UNSECURED
    assert instance.handle_request("/") == 503


def test_no_provisioner_and_no_wizard_fails(home, config):
    instance = JenkinsInstance(home)
    with pytest.raises(BootstrapError, match="Initialization incomplete"):
        instance.start(HookRegistry(config))
    assert not instance.started


def test_build_registry_runs_provisioner_first(secret_files, home, config):
    init_dir = home / "init.d"
    init_dir.mkdir(parents=True)
    (init_dir / "00-check.py").write_text(
        "def init(context):\n"
        "    assert 'admin' in context.users\n"
    )
    secret_files("admin", "admin")

    registry = build_registry(config, init_dir=init_dir)
    assert registry.names() == ["provision_admin", "00-check.py"]
    instance = JenkinsInstance(home)
    assert instance.start(registry) is InstallState.READY


def test_bootstrap_discovers_home_init_dir(secret_files, home):
    init_dir = home / "init.d"
    init_dir.mkdir(parents=True)
    (init_dir / "extra.py").write_text(
        "def init(context):\n"
        "    context.instance.set_agent_to_controller_security(True)\n"
    )
    secret_files("admin", "admin")
    instance = bootstrap()
    assert instance.agent_to_controller_security is True
