"""Bootstrap provisioner: administrator account from secret files, no setup wizard."""

from pathlib import Path
from typing import Optional

from .config import Config, get_config
from .credentials import load_admin_credentials
from .init_hooks import HookRegistry, InitContext
from .instance import InstallState, JenkinsInstance
from .security import AuthorizationStrategy


def provision_admin(context: InitContext) -> None:
    """
    Create or update the administrator account and lock the controller down.

    Reads the identifier and password secret files, upserts the account,
    grants full control to any logged-in user, turns off the
    agent-to-controller access control, and marks the setup wizard done.
    Running it again with unchanged secret files changes nothing.

    Raises:
        MissingCredentialError: If either secret file is missing or empty
    """
    instance = context.instance
    credentials = load_admin_credentials(context.config)

    previous = instance.provisioned_admin
    if previous and previous != credentials.username and previous in instance.users:
        print(f"Administrator identifier changed; removing previous account '{previous}'")
        instance.users.remove(previous)

    if instance.users.upsert(credentials.username, credentials.password):
        print(f"✅ Administrator account '{credentials.username}' provisioned")
    else:
        print(f"Administrator account '{credentials.username}' already up to date; skipping.")
    instance.provisioned_admin = credentials.username

    instance.set_authorization(AuthorizationStrategy.FULL_CONTROL_ONCE_LOGGED_IN, allow_anonymous_read=False)

    if instance.agent_to_controller_security:
        print("Warning: disabling agent-to-controller access control; agents are fully trusted")
    instance.set_agent_to_controller_security(False)

    instance.complete_setup_wizard()


def build_registry(config: Optional[Config] = None, init_dir: Optional[Path] = None) -> HookRegistry:
    """
    Build the hook registry used at startup.

    The provisioner runs first, followed by any scripts found in the
    initialization directory.
    """
    config = config or get_config()
    registry = HookRegistry(config)
    registry.add(provision_admin, order=0)
    registry.discover(init_dir if init_dir is not None else config.init_dir)
    return registry


def bootstrap(home=None, config: Optional[Config] = None) -> JenkinsInstance:
    """
    Start a controller model in ``home`` with the provisioner installed.

    Args:
        home: Controller home directory (defaults to JENKINS_HOME)
        config: Config instance (defaults to the global one)

    Returns:
        The started instance, in READY state

    Raises:
        BootstrapError: If provisioning fails; nothing is persisted then
    """
    config = config or get_config()
    home = Path(home) if home is not None else config.jenkins_home
    instance = JenkinsInstance(home, run_setup_wizard=config.run_setup_wizard)
    state = instance.start(build_registry(config, init_dir=config.init_dir_for(home)))
    if state is InstallState.READY:
        print(f"✅ Controller in {home} is {state.value}")
    return instance
