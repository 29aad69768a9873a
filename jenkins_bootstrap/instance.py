"""Controller model: persisted configuration, install state, and request admission."""

import json
from enum import Enum
from pathlib import Path
from typing import Optional

from .security import AuthorizationStrategy, UserStore
from .utils import BootstrapError, write_atomic

SETUP_WIZARD_PATHS = ("/setupWizard", "/install")


class InstallState(str, Enum):
    """Lifecycle of a controller; there is no way back from READY."""
    UNINITIALIZED = "UNINITIALIZED"
    READY = "READY"


class JenkinsInstance:
    """
    In-process model of the controller parts touched at initialization.

    Configuration is loaded from ``<home>/bootstrap-state.json`` and only
    written back after every init hook has succeeded, so a failed start
    never leaves a partially initialized home behind.
    """

    STATE_FILE = "bootstrap-state.json"

    def __init__(self, home, run_setup_wizard: bool = False):
        self.home = Path(home)
        self.run_setup_wizard = run_setup_wizard
        self.started = False
        self._apply({})
        if self.state_path.exists():
            self._apply(self._read_state())

    @property
    def state_path(self) -> Path:
        return self.home / self.STATE_FILE

    def _read_state(self) -> dict:
        try:
            with open(self.state_path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise BootstrapError(f"Cannot read controller state {self.state_path}: {e}") from e

    def _apply(self, data: dict) -> None:
        self.users = UserStore.from_list(data.get("users", []))
        self.authorization = AuthorizationStrategy(
            data.get("authorization", AuthorizationStrategy.UNSECURED.value)
        )
        self.allow_anonymous_read = data.get("allow_anonymous_read", True)
        self.agent_to_controller_security = data.get("agent_to_controller_security", True)
        self.setup_wizard_completed = data.get("setup_wizard_completed", False)
        self.provisioned_admin: Optional[str] = data.get("provisioned_admin")
        self.install_state = InstallState(data.get("install_state", InstallState.UNINITIALIZED.value))

    def to_dict(self) -> dict:
        return {
            "install_state": self.install_state.value,
            "users": self.users.to_list(),
            "authorization": self.authorization.value,
            "allow_anonymous_read": self.allow_anonymous_read,
            "agent_to_controller_security": self.agent_to_controller_security,
            "setup_wizard_completed": self.setup_wizard_completed,
            "provisioned_admin": self.provisioned_admin,
        }

    def save(self) -> None:
        """Persist the configuration; the file may contain password hashes."""
        write_atomic(self.state_path, json.dumps(self.to_dict(), indent=2) + "\n", mode=0o600)

    # Operations used by init hooks

    def set_authorization(self, strategy: AuthorizationStrategy, allow_anonymous_read: bool = False) -> None:
        self.authorization = strategy
        self.allow_anonymous_read = allow_anonymous_read

    def set_agent_to_controller_security(self, enabled: bool) -> None:
        self.agent_to_controller_security = enabled

    def complete_setup_wizard(self) -> None:
        self.setup_wizard_completed = True

    def is_configured(self) -> bool:
        """True once an account exists, access is secured, and the wizard is done."""
        return (
            len(self.users) > 0
            and self.authorization is AuthorizationStrategy.FULL_CONTROL_ONCE_LOGGED_IN
            and self.setup_wizard_completed
        )

    # Lifecycle

    def start(self, hooks) -> InstallState:
        """
        Run the init hooks, persist, and begin accepting requests.

        Args:
            hooks: HookRegistry whose hooks run against this instance

        Returns:
            The resulting install state

        Raises:
            BootstrapError: If a hook fails, or initialization left the
                controller unconfigured while the setup wizard is disabled
        """
        if self.started:
            raise BootstrapError("Controller already started")

        snapshot = self.to_dict()
        try:
            hooks.run(self)
            if self.is_configured():
                self.install_state = InstallState.READY
            elif not self.run_setup_wizard:
                raise BootstrapError(
                    "Initialization incomplete: no administrator account was provisioned "
                    "and the setup wizard is disabled"
                )
        except Exception:
            self._apply(snapshot)
            raise

        self.save()
        self.started = True
        return self.install_state

    def has_full_control(self, username: str) -> bool:
        if self.authorization is AuthorizationStrategy.UNSECURED:
            return True
        return username in self.users

    def handle_request(self, path: str, username: Optional[str] = None, password: Optional[str] = None) -> int:
        """
        Decide the HTTP status a request would get.

        Returns:
            503 before start, 404 for the setup wizard unless it is allowed
            and the controller is still uninitialized, 403 for anonymous and
            401 for bad credentials on a secured controller, 200 otherwise
        """
        if not self.started:
            return 503

        if path.startswith(SETUP_WIZARD_PATHS):
            if self.run_setup_wizard and self.install_state is InstallState.UNINITIALIZED:
                return 200
            return 404

        if self.authorization is AuthorizationStrategy.UNSECURED:
            return 200
        if username is None:
            return 200 if self.allow_anonymous_read else 403
        if not self.users.authenticate(username, password or ""):
            return 401
        return 200 if self.has_full_control(username) else 403
