"""Initialization hooks run by the controller before it accepts requests."""

import importlib.util
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from .config import Config, get_config
from .instance import JenkinsInstance
from .utils import BootstrapError

HookFunc = Callable[["InitContext"], None]


@dataclass
class InitContext:
    """What a hook may touch: the account store and the policy settings."""
    instance: JenkinsInstance
    config: Config

    @property
    def users(self):
        return self.instance.users


@dataclass(order=True)
class Hook:
    """A registered initialization callback."""
    order: int
    name: str
    func: HookFunc = field(compare=False)


class HookRegistry:
    """
    Ordered list of initialization callbacks.

    Hooks run by ascending ``order`` and then by name, so the sequence
    is stable no matter the registration order.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config
        self._hooks: List[Hook] = []

    def __len__(self) -> int:
        return len(self._hooks)

    def names(self) -> List[str]:
        return [hook.name for hook in sorted(self._hooks)]

    def add(self, func: HookFunc, name: Optional[str] = None, order: int = 100) -> HookFunc:
        name = name or func.__name__
        if name in self.names():
            raise BootstrapError(f"Init hook '{name}' is already registered")
        self._hooks.append(Hook(order, name, func))
        return func

    def register(self, name: Optional[str] = None, order: int = 100):
        """Decorator form of add()."""
        def decorator(func: HookFunc) -> HookFunc:
            return self.add(func, name=name, order=order)
        return decorator

    def discover(self, directory, order: int = 200) -> List[str]:
        """
        Register every ``*.py`` script in a directory.

        Each script must define ``init(context)``. Scripts are registered
        under their file name and run in file name order.

        Args:
            directory: Initialization directory
            order: Order value given to every discovered script

        Returns:
            Names of the registered scripts
        """
        directory = Path(directory)
        if not directory.is_dir():
            return []

        registered = []
        for script in sorted(directory.glob("*.py")):
            spec = importlib.util.spec_from_file_location(f"init_hook_{script.stem}", script)
            module = importlib.util.module_from_spec(spec)
            try:
                spec.loader.exec_module(module)
            except Exception as e:
                raise BootstrapError(f"Failed to load init script {script}: {e}") from e

            func = getattr(module, "init", None)
            if not callable(func):
                raise BootstrapError(f"Init script {script} does not define init(context)")
            self.add(func, name=script.name, order=order)
            registered.append(script.name)
        return registered

    def run(self, instance) -> None:
        """Run every hook against the instance; the first failure propagates."""
        context = InitContext(instance=instance, config=self.config or get_config())
        for hook in sorted(self._hooks):
            print(f"Running init hook '{hook.name}'...")
            hook.func(context)
