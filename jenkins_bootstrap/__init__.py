"""Jenkins Bootstrap - provision a Jenkins controller with a secrets-based admin account."""

__version__ = "0.1.0"

from . import bootstrap, config, credentials, env, init_hooks, instance, jenkins, scaffold, security, utils

__all__ = [
    "bootstrap",
    "config",
    "credentials",
    "env",
    "init_hooks",
    "instance",
    "jenkins",
    "scaffold",
    "security",
    "utils",
]
