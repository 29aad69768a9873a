"""Checks against a running Jenkins: admin login, rejected logins, no setup wizard."""

import json
from typing import Dict, Optional

from .config import get_config
from .utils import http_get, HTTPError


def whoami(username: Optional[str] = None, password: Optional[str] = None) -> Dict:
    """
    Ask Jenkins who the given credentials authenticate as.

    Args:
        username: Username (anonymous when None)
        password: Password

    Returns:
        Parsed whoAmI response, or {} when the request was rejected

    Raises:
        HTTPError: If the request fails or the body isn't JSON
    """
    config = get_config()
    status, body = http_get(f"{config.jenkins_url}/whoAmI/api/json", username, password)
    if status != 200:
        return {}
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise HTTPError(f"Unexpected whoAmI response: {body[:200]}") from e


def can_login(username: str, password: str) -> bool:
    """
    Check if a username/password pair authenticates.

    Args:
        username: Username
        password: Password

    Returns:
        True if Jenkins accepts the credentials, False otherwise
    """
    info = whoami(username, password)
    return bool(info.get("authenticated")) and info.get("name") == username


def setup_wizard_reachable() -> bool:
    """
    Check if the interactive setup wizard is served.

    Returns:
        True if the wizard page answers 200
    """
    config = get_config()
    status, _ = http_get(f"{config.jenkins_url}/setupWizard/")
    return status == 200


def anonymous_access_denied() -> bool:
    """
    Check that an anonymous API request is refused.

    Returns:
        True if Jenkins answers 401 or 403
    """
    config = get_config()
    status, _ = http_get(f"{config.jenkins_url}/api/json")
    return status in (401, 403)


def verify(username: str, password: str) -> Dict[str, bool]:
    """
    Verify a provisioned controller.

    Args:
        username: Administrator identifier
        password: Administrator password

    Returns:
        Mapping of check name to result; all True on a healthy controller
    """
    checks = {
        "admin_login": can_login(username, password),
        "wrong_password_rejected": not can_login(username, password + "-wrong"),
        "anonymous_rejected": anonymous_access_denied(),
        "setup_wizard_disabled": not setup_wizard_reachable(),
    }
    for name, ok in checks.items():
        print(f"{'✅' if ok else '❌'} {name}")
    return checks
