"""Utility functions for HTTP probes, Docker operations, and common helpers."""

import os
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Optional, Tuple

import requests
from requests.auth import HTTPBasicAuth


class BootstrapError(Exception):
    """Base exception for Jenkins Bootstrap errors."""
    pass


class MissingCredentialError(BootstrapError):
    """Raised when a credential secret file is missing, unreadable, or empty."""

    def __init__(self, path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Missing credential material: {self.path} ({reason})")


class HTTPError(BootstrapError):
    """Exception raised for HTTP errors."""
    pass


class DockerError(BootstrapError):
    """Exception raised for Docker operations errors."""
    pass


def wait_for_http(url: str, timeout: int = 60, interval: int = 2) -> bool:
    """
    Wait for an HTTP endpoint to become available.

    A 403 counts as available: a secured Jenkins answers anonymous
    requests with 403 once it is up.

    Args:
        url: The URL to check
        timeout: Maximum time to wait in seconds (default: 60)
        interval: Time between checks in seconds (default: 2)

    Returns:
        True if endpoint becomes available, False if timeout
    """
    elapsed = 0
    while elapsed < timeout:
        try:
            response = requests.get(url, timeout=5, allow_redirects=True)
            if response.status_code in (200, 302, 403):
                return True
        except requests.exceptions.RequestException:
            pass

        time.sleep(interval)
        elapsed += interval

    return False


def http_get(url: str, username: Optional[str] = None, password: Optional[str] = None) -> Tuple[int, str]:
    """
    Perform HTTP GET request, with basic auth when a username is given.

    Args:
        url: The URL to request
        username: Username for basic auth
        password: Password for basic auth

    Returns:
        Tuple of (status_code, response_body)

    Raises:
        HTTPError: If request fails
    """
    auth = HTTPBasicAuth(username, password or "") if username is not None else None
    try:
        response = requests.get(
            url,
            auth=auth,
            headers={"Accept": "application/json"},
            timeout=30,
            allow_redirects=False,
        )
        return response.status_code, response.text
    except requests.exceptions.RequestException as e:
        raise HTTPError(f"GET request failed: {e}") from e


def docker(*args: str, input_text: Optional[str] = None, check: bool = True) -> subprocess.CompletedProcess:
    """
    Run a docker CLI command.

    Args:
        *args: Arguments after ``docker``
        input_text: Optional text piped to stdin
        check: Whether to raise on non-zero exit

    Returns:
        CompletedProcess instance

    Raises:
        DockerError: If docker is missing, or the command fails and check=True
    """
    cmd = ["docker", *args]
    try:
        result = subprocess.run(
            cmd,
            input=input_text,
            capture_output=True,
            text=True,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise DockerError(f"Docker command failed: {e}") from e

    if check and result.returncode != 0:
        raise DockerError(
            f"'{' '.join(cmd[:3])}' failed (exit code {result.returncode}): {result.stderr.strip()}"
        )
    return result


def write_atomic(path: Path, content: str, mode: Optional[int] = None) -> None:
    """
    Write a text file so readers see either the old or the new content.

    Args:
        path: Destination file
        content: Text to write
        mode: Optional permission bits for the new file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
