"""Reading the administrator credential secrets."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import Config, get_config
from .utils import MissingCredentialError


@dataclass(frozen=True)
class AdminCredentials:
    """Administrator identifier and password, as delivered by the secret files."""
    username: str
    password: str = field(repr=False)


def read_secret_file(path) -> str:
    """
    Read one secret value from a file.

    The value is the file content with surrounding whitespace removed,
    so ``"admin\\n"`` yields ``admin``.

    Args:
        path: Secret file path

    Returns:
        The trimmed value

    Raises:
        MissingCredentialError: If the file is absent, unreadable, or empty
    """
    path = Path(path)
    try:
        value = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError as e:
        raise MissingCredentialError(path, "file not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise MissingCredentialError(path, f"unreadable: {e}") from e

    if not value:
        raise MissingCredentialError(path, "file is empty")
    return value


def load_admin_credentials(config: Optional[Config] = None) -> AdminCredentials:
    """
    Load the administrator credentials from the configured secret files.

    Args:
        config: Config instance (defaults to the global one)

    Returns:
        AdminCredentials

    Raises:
        MissingCredentialError: If either secret file is missing or empty
    """
    config = config or get_config()
    return AdminCredentials(
        username=read_secret_file(config.admin_user_file),
        password=read_secret_file(config.admin_password_file),
    )
