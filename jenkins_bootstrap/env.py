"""Stack lifecycle: secrets, image build, deploy, and teardown."""

from pathlib import Path
from typing import Optional

from . import scaffold
from .config import get_config
from .utils import docker, wait_for_http, BootstrapError


def secret_exists(name: str) -> bool:
    """
    Check if a Docker secret exists.

    Args:
        name: Secret name

    Returns:
        True if the secret exists, False otherwise
    """
    return docker("secret", "inspect", name, check=False).returncode == 0


def create_secrets(username: str, password: str) -> None:
    """
    Create the administrator identifier and password secrets (idempotent).

    Secrets are immutable in Docker; existing ones are left alone and
    must be removed first to rotate them.

    Args:
        username: Administrator identifier
        password: Administrator password

    Raises:
        BootstrapError: If a value is empty or docker fails
    """
    config = get_config()

    for name, value in (
        (config.admin_user_secret, username),
        (config.admin_password_secret, password),
    ):
        value = value.strip()
        if not value:
            raise BootstrapError(f"Refusing to create empty secret '{name}'")
        if secret_exists(name):
            print(f"Secret '{name}' already exists; skipping creation.")
            continue
        # Value goes through stdin so it never appears in the process list
        docker("secret", "create", name, "-", input_text=value)
        print(f"✅ Created secret '{name}'")


def setup(build_dir, timeout: int = 180) -> None:
    """
    Build the controller image and deploy the stack.

    This function:
    1. Re-renders the build directory from the current configuration
    2. Checks that both secrets exist
    3. Builds the image
    4. Deploys the stack
    5. Waits for the web UI

    Args:
        build_dir: Directory holding the rendered build files
        timeout: Seconds to wait for the web UI

    Raises:
        BootstrapError: If setup fails
    """
    config = get_config()
    build_path = Path(build_dir)

    # Existing files are overwritten
    scaffold.render(build_path, config, force=True)

    missing = [
        name
        for name in (config.admin_user_secret, config.admin_password_secret)
        if not secret_exists(name)
    ]
    if missing:
        raise BootstrapError(
            f"Missing secrets: {', '.join(missing)}. Create them with 'jb secrets new' first."
        )

    print(f"Building image {config.jenkins_image} from {build_path} ...")
    docker("build", "-t", config.jenkins_image, str(build_path))

    compose_file = build_path / "docker-compose.yml"
    print(f"Deploying stack '{config.stack_name}' from {compose_file}")
    docker("stack", "deploy", "-c", str(compose_file), config.stack_name)

    login_url = f"{config.jenkins_url}/login"
    print(f"Waiting for Jenkins to become ready at {login_url} ...")
    if not wait_for_http(login_url, timeout=timeout, interval=2):
        raise BootstrapError("Timeout waiting for Jenkins")

    print("✅ Jenkins stack is up!")


def teardown(remove_secrets: bool = False) -> None:
    """
    Remove the stack, and optionally the administrator secrets.

    Args:
        remove_secrets: Also delete both secrets
    """
    config = get_config()

    print(f"Removing stack '{config.stack_name}'")
    result = docker("stack", "rm", config.stack_name, check=False)
    if result.returncode != 0:
        print(f"Warning: docker stack rm failed: {result.stderr.strip()}")

    if remove_secrets:
        for name in (config.admin_user_secret, config.admin_password_secret):
            if not secret_exists(name):
                print(f"Secret '{name}' does not exist; skipping removal.")
                continue
            result = docker("secret", "rm", name, check=False)
            if result.returncode != 0:
                # Still referenced while the stack's tasks shut down
                print(f"Warning: failed to remove secret '{name}': {result.stderr.strip()}")
            else:
                print(f"Removed secret '{name}'")

    print("✅ Jenkins stack teardown complete!")
