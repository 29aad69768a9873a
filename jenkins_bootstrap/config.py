"""Configuration management for Jenkins Bootstrap."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_TRUE_VALUES = ("1", "true", "yes", "on")


class Config:
    """Configuration class for managing environment variables and paths."""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            env_file: Optional path to .env file (for advanced use cases only).
        """
        self.package_dir = Path(__file__).parent.resolve()
        self.template_dir = self.package_dir / "templates"

        # Load environment variables only if explicitly provided
        if env_file:
            load_dotenv(env_file)

    @property
    def jenkins_home(self) -> Path:
        """Controller home directory (holds the persisted state)."""
        return Path(os.getenv("JENKINS_HOME", "/var/jenkins_home"))

    @property
    def init_dir(self) -> Path:
        """Initialization directory scanned for hook scripts at startup."""
        return self.init_dir_for(self.jenkins_home)

    def init_dir_for(self, home) -> Path:
        """Initialization directory for a given home: JENKINS_INIT_DIR if set, else ``<home>/init.d``."""
        value = os.getenv("JENKINS_INIT_DIR")
        return Path(value) if value else Path(home) / "init.d"

    @property
    def admin_user_secret(self) -> str:
        """Name of the secret holding the admin identifier."""
        return os.getenv("JENKINS_ADMIN_USER_SECRET", "jenkins-user")

    @property
    def admin_password_secret(self) -> str:
        """Name of the secret holding the admin password."""
        return os.getenv("JENKINS_ADMIN_PASSWORD_SECRET", "jenkins-pass")

    @property
    def admin_user_file(self) -> Path:
        """Secret file with the admin identifier."""
        return Path(os.getenv("JENKINS_ADMIN_USER_FILE", f"/run/secrets/{self.admin_user_secret}"))

    @property
    def admin_password_file(self) -> Path:
        """Secret file with the admin password."""
        return Path(
            os.getenv("JENKINS_ADMIN_PASSWORD_FILE", f"/run/secrets/{self.admin_password_secret}")
        )

    @property
    def run_setup_wizard(self) -> bool:
        """Whether the interactive setup wizard is allowed to run."""
        return os.getenv("JENKINS_RUN_SETUP_WIZARD", "false").strip().lower() in _TRUE_VALUES

    @property
    def java_opts(self) -> str:
        """JVM options passed to the controller container."""
        return f"-Djenkins.install.runSetupWizard={'true' if self.run_setup_wizard else 'false'}"

    @property
    def jenkins_port(self) -> int:
        """Jenkins web UI port."""
        return int(os.getenv("JENKINS_PORT", "8080"))

    @property
    def jenkins_agent_port(self) -> int:
        """Jenkins inbound agent port."""
        return int(os.getenv("JENKINS_AGENT_PORT", "50000"))

    @property
    def jenkins_url(self) -> str:
        """Jenkins URL."""
        return os.getenv("JENKINS_URL", f"http://localhost:{self.jenkins_port}").rstrip("/")

    @property
    def jenkins_base_image(self) -> str:
        """Upstream image the controller image is built from."""
        return os.getenv("JENKINS_BASE_IMAGE", "jenkins/jenkins:lts-jdk17")

    @property
    def jenkins_image(self) -> str:
        """Tag of the built controller image."""
        return os.getenv("JENKINS_IMAGE", "jenkins-bootstrap:latest")

    @property
    def stack_name(self) -> str:
        """Docker stack name."""
        return os.getenv("JENKINS_STACK_NAME", "jenkins")

    @property
    def plugins_file(self) -> Optional[Path]:
        """Optional plugin manifest overriding the bundled one."""
        value = os.getenv("JENKINS_PLUGINS_FILE")
        return Path(value) if value else None

    def get_template_path(self, template_name: str) -> Path:
        """
        Get path to a template file.

        Args:
            template_name: Template name relative to templates directory
                          (e.g., "security.groovy")

        Returns:
            Path to template file

        Raises:
            FileNotFoundError: If template doesn't exist
        """
        template_path = self.template_dir / template_name
        if not template_path.exists():
            raise FileNotFoundError(f"Template not found: {template_path}")
        return template_path


# Global config instance
_config: Optional[Config] = None


def get_config(env_file: Optional[str] = None) -> Config:
    """
    Get or create the global configuration instance.

    Args:
        env_file: Optional path to .env file

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config(env_file)
    return _config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
