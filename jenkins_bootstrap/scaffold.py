"""Render the image recipe, plugin manifest, init script, and stack file."""

from pathlib import Path
from string import Template
from typing import Dict, List, Optional

from .config import Config, get_config
from .utils import BootstrapError

# Template name -> path of the rendered file inside the build directory
FILES = {
    "Dockerfile": "Dockerfile",
    "security.groovy": "init.groovy.d/security.groovy",
    "docker-compose.yml": "docker-compose.yml",
}


def read_plugin_manifest(path) -> List[str]:
    """
    Read a newline-delimited plugin list.

    Blank lines and ``#`` comments are skipped; duplicates are dropped
    keeping the first occurrence.

    Args:
        path: Manifest file

    Returns:
        Plugin names in file order

    Raises:
        BootstrapError: If the manifest can't be read
    """
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise BootstrapError(f"Cannot read plugin manifest {path}: {e}") from e

    plugins: List[str] = []
    for line in lines:
        name = line.split("#", 1)[0].strip()
        if name and name not in plugins:
            plugins.append(name)
    return plugins


def template_values(config: Config) -> Dict[str, str]:
    """Substitution values shared by all templates."""
    return {
        "BASE_IMAGE": config.jenkins_base_image,
        "IMAGE": config.jenkins_image,
        "JAVA_OPTS": config.java_opts,
        "USER_FILE": str(config.admin_user_file),
        "PASSWORD_FILE": str(config.admin_password_file),
        "USER_SECRET": config.admin_user_secret,
        "PASSWORD_SECRET": config.admin_password_secret,
        "HTTP_PORT": str(config.jenkins_port),
        "AGENT_PORT": str(config.jenkins_agent_port),
    }


def render(target_dir, config: Optional[Config] = None, force: bool = False) -> List[Path]:
    """
    Write the build directory for the controller image and stack.

    Existing files are kept unless ``force`` is set.

    Args:
        target_dir: Directory to write into (created if missing)
        config: Config instance (defaults to the global one)
        force: Overwrite existing files

    Returns:
        Paths of the files written
    """
    config = config or get_config()
    target = Path(target_dir)
    values = template_values(config)
    written = []

    for template_name, rel_path in FILES.items():
        dest = target / rel_path
        if dest.exists() and not force:
            print(f"{dest} already exists; skipping.")
            continue

        with open(config.get_template_path(template_name)) as f:
            template = Template(f.read())

        dest.parent.mkdir(parents=True, exist_ok=True)
        with open(dest, "w") as f:
            f.write(template.substitute(values))
        dest.chmod(0o644)
        written.append(dest)
        print(f"Wrote {dest}")

    plugins_dest = target / "plugins.txt"
    if plugins_dest.exists() and not force:
        print(f"{plugins_dest} already exists; skipping.")
    else:
        source = config.plugins_file or config.get_template_path("plugins.txt")
        plugins = read_plugin_manifest(source)
        plugins_dest.parent.mkdir(parents=True, exist_ok=True)
        with open(plugins_dest, "w") as f:
            f.write("".join(f"{name}\n" for name in plugins))
        written.append(plugins_dest)
        print(f"Wrote {plugins_dest} ({len(plugins)} plugins)")

    return written
