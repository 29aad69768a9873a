"""Command-line interface for Jenkins Bootstrap."""

import sys

import click

from . import bootstrap, config, env, jenkins, scaffold
from .utils import BootstrapError


class AliasedGroup(click.Group):
    """A Click Group that supports command aliases."""

    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        # Check if cmd_name is an alias for any command
        for name, cmd in self.commands.items():
            if cmd_name in getattr(cmd, "aliases", []):
                return cmd
        return None

    def format_commands(self, ctx, formatter):
        """List commands with their aliases in parentheses."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.commands.get(subcommand)
            if cmd is None or cmd.hidden:
                continue

            cmd_name = subcommand
            aliases = getattr(cmd, "aliases", [])
            if aliases:
                cmd_name = f"{subcommand} ({', '.join(aliases)})"

            commands.append((cmd_name, cmd))

        if len(commands):
            limit = formatter.width - 6 - max(len(cmd[0]) for cmd in commands)

            rows = []
            for subcommand, cmd in commands:
                rows.append((subcommand, cmd.get_short_help_str(limit)))

            with formatter.section("Commands"):
                formatter.write_dl(rows)


def _fail(e: Exception) -> None:
    click.echo(f"❌ Error: {e}", err=True)
    sys.exit(1)


@click.group(cls=AliasedGroup)
@click.option("--env-file", type=click.Path(exists=True), help="Path to .env file")
@click.pass_context
def cli(ctx, env_file):
    """Jenkins Bootstrap - Provision a Jenkins controller from secret files."""
    ctx.ensure_object(dict)
    config.get_config(env_file)


@cli.command("scaffold")
@click.argument("target_dir", type=click.Path(file_okay=False))
@click.option("--force", "-f", is_flag=True, help="Overwrite existing files")
def scaffold_cmd(target_dir, force):
    """Render Dockerfile, plugins.txt, init script and stack file."""
    try:
        scaffold.render(target_dir, force=force)
    except (BootstrapError, FileNotFoundError) as e:
        _fail(e)


@cli.command("provision")
@click.option("--home", "-h", type=click.Path(file_okay=False), help="Controller home (default: $JENKINS_HOME)")
def provision(home):
    """Run the bootstrap provisioner against a controller home."""
    try:
        instance = bootstrap.bootstrap(home)
    except BootstrapError as e:
        _fail(e)
    click.echo(f"State: {instance.install_state.value} (admin={instance.provisioned_admin})")


# Plugin commands
@cli.group(name="plugins", cls=AliasedGroup)
def plugins():
    """Plugin manifest operations."""
    pass


@plugins.command("list")
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False), required=False)
def plugins_list(manifest):
    """Print the plugins of a manifest (bundled one by default)."""
    cfg = config.get_config()
    source = manifest or cfg.plugins_file or cfg.get_template_path("plugins.txt")
    try:
        for name in scaffold.read_plugin_manifest(source):
            click.echo(name)
    except BootstrapError as e:
        _fail(e)


# Secret commands
@cli.group(name="secrets", cls=AliasedGroup)
def secrets():
    """Administrator secret management."""
    pass


@secrets.command("new")
@click.option("--user", "-u", required=True, help="Administrator identifier")
@click.option("--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True, help="Administrator password")
def secrets_new(user, password):
    """Create the administrator secrets."""
    try:
        env.create_secrets(user, password)
    except BootstrapError as e:
        _fail(e)


# Stack commands
@cli.group(name="stack", cls=AliasedGroup)
def stack():
    """Stack lifecycle management."""
    pass


@stack.command("up")
@click.argument("build_dir", type=click.Path(file_okay=False), default="build", required=False)
@click.option("--timeout", "-t", default=180, show_default=True, help="Seconds to wait for Jenkins")
def stack_up(build_dir, timeout):
    """Build the image and deploy the stack."""
    try:
        env.setup(build_dir, timeout=timeout)
    except BootstrapError as e:
        _fail(e)


@stack.command("down")
@click.option("--secrets", "remove_secrets", is_flag=True, help="Also remove the administrator secrets")
def stack_down(remove_secrets):
    """Remove the stack."""
    try:
        env.teardown(remove_secrets=remove_secrets)
    except BootstrapError as e:
        _fail(e)


stack_down.aliases = ["rm"]


@cli.command("verify")
@click.option("--user", "-u", required=True, help="Administrator identifier")
@click.option("--password", "-p", prompt=True, hide_input=True, help="Administrator password")
def verify(user, password):
    """Check a running Jenkins: admin login works, nothing else does."""
    try:
        checks = jenkins.verify(user, password)
    except BootstrapError as e:
        _fail(e)
    if not all(checks.values()):
        sys.exit(1)


if __name__ == "__main__":
    cli()
