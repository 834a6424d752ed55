"""CLI subcommands for xpipe."""

from __future__ import annotations

import click

from xpipe.errors import ConfigError


@click.command()
def config_cmd() -> None:
    """Show configuration from the environment and config.toml."""
    from xpipe.core.config import ENV_MAP, config_paths, load_env_config, load_toml_config

    try:
        env = load_env_config()
        toml = load_toml_config()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(e.exit_code)

    click.echo("Environment:")
    if env:
        for k, v in sorted(env.items()):
            click.echo(f"  {ENV_MAP[k]}: {v}")
    else:
        click.echo("  (no environment variables set)")

    click.echo("\nTOML config:")
    if toml:
        for k, v in sorted(toml.items()):
            click.echo(f"  {k}: {v}")
    else:
        searched = ", ".join(str(p) for p in config_paths())
        click.echo(f"  (no config.toml found; searched {searched})")
