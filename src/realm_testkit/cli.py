from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer

app = typer.Typer(name="realm-testkit", help="Manage realms on the sync test server")


def _resolve_config(config: str | None):
    import yaml
    from expandvars import ExpandvarsException

    from realm_testkit.config import ControllerConfig, load_config

    if config is None:
        return ControllerConfig()
    config_path = Path(config)
    if not config_path.exists():
        typer.echo(f"Error: config file not found: {config}", err=True)
        raise typer.Exit(1)
    try:
        return load_config(config_path)
    except (ValueError, yaml.YAMLError, ExpandvarsException) as e:
        typer.echo(f"Error: invalid config {config}: {e}", err=True)
        raise typer.Exit(1)


def _load_token(key_file: str) -> str:
    from realm_testkit.config import load_admin_token

    try:
        return load_admin_token(key_file)
    except FileNotFoundError:
        typer.echo(f"Error: admin key file not found: {key_file}", err=True)
        raise typer.Exit(1)
    except ValueError as e:
        # json.JSONDecodeError and pydantic.ValidationError
        typer.echo(f"Error: invalid admin key file {key_file}: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def delete(
    server_path: str = typer.Argument(help="Realm path below the prefix"),
    prefix: str = typer.Option(..., "--prefix", help="Realm path prefix"),
    config: str | None = typer.Option(None, "--config", "-c", help="Path to controller YAML config"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    debug_file: str | None = typer.Option(
        None, "--debug-file", help="Append debug output to this file"
    ),
):
    """Delete a remote realm through the server's REST API."""
    import httpx

    from realm_testkit.controller import delete_remote_realm
    from realm_testkit.verbose import release_logger, setup_logger

    controller_config = _resolve_config(config)
    token = _load_token(controller_config.admin_key_file)

    logger = None
    if verbose or debug_file:
        logger = setup_logger(
            Path(debug_file) if debug_file else None,
            verbose=verbose,
            logger_name="realm_testkit_cli",
        )
        logger.debug(f"Using admin key file {controller_config.admin_key_file}")

    try:
        response = asyncio.run(
            delete_remote_realm(
                controller_config, token, f"{prefix}/{server_path}", logger=logger
            )
        )
    except httpx.TransportError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        if logger is not None:
            release_logger(logger)

    typer.echo(f"DELETE /api/realm/{prefix}/{server_path}: {response.status_code}")


@app.command("show-config")
def show_config(
    config: str | None = typer.Option(None, "--config", "-c", help="Path to controller YAML config"),
):
    """Print the resolved controller configuration as JSON."""
    controller_config = _resolve_config(config)
    typer.echo(json.dumps(controller_config.model_dump(), indent=2))


if __name__ == "__main__":
    app()
