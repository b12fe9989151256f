#!/usr/bin/env python3
"""k3d-manager CLI - Main entry point"""

import time

import click
from rich.console import Console

from k3dmanager.config.manager import ConfigManager
from k3dmanager.installer.bootstrap import BootstrapSettings
from k3dmanager.installer.runner import run_command
from k3dmanager.log import setup_logging

console = Console()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx, verbose):
    """k3d-manager - bootstrap local multi-node k3d clusters"""
    ctx.ensure_object(dict)

    try:
        cfg = ConfigManager().load()
    except ValueError as e:
        raise click.UsageError(str(e))

    setup_logging(cfg["logging"]["level"], verbose=verbose)

    ctx.obj["config"] = cfg
    ctx.obj["verbose"] = verbose
    ctx.obj["settings"] = BootstrapSettings.from_config(cfg)
    # Tests swap these for fakes through CliRunner.invoke(obj=...)
    ctx.obj.setdefault("runner", run_command)
    ctx.obj.setdefault("sleep", time.sleep)


@cli.command()
def version():
    """Show version information"""
    from k3dmanager import __version__

    console.print(f"k3d-manager version {__version__}")


# Import subcommands
from k3dmanager.cli import cluster, verify

cli.add_command(cluster.up)
cli.add_command(cluster.dev)
cli.add_command(cluster.info)
cli.add_command(cluster.delete)
cli.add_command(cluster.list_clusters)
cli.add_command(cluster.show_config)
cli.add_command(verify.verify)


if __name__ == "__main__":
    cli()
