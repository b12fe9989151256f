"""Verification commands"""

import click
from rich.console import Console

from k3dmanager.cli.cluster import check_delay, report_error
from k3dmanager.installer.bootstrap import check_prerequisites
from k3dmanager.installer.runner import TOOL_HINTS, CommandError
from k3dmanager.installer.verify import verify_readiness

console = Console()


@click.group()
def verify():
    """Verify prerequisites and cluster readiness"""
    pass


@verify.command()
@click.pass_context
def prereqs(ctx):
    """Check that docker, kubectl and k3d are installed"""
    settings = ctx.obj["settings"]
    tools = ["docker", settings.client, settings.provisioner]

    missing = check_prerequisites(tools)

    if missing:
        console.print("\nTo install missing components:")
        for tool in missing:
            hint = TOOL_HINTS.get(tool)
            if hint:
                console.print(f"  {tool}: {hint}")
        ctx.exit(1)


@verify.command()
@click.option("--delay", type=click.FloatRange(min=0), callback=check_delay, help="Seconds to wait before listing nodes")
@click.pass_context
def nodes(ctx, delay):
    """Wait, then list the nodes of the current cluster"""
    settings = ctx.obj["settings"]

    try:
        verify_readiness(
            runner=ctx.obj["runner"],
            delay=settings.readiness_delay if delay is None else delay,
            sleep=ctx.obj["sleep"],
            executable=settings.client,
        )
    except CommandError as e:
        report_error(e)
