"""Cluster management commands"""

import math

import click
import yaml
from rich.console import Console
from rich.markup import escape

from k3dmanager.installer.bootstrap import bootstrap_cluster
from k3dmanager.installer.cluster import (
    DEFAULT_CLUSTER,
    ClusterSpec,
    delete_invocation,
    dev_cluster,
    provision_cluster,
    render_k3d_config,
)
from k3dmanager.installer.runner import CommandError, CommandFailed, CommandInvocation, SpawnFailed
from k3dmanager.installer.verify import cluster_info

console = Console()


def report_error(e: CommandError):
    """Print what failed and abort with a non-zero exit status"""
    console.print(f"[red]✗ Command failed:[/red] {escape(str(e.invocation))}")
    if isinstance(e, CommandFailed):
        console.print(f"[red]  exit code {e.returncode}[/red]")
        if e.stderr:
            console.print(e.stderr.rstrip(), style="dim", markup=False)
    elif isinstance(e, SpawnFailed):
        console.print(f"[red]  {escape(str(e))}[/red]")
    raise click.Abort()


def check_delay(ctx, param, value):
    if value is not None and not math.isfinite(value):
        raise click.BadParameter("must be a finite number of seconds")
    return value


def build_spec(name, servers, agents, wait=True) -> ClusterSpec:
    try:
        return ClusterSpec(
            name=name,
            control_plane_count=servers,
            worker_count=agents,
            wait_for_ready=wait,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.command()
@click.option("-n", "--name", default=DEFAULT_CLUSTER.name, show_default=True, help="Cluster name")
@click.option("-s", "--servers", type=int, default=DEFAULT_CLUSTER.control_plane_count, show_default=True,
              help="Number of control plane nodes")
@click.option("-a", "--agents", type=int, default=DEFAULT_CLUSTER.worker_count, show_default=True,
              help="Number of worker nodes")
@click.option("--wait/--no-wait", default=DEFAULT_CLUSTER.wait_for_ready, show_default=True,
              help="Let k3d block until the cluster reports ready")
@click.option("--delay", type=click.FloatRange(min=0), callback=check_delay, help="Seconds to wait before listing nodes")
@click.pass_context
def up(ctx, name, servers, agents, wait, delay):
    """Create a cluster and show its nodes"""
    settings = ctx.obj["settings"]
    if delay is not None:
        settings.readiness_delay = delay

    spec = build_spec(name, servers, agents, wait)

    try:
        bootstrap_cluster(spec, settings=settings, runner=ctx.obj["runner"], sleep=ctx.obj["sleep"])
    except CommandError as e:
        report_error(e)


@click.command()
@click.option("-n", "--name", default="dev-cluster", show_default=True, help="Cluster name")
@click.option("-w", "--workers", type=click.IntRange(min=0), default=2, show_default=True,
              help="Number of worker nodes")
@click.pass_context
def dev(ctx, name, workers):
    """Create a simple development cluster"""
    settings = ctx.obj["settings"]

    try:
        spec = dev_cluster(name, workers)
    except ValueError as e:
        raise click.BadParameter(str(e))

    try:
        provision_cluster(spec, runner=ctx.obj["runner"], executable=settings.provisioner)
    except CommandError as e:
        report_error(e)

    console.print("\n[bold]Quick commands:[/bold]")
    console.print(f"  {settings.client} get nodes")
    console.print(f"  {settings.client} config use-context {escape(spec.context)}")
    console.print(f"  {settings.provisioner} cluster delete {escape(spec.name)}")


@click.command()
@click.argument("name")
@click.pass_context
def info(ctx, name):
    """Show nodes, pods and services of a cluster"""
    settings = ctx.obj["settings"]

    try:
        cluster_info(name, runner=ctx.obj["runner"], executable=settings.client)
    except CommandError as e:
        report_error(e)


@click.command()
@click.argument("name")
@click.pass_context
def delete(ctx, name):
    """Delete a cluster"""
    settings = ctx.obj["settings"]

    console.print(f"[bold]Deleting cluster: {escape(name)}[/bold]")
    try:
        ctx.obj["runner"](delete_invocation(name, settings.provisioner))
    except CommandError as e:
        report_error(e)

    console.print(f"[green]✓[/green] Cluster '{escape(name)}' deleted")


@click.command("config")
@click.option("-n", "--name", default=DEFAULT_CLUSTER.name, show_default=True, help="Cluster name")
@click.option("-s", "--servers", type=int, default=DEFAULT_CLUSTER.control_plane_count, show_default=True)
@click.option("-a", "--agents", type=int, default=DEFAULT_CLUSTER.worker_count, show_default=True)
@click.option("--wait/--no-wait", default=DEFAULT_CLUSTER.wait_for_ready, show_default=True)
def show_config(name, servers, agents, wait):
    """Print the k3d config file for a cluster topology"""
    spec = build_spec(name, servers, agents, wait)
    click.echo(yaml.safe_dump(render_k3d_config(spec), default_flow_style=False, sort_keys=False), nl=False)


@click.command("list")
@click.pass_context
def list_clusters(ctx):
    """List k3d clusters"""
    settings = ctx.obj["settings"]

    console.print("[bold]k3d clusters:[/bold]\n")
    try:
        ctx.obj["runner"](CommandInvocation(settings.provisioner, ("cluster", "list")))
    except CommandError as e:
        report_error(e)
