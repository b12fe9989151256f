"""Post-provisioning readiness checks."""

import logging
import time
from typing import Callable, List

from rich.console import Console
from rich.markup import escape

from .cluster import Runner, kube_context
from .runner import CommandInvocation, CommandOutcome, run_command

console = Console()
logger = logging.getLogger(__name__)

# Seconds to let control-plane and agent components register before asking
# the API server for nodes.
READINESS_DELAY = 10.0


def node_listing_invocation(executable: str = "kubectl") -> CommandInvocation:
    return CommandInvocation(executable, ("get", "nodes", "-o", "wide"))


def verify_readiness(
    runner: Runner = run_command,
    delay: float = READINESS_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    executable: str = "kubectl",
) -> CommandOutcome:
    """Wait a fixed delay, then list nodes through the current kube context.

    The listing is shown as kubectl prints it; node conditions are not
    inspected. If the API server is not up yet the command failure propagates.
    """
    console.print(f"\n[bold cyan]Waiting {delay:g}s for nodes to register...[/bold cyan]")
    logger.debug("Sleeping %.1f seconds before node listing", delay)
    sleep(delay)

    invocation = node_listing_invocation(executable)
    console.print(f"[dim]Running: {escape(str(invocation))}[/dim]")
    outcome = runner(invocation)

    console.print("[green]✓ Node listing complete[/green]")
    return outcome


def cluster_info(name: str, runner: Runner = run_command, executable: str = "kubectl") -> List[CommandOutcome]:
    """Switch to the cluster's context and show nodes, pods and services."""
    console.print(f"\n[bold]Cluster info: {escape(name)}[/bold]")

    outcomes = [runner(CommandInvocation(executable, ("config", "use-context", kube_context(name))))]

    sections = [
        ("Nodes", ("get", "nodes", "-o", "wide")),
        ("All Pods", ("get", "pods", "-A")),
        ("Services", ("get", "svc", "-A")),
    ]
    for title, args in sections:
        console.print(f"\n[cyan]{title}:[/cyan]")
        outcomes.append(runner(CommandInvocation(executable, args)))

    return outcomes
