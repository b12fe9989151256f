"""Cluster bootstrap orchestrator for k3d-manager."""

import logging
import shutil
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from .cluster import DEFAULT_CLUSTER, ClusterSpec, Runner, provision_cluster
from .runner import CommandError, run_command
from .verify import READINESS_DELAY, verify_readiness

console = Console()
logger = logging.getLogger(__name__)

PREREQUISITES = ("docker", "kubectl", "k3d")


@dataclass
class BootstrapSettings:
    """Tool locations and timing used by a bootstrap run"""

    provisioner: str = "k3d"
    client: str = "kubectl"
    readiness_delay: float = READINESS_DELAY

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "BootstrapSettings":
        tools = config.get("tools", {})
        readiness = config.get("readiness", {})
        return cls(
            provisioner=tools.get("provisioner", "k3d"),
            client=tools.get("client", "kubectl"),
            readiness_delay=float(readiness.get("delay", READINESS_DELAY)),
        )


def check_prerequisites(tools: Iterable[str] = PREREQUISITES) -> List[str]:
    """Check that each tool is on PATH and return the missing ones."""
    console.print("\n[bold cyan]Checking Prerequisites[/bold cyan]")

    missing = []

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        for tool in tools:
            task = progress.add_task(f"Checking {tool}...", total=1)

            path = shutil.which(tool)
            if path:
                console.print(f"  ✓ {tool} ({path})")
            else:
                console.print(f"  ✗ {tool} not found")
                missing.append(tool)

            progress.update(task, advance=1)

    if missing:
        console.print(f"\n[yellow]Missing prerequisites: {', '.join(missing)}[/yellow]")
    else:
        console.print("\n[green]✓ All prerequisites installed[/green]")

    return missing


def bootstrap_cluster(
    spec: ClusterSpec = DEFAULT_CLUSTER,
    settings: Optional[BootstrapSettings] = None,
    runner: Runner = run_command,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Provision a cluster, wait, then show its nodes.

    Steps run strictly in order and the first failure ends the run: if
    provisioning fails the node listing is never attempted.
    """
    settings = settings or BootstrapSettings()

    console.print(f"[bold green]Bootstrapping k3d cluster '{escape(spec.name)}'[/bold green]")
    logger.debug("Using settings %s", settings)

    provision_cluster(spec, runner=runner, executable=settings.provisioner)

    verify_readiness(
        runner=runner,
        delay=settings.readiness_delay,
        sleep=sleep,
        executable=settings.client,
    )

    console.print(f"\n[bold green]✓ Cluster '{escape(spec.name)}' is up[/bold green]")
    console.print("\n[bold]Useful commands:[/bold]")
    console.print(f"  kubectl config use-context {escape(spec.context)}")
    console.print(f"  {settings.provisioner} cluster delete {escape(spec.name)}")


if __name__ == "__main__":
    try:
        bootstrap_cluster()
    except CommandError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        sys.exit(1)
