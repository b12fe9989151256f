"""Cluster topology and k3d provisioning."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from .runner import CommandError, CommandInvocation, CommandOutcome, run_command

console = Console()
logger = logging.getLogger(__name__)

Runner = Callable[[CommandInvocation], CommandOutcome]

K3D_CONFIG_API_VERSION = "k3d.io/v1alpha5"


@dataclass(frozen=True)
class ClusterSpec:
    """Desired cluster topology"""

    name: str
    control_plane_count: int = 1
    worker_count: int = 0
    wait_for_ready: bool = True
    ports: Tuple[str, ...] = ()
    image: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("cluster name must not be empty")
        if self.control_plane_count < 1:
            raise ValueError(
                f"a cluster needs at least one control-plane node, got {self.control_plane_count}"
            )
        if self.worker_count < 0:
            raise ValueError(f"worker count must not be negative, got {self.worker_count}")
        object.__setattr__(self, "ports", tuple(self.ports))

    @property
    def context(self) -> str:
        return kube_context(self.name)


DEFAULT_CLUSTER = ClusterSpec(
    name="rusty-cluster",
    control_plane_count=3,
    worker_count=3,
    wait_for_ready=True,
)

DEV_PORTS = ("8080:80@loadbalancer", "8443:443@loadbalancer")


def dev_cluster(name: str = "dev-cluster", workers: int = 2) -> ClusterSpec:
    """Single server development cluster with HTTP/HTTPS published on the load balancer."""
    return ClusterSpec(
        name=name,
        control_plane_count=1,
        worker_count=workers,
        wait_for_ready=True,
        ports=DEV_PORTS,
    )


def kube_context(name: str) -> str:
    """kubeconfig context k3d registers for a cluster"""
    return f"k3d-{name}"


def create_invocation(spec: ClusterSpec, executable: str = "k3d") -> CommandInvocation:
    """Build the ``k3d cluster create`` call for a topology."""
    args = [
        "cluster", "create", spec.name,
        "--servers", str(spec.control_plane_count),
        "--agents", str(spec.worker_count),
    ]
    for port in spec.ports:
        args += ["--port", port]
    if spec.image:
        args += ["--image", spec.image]
    if spec.wait_for_ready:
        args.append("--wait")
    return CommandInvocation(executable, tuple(args))


def delete_invocation(name: str, executable: str = "k3d") -> CommandInvocation:
    return CommandInvocation(executable, ("cluster", "delete", name))


def provision_cluster(
    spec: ClusterSpec,
    runner: Runner = run_command,
    executable: str = "k3d",
) -> CommandOutcome:
    """Create the cluster described by ``spec``.

    A successful return only means k3d reported the cluster as created; the
    Kubernetes API may not be answering yet. Failures are re-raised as-is and
    nothing is rolled back.
    """
    console.print(f"\n[bold cyan]Creating cluster: {escape(spec.name)}[/bold cyan]")
    console.print(f"   Control plane nodes: {spec.control_plane_count}")
    console.print(f"   Worker nodes: {spec.worker_count}")

    invocation = create_invocation(spec, executable)
    console.print(f"[dim]Running: {escape(str(invocation))}[/dim]")

    try:
        outcome = runner(invocation)
    except CommandError:
        logger.error(
            "Creating cluster %s (%d servers, %d agents) failed; "
            "remove any leftovers with: %s",
            spec.name,
            spec.control_plane_count,
            spec.worker_count,
            delete_invocation(spec.name, executable),
        )
        raise

    console.print(f"[green]✓ Cluster '{escape(spec.name)}' created[/green]")
    return outcome


def render_k3d_config(spec: ClusterSpec) -> Dict[str, Any]:
    """Render a k3d ``Simple`` config document equivalent to ``spec``."""
    config: Dict[str, Any] = {
        "apiVersion": K3D_CONFIG_API_VERSION,
        "kind": "Simple",
        "metadata": {"name": spec.name},
        "servers": spec.control_plane_count,
        "agents": spec.worker_count,
    }

    if spec.image:
        config["image"] = spec.image

    if spec.ports:
        config["ports"] = [_port_entry(port) for port in spec.ports]

    config["options"] = {
        "k3d": {"wait": spec.wait_for_ready},
        "kubeconfig": {
            "updateDefaultKubeconfig": True,
            "switchCurrentContext": True,
        },
    }
    return config


def _port_entry(port: str) -> Dict[str, Any]:
    # "8080:80@loadbalancer" -> port plus node filter
    mapping, _, node_filter = port.partition("@")
    entry: Dict[str, Any] = {"port": mapping}
    if node_filter:
        entry["nodeFilters"] = [node_filter]
    return entry
