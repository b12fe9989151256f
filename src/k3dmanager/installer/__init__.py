"""Cluster installation orchestrator for k3d-manager."""

from .bootstrap import BootstrapSettings, bootstrap_cluster, check_prerequisites
from .cluster import DEFAULT_CLUSTER, ClusterSpec, dev_cluster, provision_cluster
from .runner import CommandFailed, CommandError, CommandInvocation, CommandOutcome, SpawnFailed, run_command
from .verify import READINESS_DELAY, verify_readiness

__all__ = [
    "BootstrapSettings",
    "bootstrap_cluster",
    "check_prerequisites",
    "DEFAULT_CLUSTER",
    "ClusterSpec",
    "dev_cluster",
    "provision_cluster",
    "CommandError",
    "CommandFailed",
    "CommandInvocation",
    "CommandOutcome",
    "SpawnFailed",
    "run_command",
    "READINESS_DELAY",
    "verify_readiness",
]
