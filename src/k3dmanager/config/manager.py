"""Configuration management for k3d-manager"""

import math
import os
from typing import Any, Dict, Mapping, Optional


class ConfigManager:
    """Resolve k3d-manager settings from defaults and the environment"""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def load(self) -> Dict[str, Any]:
        """Load configuration from defaults and environment"""
        config = self._load_defaults()
        return self._apply_env_overrides(config)

    def _load_defaults(self) -> Dict[str, Any]:
        """Load default configuration"""
        return {
            "tools": {
                "provisioner": "k3d",
                "client": "kubectl",
            },
            "readiness": {
                "delay": 10.0,
            },
            "logging": {
                "level": "info",
            },
        }

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides"""
        if provisioner := self.environ.get("K3DM_PROVISIONER"):
            config["tools"]["provisioner"] = provisioner

        if client := self.environ.get("K3DM_KUBECTL"):
            config["tools"]["client"] = client

        if delay := self.environ.get("K3DM_READY_DELAY"):
            try:
                config["readiness"]["delay"] = float(delay)
            except ValueError:
                raise ValueError(f"K3DM_READY_DELAY must be a number of seconds, got {delay!r}") from None
            if not math.isfinite(config["readiness"]["delay"]):
                raise ValueError(f"K3DM_READY_DELAY must be a finite number of seconds, got {delay!r}")
            if config["readiness"]["delay"] < 0:
                raise ValueError("K3DM_READY_DELAY must not be negative")

        if level := self.environ.get("K3DM_LOG_LEVEL"):
            config["logging"]["level"] = level.lower()

        return config
