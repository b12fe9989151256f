"""k3d-manager: bootstrap multi-node k3d clusters"""

__version__ = "0.1.0"
