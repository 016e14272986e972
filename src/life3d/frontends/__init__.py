"""Frontend interfaces for 3D Life."""

from .cli import CLILife3D

__all__ = ["CLILife3D"]
