"""End-to-end issue assembly."""

from .orchestrator import Orchestrator

__all__ = ["Orchestrator"]
