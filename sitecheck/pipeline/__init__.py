"""Website check pipeline."""

from .orchestrator import SearchOrchestrator
from .reconciliation import ReconciliationPipeline

__all__ = ['SearchOrchestrator', 'ReconciliationPipeline']
