"""
Orchestration Domain - Pipeline coordination.

This domain handles:
- Sequencing extraction and validation
- Short-circuiting on extraction failure
- The JSON wire shape returned to callers
"""

from .contracts import PipelineOrchestrator
from .models import PipelinePhase, PipelineResult, PipelineStep
from .pipeline import PipelineFacade, build_pipeline

__all__ = [
    # Contracts
    "PipelineOrchestrator",
    # Models
    "PipelinePhase",
    "PipelineStep",
    "PipelineResult",
    # Implementations
    "PipelineFacade",
    "build_pipeline",
]
