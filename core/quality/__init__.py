"""
Quality Module

Purity gate applied to every candidate produced by the pipeline.

Components:
  - QualityGate: per-content-type purity threshold check
  - GateDecision: verdict with score and threshold
"""

from core.quality.purity_gate import (
    QualityGate,
    GateDecision,
    DEFAULT_THRESHOLDS,
)

__all__ = [
    'QualityGate',
    'GateDecision',
    'DEFAULT_THRESHOLDS',
]
