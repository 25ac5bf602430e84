"""Comparison engine: reconcile, diff, classify and render two benchmark runs."""

from benchdiff.compare.classifier import classify, classify_entry
from benchdiff.compare.deltas import compute_delta, compute_deltas
from benchdiff.compare.orchestrator import ComparisonOrchestrator
from benchdiff.compare.reconciler import DuplicateFunctionError, is_comparable_name, reconcile
from benchdiff.compare.report import assemble

__all__ = [
    "ComparisonOrchestrator",
    "DuplicateFunctionError",
    "assemble",
    "classify",
    "classify_entry",
    "compute_delta",
    "compute_deltas",
    "is_comparable_name",
    "reconcile",
]
