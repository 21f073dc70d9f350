"""
Módulo de manifest (snapshot de mtimes para detecção de mudanças).
"""

from .exclusions import (
    DEFAULT_EXCLUSIONS,
    ExclusionRule,
    ScanEntry,
    excluded_names,
    is_hidden,
    is_node_modules,
)
from .manifest_builder import Manifest, ManifestDiff, ManifestScanner, scan

__all__ = [
    # Snapshot
    "Manifest",
    "ManifestDiff",
    "ManifestScanner",
    "scan",
    # Exclusões
    "DEFAULT_EXCLUSIONS",
    "ExclusionRule",
    "ScanEntry",
    "excluded_names",
    "is_hidden",
    "is_node_modules",
]
