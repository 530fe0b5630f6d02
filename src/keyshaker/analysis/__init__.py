"""Static analysis of the route tree and its import graph.

Python 3.13+. Zero external dependencies.
"""

from .extractor import (
    BindingStrategy,
    ExtractionResult,
    KeyCall,
    KeyExtractor,
    NamespaceBinding,
    RegexBindingStrategy,
    UnboundConstruction,
    mask_comments,
)
from .graph import detect_cycles
from .resolver import ImportResolver
from .scanner import ScanResult, SourceScanner
from .walker import DependencyWalker, FileRecord, WalkArena, merge_key_maps

__all__ = [
    "BindingStrategy",
    "DependencyWalker",
    "ExtractionResult",
    "FileRecord",
    "ImportResolver",
    "KeyCall",
    "KeyExtractor",
    "NamespaceBinding",
    "RegexBindingStrategy",
    "ScanResult",
    "SourceScanner",
    "UnboundConstruction",
    "WalkArena",
    "detect_cycles",
    "mask_comments",
    "merge_key_maps",
]
