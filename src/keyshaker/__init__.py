"""keyshaker - route-level translation key extraction and bundling.

Scans a Next.js-style route tree, follows each route's local imports to
find every literal translation key it uses, and writes one minimal JSON
chunk per (route, locale) and per (menu, locale) plus a manifest.

Public API:
    ProjectLayout - Fixed project paths derived from a root
    generate - Async pipeline: scan, validate, walk, build, write
    KeyExtractor - Per-file binding and key extraction
    DependencyWalker - Key union across an entry file's import graph
    UsageValidator - Server/client and missing-namespace checks
    ManifestBuilder, ChunkWriter, ChunkReader - Manifest and chunk I/O
    IncrementalPlugin - Build-tool integration

Exceptions:
    KeyshakerError - Base exception class
    ConfigurationError - Invalid layout or options
    ManifestError - Unusable manifest on disk

Submodules:
    keyshaker.analysis - Scanner, extractor, resolver, walker, cycle detection
    keyshaker.validation - Usage validator
    keyshaker.diagnostics - Issues, reports, formatting, exceptions
    keyshaker.bundling - Locale loading, menus, manifest, chunk writer/reader
"""

from .analysis import DependencyWalker, KeyExtractor, SourceScanner
from .bundling import ChunkReader, ChunkWriter, ManifestBuilder
from .config import ExtractionSettings, MenuRules, ProjectLayout
from .diagnostics import (
    ConfigurationError,
    Issue,
    KeyshakerError,
    ManifestError,
    ValidationReport,
)
from .pipeline import GenerationResult, generate
from .plugin import IncrementalPlugin, PluginOptions
from .validation import UsageValidator

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("keyshaker")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ChunkReader",
    "ChunkWriter",
    "ConfigurationError",
    "DependencyWalker",
    "ExtractionSettings",
    "GenerationResult",
    "IncrementalPlugin",
    "Issue",
    "KeyExtractor",
    "KeyshakerError",
    "ManifestBuilder",
    "ManifestError",
    "MenuRules",
    "PluginOptions",
    "ProjectLayout",
    "SourceScanner",
    "UsageValidator",
    "ValidationReport",
    "__version__",
    "generate",
]
