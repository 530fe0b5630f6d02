"""Shared constants for keyshaker.

This module provides centralized defaults used across the analysis,
validation and bundling packages. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Walk limits: Termination bounds for import-graph traversal
- Source conventions: Extensions, aliases and entry filenames
- Menu conventions: Menu ids, namespaces and route tables
- Output conventions: Artifact names and JSON layout

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Walk limits
    "MAX_WALK_DEPTH",
    # Source conventions
    "SOURCE_EXTENSIONS",
    "DEFAULT_ALIASES",
    "I18N_SEGMENT",
    "PRUNED_DIRS",
    "ENTRY_STEMS",
    "SERVER_ONLY_STEMS",
    "LOADING_STEM",
    "CLIENT_DIRECTIVE",
    # Menu conventions
    "ADMIN_MENU_ID",
    "USER_MENU_ID",
    "GLOBAL_MENU_NAMESPACE",
    "EXTENSION_NAV_PREFIX",
    "ADMIN_MENU_EXPORT",
    "USER_MENU_EXPORT",
    "EXCLUDED_PATHS",
    "EXTENSION_DIRS",
    # Output conventions
    "MANIFEST_FILENAME",
    "INDEX_CHUNK_NAME",
]

# ============================================================================
# WALK LIMITS
# ============================================================================

# Maximum import depth followed from an entry file (entry is depth 0).
# Files deeper than this are not read. The visited set already guarantees
# termination under cycles; this bound protects against pathological chains.
MAX_WALK_DEPTH: int = 10

# ============================================================================
# SOURCE CONVENTIONS
# ============================================================================

# Resolution order for extensionless specifiers, also used for index files.
SOURCE_EXTENSIONS: tuple[str, ...] = (".tsx", ".ts", ".jsx", ".js")

# Alias prefix -> directory relative to the project root.
DEFAULT_ALIASES: dict[str, str] = {"@/": ""}

# Path segment owned by the translation runtime itself; never analyzed.
I18N_SEGMENT: str = "i18n"

# Directory names skipped while scanning and walking.
PRUNED_DIRS: frozenset[str] = frozenset({"node_modules", ".next", ".git", ".turbo"})

# File stems that seed a dependency walk.
ENTRY_STEMS: frozenset[str] = frozenset({"page", "layout"})

# File stems the framework always renders on the server unless opted out.
SERVER_ONLY_STEMS: frozenset[str] = frozenset(
    {"page", "layout", "loading", "error", "not-found", "template"}
)

LOADING_STEM: str = "loading"

CLIENT_DIRECTIVE: str = "use client"

# ============================================================================
# MENU CONVENTIONS
# ============================================================================

ADMIN_MENU_ID: str = "menu-admin"
USER_MENU_ID: str = "menu-user"

# Namespace holding translations for the global admin/user menus.
GLOBAL_MENU_NAMESPACE: str = "menu"

# Extension menus live in the extension's own namespace; navigation strings
# are kept apart from its content strings under this prefix.
EXTENSION_NAV_PREFIX: str = "nav."

ADMIN_MENU_EXPORT: str = "adminMenu"
USER_MENU_EXPORT: str = "userMenu"

# Routes rendered without the dashboard chrome, so they need no menu.
EXCLUDED_PATHS: tuple[str, ...] = (
    "/admin/crm/kyc/level/create",
    "/admin/crm/kyc/level/[id]",
    "/admin/crm/kyc/application/[id]",
    "/admin/crm/support/[id]",
    "/admin/finance/deposit/log/[id]",
    "/admin/finance/withdraw/log/[id]",
    "/admin/finance/transfer/[id]",
    "/admin/default-editor",
    "/admin/default-editor/[pageId]/edit",
    "/admin/content/media",
    "/admin/system/notification/template/[id]",
    "/admin/system/settings",
    "/admin/system/license",
    "/admin/system/extension",
    "/admin/system/extension/[id]",
    "/admin/system/update",
    "/admin/builder",
)

# Extension directories that ship their own menu.ts.
EXTENSION_DIRS: tuple[str, ...] = (
    "affiliate",
    "ai/investment",
    "ai/market-maker",
    "copy-trading",
    "ecommerce",
    "ecosystem",
    "faq",
    "forex",
    "futures",
    "gateway",
    "ico",
    "mailwizard",
    "nft",
    "p2p",
    "staking",
)

# ============================================================================
# OUTPUT CONVENTIONS
# ============================================================================

MANIFEST_FILENAME: str = "manifest.json"

# Chunk name used for the root route "/".
INDEX_CHUNK_NAME: str = "index"
