"""Route classification and menu key derivation.

Every route uses at most one menu. The menu is chosen by an ordered rule
table (MenuRules):

1. Excluded route patterns: no menu
2. Extension admin directories that ship a menu.ts: extension admin menu
3. Extension user directories that ship a menu.ts (never under /admin/)
4. Routes starting with /admin: the global admin menu
5. Everything else: the global user menu

Each distinct menu definition is read and turned into keys once per run,
however many routes reference it. The global menu file declares both the
admin and the user menu, so each of those reads only its own export.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from keyshaker.analysis.extractor import mask_comments
from keyshaker.config import MenuRules, ProjectLayout
from keyshaker.enums import PageType

__all__ = [
    "MenuAssignment",
    "MenuEntry",
    "MenuResolver",
    "derive_menu_keys",
    "export_block",
    "match_route_pattern",
    "route_for_entry",
]

logger = logging.getLogger(__name__)

_LOCALE_SEGMENT = "[locale]"
_PARAM_SEGMENT = re.compile(r"^\[\w+\]$")
_MENU_KEY = re.compile(r"""\bkey\s*:\s*(?P<q>["'])(?P<id>[^"'\n]+)(?P=q)""")
_NEXT_EXPORT = re.compile(r"^[ \t]*export\b", re.MULTILINE)


# ==============================================================================
# ROUTES
# ==============================================================================


def route_for_entry(entry: Path, route_root: Path) -> str | None:
    """Route pattern served by an entry file, or None outside route_root.

    The [locale] segment, route groups such as (dashboard) and the file
    name are dropped; dynamic segments keep their brackets.

    Example:
        >>> root = Path("/srv/app/[locale]")
        >>> route_for_entry(root / "(dashboard)" / "admin" / "[id]" / "page.tsx", root)
        '/admin/[id]'
        >>> route_for_entry(root / "page.tsx", root)
        '/'
    """
    try:
        relative = entry.relative_to(route_root)
    except ValueError:
        return None
    segments = [
        part
        for part in relative.parent.parts
        if part != _LOCALE_SEGMENT and not (part.startswith("(") and part.endswith(")"))
    ]
    return "/" + "/".join(segments)


def match_route_pattern(pattern: str, route: str) -> bool:
    """True if route equals pattern or lies below it.

    Bracketed segments in the pattern ([id]) match any single segment.

    Example:
        >>> match_route_pattern("/admin/crm/support/[id]", "/admin/crm/support/42/edit")
        True
        >>> match_route_pattern("/admin/builder", "/admin/builders")
        False
    """
    parts = [
        "[^/]+" if _PARAM_SEGMENT.match(segment) else re.escape(segment)
        for segment in pattern.split("/")
    ]
    return re.match("^" + "/".join(parts) + "(?:/.*)?$", route) is not None


# ==============================================================================
# MENUS
# ==============================================================================


@dataclass(frozen=True, slots=True)
class MenuAssignment:
    """Menu chosen for one route.

    Attributes:
        page_type: Category of the route
        menu_id: Menu bundle id, None for excluded routes
        menu_file: Definition file of the menu, None for excluded routes
        extension: Extension directory for extension menus
        namespace: Namespace the menu's keys live in
        export: Export holding this menu's items, None for the whole file
    """

    page_type: PageType
    menu_id: str | None = None
    menu_file: Path | None = None
    extension: str | None = None
    namespace: str | None = None
    export: str | None = None

    @property
    def is_extension(self) -> bool:
        """True for extension-owned menus."""
        return self.page_type in (PageType.EXTENSION_ADMIN, PageType.EXTENSION_USER)


@dataclass(frozen=True, slots=True)
class MenuEntry:
    """Keys of one menu bundle, shared by every route using it."""

    menu_id: str
    namespace: str
    keys: frozenset[str] = frozenset()

    @property
    def key_count(self) -> int:
        """Number of derived keys."""
        return len(self.keys)

    def key_map(self) -> dict[str, frozenset[str]]:
        """Namespace -> keys view used when building chunks."""
        return {self.namespace: self.keys}


def export_block(text: str, export: str) -> str | None:
    """Source of one exported declaration, up to the next export.

    Comments are masked first. Returns None if the export is absent.

    Example:
        >>> src = 'export const a = [{ key: "x" }];\\nexport const b = [{ key: "y" }];'
        >>> export_block(src, "b")
        'export const b = [{ key: "y" }];'
    """
    source = mask_comments(text)
    start = re.search(rf"\bexport\s+(?:const|let|var)\s+{re.escape(export)}\b", source)
    if start is None:
        return None
    following = _NEXT_EXPORT.search(source, start.end())
    end = following.start() if following else len(source)
    return source[start.start():end].rstrip()


def derive_menu_keys(text: str, prefix: str = "") -> frozenset[str]:
    """Title and description keys for every ``key: "<id>"`` literal.

    Dashes and slashes in the id become dots.

    Example:
        >>> sorted(derive_menu_keys('{ key: "admin-users" }'))
        ['admin.users.description', 'admin.users.title']
        >>> sorted(derive_menu_keys('{ key: "plans" }', prefix="nav."))
        ['nav.plans.description', 'nav.plans.title']
    """
    keys: set[str] = set()
    for match in _MENU_KEY.finditer(mask_comments(text)):
        path = match["id"].replace("-", ".").replace("/", ".")
        keys.add(f"{prefix}{path}.title")
        keys.add(f"{prefix}{path}.description")
    return frozenset(keys)


def _extension_menu_id(prefix: str, extension: str) -> str:
    return f"{prefix}{extension.replace('/', '_')}"


@dataclass(slots=True)
class MenuResolver:
    """Per-run classifier and menu reader.

    Menu file texts and derived menu entries are cached on the instance,
    so one resolver must not outlive the file-system snapshot it read.
    """

    layout: ProjectLayout
    _texts: dict[Path, str | None] = field(default_factory=dict, init=False, repr=False)
    _entries: dict[str, MenuEntry] = field(default_factory=dict, init=False, repr=False)

    @property
    def rules(self) -> MenuRules:
        return self.layout.menu_rules

    def classify(self, route: str, entry: Path) -> MenuAssignment:
        """Pick the menu for a route served by entry."""
        rules = self.rules
        for pattern in rules.excluded_paths:
            if match_route_pattern(pattern, route):
                return MenuAssignment(PageType.EXCLUDED)

        extension_path = self._extension_relative(entry)
        if extension_path is not None:
            for ext in rules.extension_dirs:
                if extension_path == f"admin/{ext}" or extension_path.startswith(f"admin/{ext}/"):
                    menu_file = self.layout.extension_root / "admin" / ext / "menu.ts"
                    if menu_file.is_file():
                        menu_id = _extension_menu_id("ext_admin_", ext)
                        return MenuAssignment(
                            PageType.EXTENSION_ADMIN, menu_id, menu_file, ext, menu_id
                        )

            if "/admin/" not in f"/{extension_path}/":
                for ext in rules.extension_dirs:
                    if extension_path == ext or extension_path.startswith(f"{ext}/"):
                        menu_file = self.layout.extension_root / ext / "menu.ts"
                        if menu_file.is_file():
                            menu_id = _extension_menu_id("ext_", ext)
                            return MenuAssignment(
                                PageType.EXTENSION_USER, menu_id, menu_file, ext, menu_id
                            )

        if route.startswith("/admin"):
            return MenuAssignment(
                PageType.ADMIN,
                rules.admin_menu_id,
                self.layout.global_menu_file,
                namespace=rules.global_namespace,
                export=rules.admin_export,
            )
        return MenuAssignment(
            PageType.USER,
            rules.user_menu_id,
            self.layout.global_menu_file,
            namespace=rules.global_namespace,
            export=rules.user_export,
        )

    def _extension_relative(self, entry: Path) -> str | None:
        try:
            return entry.relative_to(self.layout.extension_root).as_posix()
        except ValueError:
            return None

    def read_menu_file(self, path: Path) -> str | None:
        """Menu file text, read at most once per resolver."""
        if path not in self._texts:
            try:
                self._texts[path] = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                logger.debug("Menu file %s does not exist", path)
                self._texts[path] = None
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not extract menu keys from %s: %s", path, e)
                self._texts[path] = None
        return self._texts[path]

    def menu_entry(self, assignment: MenuAssignment) -> MenuEntry | None:
        """Keys of the assigned menu, derived once per menu id."""
        if assignment.menu_id is None or assignment.menu_file is None:
            return None
        cached = self._entries.get(assignment.menu_id)
        if cached is not None:
            return cached

        namespace = assignment.namespace or self.rules.global_namespace
        text = self.read_menu_file(assignment.menu_file)
        keys: frozenset[str] = frozenset()
        if text is not None:
            if assignment.export is not None:
                block = export_block(text, assignment.export)
                if block is None:
                    logger.debug(
                        "Export %s not found in %s; using the whole file",
                        assignment.export,
                        assignment.menu_file,
                    )
                    block = text
            else:
                block = text
            prefix = self.rules.extension_prefix if assignment.is_extension else ""
            keys = derive_menu_keys(block, prefix)

        entry = MenuEntry(assignment.menu_id, namespace, keys)
        self._entries[assignment.menu_id] = entry
        logger.debug("Menu %s: %d keys", entry.menu_id, entry.key_count)
        return entry
