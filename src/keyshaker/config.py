"""Configuration objects for keyshaker.

All settings are frozen dataclasses with defaults taken from
keyshaker.constants. Validation happens in __post_init__ so that an
invalid setting fails when the object is built, before any file is read.

Components:
    ExtractionSettings - Walk depth, extensions, aliases, pruned directories
    MenuRules - Route -> menu classification tables
    ProjectLayout - Fixed project-relative paths derived from a root

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from keyshaker.constants import (
    ADMIN_MENU_EXPORT,
    ADMIN_MENU_ID,
    DEFAULT_ALIASES,
    ENTRY_STEMS,
    EXCLUDED_PATHS,
    EXTENSION_DIRS,
    EXTENSION_NAV_PREFIX,
    GLOBAL_MENU_NAMESPACE,
    I18N_SEGMENT,
    MAX_WALK_DEPTH,
    PRUNED_DIRS,
    SOURCE_EXTENSIONS,
    USER_MENU_EXPORT,
    USER_MENU_ID,
)
from keyshaker.diagnostics.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = [
    "ExtractionSettings",
    "MenuRules",
    "ProjectLayout",
]


def _frozen_aliases(aliases: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(aliases))


@dataclass(frozen=True, slots=True)
class ExtractionSettings:
    """Settings shared by the scanner, resolver and walker.

    Attributes:
        max_depth: Deepest import level read from an entry file (entry = 0)
        extensions: Extensions tried, in order, when resolving specifiers
        aliases: Alias prefix -> directory relative to the project root
        i18n_segment: Path segment reserved for the translation runtime
        pruned_dirs: Directory names never scanned or walked into
        entry_stems: File stems that mark route entry files
    """

    max_depth: int = MAX_WALK_DEPTH
    extensions: tuple[str, ...] = SOURCE_EXTENSIONS
    aliases: Mapping[str, str] = field(
        default_factory=lambda: _frozen_aliases(DEFAULT_ALIASES)
    )
    i18n_segment: str = I18N_SEGMENT
    pruned_dirs: frozenset[str] = PRUNED_DIRS
    entry_stems: frozenset[str] = ENTRY_STEMS

    def __post_init__(self) -> None:
        """Validate settings and freeze the alias map.

        Raises:
            ConfigurationError: If a setting cannot work
        """
        if self.max_depth < 0:
            msg = f"max_depth must be >= 0, got {self.max_depth}"
            raise ConfigurationError(msg)
        if not self.extensions:
            msg = "extensions must not be empty"
            raise ConfigurationError(msg)
        for ext in self.extensions:
            if not ext.startswith("."):
                msg = f"extensions must start with '.', got {ext!r}"
                raise ConfigurationError(msg)
        for prefix in self.aliases:
            if not prefix or prefix.startswith("."):
                msg = f"alias prefix must be non-empty and not relative, got {prefix!r}"
                raise ConfigurationError(msg)
        object.__setattr__(self, "aliases", _frozen_aliases(self.aliases))

    def is_source_file(self, path: Path) -> bool:
        """True if the file has one of the configured source extensions."""
        return path.suffix in self.extensions

    def is_entry_file(self, path: Path) -> bool:
        """True if the file name marks a route entry (page.tsx, layout.ts, ...)."""
        return self.is_source_file(path) and path.stem in self.entry_stems

    def is_excluded_path(self, path: Path, root: Path | None = None) -> bool:
        """True if the path lies in a pruned directory or the i18n runtime.

        With root given, only the part of the path below root is inspected.
        """
        parts = path.parts
        if root is not None and path.is_relative_to(root):
            parts = path.relative_to(root).parts
        return self.i18n_segment in parts or any(part in self.pruned_dirs for part in parts)


@dataclass(frozen=True, slots=True)
class MenuRules:
    """Tables that decide which menu a route uses.

    Attributes:
        excluded_paths: Route patterns without menu chrome ([param] wildcards)
        extension_dirs: Extension directories that may ship a menu.ts
        admin_menu_id: Menu id of the global admin menu
        user_menu_id: Menu id of the global user menu
        global_namespace: Namespace of the global menus
        extension_prefix: Key prefix for extension navigation strings
        admin_export: Export in the global menu file holding admin items
        user_export: Export in the global menu file holding user items
    """

    excluded_paths: tuple[str, ...] = EXCLUDED_PATHS
    extension_dirs: tuple[str, ...] = EXTENSION_DIRS
    admin_menu_id: str = ADMIN_MENU_ID
    user_menu_id: str = USER_MENU_ID
    global_namespace: str = GLOBAL_MENU_NAMESPACE
    extension_prefix: str = EXTENSION_NAV_PREFIX
    admin_export: str | None = ADMIN_MENU_EXPORT
    user_export: str | None = USER_MENU_EXPORT

    def __post_init__(self) -> None:
        """Reject rule tables that would produce colliding menu ids.

        Raises:
            ConfigurationError: If the two global menu ids are equal or empty
        """
        if not self.admin_menu_id or not self.user_menu_id:
            msg = "menu ids must not be empty"
            raise ConfigurationError(msg)
        if self.admin_menu_id == self.user_menu_id:
            msg = f"admin and user menu ids must differ, both are {self.admin_menu_id!r}"
            raise ConfigurationError(msg)
        for pattern in self.excluded_paths:
            if not pattern.startswith("/"):
                msg = f"excluded path must start with '/', got {pattern!r}"
                raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class ProjectLayout:
    """Fixed project-relative layout the generator operates on.

    Use ProjectLayout.from_root() to derive every path from a project root.

    Attributes:
        project_root: Directory that aliases resolve against
        app_dir: Route tree root (the [locale] directory)
        messages_dir: Directory with one <locale>.json per locale
        output_dir: Directory receiving manifest.json and chunks
        global_menu_file: Definitions of the global admin/user menus
        extension_root: Directory holding extension route trees
        settings: Extraction settings
        menu_rules: Menu classification tables
    """

    project_root: Path
    app_dir: Path
    messages_dir: Path
    output_dir: Path
    global_menu_file: Path
    extension_root: Path
    settings: ExtractionSettings = field(default_factory=ExtractionSettings)
    menu_rules: MenuRules = field(default_factory=MenuRules)

    @classmethod
    def from_root(
        cls,
        root: str | Path,
        *,
        output_dir: str | Path | None = None,
        settings: ExtractionSettings | None = None,
        menu_rules: MenuRules | None = None,
    ) -> ProjectLayout:
        """Derive the standard layout from a project root.

        Example:
            >>> layout = ProjectLayout.from_root("/srv/frontend")
            >>> layout.app_dir.as_posix()
            '/srv/frontend/app/[locale]'
            >>> layout.output_dir.as_posix()
            '/srv/frontend/public/i18n'
        """
        project_root = Path(root).absolute()
        app_dir = project_root / "app" / "[locale]"
        if output_dir is None:
            out = project_root / "public" / "i18n"
        else:
            out = Path(output_dir)
            if not out.is_absolute():
                out = project_root / out
        return cls(
            project_root=project_root,
            app_dir=app_dir,
            messages_dir=project_root / "messages",
            output_dir=out,
            global_menu_file=project_root / "config" / "menu.ts",
            extension_root=app_dir / "(ext)",
            settings=settings or ExtractionSettings(),
            menu_rules=menu_rules or MenuRules(),
        )

    def __post_init__(self) -> None:
        """Reject output directories that would overwrite inputs.

        Raises:
            ConfigurationError: If output_dir is the app or messages directory
        """
        if self.output_dir in (self.app_dir, self.messages_dir, self.project_root):
            msg = f"output_dir must be a dedicated directory, got {self.output_dir}"
            raise ConfigurationError(msg)
