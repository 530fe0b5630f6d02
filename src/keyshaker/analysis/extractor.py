"""Lexical extraction of translation bindings, keys and imports.

Finds translation accessors bound to a namespace in one source file, the
literal keys invoked through each accessor, and the local import
specifiers that the dependency walker follows.

Extraction contract:
- A key is recorded only when it is a literal string argument of a call
  on an identifier with a known binding. Computed keys are invisible.
- A key call is attributed to the nearest preceding binding of the same
  identifier, never to another accessor.
- Accessors constructed without a namespace register no binding.

The lexical work sits behind the BindingStrategy protocol, so the regular
expression engine used here can be replaced by a parse-tree strategy
without changing the contract enforced by KeyExtractor.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import bisect
import functools
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from keyshaker.config import ExtractionSettings
from keyshaker.enums import BindingOrigin

__all__ = [
    "BindingStrategy",
    "ExtractionResult",
    "KeyCall",
    "KeyExtractor",
    "NamespaceBinding",
    "RegexBindingStrategy",
    "UnboundConstruction",
    "line_of",
    "mask_comments",
]

# ==============================================================================
# RESULT TYPES
# ==============================================================================


@dataclass(frozen=True, slots=True)
class NamespaceBinding:
    """Accessor identifier bound to a namespace in one file.

    Attributes:
        local_name: Identifier holding the accessor (e.g. 't', 'tCommon')
        namespace: Namespace literal passed to the constructor
        origin: SYNC for the render-time hook, ASYNC for awaited calls
        offset: Character offset of the binding statement
        line: 1-indexed line of the binding statement
    """

    local_name: str
    namespace: str
    origin: BindingOrigin
    offset: int = 0
    line: int = 0


@dataclass(frozen=True, slots=True)
class KeyCall:
    """Literal key passed to an accessor call."""

    local_name: str
    key: str
    offset: int
    line: int


@dataclass(frozen=True, slots=True)
class UnboundConstruction:
    """Accessor constructor called with empty arguments."""

    constructor: str
    origin: BindingOrigin
    offset: int
    line: int


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Everything extracted from one file.

    Attributes:
        bindings: Registered namespace bindings in source order
        keys: Namespace -> literal keys attributed to it. Every bound
              namespace is present, possibly with no keys.
        import_specifiers: Local (relative or aliased) imports, source order
        unbound: Accessor constructions without a namespace
    """

    bindings: tuple[NamespaceBinding, ...] = ()
    keys: Mapping[str, frozenset[str]] = field(default_factory=dict)
    import_specifiers: tuple[str, ...] = ()
    unbound: tuple[UnboundConstruction, ...] = ()

    @property
    def namespaces(self) -> frozenset[str]:
        """Namespaces bound in the file."""
        return frozenset(self.keys)

    @property
    def has_translations(self) -> bool:
        """True if the file binds at least one accessor."""
        return bool(self.bindings)

    def key_map(self) -> dict[str, set[str]]:
        """Mutable copy of the namespace -> keys map."""
        return {ns: set(keys) for ns, keys in self.keys.items()}


# ==============================================================================
# LEXICAL HELPERS
# ==============================================================================


# Characters after which a "/" starts a regex literal rather than a division
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};~")
_REGEX_KEYWORDS = frozenset(
    {"return", "typeof", "case", "do", "else", "in", "of", "new", "delete", "void",
     "throw", "yield", "await"}
)
_URL_SCHEME = re.compile(r"[A-Za-z][\w+.-]*:$")


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def _regex_allowed(source: str, prev: int) -> bool:
    """True if a "/" following offset prev is in expression position."""
    if prev < 0:
        return True
    ch = source[prev]
    if ch in _REGEX_PRECEDERS:
        return True
    if ch == ">":
        # arrow body; a bare ">" may close a JSX tag
        return prev > 0 and source[prev - 1] == "="
    if not _is_word_char(ch):
        return False
    start = prev
    while start > 0 and _is_word_char(source[start - 1]):
        start -= 1
    return source[start:prev + 1] in _REGEX_KEYWORDS


def _regex_end(source: str, start: int) -> int:
    """Offset just past the regex literal opening at start, or -1.

    Regex literals never span lines; an unclosed one is not a regex.
    """
    n = len(source)
    j = start + 1
    in_class = False
    while j < n:
        ch = source[j]
        if ch == "\n":
            return -1
        if ch == "\\":
            j += 2
            continue
        if in_class:
            in_class = ch != "]"
        elif ch == "[":
            in_class = True
        elif ch == "/":
            return j + 1
        j += 1
    return -1


def _is_line_comment(source: str, start: int) -> bool:
    """False for "//" inside a URL or JSX text such as ``<p>a // b</p>``."""
    if _URL_SCHEME.search(source, max(0, start - 32), start):
        return False
    end = source.find("\n", start)
    return "</" not in source[start:len(source) if end == -1 else end]


@functools.lru_cache(maxsize=32)
def mask_comments(source: str) -> str:
    """Blank out // and /* */ comments, keeping offsets and newlines.

    String, template and regex literals are skipped so that comment
    markers inside them are left alone; a "/" counts as a regex opener
    only in expression position. An unterminated quote ends at the end of
    its line, so JSX text such as ``Don't`` cannot swallow the rest of the
    file. When a marker is ambiguous (an unclosed ``/*``, a ``//`` after a
    URL scheme or before a closing JSX tag) the text is left unmasked.

    Example:
        >>> mask_comments('t("a") // t("b")')
        't("a")         '
        >>> mask_comments('s.replace(/\\\\/*$/, ""); t("a")')
        's.replace(/\\\\/*$/, ""); t("a")'
    """
    out = list(source)
    n = len(source)
    i = 0
    prev = -1
    quote: str | None = None
    while i < n:
        ch = source[i]
        if quote is not None:
            if ch == "\\":
                i += 2
                continue
            if ch == quote or (ch == "\n" and quote != "`"):
                quote = None
                prev = i
            i += 1
            continue
        if ch in "\"'`":
            quote = ch
            i += 1
            continue
        if ch == "/":
            nxt = source[i + 1] if i + 1 < n else ""
            if nxt == "/" and _is_line_comment(source, i):
                end = source.find("\n", i)
                end = n if end == -1 else end
                out[i:end] = " " * (end - i)
                i = end
                continue
            if nxt == "*":
                end = source.find("*/", i + 2)
                if end != -1:
                    for j in range(i, end + 2):
                        if out[j] != "\n":
                            out[j] = " "
                    i = end + 2
                    continue
            elif nxt != "/" and _regex_allowed(source, prev):
                end = _regex_end(source, i)
                if end != -1:
                    prev = end - 1
                    i = end
                    continue
        if not ch.isspace():
            prev = i
        i += 1
    return "".join(out)


class _LineIndex:
    """Offset -> 1-indexed line lookup for one text."""

    __slots__ = ("_newlines",)

    def __init__(self, text: str) -> None:
        self._newlines = [m.start() for m in re.finditer("\n", text)]

    def line(self, offset: int) -> int:
        return bisect.bisect_left(self._newlines, offset) + 1


def line_of(text: str, offset: int) -> int:
    """1-indexed line number of a character offset."""
    return text.count("\n", 0, offset) + 1


# ==============================================================================
# STRATEGY
# ==============================================================================


class BindingStrategy(Protocol):
    """Lexical engine used by KeyExtractor.

    Implementations find raw occurrences; KeyExtractor applies the
    attribution and filtering rules on top.
    """

    def extract_bindings(self, text: str) -> tuple[NamespaceBinding, ...]:
        """Namespace bindings in source order."""
        ...

    def extract_key_calls(self, text: str, names: Iterable[str]) -> tuple[KeyCall, ...]:
        """Literal-key calls on the given identifiers, in source order."""
        ...

    def extract_imports(self, text: str) -> tuple[str, ...]:
        """Every import specifier, in source order."""
        ...

    def find_unbound_constructions(self, text: str) -> tuple[UnboundConstruction, ...]:
        """Accessor constructions with empty arguments."""
        ...


_IDENT = r"[A-Za-z_$][\w$]*"
_DECL = rf"\b(?:const|let|var)\s+(?P<name>{_IDENT})\s*=\s*"
_NS = r"(?P<q>[\"'`])(?P<ns>[^\"'`\n]+)(?P=q)"

_SYNC_BINDING = re.compile(rf"{_DECL}useTranslations\s*\(\s*{_NS}\s*\)")
_ASYNC_BINDINGS = (
    # await getTranslations({ locale, namespace: "dashboard" })
    re.compile(
        rf"{_DECL}await\s+getTranslations\s*\(\s*\{{[^}}]*?\bnamespace\s*:\s*{_NS}[^}}]*\}}\s*\)"
    ),
    # await getTranslations("dashboard")
    re.compile(rf"{_DECL}await\s+getTranslations\s*\(\s*{_NS}\s*\)"),
    # await getTranslationsForLocale(locale, "dashboard")
    re.compile(rf"{_DECL}await\s+getTranslationsForLocale\s*\(\s*[^,()]+,\s*{_NS}\s*\)"),
)

_EMPTY_CONSTRUCTIONS = (
    ("useTranslations", BindingOrigin.SYNC),
    ("getTranslations", BindingOrigin.ASYNC),
)

_FUNCTION_DEF_TAIL = re.compile(r"\bfunction\s*\*?\s*$")

# Literal key followed by the end of the argument; "a" + b is not a literal key
_KEY_LITERAL = r"(?:\"(?P<dq>[^\"\n]+)\"|'(?P<sq>[^'\n]+)'|`(?P<bq>[^`]+)`)\s*[,)]"

_IMPORT_PATTERNS = (
    # import X from "p" / import { a, b } from "p" (type-only imports skipped)
    re.compile(r"\bimport\s+(?!type\b)[\w$\s{},*]+?\s+from\s*(?P<q>[\"'])(?P<spec>[^\"'\n]+)(?P=q)"),
    # import "p"
    re.compile(r"\bimport\s*(?P<q>[\"'])(?P<spec>[^\"'\n]+)(?P=q)"),
    # export { a } from "p" / export * from "p"
    re.compile(r"\bexport\s+(?!type\b)[\w$\s{},*]+?\s+from\s*(?P<q>[\"'])(?P<spec>[^\"'\n]+)(?P=q)"),
    # import("p")
    re.compile(r"\bimport\s*\(\s*(?P<q>[\"'`])(?P<spec>[^\"'`\n$]+)(?P=q)\s*\)"),
)


def _is_computed(literal: str) -> bool:
    return "${" in literal


@dataclass(frozen=True, slots=True)
class RegexBindingStrategy:
    """Regular-expression strategy over comment-masked source text.

    Attributes:
        mask: Blank comments before matching (default True)
    """

    mask: bool = True

    def _prepare(self, text: str) -> str:
        return mask_comments(text) if self.mask else text

    def extract_bindings(self, text: str) -> tuple[NamespaceBinding, ...]:
        """Namespace bindings in source order."""
        source = self._prepare(text)
        lines = _LineIndex(source)
        found: list[NamespaceBinding] = []
        patterns = [(_SYNC_BINDING, BindingOrigin.SYNC)]
        patterns.extend((p, BindingOrigin.ASYNC) for p in _ASYNC_BINDINGS)
        for pattern, origin in patterns:
            for match in pattern.finditer(source):
                namespace = match["ns"].strip()
                if not namespace or _is_computed(namespace):
                    continue
                found.append(
                    NamespaceBinding(
                        local_name=match["name"],
                        namespace=namespace,
                        origin=origin,
                        offset=match.start(),
                        line=lines.line(match.start()),
                    )
                )
        found.sort(key=lambda b: b.offset)
        return tuple(found)

    def extract_key_calls(self, text: str, names: Iterable[str]) -> tuple[KeyCall, ...]:
        """Literal-key calls on the given identifiers, in source order."""
        source = self._prepare(text)
        lines = _LineIndex(source)
        calls: list[KeyCall] = []
        for name in sorted(set(names)):
            ident = rf"(?<![\w$.]){re.escape(name)}"
            direct = re.compile(rf"{ident}\s*\(\s*{_KEY_LITERAL}")
            method = re.compile(rf"{ident}\s*\.\s*(?:has|raw|rich)\s*\(\s*{_KEY_LITERAL}")
            for pattern in (direct, method):
                for match in pattern.finditer(source):
                    key = match["dq"] or match["sq"] or match["bq"]
                    if not key or _is_computed(key):
                        continue
                    calls.append(KeyCall(name, key, match.start(), lines.line(match.start())))
        calls.sort(key=lambda c: c.offset)
        return tuple(calls)

    def extract_imports(self, text: str) -> tuple[str, ...]:
        """Every import specifier, deduplicated, in source order."""
        source = self._prepare(text)
        hits: list[tuple[int, str]] = []
        for pattern in _IMPORT_PATTERNS:
            hits.extend((m.start(), m["spec"]) for m in pattern.finditer(source))
        hits.sort()
        return tuple(dict.fromkeys(spec for _, spec in hits))

    def find_unbound_constructions(self, text: str) -> tuple[UnboundConstruction, ...]:
        """Accessor constructions with empty arguments."""
        source = self._prepare(text)
        lines = _LineIndex(source)
        found: list[UnboundConstruction] = []
        for constructor, origin in _EMPTY_CONSTRUCTIONS:
            pattern = re.compile(rf"(?<![\w$.]){constructor}\s*\(\s*\)")
            for match in pattern.finditer(source):
                # A definition such as `function useTranslations()` is not a call
                if _FUNCTION_DEF_TAIL.search(source, 0, match.start()):
                    continue
                found.append(
                    UnboundConstruction(constructor, origin, match.start(), lines.line(match.start()))
                )
        found.sort(key=lambda u: u.offset)
        return tuple(found)


# ==============================================================================
# EXTRACTOR
# ==============================================================================


@dataclass(frozen=True, slots=True)
class KeyExtractor:
    """Per-file extraction with the attribution rules applied.

    Example:
        >>> extractor = KeyExtractor()
        >>> result = extractor.extract('const t = useTranslations("common");\\nt("a.b");')
        >>> dict(result.keys)
        {'common': frozenset({'a.b'})}
    """

    strategy: BindingStrategy = field(default_factory=RegexBindingStrategy)
    settings: ExtractionSettings = field(default_factory=ExtractionSettings)

    def extract_bindings(self, text: str) -> tuple[NamespaceBinding, ...]:
        """Namespace bindings declared in the text."""
        return self.strategy.extract_bindings(text)

    def extract(self, text: str) -> ExtractionResult:
        """Extract bindings, attributed keys and local imports from one file."""
        bindings = self.strategy.extract_bindings(text)
        keys: dict[str, set[str]] = {b.namespace: set() for b in bindings}

        by_name: dict[str, list[NamespaceBinding]] = {}
        for binding in bindings:
            by_name.setdefault(binding.local_name, []).append(binding)
        offsets = {name: [b.offset for b in items] for name, items in by_name.items()}

        for call in self.strategy.extract_key_calls(text, by_name):
            # Nearest binding of this identifier that precedes the call
            idx = bisect.bisect_left(offsets[call.local_name], call.offset) - 1
            if idx < 0:
                continue
            keys[by_name[call.local_name][idx].namespace].add(call.key)

        return ExtractionResult(
            bindings=bindings,
            keys={ns: frozenset(k) for ns, k in keys.items()},
            import_specifiers=self.local_imports(self.strategy.extract_imports(text)),
            unbound=self.strategy.find_unbound_constructions(text),
        )

    def is_local_specifier(self, specifier: str) -> bool:
        """True for relative or aliased specifiers outside the i18n runtime."""
        relative = specifier in (".", "..") or specifier.startswith(("./", "../"))
        aliased = any(specifier.startswith(prefix) for prefix in self.settings.aliases)
        if not (relative or aliased):
            return False
        return self.settings.i18n_segment not in specifier.split("/")

    def local_imports(self, specifiers: Iterable[str]) -> tuple[str, ...]:
        """Keep the specifiers that belong to the walked dependency graph."""
        return tuple(s for s in specifiers if self.is_local_specifier(s))
