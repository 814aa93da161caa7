"""Classification heuristics for React / Next.js source files.

Pure functions over names, paths and file content. The tables below are
process-wide constants and are never mutated.
"""
import re
from pathlib import Path, PurePath
from typing import Optional

# Identifiers that are never reported as definitions nor recorded as usages
BUILT_INS = frozenset({
    # React core
    "React", "useState", "useEffect", "useContext", "useReducer", "useCallback", "useMemo",
    "useRef", "useImperativeHandle", "useLayoutEffect", "useDebugValue", "useDeferredValue",
    "useTransition", "useId", "useSyncExternalStore", "useInsertionEffect", "Fragment",
    "Suspense", "ErrorBoundary", "StrictMode", "Profiler", "memo", "forwardRef", "lazy",
    "createElement", "cloneElement", "createContext", "Children", "isValidElement", "createRef",

    # Next.js
    "NextPage", "GetServerSideProps", "GetStaticProps", "GetStaticPaths",
    "InferGetServerSidePropsType", "InferGetStaticPropsType", "NextApiRequest",
    "NextApiResponse", "NextPageContext", "AppProps", "AppContext", "Head", "Html", "Main",
    "NextScript", "Document", "App", "Router", "Image", "Link", "useRouter", "usePathname",
    "useSearchParams", "useSelectedLayoutSegment", "useSelectedLayoutSegments",
    "useServerInsertedHTML", "redirect", "notFound",

    # HTML / SVG tags
    "div", "span", "p", "h1", "h2", "h3", "h4", "h5", "h6", "a", "img", "button", "input",
    "form", "ul", "li", "ol", "table", "tr", "td", "th", "thead", "tbody", "section",
    "article", "header", "footer", "nav", "main", "aside", "figure", "figcaption",
    "blockquote", "code", "pre", "strong", "em", "b", "i", "u", "mark", "small", "sub",
    "sup", "br", "hr", "iframe", "canvas", "svg", "path", "circle", "rect", "g", "line",
    "polyline", "polygon", "text", "ellipse",

    # JavaScript globals and keywords
    "console", "window", "document", "localStorage", "sessionStorage", "setTimeout",
    "setInterval", "clearTimeout", "clearInterval", "fetch", "Promise", "async", "await",
    "try", "catch", "finally", "if", "else", "for", "while", "do", "switch", "case",
    "default", "break", "continue", "return", "throw", "new", "typeof", "instanceof",
    "delete", "void", "null", "undefined", "true", "false", "this", "Array", "Object",
    "String", "Number", "Boolean", "Map", "Set", "Date", "Math", "JSON", "RegExp", "Error",
    "Function", "Symbol", "Proxy", "Reflect", "WeakMap", "WeakSet", "Intl", "WebAssembly",
    "decodeURI", "encodeURI", "decodeURIComponent", "encodeURIComponent", "isNaN",
    "isFinite", "parseFloat", "parseInt", "eval", "isPrototypeOf", "hasOwnProperty",
    "valueOf", "toString", "toLocaleString", "constructor", "prototype", "require",
    "module", "exports", "process", "super", "of", "in", "yield", "with", "get", "set",

    # TypeScript keywords
    "interface", "type", "enum", "namespace", "declare", "export", "import", "from", "as",
    "extends", "implements", "public", "private", "protected", "readonly", "abstract",
    "static", "function", "const", "let", "var", "class", "keyof", "infer", "satisfies",
    "any", "unknown", "never", "string", "number", "boolean", "object", "symbol", "bigint",

    # Common third-party helpers
    "axios", "clsx", "zod", "reactHookForm", "useForm", "useTranslations", "useLocale",
    "cn", "classNames", "twMerge", "z",
})

HOOK_NAME_RE = re.compile(r'^use[A-Z]\w*$')

_DIGITS_RE = re.compile(r'^\d+$')
_SINGLE_LETTER_RE = re.compile(r'^[A-Za-z]$')
_NON_IDENTIFIER_START_RE = re.compile(r'^[^A-Za-z_]')

# Content signals for component detection
_JSX_RETURN_RE = re.compile(r'return\s*\(?\s*<[A-Za-z>]')
_HOOK_REFERENCE_RE = re.compile(r'\buse[A-Z]\w*\s*\(')
_JSX_ATTRIBUTE_RE = re.compile(r'className|onClick|onSubmit|onChange|style')
_FRAGMENT_RE = re.compile(r'<Fragment>|<\w+\.Fragment>|<>')
_MEMO_RE = re.compile(r'\bmemo\(')
_FORWARD_REF_RE = re.compile(r'\bforwardRef\(')
_USE_CLIENT_RE = re.compile(r'''^\s*['"]use client['"]''', re.MULTILINE)

COMPONENT_DIRECTORIES = frozenset({'components', 'component', 'ui'})

SOURCE_EXTENSIONS = ('.tsx', '.ts', '.jsx', '.js', '.mjs', '.cjs')

# App Router and Pages Router file conventions
ENTRY_POINT_STEMS = frozenset({
    'page', 'layout', 'loading', 'error', 'not-found', 'route', 'middleware',
    'template', 'global-error', 'default',
    '_app', '_document', '_error', 'index',
})

ROUTING_ROOTS = frozenset({'app', 'pages'})


def is_common_pattern(name: str) -> bool:
    """Check for names too generic to track (digits, single letters, odd starts)."""
    return bool(
        _DIGITS_RE.match(name)
        or _SINGLE_LETTER_RE.match(name)
        or _NON_IDENTIFIER_START_RE.match(name)
    )


def is_builtin_or_common(name: str) -> bool:
    """Return True if a name must never enter the definition/usage model.

    Args:
        name: Identifier to test

    Returns:
        True for builtins and common-pattern names (including the empty string)
    """
    if not name:
        return True
    return name in BUILT_INS or is_common_pattern(name)


def is_hook_name(name: str) -> bool:
    """Check the hook naming convention (``use`` + capitalized word)."""
    return bool(HOOK_NAME_RE.match(name))


def is_likely_component(name: str, file_content: str, file_path: str | Path) -> bool:
    """Decide whether a PascalCase definition is a React component.

    Anything not starting with an uppercase letter is a plain function,
    whatever the content says.

    Args:
        name: Definition name
        file_content: Full text of the defining file
        file_path: Path of the defining file

    Returns:
        True if the definition should be reported as a component
    """
    if not name or not name[0].isupper():
        return False

    if _USE_CLIENT_RE.search(file_content):
        return True

    if is_entry_point(file_path):
        return True

    if _JSX_RETURN_RE.search(file_content):
        return True

    uses_hooks = bool(_HOOK_REFERENCE_RE.search(file_content))
    uses_attributes = bool(_JSX_ATTRIBUTE_RE.search(file_content))

    if (uses_hooks or uses_attributes
            or _FRAGMENT_RE.search(file_content)
            or _MEMO_RE.search(file_content)
            or _FORWARD_REF_RE.search(file_content)):
        return True

    directories = {part.lower() for part in PurePath(file_path).parent.parts}
    if directories & COMPONENT_DIRECTORIES and (uses_hooks or uses_attributes):
        return True

    return False


def _is_dynamic_segment(segment: str) -> bool:
    return segment.startswith('[') and segment.endswith(']')


def is_entry_point(file_path: str | Path, root: Optional[str | Path] = None) -> bool:
    """Check whether a file is a framework routing or lifecycle entry point.

    Args:
        file_path: Path to the file
        root: Optional source root; directory checks use the path relative to it

    Returns:
        True if the naming or location convention alone makes the file reachable
    """
    path = PurePath(file_path)
    if root is not None:
        try:
            path = path.relative_to(PurePath(root))
        except ValueError:
            pass

    suffix = path.suffix.lower()
    stem = path.name[:-len(suffix)] if suffix else path.name

    if suffix in SOURCE_EXTENSIONS and stem in ENTRY_POINT_STEMS:
        return True

    directories = path.parts[:-1]
    if any(part in ROUTING_ROOTS for part in directories):
        return True

    # Dynamic segments ([slug].tsx, [...all]/page.tsx)
    if _is_dynamic_segment(stem) or any(_is_dynamic_segment(part) for part in directories):
        return True

    return False
