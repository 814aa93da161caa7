"""Regular-expression templates shared by the lexical strategy and the
cross-reference checks.

All patterns are compiled once at import time. Text helpers that blank out
regions keep the original length (newlines included) so match offsets and
line numbers in the result still point into the raw file.
"""
import re

IDENT = r'[A-Za-z_$][\w$]*'

# Naive comment stripping: string and regex literals containing comment-like
# sequences ('http://...') are NOT respected.
SINGLE_LINE_COMMENT_RE = re.compile(r'//.*$', re.MULTILINE)
BLOCK_COMMENT_RE = re.compile(r'/\*[\s\S]*?\*/')

# Whole import statements, including multi-line named import lists
IMPORT_STATEMENT_RE = re.compile(
    r'''\bimport\s+(?:type\s+)?[^;'"`]*?\s*from\s*['"`][^'"`]*['"`]'''
    r'''|\bimport\s+''' + IDENT + r'''\s*=\s*require\s*\(\s*['"`][^'"`]*['"`]\s*\)'''
)

EXPORT_CLAUSE_RE = re.compile(r'\bexport\s+(?:type\s+)?\{[^}]*\}')

# The declaring spelling of a name: its keyword form, or a later entry in a
# declaration list (const a = 1, b = 2). `==` and `=>` are not declarations.
DECLARATION_SITE_TEMPLATE = (
    r'\b(?:function(?:\s*\*\s*|\s+)|(?:class|interface|type|enum|const|let|var)\s+){name}\b'
    r'|,\s*{name}\s*(?::[^=\n;,]+)?=(?![=>])'
)

# Definition templates, applied in order per category. Group 1 is the name.
# Right-hand side of a function-valued binding: (a, b) => / a => / function
_FUNCTION_VALUE = (
    r'\s*(?::[^=\n]+)?=\s*(?:async\s*)?'
    r'(?:\([^)]*\)\s*(?::[^=\n]+)?=>|' + IDENT + r'\s*=>|function\b)'
)

COMPONENT_PATTERNS = [
    re.compile(r'\bexport\s+default\s+function\s+([A-Z]\w*)\s*[(<]'),
    re.compile(r'\bexport\s+(?:const|let|var)\s+([A-Z]\w*)' + _FUNCTION_VALUE),
    re.compile(r'\bexport\s+function\s+([A-Z]\w*)\s*[(<]'),
    re.compile(r'\b(?:const|let|var)\s+([A-Z]\w*)' + _FUNCTION_VALUE),
    re.compile(r'\b(?:const|let|var)\s+([A-Z]\w*)\s*=\s*(?:React\.)?(?:memo|forwardRef)\s*\('),
    re.compile(r'\bfunction\s+([A-Z]\w*)\s*[(<]'),
]

FUNCTION_PATTERNS = [
    re.compile(r'\bfunction(?:\s*\*\s*|\s+)([a-z_$][\w$]*)\s*[(<]'),
    re.compile(r'\b(?:const|let|var)\s+([a-z_$][\w$]*)' + _FUNCTION_VALUE),
    re.compile(r'\bexport\s+(?:async\s+)?function(?:\s*\*\s*|\s+)([a-z_$][\w$]*)\s*[(<]'),
    re.compile(r'\bexport\s+(?:const|let|var)\s+([a-z_$][\w$]*)' + _FUNCTION_VALUE),
]

VARIABLE_PATTERNS = [
    re.compile(r'\bexport\s+(?:const|let|var)\s+(' + IDENT + r')\s*(?::[^=\n]+)?='),
    re.compile(r'^[ \t]*(?:const|let|var)\s+(' + IDENT + r')\s*(?::[^=\n]+)?=', re.MULTILINE),
]

# import { a, b as c } from 'x'  /  import type { T } from 'x'
NAMED_IMPORT_RE = re.compile(r'''\bimport\s+(?:type\s+)?\{([^}]*)\}\s*from\s*['"`][^'"`]+['"`]''')
# import x from 'y'  /  import x, { a } from 'y'  /  import x, * as ns from 'y'
DEFAULT_IMPORT_RE = re.compile(
    r'''\bimport\s+(?:type\s+)?(''' + IDENT + r''')\s*(?:,\s*(?:\{([^}]*)\}|\*\s*as\s+(''' + IDENT + r''')))?\s*from\s*['"`][^'"`]+['"`]'''
)
# import * as ns from 'y'
NAMESPACE_IMPORT_RE = re.compile(r'''\bimport\s+\*\s*as\s+(''' + IDENT + r''')\s*from\s*['"`][^'"`]+['"`]''')
# import x = require('y')
REQUIRE_IMPORT_RE = re.compile(r'''\bimport\s+(''' + IDENT + r''')\s*=\s*require\s*\(''')

# Names a file exports, for the lexical exported set
EXPORTED_DECLARATION_RE = re.compile(
    r'\bexport\s+(?:default\s+)?(?:async\s+)?(?:function\s*\*?|class|const|let|var)\s+(' + IDENT + r')'
)
EXPORT_DEFAULT_NAME_RE = re.compile(r'\bexport\s+default\s+(' + IDENT + r')\s*;?\s*$', re.MULTILINE)

# Usage battery: (context, pattern). Every capture group that matched is a name.
USAGE_PATTERNS = [
    # <ComponentName /> or <div>
    ('jsx', re.compile(r'<\s*(' + IDENT + r')(?=[\s/>.])')),
    # functionName(
    ('call', re.compile(r'\b(' + IDENT + r')\s*\(')),
    # object.property
    ('property', re.compile(r'\b(' + IDENT + r')\s*\??\.(?!\.)')),
    # bare word
    ('reference', re.compile(r'\b(' + IDENT + r')\b')),
    # setValue: updateUrlState
    ('property', re.compile(r'\b' + IDENT + r'\s*:\s*(' + IDENT + r')\b')),
    # { updateUrlState } / { a, updateUrlState }
    ('property', re.compile(r'[{,]\s*(' + IDENT + r')\s*(?=[,}])')),
    # <Component prop={handleSearchValue} />
    ('jsx', re.compile(r'\b' + IDENT + r'\s*=\s*\{\s*(' + IDENT + r')\s*\}')),
    # export default updateUrlState
    ('reference', re.compile(r'\bexport\s+default\s+(' + IDENT + r')')),
    # export default withSomething(updateUrlState)
    ('call', re.compile(r'\bwith[A-Z]\w*\(\s*(' + IDENT + r')\s*\)')),
    # {...updateUrlState}
    ('spread', re.compile(r'\.\.\.\s*(' + IDENT + r')')),
    # param: TypeName
    ('type', re.compile(r':\s*([A-Z]\w*)\b')),
    # Array<TypeName> / Record<Key, Value>
    ('type', re.compile(r'<\s*([A-Z]\w*)\s*(?=[,>\[])')),
    # interface X extends Base / class X implements Contract
    ('type', re.compile(r'\b(?:extends|implements)\s+([A-Z]\w*)')),
]


def _blank(match: re.Match) -> str:
    """Replace a match with spaces, keeping its newlines."""
    return re.sub(r'[^\n]', ' ', match.group(0))


def strip_comments(content: str) -> str:
    """Remove single-line then block comments, preserving line structure."""
    result = SINGLE_LINE_COMMENT_RE.sub('', content)
    return BLOCK_COMMENT_RE.sub(lambda m: '\n' * m.group(0).count('\n'), result)


def mask_imports(content: str) -> str:
    """Blank out import statements so imported names are not self-usages."""
    return IMPORT_STATEMENT_RE.sub(_blank, content)


def mask_export_clauses(content: str) -> str:
    """Blank out ``export { a, b }`` clauses."""
    return EXPORT_CLAUSE_RE.sub(_blank, content)


def declaration_site_re(name: str) -> re.Pattern:
    """Pattern matching the declaring spelling of one name (``const name``)."""
    return re.compile(DECLARATION_SITE_TEMPLATE.format(name=re.escape(name)))


ANY_DECLARATION_SITE_RE = re.compile(DECLARATION_SITE_TEMPLATE.format(name=IDENT))


def mask_declaration_sites(content: str, name: str = None) -> str:
    """Blank out the declaring spelling of ``name`` (or of every name)."""
    pattern = ANY_DECLARATION_SITE_RE if name is None else declaration_site_re(name)
    return pattern.sub(_blank, content)


def line_at(content: str, index: int) -> int:
    """1-based line number of a character offset."""
    return content.count('\n', 0, index) + 1


def split_import_list(import_list: str) -> list:
    """Local names bound by ``a, b as c, type T`` (-> ['a', 'c', 'T'])."""
    names = []
    for item in import_list.split(','):
        item = item.strip()
        if not item:
            continue
        if item.startswith('type '):
            item = item[len('type '):].strip()
        if ' as ' in item:
            item = item.split(' as ')[-1].strip()
        names.append(item)
    return names
