"""Tests for the naming, path and content classification heuristics."""
import pytest

from deadfinder.analyzer.heuristics import (
    BUILT_INS,
    is_builtin_or_common,
    is_common_pattern,
    is_entry_point,
    is_hook_name,
    is_likely_component,
)


class TestBuiltinOrCommon:
    """Names that must never enter the model."""

    def test_every_builtin_is_filtered(self):
        """Every table entry is rejected."""
        rejected = [name for name in BUILT_INS if not is_builtin_or_common(name)]
        assert rejected == []

    @pytest.mark.parametrize('name', ['42', 'x', 'Q', '$el', '-flag', ''])
    def test_common_patterns(self, name):
        """Digits, single letters and odd leading characters are filtered."""
        assert is_builtin_or_common(name)

    @pytest.mark.parametrize('name', ['formatPrice', 'UserCard', '_private', 'value1'])
    def test_project_names_pass(self, name):
        assert not is_common_pattern(name)
        assert not is_builtin_or_common(name)


class TestHookName:
    def test_hook_convention(self):
        assert is_hook_name('useToggle')
        assert not is_hook_name('user')
        assert not is_hook_name('useful')
        assert not is_hook_name('Toggle')


class TestLikelyComponent:
    """PascalCase names are components only with markup or hook signals."""

    JSX_CONTENT = "export function Card() {\n  return <div />;\n}\n"

    @pytest.mark.parametrize('content', [
        JSX_CONTENT,
        "'use client'\nexport const x = 1;",
        "const Box = memo(() => null);",
    ])
    def test_lowercase_never_component(self, content):
        """The first-letter rule wins regardless of content."""
        assert not is_likely_component('card', content, 'components/card.tsx')

    def test_jsx_return(self):
        assert is_likely_component('Card', self.JSX_CONTENT, 'widgets/Card.tsx')

    def test_use_client_directive(self):
        assert is_likely_component('Toolbar', '"use client"\nfunction Toolbar() {}', 'widgets/Toolbar.tsx')

    def test_hooks_and_attributes(self):
        content = "function Counter() { const [n, setN] = useState(0); }"
        assert is_likely_component('Counter', content, 'widgets/Counter.tsx')
        assert is_likely_component('Field', "const props = { onChange: f };", 'widgets/Field.tsx')

    def test_forward_ref_and_fragment(self):
        assert is_likely_component('Input', "const Input = forwardRef(render);", 'a/Input.tsx')
        assert is_likely_component('Group', "const Group = () => <>{items}</>;", 'a/Group.tsx')

    def test_entry_point_file(self):
        assert is_likely_component('Dashboard', "function Dashboard() {}", 'app/dashboard/page.tsx')

    def test_plain_pascal_case_function(self):
        """No markup signal at all: routed as a function."""
        content = "export function Parser(input) { return input.split(','); }"
        assert not is_likely_component('Parser', content, 'models/Parser.ts')


class TestEntryPoint:
    """Framework routing and lifecycle conventions."""

    @pytest.mark.parametrize('path', [
        'page.tsx', 'layout.ts', 'route.ts', 'middleware.ts', '_app.tsx', '_document.tsx',
        'not-found.tsx', 'global-error.tsx', 'index.js',
    ])
    def test_conventional_basenames(self, path):
        assert is_entry_point(path)

    @pytest.mark.parametrize('path', [
        'app/dashboard/Chart.tsx',
        'pages/about.tsx',
        'pages/api/users.ts',
        'blog/[slug].tsx',
        'shop/[...all]/Gallery.tsx',
    ])
    def test_routing_roots_and_dynamic_segments(self, path):
        assert is_entry_point(path)

    @pytest.mark.parametrize('path', ['helper123.ts', 'widgets/Button.tsx', 'lib/pager.ts'])
    def test_ordinary_files(self, path):
        assert not is_entry_point(path)

    def test_root_relative_check(self):
        """Directories above the source root do not count."""
        assert not is_entry_point('/home/dev/app/src/widgets/Button.tsx', root='/home/dev/app/src')
        assert is_entry_point('/home/dev/web/src/app/Chart.tsx', root='/home/dev/web/src')
