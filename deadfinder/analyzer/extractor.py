"""Definition and usage extraction from tree-sitter syntax trees."""
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Set

from tree_sitter import Node, Tree

from .heuristics import is_builtin_or_common, is_likely_component
from .parser import LanguageParser, SourceFile

DEFINITION_KINDS = ('component', 'function', 'variable', 'import')


@dataclass(frozen=True)
class Definition:
    """A named declaration located in exactly one file."""
    name: str
    kind: str  # component, function, variable, import
    file_path: str
    line: int
    exported: bool = False

    @property
    def key(self) -> tuple:
        return (self.file_path, self.name)


@dataclass(frozen=True)
class UsageOccurrence:
    """A reference to a name, tagged with its syntactic context."""
    name: str
    file_path: str
    line: int
    context: str  # call, jsx, reference, property, spread, type


@dataclass
class FileAnalysis:
    """Everything one strategy learned about one file.

    Builtins and common-pattern names are dropped on entry, so no strategy
    can leak them into the model.
    """
    file_path: str
    definitions: List[Definition] = field(default_factory=list)
    usages: List[UsageOccurrence] = field(default_factory=list)
    exports: Set[str] = field(default_factory=set)
    _defined: Set[str] = field(default_factory=set, repr=False)

    def add_definition(self, definition: Definition) -> bool:
        """Record a definition; the first definition of a name in a file wins."""
        if is_builtin_or_common(definition.name) or definition.name in self._defined:
            return False
        self._defined.add(definition.name)
        self.definitions.append(definition)
        if definition.exported:
            self.exports.add(definition.name)
        return True

    def add_usage(self, usage: UsageOccurrence) -> None:
        if not is_builtin_or_common(usage.name):
            self.usages.append(usage)

    def add_export(self, name: str) -> None:
        if not is_builtin_or_common(name):
            self.exports.add(name)

    def is_defined(self, name: str) -> bool:
        return name in self._defined

    def finalize(self) -> 'FileAnalysis':
        """Propagate export clauses (``export { foo }``) onto earlier definitions."""
        self.definitions = [
            replace(d, exported=True) if d.name in self.exports and not d.exported else d
            for d in self.definitions
        ]
        return self


class StructuralExtractor:
    """Walk a syntax tree once, labelling definitions and emitting usages."""

    FUNCTION_VALUE_TYPES = {'arrow_function', 'function_expression', 'function', 'generator_function'}
    FUNCTION_DECLARATION_TYPES = {'function_declaration', 'generator_function_declaration'}
    VARIABLE_DECLARATION_TYPES = {'lexical_declaration', 'variable_declaration'}
    # Higher-order wrappers whose result is still a component/function
    WRAPPER_CALLS = {'memo', 'forwardRef', 'React.memo', 'React.forwardRef'}

    JSX_NAME_PARENTS = {'jsx_opening_element', 'jsx_closing_element', 'jsx_self_closing_element'}

    # Parents whose identifier children are always bindings, never usages
    BINDING_PARENTS = {
        'formal_parameters', 'array_pattern', 'rest_pattern',
        'import_clause', 'import_specifier', 'namespace_import', 'import_require_clause',
        'namespace_export',
    }

    # Parent type -> fields that introduce a binding rather than reference one
    BINDING_FIELDS = {
        'variable_declarator': ('name',),
        'function_declaration': ('name',),
        'generator_function_declaration': ('name',),
        'function_expression': ('name',),
        'function': ('name',),
        'generator_function': ('name',),
        'function_signature': ('name',),
        'class_declaration': ('name',),
        'abstract_class_declaration': ('name',),
        'class': ('name',),
        'interface_declaration': ('name',),
        'type_alias_declaration': ('name',),
        'enum_declaration': ('name',),
        'internal_module': ('name',),
        'module': ('name',),
        'type_parameter': ('name',),
        'required_parameter': ('pattern',),
        'optional_parameter': ('pattern',),
        'assignment_pattern': ('left',),
        'pair_pattern': ('value',),
        'catch_clause': ('parameter',),
        'arrow_function': ('parameter',),
        'for_in_statement': ('left',),
        'export_specifier': ('alias',),
    }

    def __init__(self):
        self._parsers: Dict[str, LanguageParser] = {}

    def analyze_file(self, source: SourceFile) -> FileAnalysis:
        """Parse and walk one file.

        Args:
            source: File to analyze

        Returns:
            FileAnalysis for the file

        Raises:
            ParseFailure: If the file does not parse cleanly
        """
        parser = self._parsers.get(source.dialect)
        if parser is None:
            parser = self._parsers[source.dialect] = LanguageParser.for_source(source)
        tree = parser.parse(source)
        return self.extract(tree, source)

    def extract(self, tree: Tree, source: SourceFile) -> FileAnalysis:
        """Walk a parsed tree; each node is visited exactly once.

        Args:
            tree: Parsed tree for ``source``
            source: The file the tree was parsed from

        Returns:
            FileAnalysis with definitions, usages and exported names
        """
        analysis = FileAnalysis(file_path=source.path)

        # (node, parent, exported) frames; tree-sitter child lists carry no
        # parent back-references, so the walk cannot cycle.
        stack = [(tree.root_node, None, False)]

        while stack:
            node, parent, exported = stack.pop()
            node_type = node.type
            child_exported = False

            if node_type == 'import_statement':
                self._handle_import(node, source, analysis)
                # Import bindings are definitions, never usages
                continue

            if node_type == 'export_statement':
                self._handle_export(node, analysis)
                declaration = node.child_by_field_name('declaration')
                for child in reversed(node.children):
                    is_declaration = declaration is not None and child.id == declaration.id
                    stack.append((child, node, is_declaration))
                continue

            if node_type in self.VARIABLE_DECLARATION_TYPES:
                child_exported = exported
            elif node_type == 'variable_declarator':
                self._handle_declarator(node, source, analysis, exported)
            elif node_type in self.FUNCTION_DECLARATION_TYPES:
                self._handle_function(node, source, analysis, exported)
            elif node_type in ('identifier', 'type_identifier', 'shorthand_property_identifier',
                               'property_identifier'):
                context = self._usage_context(node, parent)
                if context:
                    analysis.add_usage(UsageOccurrence(
                        name=self._text(node),
                        file_path=source.path,
                        line=node.start_point[0] + 1,
                        context=context,
                    ))

            for child in reversed(node.children):
                stack.append((child, node, child_exported))

        return analysis.finalize()

    # --- Definitions ---

    def _handle_import(self, node: Node, source: SourceFile, analysis: FileAnalysis):
        """Register each locally bound import name as an ``import`` definition."""
        for child in node.named_children:
            if child.type == 'import_clause':
                for clause_child in child.named_children:
                    if clause_child.type == 'identifier':
                        # import x from 'mod'
                        self._add_import(clause_child, source, analysis)
                    elif clause_child.type == 'namespace_import':
                        # import * as ns from 'mod'
                        for ns_child in clause_child.named_children:
                            if ns_child.type == 'identifier':
                                self._add_import(ns_child, source, analysis)
                    elif clause_child.type == 'named_imports':
                        # import { x, y as z } from 'mod'
                        for specifier in clause_child.named_children:
                            if specifier.type != 'import_specifier':
                                continue
                            local = specifier.child_by_field_name('alias')
                            if local is None:
                                local = specifier.child_by_field_name('name')
                            if local is not None and local.type == 'identifier':
                                self._add_import(local, source, analysis)
            elif child.type == 'import_require_clause':
                # import x = require('mod')
                for clause_child in child.named_children:
                    if clause_child.type == 'identifier':
                        self._add_import(clause_child, source, analysis)
                        break

    def _add_import(self, name_node: Node, source: SourceFile, analysis: FileAnalysis):
        analysis.add_definition(Definition(
            name=self._text(name_node),
            kind='import',
            file_path=source.path,
            line=name_node.start_point[0] + 1,
        ))

    def _handle_export(self, node: Node, analysis: FileAnalysis):
        """Record names exported by clauses and ``export default name``."""
        value = node.child_by_field_name('value')
        if value is not None and value.type == 'identifier':
            analysis.add_export(self._text(value))

        for child in node.named_children:
            if child.type != 'export_clause':
                continue
            for specifier in child.named_children:
                if specifier.type == 'export_specifier':
                    name_node = specifier.child_by_field_name('name')
                    if name_node is not None:
                        analysis.add_export(self._text(name_node))

    def _handle_declarator(self, node: Node, source: SourceFile, analysis: FileAnalysis, exported: bool):
        name_node = node.child_by_field_name('name')
        # Destructuring patterns bind several names; only plain bindings are tracked
        if name_node is None or name_node.type != 'identifier':
            return

        name = self._text(name_node)
        value = node.child_by_field_name('value')
        if value is not None and self._is_function_value(value):
            kind = 'component' if is_likely_component(name, source.text, source.classification_path) else 'function'
        else:
            kind = 'variable'

        analysis.add_definition(Definition(
            name=name,
            kind=kind,
            file_path=source.path,
            line=name_node.start_point[0] + 1,
            exported=exported,
        ))

    def _handle_function(self, node: Node, source: SourceFile, analysis: FileAnalysis, exported: bool):
        name_node = node.child_by_field_name('name')
        if name_node is None:
            return

        name = self._text(name_node)
        kind = 'component' if is_likely_component(name, source.text, source.classification_path) else 'function'
        analysis.add_definition(Definition(
            name=name,
            kind=kind,
            file_path=source.path,
            line=name_node.start_point[0] + 1,
            exported=exported,
        ))

    def _is_function_value(self, value: Node) -> bool:
        """Check whether an initializer evaluates to a function."""
        while value.type == 'parenthesized_expression' and value.named_child_count:
            value = value.named_children[0]

        if value.type in self.FUNCTION_VALUE_TYPES:
            return True

        # memo(() => ...), React.forwardRef(function (props, ref) { ... })
        if value.type == 'call_expression':
            callee = value.child_by_field_name('function')
            arguments = value.child_by_field_name('arguments')
            if callee is not None and arguments is not None and self._text(callee) in self.WRAPPER_CALLS:
                return any(self._is_function_value(arg) for arg in arguments.named_children)

        return False

    # --- Usages ---

    def _usage_context(self, node: Node, parent: Optional[Node]) -> Optional[str]:
        """Return the usage context tag for a name node, or None for bindings."""
        node_type = node.type
        parent_type = parent.type if parent is not None else None

        if node_type == 'shorthand_property_identifier':
            # { updateUrlState } in an object literal
            return 'property'

        if node_type == 'property_identifier':
            # Only markup attribute names count; obj.prop and { key: v } do not
            return 'jsx' if parent_type == 'jsx_attribute' else None

        if parent_type in self.BINDING_PARENTS:
            return None
        binding_fields = self.BINDING_FIELDS.get(parent_type, ())
        if any(self._is_field(parent, f, node) for f in binding_fields):
            return None

        if node_type == 'type_identifier':
            return 'type'
        if parent_type == 'call_expression' and self._is_field(parent, 'function', node):
            return 'call'
        if parent_type == 'member_expression' and self._is_field(parent, 'object', node):
            return 'property'
        if parent_type in self.JSX_NAME_PARENTS:
            return 'jsx'
        if parent_type == 'spread_element':
            return 'spread'
        return 'reference'

    @staticmethod
    def _is_field(parent: Node, field_name: str, node: Node) -> bool:
        child = parent.child_by_field_name(field_name)
        return child is not None and child.id == node.id

    @staticmethod
    def _text(node: Node) -> str:
        return node.text.decode('utf-8')
