"""React/JSX component source → notation converter.

Parses with the tree-sitter TSX grammar and walks the immutable syntax
tree explicitly. For every PascalCase component it emits::

    COMPONENT Login
      PROP user
      HOOK useState open false
      HOOK useEffect [open]
        CALL track()
      FUNCTION handleSubmit
      VARIABLE title user.name
      RENDER BUTTON
        EVENT onClick login
        TEXT Login
        DYNAMIC user.name

Markup outside any component is rendered at indent 0.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser

from ..lines import TokenLine, create_line, normalize, render_lines
from ..schema import FORMAT_LABELS, InputFormat
from ..utils.errors import ConversionError
from ..utils.logging import logger

__all__ = ["detect", "convert"]

LABEL = FORMAT_LABELS[InputFormat.REACT]
EMPTY = "COMPONENT (empty)"

TSX_LANGUAGE = Language(tstypescript.language_tsx())

_DETECT_PATTERNS = (
    re.compile(r"<[A-Z]"),
    re.compile(r"function\s+[A-Z]\w*\s*\("),
    re.compile(r"const\s+[A-Z]\w*\s*="),
    re.compile(r"""import[^;\n]*from\s+['"](?:react|preact)(?:[-/][\w/-]*)?['"]"""),
)

_COMPONENT_NAME = re.compile(r"^[A-Z][A-Za-z0-9]*$")
_HOOK_NAME = re.compile(r"^use[A-Z]\w*$")

_FUNCTION_TYPES = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
    "class_declaration",
    "class",
})
_INLINE_FUNCTION_TYPES = frozenset({"arrow_function", "function_expression", "function"})
_JSX_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})
_LITERAL_TYPES = frozenset({
    "identifier",
    "property_identifier",
    "shorthand_property_identifier",
    "this",
    "super",
    "number",
    "true",
    "false",
    "null",
    "undefined",
})

_WRAPPERS = frozenset({"memo", "forwardRef"})
_STATE_HOOKS = frozenset({"useState"})
_EFFECT_HOOKS = frozenset({"useEffect", "useLayoutEffect", "useInsertionEffect"})
_DEPENDENCY_HOOKS = frozenset({"useCallback", "useMemo", "useImperativeHandle"})
_CLASS_ATTRIBUTES = frozenset({"className", "class"})


@dataclass(frozen=True)
class _Scope:
    """Body of the component being extracted and the indent of its facts."""

    body: Node
    indent: int


def detect(text: str) -> bool:
    return any(pattern.search(text) for pattern in _DETECT_PATTERNS)


def convert(text: str) -> str:
    try:
        lines = _extract(text)
    except ConversionError as e:
        logger.debug(f"Component conversion failed: {e}")
        return e.to_line()
    return render_lines(lines) or EMPTY


def _extract(text: str) -> list[TokenLine]:
    try:
        source = text.encode("utf-8")
    except UnicodeEncodeError as e:
        # lone surrogates from surrogateescape decoding or \ud800 escapes
        raise ConversionError(LABEL, f"Unencodable character at offset {e.start}") from e

    # Parsers hold per-parse state; the language is shared.
    tree = Parser(TSX_LANGUAGE).parse(source)
    root = tree.root_node
    if root.has_error:
        raise ConversionError(LABEL, _describe_error(root))

    lines: list[TokenLine] = []
    try:
        _walk(root, lines)
    except RecursionError as e:
        raise ConversionError(LABEL, "maximum nesting depth exceeded") from e
    return lines


def _describe_error(root: Node) -> str:
    node = _first_error(root)
    row, column = node.start_point
    where = f"line {row + 1}, column {column + 1}"
    if node.is_missing:
        return f"Missing {node.type} at {where}"
    snippet = normalize(_text(node))[:20]
    if snippet:
        return f"Unexpected token '{snippet}' at {where}"
    return f"Unexpected token at {where}"


def _first_error(node: Node) -> Node:
    # Iterative: broken input can nest thousands of blocks deep.
    while True:
        for child in node.children:
            if child.type == "ERROR" or child.is_missing:
                return child
            if child.has_error:
                node = child
                break
        else:
            return node


# --- Tree walk -----------------------------------------------------------------


def _walk(node: Node, lines: list[TokenLine]) -> None:
    found = _as_component(node)
    if found is not None:
        name, function = found
        _emit_component(name, function, lines)
        return

    if node.type in _JSX_TYPES:
        _render_element(node, lines, 0)
        return

    for child in node.named_children:
        _walk(child, lines)


def _as_component(node: Node) -> tuple[str, Node] | None:
    """Return (name, function node) when ``node`` declares a component."""
    name = node.child_by_field_name("name")
    if name is None or name.type != "identifier" or not _COMPONENT_NAME.match(_text(name)):
        return None

    if node.type == "function_declaration":
        return _text(name), node
    if node.type == "variable_declarator":
        function = _unwrap_function(node.child_by_field_name("value"))
        if function is not None:
            return _text(name), function
    return None


def _unwrap_function(node: Node | None) -> Node | None:
    """Find the function behind ``() => ...``, ``memo(...)`` or ``forwardRef(...)``."""
    if node is None:
        return None
    if node.type in _INLINE_FUNCTION_TYPES:
        return node
    if node.type == "parenthesized_expression":
        return _unwrap_function(_first_named(node))
    if node.type == "call_expression" and _callee_name(node) in _WRAPPERS:
        args = _arguments(node)
        return _unwrap_function(args[0]) if args else None
    return None


def _scoped(node: Node, types: frozenset[str]) -> Iterator[Node]:
    """Descendants of the given types whose nearest enclosing function is ``node``'s."""
    for child in node.named_children:
        if child.type in _FUNCTION_TYPES:
            continue
        if child.type in types:
            yield child
        yield from _scoped(child, types)


# --- Component extraction ------------------------------------------------------


def _emit_component(name: str, function: Node, lines: list[TokenLine]) -> None:
    lines.append(create_line("COMPONENT", name, 0))
    for prop in _parameter_names(function):
        lines.append(create_line("PROP", prop, 1))

    body = function.child_by_field_name("body")
    if body is None:
        return
    scope = _Scope(body=body, indent=1)

    if body.type != "statement_block":
        # Arrow function with an expression body
        for element in _markup_roots(body):
            _render_element(element, lines, scope.indent)
        return

    _emit_hooks(scope, lines)
    _emit_declarations(scope, lines)
    for statement in _scoped(body, frozenset({"return_statement"})):
        for element in _markup_roots(statement):
            _render_element(element, lines, scope.indent)


def _parameter_names(function: Node) -> list[str]:
    params = function.child_by_field_name("parameters")
    if params is None:
        single = function.child_by_field_name("parameter")
        return _pattern_names(single) if single is not None else []
    names: list[str] = []
    for param in params.named_children:
        names.extend(_pattern_names(param))
    return names


def _pattern_names(node: Node) -> list[str]:
    kind = node.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        return [_text(node)]
    if kind in ("required_parameter", "optional_parameter"):
        pattern = node.child_by_field_name("pattern")
        return _pattern_names(pattern) if pattern is not None else []
    if kind in ("assignment_pattern", "object_assignment_pattern"):
        left = node.child_by_field_name("left")
        return _pattern_names(left) if left is not None else []
    if kind == "pair_pattern":
        key = node.child_by_field_name("key")
        return [_text(key)] if key is not None else []
    if kind == "rest_pattern":
        inner = _first_named(node)
        return [f"...{_text(inner)}"] if inner is not None else []
    if kind == "object_pattern":
        names: list[str] = []
        for prop in node.named_children:
            names.extend(_pattern_names(prop))
        return names
    return []


def _emit_hooks(scope: _Scope, lines: list[TokenLine]) -> None:
    for call in _scoped(scope.body, frozenset({"call_expression"})):
        hook = _callee_name(call)
        if not _HOOK_NAME.match(hook):
            continue
        args = _arguments(call)
        binding = _binding_name(call)

        if hook in _STATE_HOOKS:
            initial = _render_expression(args[0]) if args else None
            lines.append(create_line("HOOK", _join(hook, binding, initial), scope.indent))
        elif hook in _EFFECT_HOOKS:
            deps = _render_dependencies(args[1] if len(args) > 1 else None)
            lines.append(create_line("HOOK", _join(hook, deps), scope.indent))
            if args:
                _emit_effect_body(args[0], lines, scope.indent + 1)
        else:
            deps = None
            if hook in _DEPENDENCY_HOOKS and len(args) > 1:
                deps = _render_dependencies(args[-1])
            lines.append(create_line("HOOK", _join(hook, binding, deps), scope.indent))


def _emit_effect_body(callback: Node, lines: list[TokenLine], indent: int) -> None:
    """Shallow listing of an effect callback's top-level calls and functions."""
    function = _unwrap_function(callback)
    if function is None:
        return
    body = function.child_by_field_name("body")
    if body is None:
        return

    if body.type != "statement_block":
        call = _unwrap_call(body)
        if call is not None:
            lines.append(create_line("CALL", _render_expression(call), indent))
        return

    for statement in body.named_children:
        if statement.type == "expression_statement":
            call = _unwrap_call(_first_named(statement))
            if call is not None:
                lines.append(create_line("CALL", _render_expression(call), indent))
        elif statement.type == "function_declaration":
            name = statement.child_by_field_name("name")
            if name is not None:
                lines.append(create_line("FUNCTION", _text(name), indent))
        elif statement.type in ("lexical_declaration", "variable_declaration"):
            for declarator in _declarators(statement):
                if _unwrap_function(declarator.child_by_field_name("value")) is not None:
                    lines.append(create_line("FUNCTION", _binding_text(declarator), indent))


def _emit_declarations(scope: _Scope, lines: list[TokenLine]) -> None:
    for statement in scope.body.named_children:
        if statement.type == "function_declaration":
            name = statement.child_by_field_name("name")
            if name is not None:
                lines.append(create_line("FUNCTION", _text(name), scope.indent))
            continue
        if statement.type not in ("lexical_declaration", "variable_declaration"):
            continue

        for declarator in _declarators(statement):
            name = _binding_text(declarator)
            value = declarator.child_by_field_name("value")
            if value is None:
                lines.append(create_line("VARIABLE", name, scope.indent))
            elif _is_hook_call(value):
                continue
            elif _unwrap_function(value) is not None:
                lines.append(create_line("FUNCTION", name, scope.indent))
            else:
                lines.append(create_line("VARIABLE", _join(name, _render_expression(value)), scope.indent))


def _declarators(statement: Node) -> list[Node]:
    return [c for c in statement.named_children if c.type == "variable_declarator"]


def _is_hook_call(node: Node) -> bool:
    call = _unwrap_call(node)
    return call is not None and bool(_HOOK_NAME.match(_callee_name(call)))


def _binding_name(call: Node) -> str | None:
    """Name a hook result is bound to; the state name for ``[state, setState]``."""
    parent = call.parent
    while parent is not None and parent.type in ("await_expression", "parenthesized_expression", "as_expression"):
        parent = parent.parent
    if parent is None or parent.type != "variable_declarator":
        return None
    target = parent.child_by_field_name("name")
    if target is None:
        return None
    if target.type == "array_pattern":
        first = _first_named(target)
        return _text(first) if first is not None else None
    return _compact(target)


def _binding_text(declarator: Node) -> str:
    target = declarator.child_by_field_name("name")
    return _compact(target) if target is not None else "expression"


# --- Markup rendering ----------------------------------------------------------


def _markup_roots(node: Node) -> Iterator[Node]:
    """Outermost JSX nodes under ``node``, outside nested functions."""
    if node.type in _JSX_TYPES:
        yield node
        return
    if node.type in _FUNCTION_TYPES:
        return
    for child in node.named_children:
        yield from _markup_roots(child)


def _render_element(element: Node, lines: list[TokenLine], indent: int) -> None:
    if element.type == "jsx_self_closing_element":
        opening: Node | None = element
        children: list[Node] = []
    elif element.type == "jsx_element":
        opening = next((c for c in element.named_children if c.type == "jsx_opening_element"), None)
        children = [
            c for c in element.named_children
            if c.type not in ("jsx_opening_element", "jsx_closing_element")
        ]
    else:
        opening = None
        children = list(element.named_children)

    lines.append(create_line("RENDER", _tag_name(opening).upper(), indent))

    if opening is not None:
        for attribute in opening.named_children:
            if attribute.type == "jsx_attribute":
                _render_attribute(attribute, lines, indent + 1)
            elif attribute.type == "jsx_expression":
                # {...props}
                spread = _first_named(attribute)
                value = _render_expression(_first_named(spread)) if spread is not None else "expression"
                lines.append(create_line("PROP", f"...{value}", indent + 1))

    for child in children:
        if child.type == "jsx_text":
            text = normalize(_text(child))
            if text:
                lines.append(create_line("TEXT", text, indent + 1))
        elif child.type == "jsx_expression":
            inner = _first_named(child)
            if inner is not None:
                lines.append(create_line("DYNAMIC", _render_expression(inner), indent + 1))
        elif child.type in _JSX_TYPES:
            lines.append(create_line("CHILD", None, indent + 1))
            _render_element(child, lines, indent + 2)


def _tag_name(opening: Node | None) -> str:
    if opening is None:
        return "fragment"
    name = opening.child_by_field_name("name")
    return _text(name) if name is not None else "fragment"


def _render_attribute(attribute: Node, lines: list[TokenLine], indent: int) -> None:
    parts = attribute.named_children
    if not parts:
        return
    name = _text(parts[0])
    value = _attribute_value(parts[1] if len(parts) > 1 else None)

    if name.startswith("on"):
        lines.append(create_line("EVENT", f"{name} {value}", indent))
    elif name in _CLASS_ATTRIBUTES:
        lines.append(create_line("CLASS", value, indent))
    else:
        lines.append(create_line("PROP", f"{name} {value}", indent))


def _attribute_value(value: Node | None) -> str:
    if value is None:
        return "true"
    if value.type == "string":
        return _string_value(value)
    if value.type == "jsx_expression":
        return _render_expression(_first_named(value))
    return "expression"


# --- Expressions ---------------------------------------------------------------


def _render_expression(node: Node | None) -> str:
    """Best-effort one-token rendering of an expression."""
    if node is None:
        return "expression"
    kind = node.type
    if kind in _LITERAL_TYPES:
        return _text(node)
    if kind == "string":
        return _string_value(node)
    if kind == "template_string":
        if any(c.type == "template_substitution" for c in node.named_children):
            return "expression"
        return _text(node)[1:-1] or '""'
    if kind == "member_expression":
        prop = node.child_by_field_name("property")
        prop_name = _text(prop) if prop is not None else "unknown"
        return f"{_render_expression(node.child_by_field_name('object'))}.{prop_name}"
    if kind == "call_expression":
        return f"{_render_expression(node.child_by_field_name('function'))}()"
    if kind == "array":
        items = [_render_expression(c) for c in node.named_children if c.type != "comment"]
        return f"[{', '.join(items)}]"
    if kind in ("parenthesized_expression", "non_null_expression"):
        return _render_expression(_first_named(node))
    return "expression"


def _render_dependencies(node: Node | None) -> str | None:
    if node is None or node.type != "array":
        return None
    return _render_expression(node)


def _string_value(node: Node) -> str:
    return _text(node)[1:-1] or '""'


def _callee_name(call: Node) -> str:
    callee = call.child_by_field_name("function")
    if callee is None:
        return ""
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        return _text(prop) if prop is not None else ""
    if callee.type == "identifier":
        return _text(callee)
    return ""


def _unwrap_call(node: Node | None) -> Node | None:
    while node is not None and node.type in ("await_expression", "parenthesized_expression"):
        node = _first_named(node)
    if node is not None and node.type == "call_expression":
        return node
    return None


def _arguments(call: Node) -> list[Node]:
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    return [a for a in args.named_children if a.type != "comment"]


# --- Node helpers --------------------------------------------------------------


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def _compact(node: Node) -> str:
    return normalize(_text(node))


def _first_named(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _join(*parts: str | None) -> str:
    return " ".join(part for part in parts if part)
