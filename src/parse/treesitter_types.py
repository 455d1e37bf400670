"""Tree-sitter based type descriptor extraction for layerlint.

Derives the field, visibility and method-signature information the
structural checks need from the same syntax tree used for imports, so
analyzed code is never imported or executed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from extract.models import (
    FieldDescriptor,
    MethodDescriptor,
    ParameterDescriptor,
    TypeDescriptor,
    TypeKind,
)
from parse.treesitter_parser import node_text

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node

_INTERFACE_BASES = frozenset({"Protocol", "ABC"})
_INTERFACE_METACLASSES = frozenset({"ABCMeta"})
_FROZEN_BASES = frozenset({"NamedTuple"})
_RECEIVERLESS_DECORATORS = frozenset({"staticmethod"})
_NESTED_SCOPES = frozenset({"function_definition", "class_definition", "lambda"})


def _last_segment(name: str) -> str:
    return name.rsplit(".", 1)[-1]


def is_exported(name: str) -> bool:
    """Python visibility convention: a leading underscore marks private names."""
    return bool(name) and not name.startswith("_")


def iter_top_level_definitions(root: Node) -> Iterator[tuple[Node, list[Node]]]:
    """Yield (definition, decorators) for module-level classes and functions."""
    for child in root.children:
        if child.type == "decorated_definition":
            definition = child.child_by_field_name("definition")
            if definition is None:
                continue
            decorators = [c for c in child.children if c.type == "decorator"]
            yield definition, decorators
        elif child.type in ("class_definition", "function_definition"):
            yield child, []


def definition_name(node: Node) -> str:
    return node_text(node.child_by_field_name("name"))


def _extract_bases(node: Node) -> tuple[list[str], str | None]:
    """Extract base class names and the metaclass from a class definition.

    Returns base names as written in source (subscripted generics reduced to
    their base, e.g. Protocol[T] -> Protocol) and the metaclass, if any.
    """
    superclasses = node.child_by_field_name("superclasses")
    if superclasses is None:
        return [], None

    bases: list[str] = []
    metaclass: str | None = None
    for child in superclasses.children:
        if child.type in ("identifier", "attribute"):
            bases.append(node_text(child))
        elif child.type == "subscript":
            bases.append(node_text(child.child_by_field_name("value")))
        elif child.type == "call":
            bases.append(node_text(child.child_by_field_name("function")))
        elif child.type == "keyword_argument":
            if node_text(child.child_by_field_name("name")) == "metaclass":
                metaclass = node_text(child.child_by_field_name("value"))

    return [base for base in bases if base], metaclass


def _decorator_names(decorators: list[Node]) -> list[str]:
    """Decorator expressions without the leading '@' and call arguments."""
    names: list[str] = []
    for decorator in decorators:
        text = node_text(decorator).lstrip("@").strip()
        names.append(text.split("(", 1)[0].strip())
    return names


def _is_frozen(bases: list[str], decorators: list[Node]) -> bool:
    if any(_last_segment(base) in _FROZEN_BASES for base in bases):
        return True
    for decorator in decorators:
        text = node_text(decorator).replace(" ", "")
        name = _last_segment(text.lstrip("@").split("(", 1)[0])
        if name in ("dataclass", "define") and "frozen=True" in text:
            return True
        if name == "frozen":
            return True
    return False


def _type_kind(bases: list[str], metaclass: str | None) -> TypeKind:
    if any(_last_segment(base) in _INTERFACE_BASES for base in bases):
        return "interface"
    if metaclass is not None and _last_segment(metaclass) in _INTERFACE_METACLASSES:
        return "interface"
    return "class"


def _parameter_name_and_annotation(node: Node) -> tuple[str, str | None] | None:
    """Name and annotation of one entry of a `parameters` node."""
    if node.type == "identifier":
        return node_text(node), None
    if node.type in ("list_splat_pattern", "dictionary_splat_pattern"):
        return node_text(node), None
    if node.type == "typed_parameter":
        name_node = next(
            (
                c
                for c in node.named_children
                if c.type
                in ("identifier", "list_splat_pattern", "dictionary_splat_pattern")
            ),
            None,
        )
        if name_node is None:
            return None
        annotation = node_text(node.child_by_field_name("type")) or None
        return node_text(name_node), annotation
    if node.type in ("default_parameter", "typed_default_parameter"):
        name = node_text(node.child_by_field_name("name"))
        annotation = node_text(node.child_by_field_name("type")) or None
        return name, annotation
    # keyword_separator, positional_separator, comments
    return None


def _method_parameters(
    node: Node, decorator_names: list[str]
) -> tuple[str | None, list[ParameterDescriptor]]:
    """Return the receiver name (if any) and the remaining parameters."""
    params_node = node.child_by_field_name("parameters")
    params: list[ParameterDescriptor] = []
    if params_node is not None:
        for child in params_node.named_children:
            entry = _parameter_name_and_annotation(child)
            if entry is not None:
                params.append(ParameterDescriptor(name=entry[0], annotation=entry[1]))

    has_receiver = not any(
        _last_segment(name) in _RECEIVERLESS_DECORATORS for name in decorator_names
    )
    if has_receiver and params:
        return params[0].name, params[1:]
    return None, params


def _iter_scope_nodes(node: Node) -> Iterator[Node]:
    """Walk a function body without descending into nested scopes."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        if current.type in _NESTED_SCOPES:
            continue
        stack.extend(reversed(current.children))


def _assignment_targets(left: Node) -> list[Node]:
    if left.type in ("pattern_list", "tuple_pattern", "list_pattern"):
        return list(left.named_children)
    return [left]


def _receiver_fields(
    body: Node,
    receiver: str,
    init_annotations: dict[str, str | None],
) -> list[FieldDescriptor]:
    """Fields created by `receiver.<name> = ...` assignments in a method body."""
    fields: list[FieldDescriptor] = []
    for node in _iter_scope_nodes(body):
        if node.type != "assignment":
            continue
        left = node.child_by_field_name("left")
        if left is None:
            continue
        explicit = node_text(node.child_by_field_name("type")) or None
        right = node.child_by_field_name("right")
        for target in _assignment_targets(left):
            if target.type != "attribute":
                continue
            if node_text(target.child_by_field_name("object")) != receiver:
                continue
            name = node_text(target.child_by_field_name("attribute"))
            annotation = explicit
            if annotation is None and right is not None and right.type == "identifier":
                annotation = init_annotations.get(node_text(right))
            fields.append(
                FieldDescriptor(
                    name=name, annotation=annotation, exported=is_exported(name)
                )
            )
    return fields


def _class_level_field(statement: Node) -> FieldDescriptor | None:
    """An annotated class attribute (`name: T` or `name: T = value`)."""
    if statement.type != "expression_statement" or not statement.named_children:
        return None
    assignment = statement.named_children[0]
    if assignment.type != "assignment":
        return None
    left = assignment.child_by_field_name("left")
    annotation = node_text(assignment.child_by_field_name("type"))
    if left is None or left.type != "identifier" or not annotation:
        return None
    if _last_segment(annotation.split("[", 1)[0]) == "ClassVar":
        return None
    name = node_text(left)
    return FieldDescriptor(name=name, annotation=annotation, exported=is_exported(name))


def _iter_class_members(body: Node) -> Iterator[tuple[Node, list[Node]]]:
    for child in body.children:
        if child.type == "decorated_definition":
            definition = child.child_by_field_name("definition")
            if definition is not None:
                yield definition, [c for c in child.children if c.type == "decorator"]
        else:
            yield child, []


def build_type_descriptor(
    node: Node,
    decorators: list[Node],
    module_name: str,
) -> TypeDescriptor:
    """Describe a class definition node."""
    name = definition_name(node)
    bases, metaclass = _extract_bases(node)

    class_fields: list[FieldDescriptor] = []
    methods: list[MethodDescriptor] = []
    method_bodies: list[tuple[str, Node]] = []
    init_annotations: dict[str, str | None] = {}

    body = node.child_by_field_name("body")
    if body is not None:
        for member, member_decorators in _iter_class_members(body):
            if member.type == "function_definition":
                method_name = definition_name(member)
                receiver, params = _method_parameters(
                    member, _decorator_names(member_decorators)
                )
                returns = node_text(member.child_by_field_name("return_type")) or None
                methods.append(
                    MethodDescriptor(
                        name=method_name, parameters=tuple(params), returns=returns
                    )
                )
                if method_name == "__init__":
                    init_annotations = {p.name: p.annotation for p in params}
                member_body = member.child_by_field_name("body")
                if receiver is not None and member_body is not None:
                    method_bodies.append((receiver, member_body))
            else:
                field = _class_level_field(member)
                if field is not None:
                    class_fields.append(field)

    instance_fields: list[FieldDescriptor] = []
    for receiver, member_body in method_bodies:
        instance_fields.extend(_receiver_fields(member_body, receiver, init_annotations))

    unique_fields: dict[str, FieldDescriptor] = {}
    for field in (*class_fields, *instance_fields):
        unique_fields.setdefault(field.name, field)

    qualified_name = f"{module_name}.{name}" if module_name else name
    return TypeDescriptor(
        name=name,
        qualified_name=qualified_name,
        kind=_type_kind(bases, metaclass),
        bases=tuple(bases),
        frozen=_is_frozen(bases, decorators),
        fields=tuple(unique_fields.values()),
        methods=tuple(methods),
    )


def extract_type_descriptors(root: Node, module_name: str) -> list[TypeDescriptor]:
    """Build descriptors for every module-level class in a parsed module."""
    return [
        build_type_descriptor(node, decorators, module_name)
        for node, decorators in iter_top_level_definitions(root)
        if node.type == "class_definition"
    ]


__all__ = [
    "build_type_descriptor",
    "definition_name",
    "extract_type_descriptors",
    "is_exported",
    "iter_top_level_definitions",
]
