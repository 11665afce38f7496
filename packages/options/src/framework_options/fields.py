"""Discovery of the bindable fields of an options type."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Final, List, Tuple, get_args, get_origin, get_type_hints

from .constraints import Constraint, Required
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class FieldDescriptor:
    """Binding and validation metadata for one field of an options type.

    Attributes:
        name: Field name, also the key looked up in every source
        declared_type: Declared type with ``Annotated`` metadata stripped
        writable: Whether the loader may assign the field
        required: Whether the field carries a ``Required`` marker
        constraints: Declared value constraints, in annotation order
        required_rule: The ``Required`` marker, when present
    """

    name: str
    declared_type: Any
    writable: bool = True
    required: bool = False
    constraints: Tuple[Constraint, ...] = ()
    required_rule: Required | None = None


def describe_fields(record_type: type) -> List[FieldDescriptor]:
    """Describe the public fields of an options type in declaration order.

    Annotated class attributes (including dataclass fields) come first,
    followed by public properties. A property without a setter, a ``Final``
    attribute, and any field of a frozen dataclass are read-only.

    Args:
        record_type: Options class to inspect

    Returns:
        List of field descriptors

    Raises:
        ConfigurationError: If the type hints of the class cannot be resolved
    """
    try:
        hints = get_type_hints(record_type, include_extras=True)
    except NameError as e:
        raise ConfigurationError(
            f"Cannot resolve field types of {record_type.__name__}: {e}",
            context={"record_type": record_type.__name__},
        ) from e

    frozen = dataclasses.is_dataclass(record_type) and record_type.__dataclass_params__.frozen
    properties = _public_properties(record_type)

    descriptors: List[FieldDescriptor] = []
    for name, hint in hints.items():
        if name.startswith("_") or name in properties or _is_class_var(hint):
            continue
        declared, metadata = _split_annotated(hint)
        final = declared is Final or get_origin(declared) is Final
        if final:
            args = get_args(declared)
            declared = args[0] if args else Any
        descriptors.append(_build(name, declared, metadata, writable=not (frozen or final)))

    for name, prop in properties.items():
        try:
            prop_hints = get_type_hints(prop.fget, include_extras=True) if prop.fget else {}
        except NameError:
            prop_hints = {}
        declared, metadata = _split_annotated(prop_hints.get("return", Any))
        descriptors.append(_build(name, declared, metadata, writable=prop.fset is not None))

    return descriptors


def _build(name: str, declared: Any, metadata: Tuple[Any, ...], writable: bool) -> FieldDescriptor:
    markers = [item for item in metadata if _is_required(item)]
    required_rule = None
    if markers:
        required_rule = markers[0] if isinstance(markers[0], Required) else Required()
    constraints = tuple(
        item for item in metadata if isinstance(item, Constraint) and not _is_required(item)
    )
    return FieldDescriptor(
        name=name,
        declared_type=declared,
        writable=writable,
        required=required_rule is not None,
        constraints=constraints,
        required_rule=required_rule,
    )


def _is_required(item: Any) -> bool:
    return item is Required or isinstance(item, Required)


def _split_annotated(hint: Any) -> Tuple[Any, Tuple[Any, ...]]:
    metadata: Tuple[Any, ...] = ()
    while get_origin(hint) is Annotated:
        args = get_args(hint)
        hint, metadata = args[0], metadata + tuple(args[1:])
    return hint, metadata


def _is_class_var(hint: Any) -> bool:
    hint, _ = _split_annotated(hint)
    return hint is ClassVar or get_origin(hint) is ClassVar


def _public_properties(record_type: type) -> dict:
    found: dict = {}
    for klass in reversed(record_type.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and not name.startswith("_"):
                found[name] = attr
    return found
