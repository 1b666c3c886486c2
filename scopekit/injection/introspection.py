# file: scopekit/injection/introspection.py

import inspect
import logging
import types
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Dict, Iterable, List, Optional, Union, get_args, get_origin

from scopekit.injection.attributes import INJECT_MARKER_ATTR, Inject

logger = logging.getLogger(__name__)


class MemberKind(Enum):
    FIELD = "field"
    PROPERTY = "property"


@dataclass(frozen=True)
class MemberDescriptor:
    """
    One tagged member of a class: what to inject, where, and from which scope.

    attribute is the name actually read and written on the instance. It
    differs from name only for private (double underscore) fields, which
    Python mangles.
    """
    name: str
    service_type: Any
    use_global: bool = False
    kind: MemberKind = MemberKind.FIELD
    has_setter: bool = True
    owner: Optional[type] = None
    attribute: Optional[str] = None

    def __post_init__(self):
        if self.attribute is None:
            object.__setattr__(self, "attribute", self.name)

    def get_value(self, target: Any) -> Any:
        # Unset fields and getters over unset backing attributes read as None
        return getattr(target, self.attribute, None)

    def set_value(self, target: Any, value: Any):
        setattr(target, self.attribute, value)

    @property
    def qualified_name(self) -> str:
        owner = self.owner.__name__ if self.owner is not None else "?"
        return f"{owner}.{self.name}"


class Introspector(ABC):
    """Enumerates the injectable members of a class, inherited ones included."""

    @abstractmethod
    def describe_injectables(self, cls: type) -> List[MemberDescriptor]:
        pass


def _unwrap_optional(hint: Any) -> Any:
    """Optional[X] -> X. Other unions are returned as they are."""
    if get_origin(hint) in (Union, types.UnionType):
        args = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _split_annotated(hint: Any):
    """
    Returns (service_type, Inject marker) for a tagged annotation, or
    (None, None). Accepts Annotated[T, Inject()] and Optional[Annotated[...]].
    """
    if get_origin(hint) is Annotated:
        service_type, *metadata = get_args(hint)
        for item in metadata:
            if isinstance(item, Inject):
                return _unwrap_optional(service_type), item
            if item is Inject:
                return _unwrap_optional(service_type), Inject()
        return None, None

    if get_origin(hint) in (Union, types.UnionType):
        for arg in get_args(hint):
            service_type, marker = _split_annotated(arg)
            if marker is not None:
                return service_type, marker
    return None, None


def _mangle(klass: type, name: str) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{klass.__name__.lstrip('_')}{name}"
    return name


def _annotations_of(obj: Any) -> Dict[str, Any]:
    try:
        return inspect.get_annotations(obj, eval_str=True)
    except Exception as e:
        # Forward references that cannot be resolved stay strings and are
        # therefore never recognised as tagged.
        logger.warning(f"Could not resolve annotations of {getattr(obj, '__qualname__', obj)}: {e}")
        return inspect.get_annotations(obj)


class ReflectiveIntrospector(Introspector):
    """
    Finds tagged members by reflection over the class's MRO, most derived
    class first. All tagged fields are listed before all tagged properties.
    Results are cached per class.
    """

    def __init__(self):
        self._cache: Dict[type, List[MemberDescriptor]] = {}

    def describe_injectables(self, cls: type) -> List[MemberDescriptor]:
        members = self._cache.get(cls)
        if members is None:
            members = self._scan(cls)
            self._cache[cls] = members
        return list(members)

    def clear_cache(self):
        self._cache.clear()

    def _scan(self, cls: type) -> List[MemberDescriptor]:
        chain = [klass for klass in inspect.getmro(cls) if klass is not object]

        found: List[MemberDescriptor] = []
        for klass in chain:
            found.extend(self._fields_of(klass))
        for klass in chain:
            found.extend(self._properties_of(klass))

        # A redeclared member is described once, by its most derived class
        seen = set()
        members = []
        for member in found:
            if member.attribute in seen:
                continue
            seen.add(member.attribute)
            members.append(member)
        return members

    def _fields_of(self, klass: type) -> Iterable[MemberDescriptor]:
        for name, hint in _annotations_of(klass).items():
            service_type, marker = _split_annotated(hint)
            if marker is None:
                continue
            yield MemberDescriptor(
                name=name,
                service_type=service_type,
                use_global=marker.use_global,
                kind=MemberKind.FIELD,
                has_setter=True,
                owner=klass,
                attribute=_mangle(klass, name),
            )

    def _properties_of(self, klass: type) -> Iterable[MemberDescriptor]:
        for name, value in vars(klass).items():
            if not isinstance(value, property) or value.fget is None:
                continue
            marker = getattr(value.fget, INJECT_MARKER_ATTR, None)
            if not isinstance(marker, Inject):
                continue

            hint = _annotations_of(value.fget).get("return")
            if hint is None or isinstance(hint, str):
                logger.warning(
                    f"Property {klass.__name__}.{name} is tagged for injection "
                    f"but its getter has no usable return annotation. Skipping."
                )
                continue
            if get_origin(hint) is Annotated:
                hint = get_args(hint)[0]

            yield MemberDescriptor(
                name=name,
                service_type=_unwrap_optional(hint),
                use_global=marker.use_global,
                kind=MemberKind.PROPERTY,
                has_setter=value.fset is not None,
                owner=klass,
                attribute=name,
            )


class ManualIntrospector(Introspector):
    """
    Explicit, hand-maintained table of injectable members per class.
    Classes without an entry anywhere in their MRO are handed to the
    fallback introspector, if one is given.
    """

    def __init__(self, fallback: Optional[Introspector] = None):
        self._table: Dict[type, List[MemberDescriptor]] = {}
        self.fallback = fallback

    def register(self, cls: type, members: Iterable[MemberDescriptor]):
        self._table[cls] = [
            member if member.owner is not None else _with_owner(member, cls)
            for member in members
        ]

    def describe_injectables(self, cls: type) -> List[MemberDescriptor]:
        members: List[MemberDescriptor] = []
        known = False
        for klass in inspect.getmro(cls):
            if klass in self._table:
                known = True
                members.extend(self._table[klass])
        if not known and self.fallback is not None:
            return self.fallback.describe_injectables(cls)
        return members


def _with_owner(member: MemberDescriptor, owner: type) -> MemberDescriptor:
    return MemberDescriptor(
        name=member.name,
        service_type=member.service_type,
        use_global=member.use_global,
        kind=member.kind,
        has_setter=member.has_setter,
        owner=owner,
        attribute=member.attribute,
    )
