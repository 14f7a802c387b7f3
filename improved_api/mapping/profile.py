# ==============================================================================
# MAPPING PROFILES - Source to View Model Maps
# ==============================================================================
# Declarative maps from entities to Pydantic view models
# ==============================================================================

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Set, Tuple, Type

from pydantic import BaseModel

MemberResolver = Callable[[Any], Any]
MapKey = Tuple[type, Type[BaseModel]]


class TypeMap:
    """
    Map from one source type to one destination model.

    Members without an explicit resolver are copied from the source
    attribute of the same name.

    Example:
        >>> profile.create_map(Many, ManyViewModel).for_member(
        ...     "label", lambda m: f"{m.many_id}:{m.one_id}"
        ... )
    """

    def __init__(self, source: type, destination: Type[BaseModel]) -> None:
        self.source = source
        self.destination = destination
        self.resolvers: Dict[str, MemberResolver] = {}
        self.ignored: Set[str] = set()

    @property
    def key(self) -> MapKey:
        return (self.source, self.destination)

    def for_member(self, name: str, map_from: MemberResolver) -> "TypeMap":
        """
        Compute a destination member from the source object.

        Raises:
            ValueError: If the destination has no such field
        """
        self._check_member(name)
        self.resolvers[name] = map_from
        self.ignored.discard(name)
        return self

    def ignore(self, name: str) -> "TypeMap":
        """Leave a destination member to its default value."""
        self._check_member(name)
        self.ignored.add(name)
        self.resolvers.pop(name, None)
        return self

    def _check_member(self, name: str) -> None:
        if name not in self.destination.model_fields:
            raise ValueError(
                f"{self.destination.__name__} has no member '{name}'"
            )

    def __repr__(self) -> str:
        return f"TypeMap({self.source.__name__} -> {self.destination.__name__})"


class Profile:
    """
    Named group of type maps.

    Subclasses declare their maps in ``configure``.

    Example:
        >>> class MappingProfile(Profile):
        ...     def configure(self):
        ...         self.create_map(One, OneViewModel)
    """

    def __init__(self, profile_name: Optional[str] = None) -> None:
        self.profile_name = profile_name or self.__class__.__name__
        self._type_maps: Dict[MapKey, TypeMap] = {}
        self.configure()

    def configure(self) -> None:
        """Declare type maps."""

    def create_map(self, source: type, destination: Type[BaseModel]) -> TypeMap:
        type_map = TypeMap(source, destination)
        self._type_maps[type_map.key] = type_map
        return type_map

    @property
    def type_maps(self) -> Dict[MapKey, TypeMap]:
        return dict(self._type_maps)
