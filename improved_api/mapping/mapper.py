# ==============================================================================
# MAPPER - Object to View Model Conversion
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from improved_api.core.exceptions import MappingError
from improved_api.mapping.profile import MapKey, Profile, TypeMap

DestinationType = TypeVar("DestinationType", bound=BaseModel)

logger = logging.getLogger(__name__)


class Mapper:
    """
    Applies the type maps collected from a set of profiles.

    Maps that were not declared are created on first use and copy
    same-named members.
    """

    def __init__(self, profiles: Optional[Iterable[Profile]] = None) -> None:
        self._type_maps: Dict[MapKey, TypeMap] = {}
        for profile in profiles or []:
            self.add_profile(profile)

    def add_profile(self, profile: Profile) -> None:
        self._type_maps.update(profile.type_maps)
        logger.debug(
            f"Added mapping profile '{profile.profile_name}' "
            f"({len(profile.type_maps)} maps)"
        )

    def has_map(self, source: type, destination: Type[BaseModel]) -> bool:
        return (source, destination) in self._type_maps

    def _find_map(self, source: type, destination: Type[BaseModel]) -> TypeMap:
        # Declared maps for a base class apply to its subclasses too
        for klass in source.__mro__:
            type_map = self._type_maps.get((klass, destination))
            if type_map is not None:
                return type_map
        type_map = TypeMap(source, destination)
        self._type_maps[type_map.key] = type_map
        return type_map

    def map(self, source: Any, destination: Type[DestinationType]) -> DestinationType:
        """
        Map one object to the destination model.

        Raises:
            MappingError: If a member resolver fails or the result is invalid
        """
        type_map = self._find_map(type(source), destination)
        values: Dict[str, Any] = {}

        for name in destination.model_fields:
            if name in type_map.ignored:
                continue
            resolver = type_map.resolvers.get(name)
            if resolver is not None:
                try:
                    values[name] = resolver(source)
                except Exception as e:
                    raise MappingError(
                        message=f"Could not resolve member '{name}' of {destination.__name__}",
                        details={"map": repr(type_map), "error": str(e)},
                    )
            elif isinstance(source, dict):
                if name in source:
                    values[name] = source[name]
            elif hasattr(source, name):
                values[name] = getattr(source, name)

        try:
            return destination.model_validate(values)
        except PydanticValidationError as e:
            raise MappingError(
                message=f"Could not map {type(source).__name__} to {destination.__name__}",
                details={"map": repr(type_map), "error": str(e)},
            )

    def map_many(
        self,
        sources: Iterable[Any],
        destination: Type[DestinationType],
    ) -> List[DestinationType]:
        return [self.map(source, destination) for source in sources]
