# ==============================================================================
# STARTUP
# ==============================================================================

from __future__ import annotations

from typing import Optional

from improved_api.api.startup import ImprovedStartup
from improved_api.core.settings import Settings

from foreign_key_example.api import (
    CategoryController,
    ManyController,
    OneController,
    ToOneController,
)
from foreign_key_example.database import ExampleContext
from foreign_key_example.mapping import MappingProfile


class Startup(ImprovedStartup):
    """
    Wires the example application.

    Authentication is requested here and becomes active as soon as the
    TOKEN_CONFIGURATION section is configured.
    """

    authentication_enabled = True

    def __init__(
        self,
        settings: Optional[Settings] = None,
        authentication_enabled: Optional[bool] = None,
        swagger_enabled: Optional[bool] = None,
    ) -> None:
        super().__init__(settings)
        if authentication_enabled is not None:
            self.authentication_enabled = authentication_enabled
        if swagger_enabled is not None:
            self.swagger_enabled = swagger_enabled

        self.mediator_modules.append("foreign_key_example.handlers")
        self.mapping_profiles.append(MappingProfile())
        self.controllers.extend(
            [CategoryController, OneController, ManyController, ToOneController]
        )

    def create_context(self) -> ExampleContext:
        return ExampleContext(self.settings)
