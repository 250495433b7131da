import logging
from typing import Optional, Protocol
from pydantic import ValidationError

from intersim.domain.errors import ConfigurationError
from intersim.domain.models import LiveParameters, ParameterUpdate

logger = logging.getLogger(__name__)


class ParameterProvider(Protocol):
    def current(self) -> LiveParameters:
        ...


class StaticParameters:
    def __init__(self, params: Optional[LiveParameters] = None):
        self.params = params or LiveParameters()

    def current(self) -> LiveParameters:
        return self.params


class ParameterStore:
    """Mutable provider behind the live controls; sampled once per tick."""

    def __init__(self, params: Optional[LiveParameters] = None):
        self._params = params or LiveParameters()

    def current(self) -> LiveParameters:
        return self._params

    def preview(self, update: ParameterUpdate) -> LiveParameters:
        """Validate an update against the current values without applying it."""
        changes = update.model_dump(exclude_none=True)
        try:
            return LiveParameters(**{**self._params.model_dump(), **changes})
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    def update(self, update: ParameterUpdate) -> LiveParameters:
        self._params = self.preview(update)
        logger.info("Live parameters updated: %s", update.model_dump(exclude_none=True))
        return self._params
