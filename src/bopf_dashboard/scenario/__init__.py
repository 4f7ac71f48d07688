"""Scenario inputs and the session scenario store."""

from .inputs import ScenarioInput, coerce_field  # noqa
from .store import ScenarioStore  # noqa

__all__ = ["ScenarioInput", "ScenarioStore", "coerce_field"]
