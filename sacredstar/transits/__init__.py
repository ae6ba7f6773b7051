"""Transit journeys: ingresses, aspects and lunations over time."""

from .calculate import calculate
from .journeys import aspect_journey, ingress_journey, journey_fraction
from .models import (
    AspectTransit,
    IngressTransit,
    LunationTransit,
    Transit,
    TransitKind,
    transit_from_dict,
)

__all__ = [
    "AspectTransit",
    "IngressTransit",
    "LunationTransit",
    "Transit",
    "TransitKind",
    "aspect_journey",
    "calculate",
    "ingress_journey",
    "journey_fraction",
    "transit_from_dict",
]
