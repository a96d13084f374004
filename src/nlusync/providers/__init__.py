"""Remote NLU provider gateways and their data models."""

from nlusync.providers.luis_gateway import LuisGateway, RemoteGateway
from nlusync.providers.models import (
    AppInfo,
    EntitySpan,
    ExtractedUtterance,
    ModelPayload,
    RemoteVersionDescriptor,
    SubmodelStatus,
    TrainingStatus,
)

__all__ = [
    "AppInfo",
    "EntitySpan",
    "ExtractedUtterance",
    "LuisGateway",
    "ModelPayload",
    "RemoteGateway",
    "RemoteVersionDescriptor",
    "SubmodelStatus",
    "TrainingStatus",
]
