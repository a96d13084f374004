"""Provider-side data models: versions, app metadata, training status, import payload."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RemoteVersionDescriptor(BaseModel):
    """A model version as reported by the provider."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: str
    last_modified: Optional[str] = Field(default=None, alias="lastModifiedDateTime")
    created: Optional[str] = Field(default=None, alias="createdDateTime")
    training_status: Optional[str] = Field(default=None, alias="trainingStatus")


class AppInfo(BaseModel):
    """Descriptive metadata owned by the remote application."""

    model_config = ConfigDict(extra="ignore")

    name: str
    description: str = ""
    culture: str = "en-us"


class TrainingStatus(str, Enum):
    """Status values reported for a training job or submodel."""

    NOT_STARTED = "NotStarted"
    QUEUED = "Queued"
    IN_PROGRESS = "InProgress"
    SUCCESS = "Success"
    UP_TO_DATE = "UpToDate"
    FAIL = "Fail"

    @classmethod
    def parse(cls, value: str | None) -> "TrainingStatus":
        wanted = str(value or "").lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ValueError(f"Unknown training status: {value!r}")


class SubmodelStatus(BaseModel):
    """Training status of one independently trained submodel."""

    model_id: str
    status: TrainingStatus
    failure_reason: Optional[str] = None

    @classmethod
    def from_response(cls, item: Dict[str, Any]) -> "SubmodelStatus":
        """Build from a LUIS ``{modelId, details: {status, failureReason}}`` item."""
        details = item.get("details")
        if not isinstance(details, dict):
            details = {}
        return cls(
            model_id=str(item.get("modelId", "")),
            status=TrainingStatus.parse(details.get("status") or item.get("status")),
            failure_reason=details.get("failureReason") or item.get("failureReason"),
        )


class EntitySpan(BaseModel):
    """Entity label in provider-native form."""

    model_config = ConfigDict(populate_by_name=True)

    entity: str
    start_pos: int = Field(..., ge=0, alias="startPos")
    end_pos: int = Field(..., alias="endPos")

    @model_validator(mode="after")
    def _check_order(self) -> "EntitySpan":
        if self.end_pos <= self.start_pos:
            raise ValueError(f"endPos ({self.end_pos}) must be greater than startPos ({self.start_pos})")
        return self


class ExtractedUtterance(BaseModel):
    """Training example as submitted to the provider."""

    text: str
    intent: str
    entities: List[EntitySpan] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_spans_within_text(self) -> "ExtractedUtterance":
        for span in self.entities:
            if span.end_pos > len(self.text):
                raise ValueError(
                    f"Span for {span.entity} ends at {span.end_pos}, past text length {len(self.text)}"
                )
        return self


class IntentReference(BaseModel):
    name: str


class ModelPayload(BaseModel):
    """Full application version document submitted on import."""

    model_config = ConfigDict(populate_by_name=True)

    luis_schema_version: str
    version_id: str = Field(..., alias="versionId")
    name: str
    desc: str = ""
    culture: str
    intents: List[IntentReference] = Field(default_factory=list)
    entities: List[Dict[str, Any]] = Field(default_factory=list)
    composites: List[Dict[str, Any]] = Field(default_factory=list)
    closed_lists: List[Dict[str, Any]] = Field(default_factory=list, alias="closedLists")
    bing_entities: List[str] = Field(default_factory=list)
    model_features: List[Dict[str, Any]] = Field(default_factory=list)
    regex_features: List[Dict[str, Any]] = Field(default_factory=list)
    utterances: List[ExtractedUtterance] = Field(default_factory=list)

    def to_request(self) -> Dict[str, Any]:
        """Serialize with provider field names."""
        return self.model_dump(mode="json", by_alias=True)
