"""Data models for the local intent corpus and extracted utterances."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EntityDeclaration(BaseModel):
    """An entity an intent's utterances may reference by name."""

    model_config = ConfigDict(extra="forbid")

    name: str
    type: str


class Intent(BaseModel):
    """A locally authored intent with its canonical training utterances."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    utterances: List[str] = Field(default_factory=list)
    entities: List[EntityDeclaration] = Field(default_factory=list)


class LabelSpan(BaseModel):
    """Entity label over extracted text, typed with the internal entity type."""

    type: str
    start: int = Field(..., ge=0)
    end: int
    value: str = ""

    @model_validator(mode="after")
    def _check_bounds(self) -> "LabelSpan":
        if self.end <= self.start:
            raise ValueError(f"Label end ({self.end}) must be greater than start ({self.start})")
        return self


class ExtractionResult(BaseModel):
    """Plain text plus labels produced from a canonical utterance."""

    text: str
    labels: List[LabelSpan] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_labels_within_text(self) -> "ExtractionResult":
        for label in self.labels:
            if label.end > len(self.text):
                raise ValueError(
                    f"Label {label.type} [{label.start}, {label.end}) exceeds text length {len(self.text)}"
                )
        return self
