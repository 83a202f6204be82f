"""pydantic models validating the upstream Grafana and OWID payloads.

Validation only gates the payload shape; the decoded payload is handed on as
plain dictionaries. Unknown fields are allowed because both APIs return more
than is used here.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Passthrough(BaseModel):
    model_config = ConfigDict(extra="allow")


class GrafanaField(_Passthrough):
    name: str


class GrafanaFrameSchema(_Passthrough):
    name: str | None = None
    refId: str | None = None
    meta: Any = None
    fields: list[GrafanaField]


class GrafanaFrameData(_Passthrough):
    values: list[list[Any]]


class GrafanaFrame(_Passthrough):
    schema_: GrafanaFrameSchema = Field(alias="schema")
    data: GrafanaFrameData


class GrafanaResult(_Passthrough):
    status: int | None = None
    frames: list[GrafanaFrame] = Field(default_factory=list)


class GrafanaResponse(_Passthrough):
    results: dict[str, GrafanaResult]


class OwidDataResponse(_Passthrough):
    values: list[float]
    years: list[int]
    entities: list[int]

    @model_validator(mode="after")
    def _aligned(self) -> "OwidDataResponse":
        if not len(self.values) == len(self.years) == len(self.entities):
            raise ValueError("OWID values, years and entities must have equal length.")
        return self


class OwidEntity(_Passthrough):
    id: int
    name: str
    code: str | None = None


class OwidEntityValues(_Passthrough):
    values: list[OwidEntity]


class OwidDimensions(_Passthrough):
    entities: OwidEntityValues


class OwidPresentation(_Passthrough):
    attributionShort: str | None = None


class OwidMetadataResponse(_Passthrough):
    id: int
    name: str
    unit: str = ""
    shortUnit: str | None = None
    descriptionShort: str | None = None
    presentation: OwidPresentation = Field(default_factory=OwidPresentation)
    dimensions: OwidDimensions


class DataFreshness(BaseModel):
    lastSuccessfulFetch: str | None
    isStale: bool
    error: str | None = None


class ErrorLog(BaseModel):
    source: str
    message: str
    timestamp: str


class Metadata(BaseModel):
    lastUpdate: str
    dataFreshness: dict[str, DataFreshness]
    errors: list[ErrorLog] | None = None
    version: str

    def to_dict(self) -> dict[str, Any]:
        # lastSuccessfulFetch stays as an explicit null; absent errors are omitted.
        payload = self.model_dump()
        for freshness in payload["dataFreshness"].values():
            if freshness["error"] is None:
                del freshness["error"]
        if payload["errors"] is None:
            del payload["errors"]
        return payload
