"""Pydantic DTOs (Data Transfer Objects) for the tile dashboard."""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from tile_dashboard.domain.entities import (
    FINISH_OPTIONS,
    GRADE_OPTIONS,
    STATUS_OPTIONS,
    TYPE_OPTIONS,
    TileDraft,
)


class TileCreate(BaseModel):
    """Schema for creating a new tile record.

    Brand, manufacturer, working size and storage location are required;
    the remaining fields default to the form's initial values.
    """

    entry_date: str = Field(
        default_factory=lambda: date.today().isoformat(), examples=["2024-05-01"],
    )
    brand: str = Field(..., examples=["Brand A"])
    manufacturer: str = Field(..., examples=["PT. Keramik Jaya"])
    grade: str = Field("BIa", examples=list(GRADE_OPTIONS))
    working_size: str = Field(..., examples=["60x60 cm"])
    finish: str = Field("GL", examples=list(FINISH_OPTIONS))
    type: str = Field("Rectified", examples=list(TYPE_OPTIONS))
    lokasi_sampel: str = Field(..., examples=["Rak A-01"])
    status: str = Field("Sampel Aktif", examples=list(STATUS_OPTIONS))

    @field_validator("entry_date", "brand", "manufacturer", "working_size", "lokasi_sampel")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("grade")
    @classmethod
    def _known_grade(cls, value: str) -> str:
        return _one_of(value, GRADE_OPTIONS)

    @field_validator("finish")
    @classmethod
    def _known_finish(cls, value: str) -> str:
        return _one_of(value, FINISH_OPTIONS)

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        return _one_of(value, TYPE_OPTIONS)

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        return _one_of(value, STATUS_OPTIONS)

    def to_draft(self) -> TileDraft:
        return TileDraft(**self.model_dump())


def _one_of(value: str, options: tuple[str, ...]) -> str:
    if value not in options:
        raise ValueError(f"must be one of: {', '.join(options)}")
    return value


class TileResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    entry_date: str
    brand: str
    manufacturer: str
    grade: str
    working_size: str
    finish: str
    type: str
    lokasi_sampel: str
    status: str

    model_config = {"from_attributes": True}


class NotificationResponse(BaseModel):
    message: str
    kind: str

    model_config = {"from_attributes": True}


class TileMutationResponse(BaseModel):
    """Outcome of a create or delete, with the toast the dashboard would show."""

    tile: TileResponse | None = None
    notification: NotificationResponse
    total: int


class TilePageResponse(BaseModel):
    """One page of the filtered, sorted view."""

    items: list[TileResponse]
    page: int
    total_pages: int
    total_filtered: int
    page_size: int
    sort_field: str | None = None
    sort_direction: str = "asc"


class MetricsResponse(BaseModel):
    total: int
    brands: int
    active_samples: int

    model_config = {"from_attributes": True}


class FilterOptionsResponse(BaseModel):
    grades: list[str] = []
    statuses: list[str] = []

    model_config = {"from_attributes": True}


class ChartPointResponse(BaseModel):
    name: str
    count: int
    percent: float = 0.0

    model_config = {"from_attributes": True}


class TileSummaryResponse(BaseModel):
    """KPI metrics and filter options (full list) plus chart series (filtered list)."""

    metrics: MetricsResponse
    options: FilterOptionsResponse
    grade_chart: list[ChartPointResponse] = []
    status_chart: list[ChartPointResponse] = []


class LocationBucketResponse(BaseModel):
    location: str
    count: int
    items: list[TileResponse]


class StorageMapResponse(BaseModel):
    locations: list[LocationBucketResponse] = []
