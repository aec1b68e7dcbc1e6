"""
Value types describing audio assets and the records they are resolved from.
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

# Sparse, integer-keyed mapping parsed from a delimited upstream response.
Record = dict[int, str]


class AudioKind(str, Enum):
    """The two kinds of audio assets a level can reference."""

    SFX = "sfx"
    SONG = "song"

    @property
    def content_type(self) -> str:
        return "audio/mpeg" if self is AudioKind.SONG else "audio/ogg"


class SongInfo(BaseModel):
    """Song metadata as returned by the platform's song info endpoint."""

    available: bool
    fields: Record = Field(default_factory=dict)

    class Config:
        frozen = True

    def get(self, index: int) -> str | None:
        return self.fields.get(index)


class AssetReference(BaseModel):
    """A resolved song or sound effect, ready to be downloaded (or skipped)."""

    id: int = Field(..., ge=0)
    kind: AudioKind
    available: bool = True
    download_url: str | None = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def validate_availability(self) -> "AssetReference":
        """An unavailable asset never carries a URL; an available one always does."""
        if not self.available and self.download_url is not None:
            raise ValueError("Unavailable assets cannot have a download URL.")
        if self.available and not self.download_url:
            raise ValueError("Available assets require a download URL.")
        return self

    @property
    def fetchable(self) -> bool:
        return self.available and self.download_url is not None


class LevelAssets(BaseModel):
    """All asset references collected for one level."""

    level_id: int
    songs: list[AssetReference] = Field(default_factory=list)
    sfx: list[AssetReference] = Field(default_factory=list)
    failed: int = 0

    @property
    def references(self) -> list[AssetReference]:
        return [*self.songs, *self.sfx]
