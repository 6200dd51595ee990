"""Overlay settings model."""

from pydantic import BaseModel, Field


class OverlaySettings(BaseModel, frozen=True):
    """Naming knobs for the overlay.

    ``delimiter`` joins prefix segments in the canonical name. The legacy
    single-underscore spelling is accepted as a fallback while
    ``accept_legacy_names`` is set.
    """

    delimiter: str = Field(default="__", min_length=1)
    legacy_delimiter: str = Field(default="_", min_length=1)
    accept_legacy_names: bool = True
