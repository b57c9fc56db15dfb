"""
Data models for the solar canvas service.
No parsing or drawing logic here, only Pydantic models and typed structures.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Literal, Union

NA = "N/A"

IntOrNA = Union[int, Literal["N/A"]]
FloatOrNA = Union[float, Literal["N/A"]]
TextOrNA = Union[str, Literal["N/A"]]

# band-name -> day/night -> condition
BandTable = Dict[str, Dict[str, str]]
# phenomenon-name -> location -> condition
PhenomenonTable = Dict[str, Dict[str, str]]


class CanonicalSolarRecord(BaseModel):
    """Normalized snapshot of one solar-terrestrial feed document.

    Only the feed parser builds this model. Every scalar is always present:
    a value that is missing or unreadable upstream is stored as "N/A".
    Field order is the order of the JSON document served to clients.
    """
    model_config = ConfigDict(frozen=True)

    source: TextOrNA = Field(NA, description="Feed publisher")
    updated: TextOrNA = Field(NA, description="Publisher's update timestamp, free text")
    solarflux: IntOrNA = Field(NA, description="10.7cm solar flux index (SFI)")
    aindex: IntOrNA = Field(NA, description="Planetary A index")
    kindex: IntOrNA = Field(NA, description="Planetary K index")
    kindexnt: TextOrNA = Field(NA, description="K index nowcast text")
    xray: TextOrNA = Field(NA, description="X-ray flux class, e.g. B4.2")
    sunspots: IntOrNA = Field(NA, description="Sunspot number")
    heliumline: FloatOrNA = Field(NA, description="304A helium line")
    protonflux: IntOrNA = Field(NA, description="Proton flux")
    electonflux: IntOrNA = Field(NA, description="Electron flux (upstream spelling)")
    aurora: IntOrNA = Field(NA, description="Aurora activity level")
    normalization: FloatOrNA = Field(NA, description="Normalization factor")
    latdegree: FloatOrNA = Field(NA, description="Aurora latitude in degrees")
    solarwind: FloatOrNA = Field(NA, description="Solar wind speed, km/s")
    magneticfield: FloatOrNA = Field(NA, description="Bz magnetic field, nT")
    geomagfield: TextOrNA = Field(NA, description="Geomagnetic field description")
    signalnoise: TextOrNA = Field(NA, description="Expected noise level, e.g. S1-S2")
    fof2: TextOrNA = Field(NA, description="Critical frequency foF2")
    muf: TextOrNA = Field(NA, description="Maximum usable frequency")
    muffactor: TextOrNA = Field(NA, description="MUF factor")
    calculatedconditions: BandTable = Field(default_factory=dict, description="HF band conditions by day/night")
    calculatedvhfconditions: PhenomenonTable = Field(default_factory=dict, description="VHF phenomena by location")


class RenderConfig(BaseModel):
    """Per-request rendering options.

    Built once from the query string by the request handler and passed
    explicitly to the layout engine. Never stored on the application.
    """
    model_config = ConfigDict(frozen=True)

    mode: int = Field(1, ge=0, le=1, description="1 = color-coded conditions, 0 = monochrome text")
    invert: int = Field(0, ge=0, le=1, description="1 = light theme, 0 = dark theme")
    black_and_white: bool = Field(False, description="Pure black ink on white; overrides mode and invert")
    width: int = Field(800, gt=0, description="Canvas width in pixels")
    height: int = Field(480, gt=0, description="Canvas height in pixels")
