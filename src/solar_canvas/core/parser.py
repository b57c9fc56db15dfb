"""
Feed parser: hamqsl solar XML -> CanonicalSolarRecord.

This is the only place that knows the upstream document shape. Everything
downstream (JSON endpoint, layout engine) sees the canonical record.

Expected shape:

    <solar>
      <solardata>
        <source url="...">N0NBH</source>
        <solarflux>120</solarflux>
        ...
        <calculatedconditions>
          <band name="80m-40m" time="day">Good</band>
        </calculatedconditions>
        <calculatedvhfconditions>
          <phenomenon name="E-Skip" location="europe">Band Closed</phenomenon>
        </calculatedvhfconditions>
      </solardata>
    </solar>
"""

import logging
import math
import re
import xml.etree.ElementTree as ET
from typing import Dict, Optional, Union

from solar_canvas.core.errors import MalformedFeed
from solar_canvas.core.models import NA, CanonicalSolarRecord

logger = logging.getLogger(__name__)

_int_re = re.compile(r"^[-+]?\d+")
_float_re = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

INT_FIELDS = ("solarflux", "aindex", "kindex", "sunspots", "protonflux", "electonflux", "aurora")
FLOAT_FIELDS = ("heliumline", "normalization", "latdegree", "solarwind", "magneticfield")
TEXT_FIELDS = ("source", "updated", "kindexnt", "xray", "geomagfield", "signalnoise", "fof2", "muf", "muffactor")


# ---------------------------
# Safe-extract helpers
# ---------------------------
def _text(elem: Optional[ET.Element]) -> Optional[str]:
    """Stripped text of elem, or None when the element is absent or empty."""
    if elem is None or elem.text is None:
        return None
    text = elem.text.strip()
    return text or None


def parse_int(val: Optional[str]) -> Union[int, str]:
    """
    Leading integer of the text: '120' -> 120, '12 nT' -> 12, 'abc' -> 'N/A'
    """
    if val is None:
        return NA
    m = _int_re.match(val)
    if not m:
        return NA
    return int(m.group(0))


def parse_float(val: Optional[str]) -> Union[float, str]:
    """
    Leading decimal of the text: '425.5' -> 425.5, '-3.2nT' -> -3.2, '1e999' -> 'N/A'
    """
    if val is None:
        return NA
    m = _float_re.match(val)
    if not m:
        return NA
    value = float(m.group(0))
    if not math.isfinite(value):
        return NA
    return value


def parse_text(val: Optional[str]) -> str:
    return NA if val is None else val


def fold_tagged_entries(parent: Optional[ET.Element], tag: str, secondary: str) -> Dict[str, Dict[str, str]]:
    """Fold <tag name=.. secondary=..>text</tag> children into name -> secondary -> text.

    Duplicate (name, secondary) pairs overwrite earlier ones; outer keys keep
    the order in which each name first appeared.
    """
    table: Dict[str, Dict[str, str]] = {}
    if parent is None:
        return table

    for entry in parent.findall(tag):
        name = entry.get("name")
        key = entry.get(secondary)
        if not name or not key:
            logger.debug("Skipping <%s> without name/%s attributes", tag, secondary)
            continue
        table.setdefault(name, {})[key] = _text(entry) or NA
    return table


# ---------------------------
# Document decoding
# ---------------------------
def parse_solar_xml(raw: Union[str, bytes]) -> CanonicalSolarRecord:
    """Decode a raw feed payload into a CanonicalSolarRecord.

    Raises MalformedFeed only when the payload is not XML or lacks the
    <solar><solardata> envelope. Missing or unreadable leaf values never
    raise; they become "N/A".
    """
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as e:
        raise MalformedFeed(f"Feed is not well-formed XML: {e}") from e

    if root.tag != "solar":
        raise MalformedFeed(f"Unexpected root element <{root.tag}>")

    solardata = root.find("solardata")
    if solardata is None:
        raise MalformedFeed("Feed has no <solardata> element")

    fields: Dict[str, object] = {}
    for name in TEXT_FIELDS:
        fields[name] = parse_text(_text(solardata.find(name)))
    for name in INT_FIELDS:
        fields[name] = parse_int(_text(solardata.find(name)))
    for name in FLOAT_FIELDS:
        fields[name] = parse_float(_text(solardata.find(name)))

    fields["calculatedconditions"] = fold_tagged_entries(
        solardata.find("calculatedconditions"), "band", "time"
    )
    fields["calculatedvhfconditions"] = fold_tagged_entries(
        solardata.find("calculatedvhfconditions"), "phenomenon", "location"
    )

    return CanonicalSolarRecord(**fields)
