"""
Encoded polyline helpers.

Decodes the compact polyline format used by the Google Directions API (and
optionally returned by OpenRouteService) into coordinate sequences.
See: https://developers.google.com/maps/documentation/utilities/polylinealgorithm

Pure functions, no I/O.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

LatLng = Tuple[float, float]

_ASCII_OFFSET = 63
_CHUNK_MASK = 0x1F
_CONTINUATION_BIT = 0x20


def _read_value(encoded: str, index: int) -> Tuple[Optional[int], int]:
    """
    Read one zig-zag encoded signed value starting at ``index``.

    Returns:
        Tuple (value, next_index). ``value`` is None when the string ends
        before the group is complete.
    """
    result = 0
    shift = 0
    length = len(encoded)

    while index < length:
        b = ord(encoded[index]) - _ASCII_OFFSET
        index += 1
        result |= (b & _CHUNK_MASK) << shift
        shift += 5
        if b < _CONTINUATION_BIT:
            value = ~(result >> 1) if (result & 1) else (result >> 1)
            return value, index

    return None, index


def decode(encoded: str, precision: int = 5) -> List[LatLng]:
    """
    Decode an encoded polyline into a list of (lat, lng) tuples.

    A trailing incomplete group (truncated input) is dropped: every complete
    point before it is returned and no exception is raised.

    Args:
        encoded: Encoded polyline string
        precision: Number of decimal places encoded (5 for Google)

    Returns:
        List of (lat, lng) tuples in degrees
    """
    factor = 10 ** precision
    points: List[LatLng] = []
    index = 0
    lat = 0
    lng = 0

    if not encoded:
        return points

    while index < len(encoded):
        dlat, index = _read_value(encoded, index)
        if dlat is None:
            break
        dlng, index = _read_value(encoded, index)
        if dlng is None:
            break

        lat += dlat
        lng += dlng
        points.append((lat / factor, lng / factor))

    return points


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else (value << 1)
    chunks = []
    while value >= _CONTINUATION_BIT:
        chunks.append(chr((_CONTINUATION_BIT | (value & _CHUNK_MASK)) + _ASCII_OFFSET))
        value >>= 5
    chunks.append(chr(value + _ASCII_OFFSET))
    return "".join(chunks)


def encode(points: Sequence[LatLng], precision: int = 5) -> str:
    """Encode a sequence of (lat, lng) tuples into a polyline string."""
    factor = 10 ** precision
    encoded: List[str] = []
    prev_lat = 0
    prev_lng = 0

    for lat, lng in points:
        lat_i = int(round(lat * factor))
        lng_i = int(round(lng * factor))
        encoded.append(_encode_value(lat_i - prev_lat))
        encoded.append(_encode_value(lng_i - prev_lng))
        prev_lat = lat_i
        prev_lng = lng_i

    return "".join(encoded)


def to_geojson_linestring(encoded: str, precision: int = 5) -> Dict[str, Any]:
    """
    Decode a polyline straight into a GeoJSON LineString.

    GeoJSON uses [lng, lat] order, the reverse of the decoded tuples.
    """
    return {
        "type": "LineString",
        "coordinates": [[lng, lat] for lat, lng in decode(encoded, precision)],
    }
