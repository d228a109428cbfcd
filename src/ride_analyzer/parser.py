"""GPX document reading and track extraction.

The document is parsed into a plain element tree and every ``<trkpt>`` is
mapped to a TrackPoint by ``_parse_track_point``. That function is the one
place that knows about optional children and vendor extension dialects; a
point without usable coordinates is dropped instead of failing the file.
"""

import logging
import math
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from gpxpy.gpx import GPXException, GPXXMLSyntaxException
from gpxpy.gpxfield import parse_time

from ride_analyzer.distance import calculate_bounds
from ride_analyzer.models import Bounds, Metadata, PointExtensions, Track, TrackPoint, TrackStats

logger = logging.getLogger(__name__)

# Garmin's TrackPointExtension/v1 and v2 schemas share this prefix
GARMIN_TPX_NAMESPACE = "http://www.garmin.com/xmlschemas/TrackPointExtension"

# Container names used by apps that write a bare (non-Garmin) extension
GENERIC_TPX_NAMES = ("TrackPointExtension", "tpe")


class NoTrackDataError(GPXException):
    """Raised when a document yields no usable track points."""


def parse_document(xml_text: str | bytes) -> ET.Element:
    """Parse GPX text and return the root element.

    Bytes are decoded by the XML parser according to the document's own
    encoding declaration.

    Raises:
        GPXXMLSyntaxException: If the text is not well-formed XML or cannot
            be decoded.
    """
    try:
        return ET.fromstring(xml_text.strip())
    except ET.ParseError as e:
        raise GPXXMLSyntaxException(f"GPX parsing failed: {e}", e)


def read_document(filepath: str) -> ET.Element:
    """Read a GPX file and return the root element."""
    with open(filepath, "rb") as f:
        content = f.read()
    logger.debug("Read %d bytes from %s", len(content), filepath)
    return parse_document(content)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _namespace(tag: str) -> str:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return ""


def _parse_float(text: str | None) -> float | None:
    if text is None:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_int(text: str | None) -> int | None:
    value = _parse_float(text)
    return int(value) if value is not None else None


def _parse_timestamp(text: str | None) -> datetime | None:
    """Parse a GPX timestamp as an aware UTC datetime.

    Stamps without an offset are taken to be UTC.
    """
    if not text or not text.strip():
        return None
    try:
        parsed = parse_time(text.strip())
    except (GPXException, ValueError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# (attribute, child element, converter) probed in every extension container
_EXTENSION_FIELDS = (
    ("heart_rate", "hr", _parse_int),
    ("cadence", "cad", _parse_int),
    ("speed", "speed", _parse_float),
    ("power", "power", _parse_float),
    ("temperature", "atemp", _parse_float),
)


def _extension_containers(extensions: ET.Element) -> list[ET.Element]:
    """Known TrackPointExtension containers, Garmin dialect first."""
    garmin = []
    generic = []
    for child in extensions:
        name = _local_name(child.tag)
        if name == "TrackPointExtension" and _namespace(child.tag).startswith(GARMIN_TPX_NAMESPACE):
            garmin.append(child)
        elif name in GENERIC_TPX_NAMES:
            generic.append(child)
    return garmin + generic


def _parse_extensions(extensions: ET.Element) -> PointExtensions | None:
    """Collect sensor values from whichever extension dialect carries them."""
    values = {}
    for container in _extension_containers(extensions):
        for attr, tag, convert in _EXTENSION_FIELDS:
            if values.get(attr) is not None:
                continue
            values[attr] = convert(container.findtext(f"{{*}}{tag}"))
    if not any(v is not None for v in values.values()):
        return None
    return PointExtensions(**values)


def _parse_track_point(
    element: ET.Element, track_index: int, segment_index: int, point_index: int
) -> TrackPoint | None:
    """Map a <trkpt> element to a TrackPoint, or None without coordinates."""
    lat = _parse_float(element.get("lat"))
    lon = _parse_float(element.get("lon"))
    if lat is None or lon is None:
        return None

    extensions = element.find("{*}extensions")
    return TrackPoint(
        lat=lat,
        lon=lon,
        elevation=_parse_float(element.findtext("{*}ele")),
        time=_parse_timestamp(element.findtext("{*}time")),
        track_index=track_index,
        segment_index=segment_index,
        point_index=point_index,
        extensions=_parse_extensions(extensions) if extensions is not None else None,
    )


def _parse_track_stats(extensions: ET.Element | None) -> TrackStats | None:
    if extensions is None:
        return None
    stats = extensions.find("{*}TrackStatsExtension")
    if stats is None:
        return None
    return TrackStats(
        distance=_parse_float(stats.findtext("{*}Distance")),
        timer_time=_parse_float(stats.findtext("{*}TimerTime")),
        moving_time=_parse_float(stats.findtext("{*}MovingTime")),
        stopped_time=_parse_float(stats.findtext("{*}StoppedTime")),
        max_speed=_parse_float(stats.findtext("{*}MaxSpeed")),
    )


def extract_tracks(root: ET.Element) -> list[Track]:
    """Extract every <trk> of the document as a Track.

    Points are kept in document order across all segments of a track.
    """
    tracks = []
    for track_index, trk in enumerate(root.findall("{*}trk")):
        segments = trk.findall("{*}trkseg")
        points = []
        for segment_index, trkseg in enumerate(segments):
            for point_index, trkpt in enumerate(trkseg.findall("{*}trkpt")):
                point = _parse_track_point(trkpt, track_index, segment_index, point_index)
                if point is not None:
                    points.append(point)

        extensions = trk.find("{*}extensions")
        track_id = extensions.findtext("{*}trackid") if extensions is not None else None
        tracks.append(
            Track(
                name=trk.findtext("{*}name") or f"Track {track_index + 1}",
                points=tuple(points),
                segment_count=len(segments),
                track_id=track_id,
                stats=_parse_track_stats(extensions),
            )
        )
    return tracks


def extract_points(root: ET.Element) -> tuple[list[Track], list[TrackPoint]]:
    """Extract tracks and the concatenated point sequence.

    Raises:
        NoTrackDataError: If no track point survives extraction.
    """
    tracks = extract_tracks(root)
    points = [pt for track in tracks for pt in track.points]
    if not points:
        raise NoTrackDataError("No track data found in GPX file")
    logger.debug("Extracted %d points from %d tracks", len(points), len(tracks))
    return tracks, points


def _parse_bounds(element: ET.Element | None) -> Bounds | None:
    if element is None:
        return None
    return Bounds(
        min_lat=_parse_float(element.get("minlat")) or 0.0,
        max_lat=_parse_float(element.get("maxlat")) or 0.0,
        min_lon=_parse_float(element.get("minlon")) or 0.0,
        max_lon=_parse_float(element.get("maxlon")) or 0.0,
    )


def extract_metadata(root: ET.Element, points: list[TrackPoint]) -> Metadata:
    """Extract document metadata.

    GPX 1.1 keeps it under <metadata>; GPX 1.0 puts the same fields on the
    root element. Bounds fall back to the bounding box of the points.
    """
    source = root.find("{*}metadata")
    if source is None:
        source = root

    author = source.find("{*}author")
    if author is not None:
        author_name = author.findtext("{*}name") or (author.text or "").strip()
    else:
        author_name = ""

    bounds = _parse_bounds(source.find("{*}bounds"))
    if bounds is None:
        bounds = calculate_bounds(points)

    return Metadata(
        name=source.findtext("{*}name") or "Unnamed Track",
        description=source.findtext("{*}desc") or "",
        author=author_name or "Unknown",
        time=_parse_timestamp(source.findtext("{*}time")),
        bounds=bounds,
    )
