"""GPX Ride Analyzer - noise-aware analysis of recorded cycling tracks."""

from ride_analyzer.analyzer import analyze, analyze_file, analyze_gpx, calculate_summary
from ride_analyzer.parser import NoTrackDataError

__version__ = "0.1.0"

__all__ = ["analyze", "analyze_file", "analyze_gpx", "calculate_summary", "NoTrackDataError"]
