"""Formatting utilities for display."""


def format_duration_long(seconds: float) -> str:
    """Format seconds as Xh Ym Zs string."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours}h {minutes:02d}m {secs:02d}s"


def format_optional(value: float | None, unit: str, decimals: int = 0) -> str:
    """Format a value that may be missing, e.g. an elevation or sensor average."""
    if value is None:
        return "n/a"
    return f"{value:.{decimals}f} {unit}"


def format_zones(zones: dict[str, float]) -> list[str]:
    """One line per zone: padded label and percentage."""
    width = max(len(label) for label in zones)
    return [f"  {label:<{width}}  {pct:5.1f}%" for label, pct in zones.items()]
