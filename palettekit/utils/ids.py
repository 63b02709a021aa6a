"""
PaletteKit ID Utilities
Generate unique identifiers for color provenance, palettes and batch jobs.
"""
import uuid
from datetime import datetime


def _generate_id(prefix: str, with_timestamp: bool = False) -> str:
    short_uuid = uuid.uuid4().hex[:10]
    if with_timestamp:
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        return f"{prefix}-{timestamp}-{short_uuid}"
    return f"{prefix}-{short_uuid}"


def generate_color_id() -> str:
    """
    Generate a provenance ID for a color record.

    Returns:
        Unique color ID string, e.g. ``color-3f9a0c12d4``
    """
    return _generate_id("color")


def generate_palette_id() -> str:
    """Generate a unique palette ID carrying its creation timestamp."""
    return _generate_id("palette", with_timestamp=True)


def generate_job_id() -> str:
    """Generate a unique batch job ID carrying its creation timestamp."""
    return _generate_id("batch", with_timestamp=True)
