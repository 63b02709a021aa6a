"""
PaletteKit Schemas
Pydantic models for the color records produced and consumed by the engine.

All records are JSON-serializable via ``model_dump(mode="json")``.
"""
from datetime import datetime
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from palettekit.services.colors.conversion import rgb_to_hex, rgb_to_hsl, hex_to_rgb
from palettekit.utils.ids import generate_color_id, generate_palette_id

HEX_PATTERN = r"^#[0-9A-Fa-f]{6}$"


# ============================================================================
# COLOR VALUES
# ============================================================================

class RGB(BaseModel):
    """8-bit sRGB triple."""
    model_config = ConfigDict(frozen=True)

    r: int = Field(..., ge=0, le=255, description="Red channel")
    g: int = Field(..., ge=0, le=255, description="Green channel")
    b: int = Field(..., ge=0, le=255, description="Blue channel")

    def as_tuple(self):
        return self.r, self.g, self.b


class HSL(BaseModel):
    """HSL with integer degrees and percentages."""
    model_config = ConfigDict(frozen=True)

    h: int = Field(..., ge=0, lt=360, description="Hue in degrees")
    s: int = Field(..., ge=0, le=100, description="Saturation percent")
    l: int = Field(..., ge=0, le=100, description="Lightness percent")


def _rgb_components(rgb: Any):
    if isinstance(rgb, RGB):
        return rgb.r, rgb.g, rgb.b
    if isinstance(rgb, dict):
        return rgb["r"], rgb["g"], rgb["b"]
    r, g, b = rgb
    return r, g, b


class ColorValue(BaseModel):
    """
    A single immutable color.

    ``hex`` and ``hsl`` are always recomputed from ``rgb`` during
    validation, so a stored hex can never disagree with its channels.
    Equality and hashing use the hex only; ``name`` and ``id`` are
    advisory.
    """
    model_config = ConfigDict(frozen=True)

    rgb: RGB = Field(..., description="Source channels")
    hsl: HSL = Field(..., description="Derived HSL")
    hex: str = Field(..., pattern=HEX_PATTERN, description="Derived uppercase #RRGGBB")
    name: Optional[str] = Field(None, description="Human-readable label")
    id: str = Field(default_factory=generate_color_id, description="Provenance identifier")

    @model_validator(mode="before")
    @classmethod
    def derive_hex_and_hsl(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "rgb" not in data:
            return data
        r, g, b = _rgb_components(data["rgb"])
        h, s, l = rgb_to_hsl(r, g, b)
        data = dict(data)
        data["rgb"] = {"r": r, "g": g, "b": b}
        data["hex"] = rgb_to_hex(r, g, b)
        data["hsl"] = {"h": h, "s": s, "l": l}
        if data.get("id") is None:
            data.pop("id", None)
        return data

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int, **kwargs) -> "ColorValue":
        return cls(rgb=(r, g, b), **kwargs)

    @classmethod
    def from_hex(cls, hex_color: str, **kwargs) -> "ColorValue":
        return cls(rgb=hex_to_rgb(hex_color), **kwargs)

    @property
    def rgb_tuple(self):
        return self.rgb.as_tuple()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColorValue):
            return NotImplemented
        return self.hex == other.hex

    def __hash__(self) -> int:
        return hash(self.hex)


class MixedColor(ColorValue):
    """A color produced by mixing, with its parents and blend weights."""
    parent_colors: List[str] = Field(..., description="Parent color ids in mixing order")
    ratio: List[float] = Field(..., description="Blend weight per parent")

    @model_validator(mode="after")
    def check_ratio(self) -> "MixedColor":
        if len(self.ratio) != len(self.parent_colors):
            raise ValueError("ratio and parent_colors must have the same length")
        if any(weight < 0 for weight in self.ratio):
            raise ValueError("ratio weights must be non-negative")
        if abs(sum(self.ratio) - 1.0) > 1e-6:
            raise ValueError(f"ratio weights must sum to 1, got {sum(self.ratio)}")
        return self


class Palette(BaseModel):
    """Ordered, named collection of colors."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_palette_id, description="Palette identifier")
    name: str = Field("Untitled palette", description="Palette name")
    colors: List[ColorValue] = Field(default_factory=list, description="Colors in display order")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    image_ref: Optional[str] = Field(None, description="Reference to the source image")
    file_name: Optional[str] = Field(None, description="Source file name")


# ============================================================================
# CONVERSION / DISTANCE RECORDS
# ============================================================================

class LabValues(BaseModel):
    """CIE L*a*b* coordinates."""
    l: float
    a: float
    b: float


class LchValues(BaseModel):
    """CIE LCh coordinates."""
    l: float
    c: float
    h: float


DeltaEMethod = Literal["ciede2000", "cie94", "cie76", "invalid"]


class DeltaEResult(BaseModel):
    """A color difference together with the formula that produced it."""
    model_config = ConfigDict(frozen=True)

    value: float = Field(..., ge=0.0, description="Color difference, 2 decimals")
    method: DeltaEMethod = Field(..., description="Formula actually used")

    @property
    def is_approximate(self) -> bool:
        """True when a fallback path produced the value."""
        return self.method in ("cie76", "invalid")


# ============================================================================
# HARMONY / WHEEL
# ============================================================================

class WheelPosition(BaseModel):
    """Polar position on the hue wheel."""
    angle: int = Field(..., ge=0, lt=360, description="Hue angle in degrees")
    radius: int = Field(..., ge=0, le=100, description="Saturation percent")


class HarmonySet(BaseModel):
    """Hue-rotated harmony relationships of one base color."""
    complementary: str = Field(..., pattern=HEX_PATTERN)
    analogous: List[str] = Field(..., min_length=2, max_length=2)
    triadic: List[str] = Field(..., min_length=2, max_length=2)
    tetradic: List[str] = Field(..., min_length=3, max_length=3)
    split_complementary: List[str] = Field(..., min_length=2, max_length=2)


class Chromaticity(BaseModel):
    """CIE 1931 xy chromaticity."""
    x: float
    y: float


class ColorScience(BaseModel):
    """Physical description of a color for educational display."""
    wavelength: Optional[float] = Field(None, description="Approximate dominant wavelength in nm")
    luminance: float = Field(..., ge=0.0, le=1.0, description="Relative luminance")
    chromaticity: Chromaticity


class EducationalColor(ColorValue):
    """A color enriched with science, wheel, psychology and harmony data."""
    science: ColorScience
    wheel_position: WheelPosition
    psychology_effects: List[str] = Field(default_factory=list, max_length=6)
    harmony_colors: HarmonySet


# ============================================================================
# ACCESSIBILITY
# ============================================================================

class LevelResult(BaseModel):
    """Pass/fail for normal and large text at one WCAG level."""
    normal: bool
    large: bool


class WCAGSuggestions(BaseModel):
    """Adjusted foregrounds reaching AA-normal, when reachable."""
    light_version: Optional[str] = Field(None, description="Brightened foreground")
    dark_version: Optional[str] = Field(None, description="Darkened foreground")


class WCAGResult(BaseModel):
    """WCAG 2.1 contrast evaluation of a foreground/background pair."""
    foreground: str
    background: str
    contrast_ratio: float = Field(..., ge=1.0, le=21.0)
    aa_level: LevelResult
    aaa_level: LevelResult
    suggestions: Optional[WCAGSuggestions] = None


class DeficiencyType(str, Enum):
    """Simulated color vision deficiencies."""
    PROTANOMALY = "protanomaly"
    DEUTERANOMALY = "deuteranomaly"
    TRITANOMALY = "tritanomaly"
    MONOCHROMACY = "monochromacy"


class DistinguishabilityIssue(BaseModel):
    """Two palette entries that collapse under one simulated deficiency."""
    deficiency: DeficiencyType
    first_index: int = Field(..., ge=0)
    second_index: int = Field(..., ge=0)
    delta_e: float


class AccessibilityReport(BaseModel):
    """Distinguishability verdict across every simulated deficiency."""
    is_accessible: bool
    issues: List[str] = Field(default_factory=list)
    conflicts: List[DistinguishabilityIssue] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class ColorBlindnessResult(BaseModel):
    """Per-deficiency simulated palettes plus the accessibility verdict."""
    original: List[ColorValue]
    protanomaly: List[ColorValue]
    deuteranomaly: List[ColorValue]
    tritanomaly: List[ColorValue]
    monochromacy: List[ColorValue]
    accessibility: AccessibilityReport


class WCAGSummary(BaseModel):
    """Compact WCAG level of a color against white."""
    level: Literal["AAA", "AA", "FAIL"]
    contrast_ratio: float


class AdvancedColor(ColorValue):
    """A color with Lab/LCh coordinates, WCAG level and optional Delta E."""
    lab: LabValues
    lch: LchValues
    wcag: WCAGSummary
    delta_e: Optional[float] = Field(None, description="CIEDE2000 distance to a base color")


# ============================================================================
# MIXING EDUCATION
# ============================================================================

class MixingType(str, Enum):
    """Explanatory mixing label; a heuristic, not a physical model."""
    ADDITIVE = "additive"
    SUBTRACTIVE = "subtractive"


class ColorTheoryExample(BaseModel):
    before: List[ColorValue]
    after: ColorValue
    explanation: str


class ColorTheoryExplanation(BaseModel):
    """Explanatory text for one mixing operation."""
    title: str
    description: str
    principles: List[str]
    examples: List[ColorTheoryExample] = Field(default_factory=list)


class EducationalMixingResult(MixedColor):
    """A mixed color plus the theory behind it."""
    theory: ColorTheoryExplanation
    mixing_type: MixingType
    scientific_explanation: str
    real_world_applications: List[str]


# ============================================================================
# EXTRACTION
# ============================================================================

class ExtractionReport(BaseModel):
    """Extracted palette plus how each stage contributed to it."""
    colors: List[ColorValue]
    algorithm: Literal["median_cut", "kmeans"]
    primary_count: int = Field(..., ge=0, description="Colors from the quantization pass")
    fallback_count: int = Field(..., ge=0, description="Colors appended by the frequency pass")
    synthesized_count: int = Field(..., ge=0, description="Colors synthesized by channel offsets")
    primary_failed: bool = Field(False, description="Whether the quantization pass raised")


# ============================================================================
# EXPORT / BATCH
# ============================================================================

class ExportOptions(BaseModel):
    """Palette export settings."""
    file_type: Literal["json", "css", "scss", "text"] = "json"
    color_format: Literal["hex", "rgb", "hsl", "lab", "lch"] = "hex"
    compression: Literal["none", "zip"] = "none"
    custom_names: Optional[List[str]] = Field(None, description="Per-color name overrides")
    include_wcag: bool = False
    include_color_blindness: bool = False
    include_lab_values: bool = False
    include_swatch: bool = False


class BatchOptions(BaseModel):
    """Per-job extraction settings."""
    palette_size: int = Field(5, ge=1, le=64)
    algorithm: Literal["median_cut", "kmeans"] = "median_cut"
    quality: int = Field(1, ge=1, le=10, description="Pixel stride for the quantization pass")
    include_wcag: bool = False
    include_color_blindness: bool = False


class BatchImageResult(BaseModel):
    """Outcome for one image of a batch job."""
    image_name: str
    palette: Palette
    wcag: List[WCAGResult] = Field(default_factory=list)
    color_blindness: Optional[ColorBlindnessResult] = None
    duration_ms: float = 0.0


class BatchJob(BaseModel):
    """A batch extraction job and its progress."""
    id: str
    name: str
    image_names: List[str]
    options: BatchOptions
    status: Literal["pending", "processing", "completed", "error"] = "pending"
    progress: int = Field(0, ge=0, le=100)
    results: List[BatchImageResult] = Field(default_factory=list)
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @field_validator("image_names")
    @classmethod
    def require_images(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("a batch job needs at least one image")
        return value
