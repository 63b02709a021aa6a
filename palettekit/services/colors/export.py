"""
Palette export.

Serializes a palette as JSON, CSS custom properties, SCSS variables or
plain text, optionally bundled in a zip archive together with WCAG,
color-blindness and Lab reports and a swatch image.
"""

import io
import json
import re
import zipfile
from typing import Dict, Optional, Sequence

from loguru import logger

from palettekit.schemas import ColorValue, ExportOptions, Palette
from palettekit.services.colors.accessibility import simulate_color_blindness
from palettekit.services.colors.advanced import evaluate_palette_wcag
from palettekit.services.colors.conversion import rgb_to_lab, rgb_to_lch
from palettekit.services.colors.swatches import render_swatch_strip

FILE_EXTENSIONS = {"json": "json", "css": "css", "scss": "scss", "text": "txt"}


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def _display_name(palette: Palette, index: int, options: ExportOptions) -> Optional[str]:
    if options.custom_names and index < len(options.custom_names):
        return options.custom_names[index]
    return palette.colors[index].name


def _variable_name(palette: Palette, index: int, options: ExportOptions) -> str:
    if options.custom_names and index < len(options.custom_names):
        return _slug(options.custom_names[index])
    return f"color-{index + 1}"


def _css_value(color: ColorValue, color_format: str) -> str:
    if color_format == "rgb":
        return f"rgb({color.rgb.r}, {color.rgb.g}, {color.rgb.b})"
    if color_format == "hsl":
        return f"hsl({color.hsl.h}, {color.hsl.s}%, {color.hsl.l}%)"
    return color.hex


def _color_entry(palette: Palette, index: int, options: ExportOptions) -> Dict:
    color = palette.colors[index]
    entry = {"name": _display_name(palette, index, options), "hex": color.hex}
    r, g, b = color.rgb_tuple
    if options.color_format == "rgb":
        entry["rgb"] = color.rgb.model_dump()
    elif options.color_format == "hsl":
        entry["hsl"] = color.hsl.model_dump()
    elif options.color_format == "lab":
        entry["lab"] = rgb_to_lab(r, g, b)._asdict()
    elif options.color_format == "lch":
        entry["lch"] = rgb_to_lch(r, g, b)._asdict()
    return entry


def generate_json(palette: Palette, options: ExportOptions) -> str:
    data = {
        "name": palette.name,
        "id": palette.id,
        "created": palette.created_at.isoformat(),
        "colors": [_color_entry(palette, i, options) for i in range(len(palette.colors))],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def generate_css(palette: Palette, options: ExportOptions) -> str:
    lines = [
        f"  --{_variable_name(palette, i, options)}: {_css_value(color, options.color_format)};"
        for i, color in enumerate(palette.colors)
    ]
    return ":root {\n" + "\n".join(lines) + f"\n}}\n\n/* Generated from palette: {palette.name} */"


def generate_scss(palette: Palette, options: ExportOptions) -> str:
    lines = [
        f"${_variable_name(palette, i, options)}: {_css_value(color, options.color_format)};"
        for i, color in enumerate(palette.colors)
    ]
    return f"// Generated from palette: {palette.name}\n" + "\n".join(lines)


def generate_text(palette: Palette, options: ExportOptions) -> str:
    lines = [f"Palette: {palette.name}", f"Created: {palette.created_at.isoformat()}", ""]
    for i, color in enumerate(palette.colors):
        lines.append(f"{i + 1}. {_display_name(palette, i, options) or color.hex}")
        lines.append(f"   HEX: {color.hex}")
        lines.append(f"   RGB: {color.rgb.r}, {color.rgb.g}, {color.rgb.b}")
        lines.append(f"   HSL: {color.hsl.h}°, {color.hsl.s}%, {color.hsl.l}%")
        lines.append("")
    return "\n".join(lines)


_GENERATORS = {
    "json": generate_json,
    "css": generate_css,
    "scss": generate_scss,
    "text": generate_text,
}


def _reports(palette: Palette, options: ExportOptions) -> Dict[str, bytes]:
    files: Dict[str, bytes] = {}
    if options.include_wcag:
        results = [r.model_dump(mode="json") for r in evaluate_palette_wcag(palette.colors)]
        files[f"{palette.name}_wcag_report.json"] = json.dumps(results, indent=2).encode("utf-8")
    if options.include_color_blindness and palette.colors:
        result = simulate_color_blindness(palette.colors)
        files[f"{palette.name}_colorblindness_report.json"] = result.model_dump_json(indent=2).encode("utf-8")
    if options.include_lab_values:
        lab_data = [
            {"name": color.name, "hex": color.hex, "lab": rgb_to_lab(*color.rgb_tuple)._asdict()}
            for color in palette.colors
        ]
        files[f"{palette.name}_lab_values.json"] = json.dumps(lab_data, indent=2).encode("utf-8")
    if options.include_swatch and palette.colors:
        files[f"{palette.name}_swatch.png"] = render_swatch_strip([c.hex for c in palette.colors])
    return files


def export_palette(palette: Palette, options: Optional[ExportOptions] = None) -> bytes:
    """
    Export a palette.

    Args:
        palette: Palette to export
        options: Export settings, JSON/hex/uncompressed by default

    Returns:
        UTF-8 bytes of the main file, or zip archive bytes when
        ``options.compression == "zip"``
    """
    options = options or ExportOptions()
    main_name = f"{palette.name}.{FILE_EXTENSIONS[options.file_type]}"
    main_content = _GENERATORS[options.file_type](palette, options).encode("utf-8")

    if options.compression != "zip":
        return main_content

    files = {main_name: main_content}
    files.update(_reports(palette, options))

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for filename, content in files.items():
            archive.writestr(filename, content)

    logger.info(f"Exported palette {palette.id} as zip with {len(files)} files")
    return buffer.getvalue()


def export_to_css(colors: Sequence[ColorValue], palette_name: str) -> str:
    """``:root`` block with one ``--color-N`` hex property per color."""
    return generate_css(Palette(name=palette_name, colors=list(colors)), ExportOptions(file_type="css"))


def export_to_json(colors: Sequence[ColorValue], palette_name: str) -> str:
    """JSON document with the name and hex/rgb/hsl/name per color."""
    data = {
        "name": palette_name,
        "colors": [
            {
                "hex": color.hex,
                "rgb": color.rgb.model_dump(),
                "hsl": color.hsl.model_dump(),
                "name": color.name,
            }
            for color in colors
        ],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
