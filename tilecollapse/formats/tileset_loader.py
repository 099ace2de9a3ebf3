"""
Tile Collapse - Tileset Loader

Reads tile catalogs (XML or JSON) and optional per-tile PNG bitmaps, and
hands them to the builder.

XML format:
    <set>
      <tiles>
        <tile name="corner" symmetry="L" weight="0.5"/>
      </tiles>
      <neighbors>
        <neighbor left="corner 1" right="empty"/>
      </neighbors>
    </set>

JSON format:
    {"tiles": [{"name": "corner", "symmetry": "L", "weight": 0.5}],
     "neighbors": [{"left": "corner 1", "right": "empty"}]}
"""

import json
import xml.etree.ElementTree as ET
from pathlib import Path

import numpy as np

try:
    from PIL import Image, UnidentifiedImageError
except ImportError:
    raise ImportError("Pillow library required. Install with: pip install Pillow")

from ..core.errors import ConfigurationError
from ..core.tileset_builder import TileDefinition, TileSpec, build_definition


def load_tileset(catalog_path: str | Path, tiles_dir: str | Path | None = None) -> TileDefinition:
    """
    Load a catalog file and build its tile definition.

    The format is chosen by extension: `.json` is read as JSON, anything
    else as XML.

    Args:
        catalog_path: Path to the catalog file
        tiles_dir: Directory holding `<name>.png` for every base tile, or
            None to build a definition without pixel payloads

    Raises:
        FileNotFoundError: If the catalog file does not exist
        ConfigurationError: If the catalog or a bitmap is malformed
    """
    catalog_path = Path(catalog_path)
    if not catalog_path.exists():
        raise FileNotFoundError(f"Tile catalog not found: {catalog_path}")

    if catalog_path.suffix.lower() == ".json":
        specs, neighbors = parse_json_catalog(catalog_path.read_text(encoding="utf-8"))
    else:
        specs, neighbors = parse_xml_catalog(catalog_path.read_text(encoding="utf-8"))

    bitmaps = None
    if tiles_dir is not None:
        bitmaps = {spec.name: load_bitmap(Path(tiles_dir) / f"{spec.name}.png") for spec in specs}

    return build_definition(specs, neighbors, bitmaps)


def parse_xml_catalog(text: str) -> tuple[list[TileSpec], list[tuple[str, str]]]:
    """Parse XML catalog text into tile specs and (left, right) pairs."""
    try:
        root = ET.fromstring(text.lstrip("\ufeff"))
    except ET.ParseError as e:
        raise ConfigurationError(
            f"XML parse error at line {e.position[0]} col {e.position[1]}: {e}"
        ) from e

    tiles_node = root if root.tag == "tiles" else root.find(".//tiles")
    neighbors_node = root.find(".//neighbors")
    if tiles_node is None:
        raise ConfigurationError("No <tiles> element found in XML.")
    if neighbors_node is None:
        raise ConfigurationError("No <neighbors> element found in XML.")

    specs = []
    for tile in tiles_node.findall("tile"):
        specs.append(
            TileSpec(
                name=_required(tile.attrib, "name"),
                symmetry=(tile.get("symmetry") or "X").strip(),
                weight=_parse_weight(tile.get("weight"), tile.get("name")),
            )
        )

    neighbors = [
        (_required(n.attrib, "left"), _required(n.attrib, "right"))
        for n in neighbors_node.findall("neighbor")
    ]
    return specs, neighbors


def parse_json_catalog(text: str) -> tuple[list[TileSpec], list[tuple[str, str]]]:
    """Parse JSON catalog text into tile specs and (left, right) pairs."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"JSON parse error: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("tiles"), list):
        raise ConfigurationError("Catalog is missing its 'tiles' list")
    if not isinstance(data.get("neighbors"), list):
        raise ConfigurationError("Catalog is missing its 'neighbors' list")

    specs = []
    for position, entry in enumerate(data["tiles"]):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Tile entry {position} must be an object, got {entry!r}")
        specs.append(
            TileSpec(
                name=_required(entry, "name"),
                symmetry=str(entry.get("symmetry") or "X").strip(),
                weight=_parse_weight(entry.get("weight"), entry.get("name")),
            )
        )

    neighbors = []
    for position, entry in enumerate(data["neighbors"]):
        if not isinstance(entry, dict):
            raise ConfigurationError(
                f"Neighbor entry {position} must be an object, got {entry!r}"
            )
        neighbors.append((_required(entry, "left"), _required(entry, "right")))
    return specs, neighbors


def load_bitmap(path: Path) -> np.ndarray:
    """
    Decode a square PNG into an RGBA array of shape (size, size, 4).

    Raises:
        ConfigurationError: If the file is missing, undecodable or not square
    """
    if not path.exists():
        raise ConfigurationError(f"Tile bitmap missing at {path}")

    try:
        img = Image.open(path)
    except UnidentifiedImageError as e:
        raise ConfigurationError(f"Tile bitmap {path} could not be decoded") from e

    with img:
        if img.width != img.height:
            raise ConfigurationError(f"Tile bitmap {path} must be square.")
        try:
            return np.array(img.convert("RGBA"), dtype=np.uint8)
        except OSError as e:
            raise ConfigurationError(f"Tile bitmap {path} could not be decoded") from e


def _required(attrs, key: str) -> str:
    value = attrs.get(key)
    if not value:
        raise ConfigurationError(f'Missing required attribute "{key}".')
    return str(value)


def _parse_weight(raw, name) -> float:
    if raw is None or raw == "":
        return 1.0
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid weight '{raw}' for tile {name}") from None
