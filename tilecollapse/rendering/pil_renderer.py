"""
Tile Collapse - PIL Renderer

Rasterizes a model's grid: observed cells are drawn with their tile's
bitmap, unresolved cells as a weighted blend of every tile they can still
become, contradicted cells as opaque black.
"""

import io

import numpy as np

try:
    from PIL import Image
except ImportError:
    raise ImportError("Pillow library required. Install with: pip install Pillow")

CONTRADICTION_COLOR = (0, 0, 0, 255)


def blend_tiles(stack: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """
    Weighted per-pixel average of tile bitmaps.

    Args:
        stack: Bitmaps of shape (tiles, size, size, 4)
        weights: One weight per bitmap

    Returns:
        uint8 bitmap of shape (size, size, 4)
    """
    total = float(weights.sum())
    if total <= 0:
        weights = np.ones_like(weights)
        total = float(len(weights))
    blended = np.tensordot(weights / total, stack.astype(np.float64), axes=1)
    return np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def render_model_array(model) -> np.ndarray:
    """Render a model to an RGBA array of shape (height*size, width*size, 4)."""
    definition = model.definition
    if not definition.has_pixels:
        raise ValueError("Tile definition has no bitmaps to render")

    size = definition.tile_size
    tiles = np.stack([tile.pixels for tile in definition.tiles])
    weights = np.asarray(definition.weights, dtype=np.float64)
    state = model.state

    canvas = np.zeros((model.height * size, model.width * size, 4), dtype=np.uint8)

    for index in range(model.cell_count):
        x, y = model.coord_from_index(index)
        tile = int(state.observed[index])
        possible = state.wave[index]

        if tile >= 0:
            cell = tiles[tile]
        elif possible.any():
            cell = blend_tiles(tiles[possible], weights[possible])
        else:
            cell = np.empty((size, size, 4), dtype=np.uint8)
            cell[:] = CONTRADICTION_COLOR

        canvas[y * size : (y + 1) * size, x * size : (x + 1) * size] = cell

    return canvas


def render_model_to_image(model, scale: int = 1) -> Image.Image:
    """
    Render a model to a PIL Image.

    Args:
        model: Model whose definition carries tile bitmaps
        scale: Integer upscaling factor (nearest neighbour)

    Returns:
        RGBA PIL Image
    """
    img = Image.fromarray(render_model_array(model))
    if scale > 1:
        img = img.resize((img.width * scale, img.height * scale), Image.Resampling.NEAREST)
    return img


def render_model_to_png(model, scale: int = 1) -> bytes:
    """Render a model and encode it as PNG bytes."""
    buffer = io.BytesIO()
    render_model_to_image(model, scale).save(buffer, format="PNG")
    return buffer.getvalue()
