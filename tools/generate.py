#!/usr/bin/env python3
"""
Tile Collapse - Grid Generator

Fills a grid from a tile catalog and writes it as a PNG render or a JSON
result file.
"""

import argparse
import logging
import sys
from pathlib import Path

from tilecollapse.core.config import ModelOptions, parse_adjusters
from tilecollapse.core.errors import ConfigurationError, ExhaustedAttemptsError
from tilecollapse.formats.result_file import save_result
from tilecollapse.formats.tileset_loader import load_tileset
from tilecollapse.generator import DEFAULT_RESTARTS, Generator
from tilecollapse.logging_config import setup_logging


def write_output(result, output_path: Path, scale: int):
    """Write a PNG render or a JSON result file, chosen by extension."""
    if output_path.suffix.lower() == ".png":
        from tilecollapse.rendering.pil_renderer import render_model_to_image

        img = render_model_to_image(result.model, scale=scale)
        img.save(output_path)
        print(f"Saved: {output_path} ({img.width}x{img.height})")
    else:
        save_result(output_path, result)
        print(f"Saved: {output_path}")


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Generate a tile grid with Wave Function Collapse",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Generate a 20x20 grid and save the tile ids:
    tilecollapse-generate --xml data/tilesets/pipes.xml -W 20 -H 20 -o out.json

  Render with tile bitmaps:
    tilecollapse-generate --xml pipes.xml --tiles pipes/ -o out.png --scale 2

  Wrap around the edges, scanline order, no adjusters:
    tilecollapse-generate --xml pipes.xml --periodic --heuristic scanline \\
        --adjusters none -o out.json
        """,
    )
    parser.add_argument(
        "--xml", required=True, help="Tile catalog (.xml, or .json for a JSON catalog)"
    )
    parser.add_argument("--tiles", help="Directory holding <name>.png for every tile")
    parser.add_argument("-W", "--width", type=int, default=20, help="Grid width (default: 20)")
    parser.add_argument("-H", "--height", type=int, default=20, help="Grid height (default: 20)")
    parser.add_argument("-s", "--seed", type=int, default=0, help="First seed (default: 0)")
    parser.add_argument(
        "--limit",
        type=int,
        default=-1,
        help="Maximum steps per attempt, -1 for no limit (default: -1)",
    )
    parser.add_argument(
        "--restarts",
        type=int,
        default=DEFAULT_RESTARTS,
        help=f"Attempts before giving up (default: {DEFAULT_RESTARTS})",
    )
    parser.add_argument("--periodic", action="store_true", help="Wrap the grid edges")
    parser.add_argument(
        "--heuristic",
        default="entropy",
        help="Cell order: entropy, mrv, scanline or spiral (default: entropy)",
    )
    parser.add_argument(
        "--pattern",
        default="weighted",
        help="Tile choice: weighted or least-used (default: weighted)",
    )
    parser.add_argument(
        "--adjusters",
        default="contextual,coherence",
        help="Comma-separated adjuster order, or 'none' (default: contextual,coherence)",
    )
    parser.add_argument("-o", "--output", help="Output .png or .json file")
    parser.add_argument("--scale", type=int, default=1, help="PNG upscale factor (default: 1)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.output and args.output.lower().endswith(".png") and not args.tiles:
        print("Error: PNG output requires --tiles")
        sys.exit(1)

    try:
        definition = load_tileset(args.xml, args.tiles)
        options = ModelOptions(
            width=args.width,
            height=args.height,
            periodic=args.periodic,
            heuristic=args.heuristic,
            pattern_strategy=args.pattern,
            adjusters=parse_adjusters(args.adjusters),
        )
        generator = Generator(definition, options, restarts=args.restarts, limit=args.limit)
        result = generator.generate(args.seed)
    except (FileNotFoundError, ConfigurationError, ExhaustedAttemptsError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(
        f"Generated {args.width}x{args.height} grid with {definition.tile_count} tiles "
        f"after {result.attempts} attempt(s) (seed {result.seed})"
    )

    if args.output:
        write_output(result, Path(args.output), args.scale)
    else:
        for row in result.model.observed_grid():
            print(" ".join(f"{t:3d}" for t in row))


if __name__ == "__main__":
    main()
