"""Integration tests for the generate command-line tool."""

import json

import pytest
from PIL import Image

from tools.generate import main


def test_writes_result_file(coast_catalog, tmp_path, capsys):
    """JSON output holds the grid, one row per grid row."""
    xml_path, _ = coast_catalog
    output = tmp_path / "out.json"

    main(["--xml", str(xml_path), "-W", "6", "-H", "4", "--seed", "3", "-o", str(output)])

    data = json.loads(output.read_text())
    assert (data["width"], data["height"]) == (6, 4)
    assert data["seed"] == 3
    assert len(data["rows"]) == 4
    assert all(len(row) == 6 for row in data["rows"])
    assert "Saved:" in capsys.readouterr().out


def test_writes_png(coast_catalog, tmp_path):
    xml_path, tiles_dir = coast_catalog
    output = tmp_path / "out.png"

    main(
        [
            "--xml", str(xml_path), "--tiles", str(tiles_dir),
            "-W", "3", "-H", "2", "--scale", "2", "-o", str(output),
        ]
    )

    with Image.open(output) as img:
        assert img.size == (3 * 4 * 2, 2 * 4 * 2)


def test_prints_grid_without_output(coast_catalog, capsys):
    xml_path, _ = coast_catalog

    main(["--xml", str(xml_path), "-W", "4", "-H", "2", "--heuristic", "spiral", "--adjusters", "none"])

    out = capsys.readouterr().out
    assert "Generated 4x2 grid with 3 tiles" in out


def test_missing_catalog_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--xml", str(tmp_path / "missing.xml")])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().out


def test_bad_option_exits(coast_catalog, capsys):
    xml_path, _ = coast_catalog
    with pytest.raises(SystemExit) as exc:
        main(["--xml", str(xml_path), "--heuristic", "diagonal"])
    assert exc.value.code == 1
    assert "Unknown heuristic" in capsys.readouterr().out


def test_png_requires_tiles(coast_catalog, tmp_path, capsys):
    xml_path, _ = coast_catalog
    with pytest.raises(SystemExit) as exc:
        main(["--xml", str(xml_path), "-o", str(tmp_path / "x.png")])
    assert exc.value.code == 1
    assert "requires --tiles" in capsys.readouterr().out


def test_exhaustion_exits(tmp_path, capsys):
    catalog = tmp_path / "checker.json"
    catalog.write_text(
        json.dumps({"tiles": [{"name": "a"}, {"name": "b"}], "neighbors": [{"left": "a", "right": "b"}]})
    )
    with pytest.raises(SystemExit) as exc:
        main(["--xml", str(catalog), "-W", "3", "-H", "3", "--periodic", "--restarts", "2"])
    assert exc.value.code == 1
    assert "Failed to generate a valid output after 2 attempt(s)" in capsys.readouterr().out


def test_corrupt_tile_bitmap_exits(coast_catalog, capsys):
    """An undecodable tile PNG is reported, not raised."""
    xml_path, tiles_dir = coast_catalog
    (tiles_dir / "land.png").write_bytes(b"not a png")

    with pytest.raises(SystemExit) as exc:
        main(["--xml", str(xml_path), "--tiles", str(tiles_dir)])
    assert exc.value.code == 1
    assert "could not be decoded" in capsys.readouterr().out
