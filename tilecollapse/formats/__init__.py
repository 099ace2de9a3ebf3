"""
File formats: tile catalogs, PNG tile bitmaps and result files.
"""

from .result_file import load_result, result_to_dict, save_result
from .tileset_loader import load_bitmap, load_tileset, parse_json_catalog, parse_xml_catalog

__all__ = [
    "load_result",
    "result_to_dict",
    "save_result",
    "load_bitmap",
    "load_tileset",
    "parse_json_catalog",
    "parse_xml_catalog",
]
