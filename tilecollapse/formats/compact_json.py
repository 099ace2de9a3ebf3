"""
Compact JSON formatter that keeps rows of numbers on single lines.

Generated grids are mostly arrays of tile ids; keeping each row on one
line makes result files readable as a picture of the grid.
"""

import json


def _is_scalar(value) -> bool:
    return value is None or isinstance(value, (bool, int, float, str))


def _is_numeric_row(value) -> bool:
    return isinstance(value, (list, tuple)) and all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in value
    )


def dumps(obj, indent: int = 2) -> str:
    """
    Serialize obj to a JSON formatted string.

    Lists and tuples holding only numbers are written on one line; other
    containers are indented normally.

    Args:
        obj: The object to serialize
        indent: Number of spaces for indentation (default: 2)
    """

    def format_value(value, level: int) -> str:
        pad = " " * (indent * level)
        child_pad = " " * (indent * (level + 1))

        if _is_scalar(value) or _is_numeric_row(value):
            return json.dumps(value if not isinstance(value, tuple) else list(value))

        if isinstance(value, (list, tuple)):
            if not value:
                return "[]"
            items = [child_pad + format_value(x, level + 1) for x in value]
            return "[\n" + ",\n".join(items) + "\n" + pad + "]"

        if isinstance(value, dict):
            if not value:
                return "{}"
            items = [
                f"{child_pad}{json.dumps(str(k))}: {format_value(v, level + 1)}"
                for k, v in value.items()
            ]
            return "{\n" + ",\n".join(items) + "\n" + pad + "}"

        return json.dumps(value)

    return format_value(obj, 0)


def dump(obj, fp, indent: int = 2) -> None:
    """Serialize obj to a writable text stream, ending with a newline."""
    fp.write(dumps(obj, indent))
    fp.write("\n")


def load(fp):
    """Read JSON from a text stream."""
    return json.load(fp)
