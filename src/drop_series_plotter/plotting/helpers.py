from typing import Any

from matplotlib import colors as mcolors


def normalize_color(color: Any) -> str:
    """Return ``color`` as an upper-case ``#RRGGBB`` string.

    Anything matplotlib understands is accepted (hex, CSS names, RGB tuples);
    everything else raises ValueError.
    """
    value = color.strip() if isinstance(color, str) else color
    if value is None or (isinstance(value, str) and not value):
        raise ValueError("Color cannot be blank.")
    if isinstance(value, str) and value.lower() == "none":
        raise ValueError("Color cannot be 'none'.")
    if not mcolors.is_color_like(value):
        raise ValueError(f"Invalid color: {color!r}")
    return mcolors.to_hex(value).upper()
