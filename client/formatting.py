"""Display helpers for the client."""

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(size: int) -> str:
    """Human-readable size: ``0 Bytes``, ``1.5 KB``, ``3 MB`` ...

    The value is divided by 1024 until it drops below 1024 or the largest
    unit is reached, then rounded to two decimals with trailing zeros dropped.
    """
    if size <= 0:
        return "0 Bytes"

    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"
