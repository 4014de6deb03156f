"""Style primitives for raw terminal output.

ANSI attribute codes plus the width-aware layout helpers used by every widget
and view. Widths are measured in terminal cells, so emoji and other wide glyphs
are padded and truncated by how much of the screen they actually occupy.
"""

from rich.cells import cell_len, set_cell_size


class Colors:
    """Terminal attribute codes."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    ITALIC = "\033[3m"
    UNDERLINE = "\033[4m"
    BLINK = "\033[5m"
    REVERSE = "\033[7m"

    # Foreground colors
    BLACK = "\033[30m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    # Background colors
    BG_BLUE = "\033[44m"
    BG_WHITE = "\033[47m"


ELLIPSIS = "..."


def style(text: str, *codes: str) -> str:
    """Wrap text with attribute codes and a single trailing reset.

    Args:
        text: Text to style
        *codes: Attribute codes from Colors

    Returns:
        Styled text, or the text unchanged when no codes are given
    """
    if not codes:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def pad(text: str, width: int) -> str:
    """Right-pad with spaces or cut text so it is exactly `width` cells wide."""
    if width <= 0:
        return ""
    return set_cell_size(text, width)


def truncate(text: str, max_width: int) -> str:
    """Shorten text to at most `max_width` cells, ending in an ellipsis.

    Args:
        text: Text to shorten
        max_width: Maximum display width in cells

    Returns:
        The text unchanged if it fits. Otherwise the first `max_width - 3`
        cells followed by "...", or a hard cut without ellipsis when
        `max_width` leaves no room for one.
    """
    if max_width <= 0:
        return ""
    if cell_len(text) <= max_width:
        return text
    if max_width <= len(ELLIPSIS):
        return set_cell_size(text, max_width)
    return set_cell_size(text, max_width - len(ELLIPSIS)) + ELLIPSIS


def display_width(text: str) -> int:
    """Number of terminal cells the text occupies."""
    return cell_len(text)
