# utils.py

from mmu import InvalidInput

FREE_COLOR = "#d3d3d3"


def get_color(page_no):
    """Return a color for a frame: grey when free, a stable pastel per page."""
    if page_no is None:
        return FREE_COLOR
    return f"hsl({(page_no * 47) % 360}, 70%, 75%)"


def parse_logical_address(text):
    """Parse a user-typed address (decimal or 0x-prefixed hex)."""
    raw = str(text).strip()
    try:
        value = int(raw, 16) if raw.lower().startswith("0x") else int(raw)
    except ValueError:
        raise InvalidInput(f"Please enter a valid logical address (got {raw!r})") from None
    if value < 0:
        raise InvalidInput(f"Please enter a valid logical address (got {raw!r})")
    return value


def parse_page_refs(text):
    """Parse a comma separated page reference string such as '1,2,1,3'."""
    refs = []
    for part in str(text).split(","):
        part = part.strip()
        if part == "":
            continue
        try:
            page_no = int(part)
        except ValueError:
            raise InvalidInput(f"Page reference {part!r} is not a number") from None
        if page_no < 0:
            raise InvalidInput(f"Page reference {part!r} is negative")
        refs.append(page_no)
    return refs
