"""Conversion between a label list and the comma-separated label editor text."""

LABEL_SEPARATOR = ","


def parse_labels(text: str) -> list[str]:
    """
    Parse label editor text into a list of labels.

    Splits on commas, trims whitespace and drops empty entries, keeping order.

    >>> parse_labels(" important, ,quran ")
    ['important', 'quran']
    """
    return [label.strip() for label in text.split(LABEL_SEPARATOR) if label.strip()]


def format_labels(labels: list[str] | None) -> str:
    """Render labels as editor text, e.g. `important, quran`."""
    return f"{LABEL_SEPARATOR} ".join(labels or [])
