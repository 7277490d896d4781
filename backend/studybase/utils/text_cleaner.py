"""Text cleaning and normalization utilities."""
import re


def normalize(text: str) -> str:
    """
    Normalize extracted document text.

    Line endings become "\\n", trailing spaces and tabs are removed from every
    line, runs of blank lines collapse to a single blank line and the whole
    document is stripped. Applying it twice gives the same result as once.

    Args:
        text: Raw text to normalize (None is treated as empty)

    Returns:
        Normalized text
    """
    text = text or ""

    # Normalize line breaks
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    # Remove trailing whitespace before line breaks
    text = re.sub(r"[ \t]+\n", "\n", text)

    # Remove excessive newlines (more than 2 consecutive)
    text = re.sub(r"\n{3,}", "\n\n", text)

    return text.strip()
