"""
Utility functions for aika.
"""


def wrap_paragraph(paragraph: str, width: int) -> str:
    """
    Greedily wrap one paragraph at a column width.

    Whitespace, including single newlines, is collapsed between words.
    Words longer than the width are split into width-sized pieces.

    Args:
        paragraph: Text to wrap
        width: Maximum line length

    Returns:
        Wrapped text with lines joined by newlines
    """
    lines: list[str] = []
    current = ""

    for word in paragraph.split():
        needed = len(word) if not current else len(current) + 1 + len(word)

        if needed <= width:
            current = f"{current} {word}" if current else word
            continue

        if current:
            lines.append(current)
            current = ""

        while len(word) > width:
            lines.append(word[:width])
            word = word[width:]
        current = word

    if current:
        lines.append(current)

    return "\n".join(lines)


def wrap_text(text: str, width: int) -> str:
    """
    Wrap text paragraph by paragraph.

    Paragraphs are separated by blank lines ("\\n\\n") and stay separated
    that way in the output. A width of 0 yields an empty string.

    Example:
        >>> wrap_text("Some text\\n\\nwith multiple\\n\\nnew lines", 10)
        'Some text\\n\\nwith\\nmultiple\\n\\nnew lines'
    """
    if width <= 0:
        return ""

    return "\n\n".join(wrap_paragraph(paragraph, width) for paragraph in text.split("\n\n"))
