"""Reads the metadata block at the top of rule files.

A rule file may start with a block fenced by two lines of exactly ``---``::

    ---
    description: Conventions for writing tests
    globs: tests/**/*.py
    ---
    Rule body...

Only the ``description`` key is read; everything else is opaque payload.
"""

FRONTMATTER_FENCE = "---"
DESCRIPTION_KEY = "description:"


def extract_frontmatter_lines(content: str) -> list[str] | None:
    """Return the lines between the opening and closing fences, or None if there is no metadata block."""
    # Rule files written on Windows keep their CRLF line endings.
    lines = [line.removesuffix("\r") for line in content.split("\n")]
    if lines[0] != FRONTMATTER_FENCE:
        return None
    for index, line in enumerate(lines[1:], start=1):
        if line == FRONTMATTER_FENCE:
            return lines[1:index]
    return None


def extract_description(content: str) -> str | None:
    """Extract the description declared in a rule file's metadata block.

    Returns None when the file has no metadata block, the block has no
    ``description:`` line, the description is empty, or the input is not text.
    """
    if not isinstance(content, str):
        return None
    frontmatter = extract_frontmatter_lines(content)
    if frontmatter is None:
        return None
    for line in frontmatter:
        if line.startswith(DESCRIPTION_KEY):
            return line[len(DESCRIPTION_KEY) :].strip() or None
    return None
