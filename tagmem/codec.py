"""
Category file codec.

A category file is a sequence of blocks separated by a blank line.
A block may start with a tag line (``# tag1 tag2``); every other
non-blank line in the block is one memory entry carrying those tags.
Blocks without a tag line are grouped under ``untagged``.

Example file::

    # style
    Uses 2-space indentation

    # tools
    Uses eslint

    Prefers short commit messages

Reading merges blocks that share the same tag key, so the grouping
returned by decode() is by tag text, not by block.
"""

RECORD_SEPARATOR = "\n\n"
TAG_PREFIX = "#"
UNTAGGED_KEY = "untagged"
CATEGORY_SUFFIX = ".txt"


def tag_key(tags: list[str]) -> str:
    """Grouping key for a tag list: tags joined by single spaces."""
    return " ".join(tags)


def decode(content: str) -> dict[str, list[str]]:
    """
    Parse category file content into entries grouped by tag key.

    Key order follows first appearance in the file; entries under a key
    keep file (append) order.

    Args:
        content: Raw text of a category file

    Returns:
        Mapping of tag key -> entry bodies. Empty for blank content.
    """
    memories: dict[str, list[str]] = {}

    for block in content.split(RECORD_SEPARATOR):
        if not block.strip():
            continue

        lines = block.split("\n")
        first = lines[0]

        if first.startswith(TAG_PREFIX):
            key = tag_key(first[len(TAG_PREFIX):].split())
            entries = [line for line in lines[1:] if line.strip()]
        else:
            key = UNTAGGED_KEY
            entries = [line for line in lines if line.strip()]

        memories.setdefault(key, []).extend(entries)

    return memories


def encode_append(tags: list[str], body: str) -> str:
    """
    Encode one memory as a block that can be appended to a category file.

    The block always ends with the record separator, so the caller never
    needs to look at what the file currently ends with.
    """
    fragment = ""
    if tags:
        fragment += f"{TAG_PREFIX} {tag_key(tags)}\n"
    fragment += f"{body}{RECORD_SEPARATOR}"
    return fragment


def filter_out(content: str, substring: str) -> str:
    """
    Drop every block whose raw text contains ``substring``.

    Matching is plain case-sensitive containment over the whole block,
    tag line included, so a hit on a tag removes all entries of that
    block. Surviving blocks are rejoined verbatim; empty fragments from
    the split are kept, so separator counts are not normalized.
    """
    blocks = content.split(RECORD_SEPARATOR)
    return RECORD_SEPARATOR.join(b for b in blocks if substring not in b)


def flatten(grouped: dict[str, list[str]]) -> list[str]:
    """Concatenate all tag groups into one list, in group order."""
    flat: list[str] = []
    for entries in grouped.values():
        flat.extend(entries)
    return flat
