"""Include/exclude tag filtering for bulk sync."""

from collections.abc import Collection


def should_sync(
    note_tags: Collection[str],
    include_tags: Collection[str],
    exclude_tags: Collection[str],
) -> bool:
    """Decide whether a note takes part in a bulk sync.

    All arguments are expected to be lowercased already. Exclusion wins over
    inclusion, and an empty include list admits every note not excluded.
    """
    if not note_tags and include_tags:
        return False
    if exclude_tags and any(tag in exclude_tags for tag in note_tags):
        return False
    if not include_tags:
        return True
    return any(tag in include_tags for tag in note_tags)
