"""
Spacing between successive pieces of dictated text.

The caller owns the "last inserted text" and passes it back in as `prev`;
nothing here keeps state between calls.
"""

NO_SPACE_BEFORE = (",", ".", "!", "?", ";", ":")


def should_insert_space_before(text: str) -> bool:
    """
    False if `text` is empty or starts with punctuation that attaches
    to the previous word.
    """
    if not text:
        return False
    return text[0] not in NO_SPACE_BEFORE


def normalize_spacing(prev: str, next: str) -> str:
    """
    Returns the separator to insert before `next`: either "" or " ".

    normalize_spacing("Hello", "world")   -> " "
    normalize_spacing("Hello", ",")       -> ""
    normalize_spacing("", "Hello")        -> ""
    normalize_spacing("Hello\\n", "World") -> ""
    """
    if not prev:
        return ""

    if prev.endswith("\n"):
        return ""

    if not should_insert_space_before(next):
        return ""

    return " "
