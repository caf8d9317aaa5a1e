from voicemark.utils.text import BLOCK_WHITESPACE, SENTENCE_TERMINATORS


def find_delete_start_index(block_text: str, cursor_offset: int) -> int:
    """
    Finds where a "delete last sentence" edit should start.

    The last sentence is the one ending at or before the cursor, after
    trailing whitespace is skipped. Deletion runs from the returned index
    to the cursor.

    Every '.', '!' and '?' counts as a terminator, so "Dr. Smith" splits
    after "Dr.". Abbreviations and decimals are not recognised.

    find_delete_start_index("Single sentence.", 16)      -> 0
    find_delete_start_index("First. Second. Third.", 21) -> 15
    """
    if cursor_offset <= 0:
        return 0
    cursor_offset = min(cursor_offset, len(block_text))

    # 1. Skip trailing whitespace before the cursor
    end_pos = cursor_offset - 1
    while end_pos >= 0 and block_text[end_pos] in BLOCK_WHITESPACE:
        end_pos -= 1

    if end_pos < 0:
        return 0

    # 2. Terminator closing the last sentence
    last_terminator = _rfind_terminator(block_text, end_pos)
    if last_terminator == -1:
        return 0

    # 3. Terminator closing the sentence before it
    prev_terminator = _rfind_terminator(block_text, last_terminator - 1)
    delete_start = prev_terminator + 1

    # 4. Don't leave the gap between the two sentences behind
    while delete_start < cursor_offset and block_text[delete_start] in BLOCK_WHITESPACE:
        delete_start += 1

    return delete_start


def _rfind_terminator(text: str, from_pos: int) -> int:
    for i in range(from_pos, -1, -1):
        if text[i] in SENTENCE_TERMINATORS:
            return i
    return -1
