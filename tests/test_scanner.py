from voicemark.compiler.grammar import MISHEARD_COMMANDS, SUPPORTED_COMMANDS
from voicemark.compiler.scanner import (
    SEGMENT_COMMAND,
    SEGMENT_TEXT,
    SEGMENT_TRIGGER,
    PhraseMatch,
    PrefixMatch,
    find_next_prefix,
    iter_segments,
    match_command_phrase,
)

PREFIXES = ["voicemark", "voice mark"]


class TestFindNextPrefix:
    def test_finds_prefix(self):
        assert find_next_prefix("Hello voicemark comma", 0, PREFIXES) == PrefixMatch(6, 15, "voicemark")

    def test_keeps_original_casing(self):
        match = find_next_prefix("Hello VoiceMark comma", 0, PREFIXES)
        assert match.prefix == "VoiceMark"

    def test_two_word_prefix(self):
        match = find_next_prefix("Test Voice Mark comma", 0, PREFIXES)
        assert match == PrefixMatch(5, 15, "Voice Mark")

    def test_no_prefix(self):
        assert find_next_prefix("Just plain text", 0, PREFIXES) is None

    def test_not_inside_word(self):
        assert find_next_prefix("The invoicemark is here", 0, PREFIXES) is None
        assert find_next_prefix("This is voicemarkable", 0, PREFIXES) is None

    def test_skips_embedded_occurrence_and_finds_later_whole_word(self):
        match = find_next_prefix("invoicemark then voicemark", 0, PREFIXES)
        assert match.start == 17

    def test_earliest_prefix_wins(self):
        match = find_next_prefix("a voice mark b voicemark", 0, PREFIXES)
        assert match == PrefixMatch(2, 12, "voice mark")

    def test_tie_goes_to_first_prefix_in_order(self):
        match = find_next_prefix("voice mark comma", 0, ["voice", "voice mark"])
        assert match == PrefixMatch(0, 5, "voice")

    def test_search_starts_at_offset(self):
        match = find_next_prefix("voicemark a voicemark", 1, PREFIXES)
        assert match.start == 12

    def test_punctuation_is_not_a_boundary_by_default(self):
        assert find_next_prefix("Hello Voice Mark, comma", 0, PREFIXES) is None

    def test_punctuation_is_a_boundary_when_lenient(self):
        match = find_next_prefix("Hello Voice Mark, comma", 0, PREFIXES, lenient=True)
        assert match == PrefixMatch(6, 16, "Voice Mark")


class TestMatchCommandPhrase:
    def test_multi_word_phrase(self):
        assert match_command_phrase("voicemark full stop", 9, SUPPORTED_COMMANDS) == PhraseMatch("full stop", 19)

    def test_prefers_longest_phrase(self):
        assert match_command_phrase("x new line", 1, ["new", "new line"]) == PhraseMatch("new line", 10)

    def test_case_insensitive(self):
        assert match_command_phrase(" Make Bold", 0, SUPPORTED_COMMANDS) == PhraseMatch("make bold", 10)

    def test_requires_word_boundary(self):
        assert match_command_phrase(" commas", 0, SUPPORTED_COMMANDS) is None

    def test_nothing_after_trigger(self):
        assert match_command_phrase("voicemark   ", 9, SUPPORTED_COMMANDS) is None

    def test_unknown_phrase(self):
        assert match_command_phrase(" do something", 0, SUPPORTED_COMMANDS) is None

    def test_misheard_alias(self):
        assert match_command_phrase(" coma", 0, SUPPORTED_COMMANDS, MISHEARD_COMMANDS) == PhraseMatch("comma", 5)

    def test_exact_phrase_beats_alias(self):
        match = match_command_phrase(" comma", 0, SUPPORTED_COMMANDS, MISHEARD_COMMANDS)
        assert match == PhraseMatch("comma", 6)

    def test_lenient_skips_punctuation_after_trigger(self):
        match = match_command_phrase(", question mark", 0, SUPPORTED_COMMANDS, lenient=True)
        assert match == PhraseMatch("question mark", 15)


class TestIterSegments:
    def test_segments_tile_the_text(self):
        text = "Hi voicemark comma there voicemark zzz"
        segments = list(iter_segments(text, PREFIXES, SUPPORTED_COMMANDS))

        assert [s.kind for s in segments] == [
            SEGMENT_TEXT,
            SEGMENT_COMMAND,
            SEGMENT_TEXT,
            SEGMENT_TRIGGER,
            SEGMENT_TEXT,
        ]
        assert "".join(text[s.start : s.end] for s in segments) == text

    def test_command_segment_fields(self):
        segments = list(iter_segments("Voice Mark make italics", PREFIXES, SUPPORTED_COMMANDS))

        assert len(segments) == 1
        assert segments[0].prefix == "Voice Mark"
        assert segments[0].phrase == "make italics"
        assert segments[0].text == "Voice Mark make italics"

    def test_empty_text(self):
        assert list(iter_segments("", PREFIXES, SUPPORTED_COMMANDS)) == []
