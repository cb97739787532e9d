"""Unit tests for the XSB level parser."""

import pytest

from sokocore.constants import FIELD_ATOM, FIELD_FLOOR, FIELD_GOAL, FIELD_WALL
from sokocore.errors import (
    LevelTooTall, LevelTooWide, NoLevelDataFound, ParseError,
    PlayerPositionUndefined, TooManyLevelsInSet, strerror,
)
from sokocore.level_manager import dump_level, load_levels, parse, parse_next
from sokocore.levels import LEVELS


class TestGrid:
    """Tests for how tokens land on the grid."""

    def test_three_cell_example(self) -> None:
        """'@$.' is a 3x1 level with player, atom and goal in a row."""
        level = parse("@$.")[0]
        assert (level.width, level.height) == (3, 1)
        assert level.player_start == (0, 0)
        assert level.field[0, 1] & FIELD_ATOM
        assert level.field[0, 2] & FIELD_GOAL

    def test_symbols(self) -> None:
        level = parse("#######\n#@$*.+#\n#######\n")[0]
        row = [int(c) & ~FIELD_FLOOR for c in level.field[1, :7]]
        assert row == [
            FIELD_WALL, 0, FIELD_ATOM, FIELD_ATOM | FIELD_GOAL,
            FIELD_GOAL, FIELD_GOAL, FIELD_WALL,
        ]
        # '+' is listed after '@', so it is the start position.
        assert level.player_start == (5, 1)

    def test_floor_aliases(self) -> None:
        """Space, dash and underscore are all floor."""
        a = parse("######\n#@  .#\n#  $ #\n######\n")[0]
        b = parse("######\n#@-_.#\n#_-$-#\n######\n")[0]
        assert a.identity_hash == b.identity_hash

    def test_rle_prefix_repeats_next_symbol(self) -> None:
        a = parse("6#\n#@ $.#\n6#\n")[0]
        b = parse("######\n#@ $.#\n######\n")[0]
        assert (a.width, a.height) == (6, 3)
        assert a.identity_hash == b.identity_hash

    def test_pipe_separates_rows(self) -> None:
        level = parse("5#|#@$.#|5#")[0]
        assert (level.width, level.height) == (5, 3)
        assert level.player_start == (1, 1)

    def test_huge_count_before_noop_token(self) -> None:
        """Repeat counts in front of '\\r' or an early row end stay cheap."""
        level = parse(b"99999999999999\r@$.")[0]
        assert (level.width, level.height) == (3, 1)
        level = parse(b"9" * 1000 + b"\n@$.")[0]
        assert level.player_start == (0, 0)

    def test_huge_count_on_grid_symbol_is_too_wide(self) -> None:
        with pytest.raises(LevelTooWide):
            parse(b"@99999999999999#")

    def test_leading_blank_lines_skipped(self) -> None:
        level = parse("\n\n\n#####\n#@$.#\n#####\n")[0]
        assert level.height == 3
        assert level.player_start == (1, 1)

    def test_width_is_longest_row(self) -> None:
        level = parse("####\n#@$.###\n####\n")[0]
        assert level.width == 7

    def test_exterior_floor_removed(self) -> None:
        """Floor outside the walls is cleared; floor inside is kept."""
        level = parse("  #####\n  #@ .#\n  #$  #\n  #####\n")[0]
        assert level.field[0, 0] == 0
        assert level.field[1, 1] == 0
        assert level.field[1, 2] == FIELD_WALL | FIELD_FLOOR
        assert level.field[1, 3] == FIELD_FLOOR
        assert level.field[1, 4] == FIELD_FLOOR
        assert level.field[2, 3] == FIELD_ATOM | FIELD_FLOOR

    def test_nothing_outside_extent(self) -> None:
        level = parse("#####\n#@$.#\n#####\n")[0]
        assert not level.field[level.height:, :].any()
        assert not level.field[:, level.width:].any()

    def test_goal_count(self, corner_level) -> None:
        assert corner_level.goal_count() == 1
        assert parse("#######\n#@$*.+#\n#######\n")[0].goal_count() == 3

    def test_field_is_read_only(self) -> None:
        level = parse("@$.")[0]
        with pytest.raises(ValueError):
            level.field[0, 0] = FIELD_WALL


class TestComments:
    """Tests for leading and trailing comments."""

    def test_leading_and_trailing(self) -> None:
        level_set = load_levels("; Title\n@$.\n; After\n")
        level = level_set[0]
        assert level.precomment == "Title"
        assert level.postcomment == "After"
        assert level.comment == "After"
        assert level_set.comment == "Title"

    def test_first_comment_wins(self) -> None:
        level = parse("; one\n; two\n@$.\n")[0]
        assert level.precomment == "one"

    def test_trailing_comment_ends_block(self) -> None:
        levels = parse("@$.\n; first\n#@$.#\n; second\n")
        assert len(levels) == 2
        assert levels[0].comment == "first"
        assert levels[1].comment == "second"
        assert levels[1].width == 5

    def test_comment_falls_back_to_leading(self) -> None:
        level = parse("; only before\n@$.\n")[0]
        assert level.comment == "only before"

    def test_comment_trimmed(self) -> None:
        level = parse("@$.\n;    spaced out   \r\n")[0]
        assert level.comment == "spaced out"

    def test_comment_marker_is_dropped(self) -> None:
        """Any non-grid character opens a comment and is not kept."""
        level = parse("@$.\nTitle: Example\n")[0]
        assert level.comment == "itle: Example"

    def test_comment_truncated(self) -> None:
        level = parse("@$.\n;" + "x" * 300 + "\n")[0]
        assert level.comment == "x" * 127

    def test_comment_is_utf8(self) -> None:
        level = parse("@$.\n; Größe\n")[0]
        assert level.comment == "Größe"

    def test_truncation_drops_split_character(self) -> None:
        """'é' straddles the byte limit and is dropped whole."""
        level = parse("@$.\n;" + "x" * 126 + "é\n")[0]
        assert level.comment == "x" * 126


class TestErrors:
    """Tests for invalid level blocks."""

    def test_too_wide(self) -> None:
        with pytest.raises(LevelTooWide):
            parse("#@" + "#" * 60 + "\n")

    def test_widest_allowed(self) -> None:
        level = parse("#@" + "#" * 59 + "\n")[0]
        assert level.width == 61

    def test_too_wide_via_rle(self) -> None:
        with pytest.raises(LevelTooWide):
            parse("@61#")

    def test_too_tall(self) -> None:
        with pytest.raises(LevelTooTall):
            parse("@\n" + "#\n" * 61)

    def test_missing_player(self) -> None:
        with pytest.raises(PlayerPositionUndefined):
            parse("#####\n#$ .#\n#####\n")

    def test_no_level_data(self) -> None:
        with pytest.raises(NoLevelDataFound):
            parse("; just a comment\n; and another\n")

    def test_empty_buffer(self) -> None:
        with pytest.raises(NoLevelDataFound):
            parse(b"")

    def test_errors_are_parse_errors(self) -> None:
        with pytest.raises(ParseError) as info:
            parse("#@" + "#" * 60)
        assert info.value.level_index == 1

    def test_later_error_keeps_earlier_levels(self) -> None:
        """A bad second block stops loading but keeps the first level."""
        level_set = load_levels("@$.\n; one\n" + "62#\n")
        assert len(level_set) == 1
        assert isinstance(level_set.error, LevelTooWide)
        assert level_set.error.level_index == 2

    def test_too_many_levels(self) -> None:
        text = "@$.\n; a\n@$.\n; b\n@$.\n; c\n"
        level_set = load_levels(text, max_levels=2)
        assert len(level_set) == 2
        assert isinstance(level_set.error, TooManyLevelsInSet)

    def test_zero_capacity_raises(self) -> None:
        with pytest.raises(TooManyLevelsInSet):
            load_levels("@$.", max_levels=0)

    def test_strerror_message(self) -> None:
        with pytest.raises(PlayerPositionUndefined) as info:
            parse("###")
        assert str(info.value).startswith("Player position not defined")
        assert strerror(info.value) == "Player position not defined"
        assert strerror(LevelTooTall) == "Level height too high"
        assert strerror(KeyError()) == "Unknown error"


class TestParseNext:
    """Tests for walking a buffer block by block."""

    def test_cursor_advances_until_end(self) -> None:
        data = b"@$.\n; one\n.$@\n; two\n"
        first, cursor = parse_next(data)
        second, cursor = parse_next(data, cursor, level_index=2)
        end, final = parse_next(data, cursor, level_index=3)
        assert first.player_start == (0, 0)
        assert second.player_start == (2, 0)
        assert second.level_index == 2
        assert end is None
        assert final == len(data)

    def test_nul_byte_ends_buffer(self) -> None:
        level, _ = parse_next(b"@$.\x00#####")
        assert level.width == 3

    def test_end_of_buffer_is_not_an_error(self) -> None:
        level, cursor = parse_next(b"; trailing comment\n", 0)
        assert level is None


class TestLoadLevels:
    """Tests for load_levels() over whole files."""

    def test_level_index_is_one_based(self, starter_set) -> None:
        assert [lv.level_index for lv in starter_set] == [1, 2, 3]

    def test_builtin_starter_set(self, starter_set) -> None:
        assert starter_set.comment == "Starter set"
        assert starter_set.error is None
        assert [lv.comment for lv in starter_set] == [
            "Corridor", "Straight up", "Around the corner",
        ]

    def test_builtin_rle_set_matches_plain_corridor(self, starter_set) -> None:
        compressed = load_levels(LEVELS[1])
        assert compressed[0].identity_hash == starter_set[0].identity_hash

    def test_all_builtin_sets_load(self) -> None:
        levels = parse("".join(LEVELS))
        assert len(levels) == 4

    def test_accepts_bytes_and_str(self) -> None:
        assert parse(b"@$.")[0].identity_hash == parse("@$.")[0].identity_hash


class TestDumpLevel:
    """Tests for rendering a level back to text."""

    def test_round_trip(self, starter_set) -> None:
        for level in starter_set:
            again = parse(dump_level(level))[0]
            assert again.identity_hash == level.identity_hash

    def test_header_and_solution(self, corner_level) -> None:
        text = dump_level(corner_level, "uLdlU")
        lines = text.splitlines()
        assert lines[0] == f"; Level id: {corner_level.key}"
        assert lines[-2:] == ["; Solution", "; uLdlU"]

    def test_without_solution(self, corner_level) -> None:
        assert dump_level(corner_level).endswith("; No solution available\n")

    def test_rows(self, corner_level) -> None:
        lines = dump_level(corner_level).splitlines()
        assert lines[2:7] == [
            "######",
            "#.   #",
            "# $  #",
            "#  @ #",
            "######",
        ]
