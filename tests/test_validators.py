"""Tests for shared Discord validators."""

import pytest

from guild_playback.domain.shared.validators import parse_snowflake_list, validate_discord_snowflake


class TestValidateDiscordSnowflake:
    """Tests for Discord snowflake ID validation."""

    def test_valid_snowflake(self):
        assert validate_discord_snowflake(123456789012345678) == 123456789012345678

    @pytest.mark.parametrize("value", [0, -1])
    def test_rejects_non_positive(self, value):
        with pytest.raises(ValueError, match="positive"):
            validate_discord_snowflake(value)

    def test_rejects_too_large(self):
        with pytest.raises(ValueError, match="2\\^64"):
            validate_discord_snowflake(2**64)


class TestParseSnowflakeList:
    """Tests for guild id list coercion."""

    @pytest.mark.parametrize("value", [None, "", [], ()])
    def test_empty(self, value):
        assert parse_snowflake_list(value) == ()

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1,2,3", (1, 2, 3)),
            (" 10 , 20 ", (10, 20)),
            ("[7, 8]", (7, 8)),
            (42, (42,)),
            ([5, "6"], (5, 6)),
        ],
    )
    def test_accepted_shapes(self, value, expected):
        assert parse_snowflake_list(value) == expected

    def test_rejects_garbage_string(self):
        with pytest.raises(ValueError, match="Discord IDs"):
            parse_snowflake_list("one,two")

    def test_rejects_wrong_type(self):
        with pytest.raises(ValueError):
            parse_snowflake_list({"guild": 1})

    def test_rejects_invalid_id(self):
        with pytest.raises(ValueError):
            parse_snowflake_list([1, -2])
