"""
Tests for per-record decoding of data pack sub-tables.
"""

from svbot.mappings.records import (
    ClubRecord,
    CupRecord,
    LeagueRecord,
    Malformed,
    PlayerRecord,
    decode_club,
    decode_cup,
    decode_league,
    decode_player,
    decode_table,
    parse_int_id,
)
from tests.helpers import make_pack


class TestParseIntId:
    def test_accepts_ints_and_digit_strings(self):
        assert parse_int_id(2180) == 2180
        assert parse_int_id("2180") == 2180
        assert parse_int_id(" 17 ") == 17

    def test_rejects_bools_blanks_and_text(self):
        assert parse_int_id(True) is None
        assert parse_int_id("") is None
        assert parse_int_id("abc") is None
        assert parse_int_id(None) is None
        assert parse_int_id(3.5) is None


class TestRecordDecoders:
    def test_club(self):
        assert decode_club({"id": "2180", "n": "FC Test"}) == ClubRecord(2180, "FC Test")

    def test_club_missing_name_is_malformed(self):
        assert isinstance(decode_club({"id": "2180"}), Malformed)
        assert isinstance(decode_club({"id": "2180", "n": "   "}), Malformed)

    def test_club_bad_id_is_malformed(self):
        assert isinstance(decode_club({"id": "x12", "n": "FC Test"}), Malformed)
        assert isinstance(decode_club("not a dict"), Malformed)

    def test_player_name_is_joined_and_trimmed(self):
        assert decode_player({"id": "1", "f": "Lionel", "s": "Messi"}) == PlayerRecord(1, "Lionel Messi")
        assert decode_player({"id": "2", "s": "Ronaldinho"}) == PlayerRecord(2, "Ronaldinho")
        assert decode_player({"id": "3", "f": "Kaká"}) == PlayerRecord(3, "Kaká")

    def test_player_without_any_name_is_malformed(self):
        assert isinstance(decode_player({"id": "1"}), Malformed)
        assert isinstance(decode_player({"id": "1", "f": " ", "s": ""}), Malformed)

    def test_league_key_is_taken_verbatim(self):
        record = decode_league({"c": "CHE", "d": 1, "n": "Super League"})
        assert record == LeagueRecord("CHE", 1, "Super League")
        assert record.key == "CHE_1"

    def test_league_division_zero_and_digit_strings(self):
        assert decode_league({"c": "FRA", "d": 0, "n": "Ligue 0"}).key == "FRA_0"
        assert decode_league({"c": "FRA", "d": "2", "n": "Ligue 2"}).key == "FRA_2"

    def test_league_invalid_division_is_malformed(self):
        assert isinstance(decode_league({"c": "FRA", "d": -1, "n": "X"}), Malformed)
        assert isinstance(decode_league({"c": "FRA", "n": "X"}), Malformed)
        assert isinstance(decode_league({"d": 1, "n": "X"}), Malformed)

    def test_cup_ids_are_strings(self):
        assert decode_cup({"id": "CHE_CUP", "n": "Coupe"}) == CupRecord("CHE_CUP", "Coupe")
        assert decode_cup({"id": 7, "n": "Coupe"}) == CupRecord("7", "Coupe")
        assert isinstance(decode_cup({"id": "", "n": "Coupe"}), Malformed)


class TestDecodeTable:
    def test_counts_skipped_records(self):
        pack = make_pack(ClubData={"C": [
            {"id": "1", "n": "A"},
            {"id": "oops", "n": "B"},
            {"n": "C"},
            {"id": "4", "n": "D"},
        ]})

        table = decode_table("clubs", pack["PackData"])

        assert table.present is True
        assert table.entries == {1: "A", 4: "D"}
        assert table.skipped == 2

    def test_absent_sub_table(self):
        table = decode_table("leagues", make_pack(ClubData={"C": []})["PackData"])

        assert table.present is False
        assert table.entries == {}

    def test_structurally_invalid_sub_table(self):
        pack = make_pack(StadiumData={"S": "not a list"}, CupData=["wrong"])

        assert decode_table("stadiums", pack["PackData"]).present is False
        assert decode_table("cups", pack["PackData"]).present is False

    def test_later_duplicate_wins(self):
        pack = make_pack(ClubData={"C": [{"id": "1", "n": "Old"}, {"id": 1, "n": "New"}]})

        assert decode_table("clubs", pack["PackData"]).entries == {1: "New"}
