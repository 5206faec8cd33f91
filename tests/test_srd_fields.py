from srd.fields import (
    first,
    first_value,
    format_number,
    get_bool,
    get_float,
    get_int,
    get_lower,
    get_str,
    get_upper,
    leading_int,
    lookup,
    names,
    truncate,
)


def test_lookup_walks_keys_and_positions() -> None:
    record = {"armor_class": [{"value": 15}, {"value": 17}]}
    found = lookup(record, "armor_class", 1, "value")
    assert found.present is True
    assert found.value == 17


def test_lookup_reports_missing_for_wrong_shape() -> None:
    assert lookup({"speed": "30 ft."}, "speed", "walk").present is False
    assert lookup({"items": {"0": 1}}, "items", 0).present is False
    assert lookup(None, "anything").present is False
    assert lookup({"name": None}, "name").present is False


def test_get_int_truncates_floats_toward_zero() -> None:
    assert get_int({"hp": 7.9}, "hp", default=0) == 7
    assert get_int({"bonus": -1.5}, "bonus", default=0) == -1


def test_get_int_falls_back_on_mistyped_values() -> None:
    assert get_int({"hp": "7"}, "hp", default=3) == 3
    assert get_int({"hp": True}, "hp", default=3) == 3
    assert get_int({"hp": float("inf")}, "hp", default=3) == 3
    assert get_int({}, "hp", default=3) == 3


def test_get_float_accepts_ints() -> None:
    assert get_float({"weight": 3}, "weight", default=0.0) == 3.0
    assert get_float({"weight": "3 lb"}, "weight", default=0.0) == 0.0


def test_string_accessors_fold_case_but_keep_defaults() -> None:
    record = {"school": {"name": "Evocation"}, "dc": {"dc_type": {"index": "dex"}}}
    assert get_lower(record, "school", "name", default="x") == "evocation"
    assert get_upper(record, "dc", "dc_type", "index", default="") == "DEX"
    assert get_lower({}, "school", "name", default="Keep") == "Keep"
    assert get_str({"name": 12}, "name", default="") == ""


def test_get_bool_only_accepts_booleans() -> None:
    assert get_bool({"ritual": True}, "ritual") is True
    assert get_bool({"ritual": "yes"}, "ritual") is False
    assert get_bool({}, "ritual") is False


def test_first_ignores_remaining_elements() -> None:
    assert first({"desc": ["one", "two"]}, "desc").value == "one"
    assert first({"desc": []}, "desc").present is False
    assert first({"desc": "one"}, "desc").present is False


def test_first_value_picks_first_entry_in_source_order() -> None:
    record = {"heal_at_slot_level": {"2": "2d8", "3": "3d8"}}
    assert first_value(record, "heal_at_slot_level").value == "2d8"
    assert first_value({"heal_at_slot_level": {}}, "heal_at_slot_level").present is False


def test_names_skips_malformed_entries() -> None:
    record = {"traits": [{"name": "Darkvision"}, "bad", {"index": "x"}, {"name": "Brave"}]}
    assert names(record, "traits") == ["Darkvision", "Brave"]
    assert names({"saves": [{"index": "str"}]}, "saves", key="index", transform=str.upper) == [
        "STR"
    ]


def test_leading_int_parses_speed_strings() -> None:
    assert leading_int("30 ft.", default=0) == 30
    assert leading_int("fast", default=30) == 30
    assert leading_int(None, default=30) == 30


def test_truncate_is_a_raw_cut() -> None:
    text = "word " * 200
    assert truncate(text) == text[:500]
    assert len(truncate(text)) == 500


def test_format_number_drops_trailing_zeros() -> None:
    assert format_number(0.25, default="0") == "0.25"
    assert format_number(2.0, default="0") == "2"
    assert format_number(10, default="0") == "10"
    assert format_number("1/4", default="0") == "1/4"
    assert format_number(None, default="0") == "0"


def test_format_number_keeps_every_significant_digit() -> None:
    assert format_number(1234567.0, default="0") == "1234567"
    assert format_number(0.1234567, default="0") == "0.1234567"
    assert format_number(0.125, default="0") == "0.125"
