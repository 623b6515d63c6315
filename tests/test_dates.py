"""Tests for ozonator/utils/dates.py"""
import datetime
from unittest.mock import patch

import pytest

from ozonator.enums import DateOnlyBoundary
from ozonator.utils.dates import (
    TemporalColumnPolicy,
    date_range_with_default,
    format_datetime_ru,
    format_temporal_cell_ru,
    format_temporal_value_ru,
    get_default_date_range,
    is_temporal_column_id,
    looks_like_temporal_text,
    parse_date_only_local,
    parse_date_range,
    sanitize_date_input,
    to_datetime,
    to_sort_timestamp,
)


class TestIsTemporalColumnId:
    @pytest.mark.parametrize(
        "column_id",
        ["created_at", "UPDATED_AT", " in_process_at ", "date", "shipment_date",
         "date_from", "delivery_time", "time"],
    )
    def test_temporal(self, column_id):
        assert is_temporal_column_id(column_id)

    @pytest.mark.parametrize(
        "column_id",
        ["comment", "update", "timeline", "dated", "at", "status", "", None, "mandate"],
    )
    def test_not_temporal(self, column_id):
        assert not is_temporal_column_id(column_id)

    def test_custom_policy(self):
        policy = TemporalColumnPolicy(suffixes=("_on",), tokens=("day",))
        assert is_temporal_column_id("shipped_on", policy)
        assert is_temporal_column_id("day_of_sale", policy)
        assert not is_temporal_column_id("created_at", policy)

    def test_empty_policy_matches_nothing(self):
        assert not is_temporal_column_id("created_at", TemporalColumnPolicy((), ()))


class TestLooksLikeTemporalText:
    @pytest.mark.parametrize(
        "value", ["2024-03-05", "09:05", "23:59:59.123", "2024-03-05T10:00", "2024-03-05 10:00"]
    )
    def test_temporal_shapes(self, value):
        assert looks_like_temporal_text(value)

    @pytest.mark.parametrize("value", ["", "  ", "24:00", "05.03.2024", "hello", "2024-03-05x"])
    def test_other_text(self, value):
        assert not looks_like_temporal_text(value)


class TestParseDateOnlyLocal:
    def test_keep_is_midnight(self):
        assert parse_date_only_local("2024-03-05") == datetime.datetime(2024, 3, 5)

    def test_end_of_day(self):
        parsed = parse_date_only_local("2024-03-05", DateOnlyBoundary.END_OF_DAY)
        assert parsed == datetime.datetime(2024, 3, 5, 23, 59, 59, 999000)

    def test_boundary_as_plain_string(self):
        parsed = parse_date_only_local("2024-03-05", "endOfDay")
        assert parsed.hour == 23

    def test_invalid_calendar_date(self):
        assert parse_date_only_local("2024-02-30") is None

    def test_not_a_date(self):
        assert parse_date_only_local("2024-03-05T10:00") is None


class TestToDatetime:
    def test_naive_datetime_passes_through(self):
        value = datetime.datetime(2024, 3, 5, 14, 30)
        assert to_datetime(value) == value

    def test_aware_datetime_is_shifted_to_display_zone(self):
        value = datetime.datetime(2024, 3, 5, 14, 30, tzinfo=datetime.timezone(datetime.timedelta(hours=3)))
        assert to_datetime(value) == datetime.datetime(2024, 3, 5, 11, 30)

    def test_utc_designator(self):
        assert to_datetime("2024-03-05T14:30:00Z") == datetime.datetime(2024, 3, 5, 14, 30)

    def test_epoch_milliseconds(self):
        assert to_datetime(1709649000000) == datetime.datetime(2024, 3, 5, 14, 30)

    def test_rfc2822(self):
        assert to_datetime("Tue, 05 Mar 2024 14:30:00 GMT") == datetime.datetime(2024, 3, 5, 14, 30)

    @pytest.mark.parametrize("value", [None, "", "not-a-date", True, object(), 1e300])
    def test_not_a_point_in_time(self, value):
        assert to_datetime(value) is None


class TestFormatDateTimeRu:
    def test_full_timestamp(self):
        assert format_datetime_ru("2024-03-05T14:30:00") == "05.03.24 14:30:00"

    def test_space_separator(self):
        assert format_datetime_ru("2024-03-05 09:05:07") == "05.03.24 09:05:07"

    def test_date_only_boundaries(self):
        assert format_datetime_ru("2024-03-05") == "05.03.24 00:00:00"
        assert format_datetime_ru("2024-03-05", DateOnlyBoundary.START_OF_DAY) == "05.03.24 00:00:00"
        assert format_datetime_ru("2024-03-05", DateOnlyBoundary.END_OF_DAY) == "05.03.24 23:59:59"

    def test_native_values(self):
        assert format_datetime_ru(datetime.datetime(2024, 12, 31, 23, 0, 1)) == "31.12.24 23:00:01"
        assert format_datetime_ru(datetime.date(2024, 3, 5)) == "05.03.24 00:00:00"

    def test_empty(self):
        assert format_datetime_ru(None) == ""
        assert format_datetime_ru("") == ""

    def test_unparseable_returns_original(self):
        assert format_datetime_ru("not-a-date") == "not-a-date"
        assert format_datetime_ru(" ??? ") == " ??? "
        assert format_datetime_ru(True) == "true"

    @patch("ozonator.utils.dates.logger")
    def test_unparseable_is_logged_at_debug(self, mock_logger):
        format_datetime_ru("garbage")
        mock_logger.debug.assert_called_once()


class TestFormatTemporalValueRu:
    def test_date_only(self):
        assert format_temporal_value_ru("2024-03-05") == "05.03.24."

    def test_time_only(self):
        assert format_temporal_value_ru("09:05") == "09:05:00"
        assert format_temporal_value_ru(" 23:59:58,250 ") == "23:59:58"

    def test_full_timestamp(self):
        assert format_temporal_value_ru("2024-03-05T14:30:00") == "05.03.24 14:30:00"

    def test_empty(self):
        assert format_temporal_value_ru(None) == ""
        assert format_temporal_value_ru("") == ""
        assert format_temporal_value_ru("   ") == ""

    def test_free_text_passes_through(self):
        assert format_temporal_value_ru(" free text ") == " free text "

    def test_malformed_value_in_temporal_column(self):
        assert format_temporal_value_ru("not-a-date", column_id="created_at") == "not-a-date"

    def test_invalid_calendar_date_returns_text(self):
        assert format_temporal_value_ru("2024-02-30") == "2024-02-30"

    def test_epoch_in_temporal_column(self):
        assert format_temporal_value_ru(1709649000000, column_id="created_at") == "05.03.24 14:30:00"

    def test_number_outside_temporal_column(self):
        assert format_temporal_value_ru(1709649000000) == "1709649000000"
        assert format_temporal_value_ru(0) == "0"

    def test_native_values(self):
        assert format_temporal_value_ru(datetime.datetime(2024, 3, 5, 14, 30)) == "05.03.24 14:30:00"
        assert format_temporal_value_ru(datetime.date(2024, 3, 5)) == "05.03.24."
        assert format_temporal_value_ru(datetime.time(7, 5)) == "07:05:00"


class TestFormatTemporalCellRu:
    def test_non_temporal_column_keeps_text(self):
        text = "2024-03-05 looks like a date"
        assert format_temporal_cell_ru("comment", text) == text

    def test_non_temporal_column_does_not_reformat_dates(self):
        assert format_temporal_cell_ru("comment", "2024-03-05") == "2024-03-05"

    def test_non_temporal_column_plain_text(self):
        assert format_temporal_cell_ru("price", 10.0) == "10"
        assert format_temporal_cell_ru("is_visible", False) == "false"
        assert format_temporal_cell_ru("comment", None) == ""
        assert format_temporal_cell_ru("comment", "") == ""

    def test_temporal_column(self):
        assert format_temporal_cell_ru("created_at", "2024-03-05T14:30:00") == "05.03.24 14:30:00"
        assert format_temporal_cell_ru("shipment_date", "2024-03-05") == "05.03.24."
        assert format_temporal_cell_ru("delivery_time", "09:05") == "09:05:00"

    @pytest.mark.parametrize("value", ["x", 0, False, "0", "??", -1])
    def test_non_empty_never_blank(self, value):
        assert format_temporal_cell_ru("created_at", value) != ""
        assert format_temporal_cell_ru("comment", value) != ""


class TestToSortTimestamp:
    def test_order(self):
        earlier = to_sort_timestamp("2024-03-05T10:00:00Z")
        later = to_sort_timestamp("2024-03-05T11:00:00Z")
        assert earlier < later

    def test_utc_value(self):
        assert to_sort_timestamp("2024-03-05T14:30:00Z") == 1709649000000

    def test_epoch_passthrough(self):
        assert to_sort_timestamp(1709649000000) == 1709649000000

    @pytest.mark.parametrize("value", [None, "", "soon", False])
    def test_unparseable(self, value):
        assert to_sort_timestamp(value) is None


class TestSanitizeDateInput:
    def test_valid(self):
        assert sanitize_date_input(" 2024-03-05 ") == "2024-03-05"

    @pytest.mark.parametrize("value", [None, 20240305, "05.03.2024", "2024-03-05T00:00"])
    def test_invalid(self, value):
        assert sanitize_date_input(value) == ""


class TestDefaultDateRange:
    def test_default_window(self, monkeypatch):
        monkeypatch.delenv("OZONATOR_DATE_RANGE_DAYS", raising=False)
        result = get_default_date_range(today=datetime.date(2024, 3, 30))
        assert result.date_from == "2024-03-01"
        assert result.date_to == "2024-03-30"

    def test_custom_days(self):
        result = get_default_date_range(7, today=datetime.date(2024, 3, 5))
        assert (result.date_from, result.date_to) == ("2024-02-28", "2024-03-05")

    def test_days_are_clamped(self):
        result = get_default_date_range(-5, today=datetime.date(2024, 3, 5))
        assert result.date_from == result.date_to == "2024-03-05"

    def test_env_default(self, monkeypatch):
        monkeypatch.setenv("OZONATOR_DATE_RANGE_DAYS", "2")
        result = get_default_date_range(today=datetime.date(2024, 3, 5))
        assert result.date_from == "2024-03-04"

    def test_invalid_days_use_default(self, monkeypatch):
        monkeypatch.delenv("OZONATOR_DATE_RANGE_DAYS", raising=False)
        result = get_default_date_range("abc", today=datetime.date(2024, 3, 30))
        assert result.date_from == "2024-03-01"

    @patch("ozonator.utils.dates.moscow_today", return_value=datetime.date(2024, 1, 10))
    def test_today_in_moscow(self, _mock_today):
        assert get_default_date_range(1).to_dict() == {"from": "2024-01-10", "to": "2024-01-10"}


class TestParseDateRange:
    def test_mapping(self):
        result = parse_date_range({"from": "2024-03-01", "to": "bad"})
        assert result.date_from == "2024-03-01"
        assert result.date_to == ""

    def test_json_text(self):
        result = parse_date_range('{"from": "2024-03-01", "to": "2024-03-05"}')
        assert result.to_dict() == {"from": "2024-03-01", "to": "2024-03-05"}

    @pytest.mark.parametrize("payload", [None, "not json", "[]", {"from": "", "to": None}])
    def test_invalid(self, payload):
        assert parse_date_range(payload) is None

    def test_with_default(self):
        result = date_range_with_default(None, 1)
        assert result.date_from == result.date_to


class TestMalformedTimestamps:
    OVERSIZE_YEAR = "01 Jan 99999999999 00:00:00"

    def test_oversize_year_renders_as_text(self):
        assert format_temporal_value_ru(self.OVERSIZE_YEAR, column_id="created_at") == self.OVERSIZE_YEAR
        assert format_temporal_cell_ru("created_at", self.OVERSIZE_YEAR) == self.OVERSIZE_YEAR
        assert format_datetime_ru(self.OVERSIZE_YEAR) == self.OVERSIZE_YEAR

    def test_oversize_year_has_no_sort_timestamp(self):
        assert to_datetime(self.OVERSIZE_YEAR) is None
        assert to_sort_timestamp(self.OVERSIZE_YEAR) is None

    @pytest.mark.parametrize("value", ["20240305", "2024-W10-2", "2024-065", "20240305T143000"])
    def test_only_extended_iso_shapes_parse(self, value):
        assert to_datetime(value) is None
        assert format_temporal_cell_ru("created_at", value) == value

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2024-03-05T14:30:00.1234Z", datetime.datetime(2024, 3, 5, 14, 30, 0, 123400)),
            ("2024-03-05T14:30:00,5", datetime.datetime(2024, 3, 5, 14, 30, 0, 500000)),
            ("2024-03-05T14:30:00.123456789+00:00", datetime.datetime(2024, 3, 5, 14, 30, 0, 123456)),
            ("2024-03-05T17:30:00+0300", datetime.datetime(2024, 3, 5, 14, 30)),
            ("2024-03-05T17:30+03", datetime.datetime(2024, 3, 5, 14, 30)),
            ("2024-03-05t14:30z", datetime.datetime(2024, 3, 5, 14, 30)),
        ],
    )
    def test_iso_variants_are_normalized(self, value, expected):
        assert to_datetime(value) == expected

    def test_out_of_range_iso_fields(self):
        assert to_datetime("2024-03-05T25:00:00") is None
        assert to_datetime("2024-03-05T10:00:00+25:00") is None


class TestAsciiDigitsOnly:
    @pytest.mark.parametrize("value", ["２０２４-０３-０５", "0٩:05", "２０２４-０３-０５T10:00:00"])
    def test_non_ascii_digits_are_plain_text(self, value):
        assert not looks_like_temporal_text(value)
        assert format_temporal_value_ru(value) == value

    def test_date_input_rejects_fullwidth_digits(self):
        assert sanitize_date_input("２０２４-０３-０５") == ""

    def test_date_only_parser_rejects_fullwidth_digits(self):
        assert parse_date_only_local("２０２４-０３-０５") is None
