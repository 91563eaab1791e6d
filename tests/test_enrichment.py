"""Unit tests for enrichment functions - local time, lookups, airports and flags"""
from datetime import datetime

from timelord.models.city import CityRecord
from timelord.models.reference import ReferenceTables
from timelord.processing.enrichment import (
    enrich,
    enrich_all,
    flag_icon_path,
    format_clock,
    format_day,
    get_local_time
)


def make_city(**overrides):
    data = {
        "id": "6167865", "name": "Toronto", "asciiname": "Toronto", "country_id": "CA",
        "timezone": "America/Toronto", "population": 2800000, "latitude": "43.7", "longitude": "-79.4"
    }
    data.update(overrides)
    return CityRecord.model_validate(data)


class TestLocalTime:
    """Test local time calculation"""

    def test_converts_to_city_timezone(self, fixed_now):
        """UTC is converted to the city's zone"""
        local = get_local_time("America/Toronto", fixed_now)
        assert (local.hour, local.minute) == (9, 41)
        assert local.tzname() == "EDT"

    def test_invalid_timezone_falls_back_to_utc(self, fixed_now):
        """An unknown zone name gives UTC"""
        local = get_local_time("Invalid/Timezone", fixed_now)
        assert (local.hour, local.minute) == (13, 41)
        assert local.tzname() == "UTC"

    def test_empty_timezone_falls_back_to_utc(self, fixed_now):
        """An empty zone name gives UTC"""
        assert get_local_time("", fixed_now).tzname() == "UTC"

    def test_naive_reference_is_utc(self):
        """A naive reference time is read as UTC"""
        local = get_local_time("Europe/Paris", datetime(2026, 1, 15, 12, 0))
        assert local.hour == 13

    def test_defaults_to_now(self):
        """Without a reference time the current time is used"""
        local = get_local_time("UTC")
        assert local.tzinfo is not None


class TestFormatting:
    """Test clock and date formatting"""

    def test_format_clock(self):
        """Clock is 12-hour without a leading zero"""
        assert format_clock(datetime(2026, 1, 2, 15, 4)) == "3:04 PM"
        assert format_clock(datetime(2026, 1, 2, 9, 41)) == "9:41 AM"

    def test_format_clock_midnight_and_noon(self):
        """Midnight and noon show as 12"""
        assert format_clock(datetime(2026, 1, 2, 0, 5)) == "12:05 AM"
        assert format_clock(datetime(2026, 1, 2, 12, 0)) == "12:00 PM"

    def test_format_day(self):
        """Day is weekday, month and day of month"""
        assert format_day(datetime(2026, 1, 2)) == "Friday, January 2"
        assert format_day(datetime(2026, 10, 19)) == "Monday, October 19"


class TestFlagIcon:
    """Test flag icon lookup with fallback"""

    def test_existing_flag(self, flags_dir):
        """A country with a flag file gets that file"""
        assert flag_icon_path("Canada", str(flags_dir)) == (flags_dir / "canada.png").as_posix()

    def test_missing_flag_uses_default(self, flags_dir):
        """A country without a flag file gets the default flag"""
        assert flag_icon_path("United Kingdom", str(flags_dir)) == (flags_dir / "_no_flag.png").as_posix()

    def test_empty_country_uses_default(self, flags_dir):
        """An empty country name gets the default flag"""
        assert flag_icon_path("", str(flags_dir)) == (flags_dir / "_no_flag.png").as_posix()

    def test_spaces_become_underscores(self, flags_dir):
        """Flag file names use underscores for spaces"""
        (flags_dir / "united_states.png").write_bytes(b"png")
        assert flag_icon_path("United States", str(flags_dir)).endswith("united_states.png")


class TestEnrich:
    """Test building result items"""

    def test_toronto(self, reference_tables, flags_dir, fixed_now):
        """Toronto gets local time, country details and nearby airports"""
        result = enrich(make_city(), reference_tables, flags_dir=str(flags_dir), now=fixed_now)

        assert result.uid == "6167865"
        assert result.title == "Toronto — 9:41 AM EDT"
        assert result.subtitle == "Monday, October 19 | Canada | +1 | CAD | YYZ,YTZ,YHM"
        assert result.arg == "Toronto"
        assert result.autocomplete == "Toronto"
        assert result.icon.path == (flags_dir / "canada.png").as_posix()

    def test_country_without_airports(self, reference_tables, flags_dir, fixed_now):
        """A country with no airports leaves the airport field empty"""
        city = make_city(id="3448439", name="São Paulo", asciiname="Sao Paulo", country_id="BR",
                         timezone="America/Sao_Paulo", latitude="-23.5475", longitude="-46.63611")
        result = enrich(city, reference_tables, flags_dir=str(flags_dir), now=fixed_now)

        parts = result.subtitle.split(" | ")
        assert parts[1:] == ["Brazil", "+55", "BRL", ""]
        assert result.icon.path.endswith("_no_flag.png")

    def test_unknown_country_degrades_to_empty_fields(self, flags_dir, fixed_now):
        """Unknown countries leave the lookup fields empty"""
        city = make_city(country_id="ZZ")
        result = enrich(city, ReferenceTables(), flags_dir=str(flags_dir), now=fixed_now)

        parts = result.subtitle.split(" | ")
        assert parts == ["Monday, October 19", "", "", "", ""]
        assert result.icon.path.endswith("_no_flag.png")

    def test_invalid_timezone_does_not_fail(self, reference_tables, flags_dir, fixed_now):
        """A bad zone name shows UTC time"""
        result = enrich(make_city(timezone="Mars/Olympus"), reference_tables, flags_dir=str(flags_dir), now=fixed_now)
        assert result.title == "Toronto — 1:41 PM UTC"

    def test_distances_are_not_kept_on_shared_airports(self, reference_tables, flags_dir, fixed_now):
        """The shared airport table is not modified"""
        enrich(make_city(), reference_tables, flags_dir=str(flags_dir), now=fixed_now)
        assert all(a.distance is None for a in reference_tables.airports_for("CA"))


class TestEnrichAll:
    """Test enriching a batch of cities"""

    def test_keeps_order_and_duplicates(self, reference_tables, flags_dir, fixed_now):
        """Results follow input order, repeats included"""
        cities = [make_city(), make_city(id="2643743", name="London", asciiname="London", country_id="GB",
                                         timezone="Europe/London", latitude="51.50853", longitude="-0.12574"),
                  make_city()]
        results = enrich_all(cities, reference_tables, flags_dir=str(flags_dir), now=fixed_now)
        assert [r.uid for r in results] == ["6167865", "2643743", "6167865"]
        assert results[1].title == "London — 2:41 PM BST"

    def test_failing_city_is_skipped(self, reference_tables, flags_dir, fixed_now):
        """A city that fails to enrich is left out"""
        class BrokenTables(ReferenceTables):
            def airports_for(self, country_id):
                if country_id == "GB":
                    raise RuntimeError("broken airport table")
                return super().airports_for(country_id)

        tables = BrokenTables(**reference_tables.model_dump())
        london = make_city(id="2643743", name="London", asciiname="London", country_id="GB",
                           timezone="Europe/London", latitude="51.50853", longitude="-0.12574")
        results = enrich_all([london, make_city()], tables, flags_dir=str(flags_dir), now=fixed_now)
        assert [r.uid for r in results] == ["6167865"]

    def test_empty(self, reference_tables):
        """No cities give no results"""
        assert enrich_all([], reference_tables) == []
