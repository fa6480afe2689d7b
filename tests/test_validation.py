import pytest

from volunteer_hub.errors import ConflictError, PersistenceError, ValidationError, translate_db_error
from volunteer_hub.utils.geo import calculate_distance_miles
from volunteer_hub.utils.validation import (
    clean_email,
    clean_str,
    missing_fields,
    parse_int,
    parse_number,
    require_fields,
    validate_items,
)


class TestFieldHelpers:
    def test_missing_fields_in_declared_order(self):
        data = {"a": "x", "b": "  ", "c": None, "d": [], "e": 0, "f": False}
        assert missing_fields(data, ["a", "b", "c", "d", "e", "f", "g"]) == ["b", "c", "d", "g"]

    def test_require_fields_aggregates(self):
        with pytest.raises(ValidationError) as exc:
            require_fields({}, ["title", "email"])
        assert exc.value.message == "Missing required fields: title, email"
        assert exc.value.details == ["title", "email"]
        assert exc.value.status_code == 400

    def test_clean_str_and_email(self):
        assert clean_str("  hi  ") == "hi"
        assert clean_str("   ") is None
        assert clean_str(None, default="") == ""
        assert clean_email(" Foo@Bar.ORG ") == "foo@bar.org"

    @pytest.mark.parametrize("value", ["NaN", float("nan"), "inf", True, None, "ten", [1]])
    def test_parse_number_rejects(self, value):
        with pytest.raises(ValidationError):
            parse_number(value, "hours")

    def test_parse_number_accepts_strings(self):
        assert parse_number(" 2.5 ", "hours") == 2.5
        assert parse_int("3", "volunteers", minimum=1) == 3

    def test_parse_int_minimum_and_whole(self):
        with pytest.raises(ValidationError, match="at least 1"):
            parse_int(0, "volunteers", minimum=1)
        with pytest.raises(ValidationError, match="whole number"):
            parse_int(2.5, "volunteers")

    def test_validate_items_trims_strings(self):
        items = validate_items([{"site": " Hall ", "hours": 1}], "events", ["site", "hours"], numeric={"hours": 0})
        assert items == [{"site": "Hall", "hours": 1}]

    def test_validate_items_rejects_non_objects(self):
        with pytest.raises(ValidationError) as exc:
            validate_items(["oops"], "events", ["site"])
        assert exc.value.details == ["events[0]: must be an object"]


class TestDbErrorTranslation:
    def test_missing_table(self):
        err = translate_db_error(Exception("no such table: jobs"), "fetch jobs")
        assert isinstance(err, PersistenceError)
        assert "/migrate" in err.message

    def test_unique(self):
        err = translate_db_error(Exception("UNIQUE constraint failed: users.email"), "create user")
        assert isinstance(err, ConflictError)

    def test_fallback(self):
        err = translate_db_error(Exception("disk I/O error"), "create job")
        assert isinstance(err, PersistenceError)
        assert err.message == "Failed to create job"
        assert err.details == "disk I/O error"


class TestDistance:
    def test_same_point(self):
        assert calculate_distance_miles(36.847, -76.295, 36.847, -76.295) == 0

    def test_known_distance(self):
        # Norfolk, VA to Richmond, VA is roughly 80 miles
        assert 75 < calculate_distance_miles(36.8508, -76.2859, 37.5407, -77.4360) < 85

    def test_null_input(self):
        assert calculate_distance_miles(None, -76.2, 36.8, -76.3) is None
