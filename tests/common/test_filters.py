from datetime import datetime

import pytest
from bson import ObjectId

from labour_system.common.filters import FilterBuilder
from labour_system.core.enums import AttendanceStatus, SalaryStatus
from labour_system.core.exceptions import InvalidDateError, InvalidEnumError, InvalidIdentifierError

LABOURER = "65a1b2c3d4e5f60718293a4b"
PROJECT = "65a1b2c3d4e5f60718293a4c"


def test_blank_params_add_nothing():
    predicate = (
        FilterBuilder({"status": "  ", "labourerId": "", "startDate": None})
        .enum("status", AttendanceStatus, "status")
        .identifier("labourerId", "labourer_id")
        .since("startDate", "date")
        .build()
    )
    assert predicate.to_mongo() == {}


def test_identifier_and_enum_compile_to_mongo_values():
    predicate = (
        FilterBuilder({"labourerId": LABOURER, "status": "Half-Day"})
        .identifier("labourerId", "labourer_id")
        .enum("status", AttendanceStatus, "status")
        .build()
    )
    assert predicate.to_mongo() == {"labourer_id": ObjectId(LABOURER), "status": "half-day"}


def test_malformed_values_raise_instead_of_widening_query():
    with pytest.raises(InvalidIdentifierError):
        FilterBuilder({"labourerId": "abc"}).identifier("labourerId", "labourer_id")
    with pytest.raises(InvalidEnumError) as exc:
        FilterBuilder({"status": "late"}).enum("status", SalaryStatus, "status")
    assert "pending, paid" in exc.value.message
    with pytest.raises(InvalidDateError):
        FilterBuilder({"startDate": "yesterday"}).since("startDate", "date")


def test_date_range_merges_bounds_on_one_field():
    predicate = FilterBuilder({"startDate": "2024-01-01", "endDate": "2024-01-31"}).date_range(
        "startDate", "endDate", "date"
    ).build()
    assert predicate.to_mongo() == {"date": {"$gte": datetime(2024, 1, 1), "$lte": datetime(2024, 1, 31)}}


def test_overlap_uses_opposite_bounds():
    predicate = (
        FilterBuilder({"startPeriod": "2024-02-01", "endPeriod": "2024-02-29"})
        .overlap("startPeriod", "endPeriod", start_field="start_period", end_field="end_period")
        .build()
    )
    assert predicate.to_mongo() == {
        "end_period": {"$gte": datetime(2024, 2, 1)},
        "start_period": {"$lte": datetime(2024, 2, 29)},
    }
    spanning = {"start_period": datetime(2024, 1, 20), "end_period": datetime(2024, 2, 5)}
    before = {"start_period": datetime(2024, 1, 1), "end_period": datetime(2024, 1, 31)}
    assert predicate.matches(spanning)
    assert not predicate.matches(before)


def test_single_day_covers_whole_day():
    predicate = FilterBuilder({"date": "2024-03-05T10:30:00Z"}).on_day("date", "date").build()
    assert predicate.to_mongo() == {
        "date": {"$gte": datetime(2024, 3, 5), "$lte": datetime(2024, 3, 5, 23, 59, 59, 999000)}
    }
    assert predicate.matches({"date": datetime(2024, 3, 5, 23, 59)})
    assert not predicate.matches({"date": datetime(2024, 3, 6)})


def test_comma_separated_identifiers_become_in():
    predicate = FilterBuilder({"userIds": f"{LABOURER}, {PROJECT}"}).identifiers("userIds", "user_id").build()
    assert predicate.to_mongo() == {"user_id": {"$in": [ObjectId(LABOURER), ObjectId(PROJECT)]}}
    assert predicate.matches({"user_id": PROJECT})


def test_contains_is_escaped_and_case_insensitive():
    predicate = FilterBuilder({"fullName": "r.k"}).contains("fullName", "full_name").build()
    assert predicate.to_mongo() == {"full_name": {"$regex": r"r\.k", "$options": "i"}}
    assert predicate.matches({"full_name": "R.K. Sharma"})
    assert not predicate.matches({"full_name": "Rak"})


def test_where_not_matches_missing_field_and_list_membership():
    predicate = FilterBuilder().where_not("lifecycle", "deleted").build()
    assert predicate.matches({})
    assert not predicate.matches({"lifecycle": "deleted"})

    assigned = FilterBuilder().where("assigned_labourers", LABOURER, identifier=True).build()
    assert assigned.matches({"assigned_labourers": [PROJECT, LABOURER]})
    assert assigned.to_mongo() == {"assigned_labourers": ObjectId(LABOURER)}


def test_repeated_operator_on_one_field_keeps_both_bounds():
    predicate = (
        FilterBuilder({"startDate": "2024-03-01", "endDate": "2024-03-31"})
        .date_range("startDate", "endDate", "date")
        .between("date", datetime(2024, 3, 10), datetime(2024, 3, 20))
        .build()
    )

    assert predicate.to_mongo() == {
        "date": {"$gte": datetime(2024, 3, 1), "$lte": datetime(2024, 3, 31)},
        "$and": [{"date": {"$gte": datetime(2024, 3, 10)}}, {"date": {"$lte": datetime(2024, 3, 20)}}],
    }
    assert predicate.matches({"date": datetime(2024, 3, 15)})
    assert not predicate.matches({"date": datetime(2024, 3, 5)})
