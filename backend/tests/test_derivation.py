from roster.services.derivation import (
    add_vacation_date,
    at_sr_threshold,
    find_record,
    group_by_manager,
    manager_name,
    normalize_vacation_dates,
    partition_by_role,
    remove_vacation_date,
    reports_of,
    resolve_skill_names,
    sort_users,
    sr_display,
    sr_status,
    unassigned_or_admins,
)


def _u(uid, name, role, manager_id=None, **extra):
    return {"id": uid, "name": name, "role": role, "managerId": manager_id, **extra}


def test_sort_users_orders_by_role_then_name():
    users = [
        _u("1", "zed", "Viewer"),
        _u("2", "Bob", "Engineer"),
        _u("3", "alice", "Engineer"),
        _u("4", "Carl", "Admin"),
        _u("5", "Mia", "Manager"),
        _u("6", "Al", "Contractor"),
    ]
    ordered = [u["id"] for u in sort_users(users)]
    assert ordered == ["4", "5", "3", "2", "1", "6"]


def test_sort_users_is_stable_for_equal_names():
    users = [_u("a", "Sam", "Engineer"), _u("b", "sam", "Engineer"), _u("c", "Sam", "Engineer")]
    assert [u["id"] for u in sort_users(users)] == ["a", "b", "c"]


def test_partition_by_role_always_has_known_buckets():
    buckets = partition_by_role([_u("1", "A", "Engineer"), _u("2", "B", "Contractor")])
    assert set(buckets) == {"Admin", "Manager", "Engineer", "Viewer", "Contractor"}
    assert buckets["Admin"] == []
    assert [u["id"] for u in buckets["Engineer"]] == ["1"]
    assert [u["id"] for u in buckets["Contractor"]] == ["2"]


def test_reports_of_only_returns_engineers():
    users = [
        _u("e1", "E1", "Engineer", "m1"),
        _u("v1", "V1", "Viewer", "m1"),
        _u("e2", "E2", "Engineer", "m2"),
    ]
    assert [u["id"] for u in reports_of(users, "m1")] == ["e1"]
    assert reports_of(users, "nobody") == []


def test_unassigned_or_admins_excludes_managers_and_assigned_users():
    users = [
        _u("a1", "A", "Admin", "m1"),
        _u("m1", "M", "Manager"),
        _u("e1", "E1", "Engineer", "m1"),
        _u("e2", "E2", "Engineer"),
        _u("v1", "V", "Viewer", ""),
    ]
    assert [u["id"] for u in unassigned_or_admins(users)] == ["a1", "e2", "v1"]


def test_group_by_manager_includes_engineers_and_viewers():
    users = [
        _u("m1", "M1", "Manager"),
        _u("m2", "M2", "Manager"),
        _u("e1", "E1", "Engineer", "m1"),
        _u("v1", "V1", "Viewer", "m1"),
        _u("a1", "A1", "Admin", "m1"),
    ]
    groups = {manager["id"]: [u["id"] for u in members] for manager, members in group_by_manager(users)}
    assert groups == {"m1": ["e1", "v1"], "m2": []}


def test_resolve_skill_names_skips_unknown_ids():
    skills = [{"id": "s1", "name": "Python"}, {"id": "s2", "name": "SQL"}]
    assert resolve_skill_names(["s2", "gone", "s1"], skills) == ["SQL", "Python"]
    assert resolve_skill_names(None, skills) == []


def test_find_record_and_manager_name():
    users = [_u("m1", "Mona", "Manager"), _u("e1", "Eli", "Engineer", "m1"), _u("e2", "Bea", "Engineer", "gone")]
    assert find_record(users, "e1")["name"] == "Eli"
    assert find_record(users, None) is None
    assert manager_name(users, users[1]) == "Mona"
    assert manager_name(users, users[2]) == "N/A"
    assert manager_name(users, users[0]) == "None"


def test_sr_status_and_threshold_gate():
    assert sr_status({"currentSrCount": 2, "srThreshold": 2}).over is True
    assert sr_status({"currentSrCount": 1, "srThreshold": 2}).over is False
    # a zero threshold never shows as over, but still gates assignment
    assert sr_status({"currentSrCount": 0, "srThreshold": 0}).over is False
    assert at_sr_threshold({"currentSrCount": 0, "srThreshold": 0}) is True
    assert at_sr_threshold({"currentSrCount": 1, "srThreshold": 2}) is False


def test_sr_display_only_for_engineers():
    assert sr_display({"role": "Engineer", "currentSrCount": 3, "srThreshold": 5}) == "3 / 5"
    assert sr_display({"role": "Manager", "currentSrCount": 3, "srThreshold": 5}) == "N/A"


def test_vacation_dates_stay_sorted_and_unique():
    dates, added = add_vacation_date(["2024-05-10", "2024-03-01"], "2024-04-15")
    assert added is True
    assert dates == ["2024-03-01", "2024-04-15", "2024-05-10"]

    same, added = add_vacation_date(dates, "2024-04-15")
    assert added is False
    assert same == dates

    assert remove_vacation_date(dates, "2024-04-15") == ["2024-03-01", "2024-05-10"]
    assert remove_vacation_date(None, "2024-04-15") == []
    assert normalize_vacation_dates(["2024-02-02", "2024-01-01", "2024-02-02"]) == ["2024-01-01", "2024-02-02"]
