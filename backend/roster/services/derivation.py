"""
Pure views over the cached Users / Skills collections.

Nothing here touches the store or mutates its arguments; every function
returns new lists built from the records it was given.
"""
from collections import namedtuple
from typing import Dict, Iterable, List, Optional, Tuple

from roster.models.user import Role, ROLE_RANK, UNKNOWN_ROLE_RANK

SRStatus = namedtuple("SRStatus", ["current", "threshold", "over"])


def role_rank(user: dict) -> int:
    return ROLE_RANK.get(user.get("role"), UNKNOWN_ROLE_RANK)


def sort_users(users: Iterable[dict]) -> List[dict]:
    """Admins, then Managers, Engineers, Viewers; by name within a role.

    The sort is stable, so equal names keep their snapshot order.
    """
    return sorted(users, key=lambda u: (role_rank(u), (u.get("name") or "").casefold()))


def partition_by_role(users: Iterable[dict]) -> Dict[str, List[dict]]:
    buckets = {role.value: [] for role in Role}
    for user in users:
        # roles outside the enumeration get a bucket of their own
        buckets.setdefault(user.get("role"), []).append(user)
    return buckets


def reports_of(users: Iterable[dict], manager_id: Optional[str]) -> List[dict]:
    """Engineers reporting to the given manager."""
    return [
        u for u in users
        if u.get("role") == Role.ENGINEER.value and u.get("managerId") == manager_id
    ]


def resolve_skill_names(skill_ids: Optional[Iterable[str]], skills: Iterable[dict]) -> List[str]:
    names_by_id = {s["id"]: s.get("name", "") for s in skills}
    return [names_by_id[skill_id] for skill_id in (skill_ids or []) if skill_id in names_by_id]


def unassigned_or_admins(users: Iterable[dict]) -> List[dict]:
    """The "other users" bucket: Admins, plus non-Managers without a manager."""
    return [
        u for u in users
        if u.get("role") == Role.ADMIN.value
        or (u.get("role") != Role.MANAGER.value and not u.get("managerId"))
    ]


def group_by_manager(users: List[dict]) -> List[Tuple[dict, List[dict]]]:
    """Each Manager paired with the Engineers and Viewers who report to them."""
    members = [u for u in users if u.get("role") in (Role.ENGINEER.value, Role.VIEWER.value)]
    return [
        (manager, [u for u in members if u.get("managerId") == manager["id"]])
        for manager in users
        if manager.get("role") == Role.MANAGER.value
    ]


def find_record(records: Iterable[dict], record_id: Optional[str]) -> Optional[dict]:
    if not record_id:
        return None
    return next((r for r in records if r.get("id") == record_id), None)


def manager_name(users: Iterable[dict], user: dict) -> str:
    if not user.get("managerId"):
        return "None"
    manager = find_record(users, user["managerId"])
    return manager.get("name", "N/A") if manager else "N/A"


def sr_status(user: dict) -> SRStatus:
    current = user.get("currentSrCount") or 0
    threshold = user.get("srThreshold") or 0
    return SRStatus(current, threshold, bool(threshold) and current >= threshold)


def at_sr_threshold(user: dict) -> bool:
    """True when an unforced SR assignment must be confirmed first.

    Unlike ``sr_status(...).over`` this holds for a zero threshold too.
    """
    return (user.get("currentSrCount") or 0) >= (user.get("srThreshold") or 0)


def sr_display(user: dict) -> str:
    if user.get("role") != Role.ENGINEER.value:
        return "N/A"
    status = sr_status(user)
    return f"{status.current} / {status.threshold}"


def add_vacation_date(dates: Optional[List[str]], new_date: str) -> Tuple[List[str], bool]:
    """Return the sorted dates with ``new_date`` added, and whether it was new."""
    current = list(dates or [])
    if new_date in current:
        return current, False
    return sorted(current + [new_date]), True


def remove_vacation_date(dates: Optional[List[str]], old_date: str) -> List[str]:
    return [d for d in (dates or []) if d != old_date]


def normalize_vacation_dates(dates: Optional[Iterable[str]]) -> List[str]:
    return sorted(set(dates or []))
