"""
Mutation actions issued from the dashboards.

Every action has the same shape: check preconditions against the cached
record it was handed, ask for confirmation where the action is destructive
or overrides a threshold, issue exactly one write, and report the outcome
as a status message.  Nothing is changed locally; the live subscription
brings the new state back.  There is no lost-update protection: SR
counts are incremented from the cached value.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from roster.config import CollectionPaths
from roster.models.skill import Skill
from roster.models.user import Role
from roster.services.derivation import (
    add_vacation_date,
    at_sr_threshold,
    normalize_vacation_dates,
    remove_vacation_date,
)
from roster.services.status import StatusBoard
from roster.utils.logger import log_event, log_error, EventTypes


class Outcome(str, Enum):
    DONE = "done"          # the write went through
    CONFIRM = "confirm"    # nothing written; re-issue with confirmation
    INFO = "info"          # nothing to write
    REJECTED = "rejected"  # local precondition failed, nothing written
    ERROR = "error"        # the store rejected the write


class ActionResult(BaseModel):
    outcome: Outcome
    message: str

    @classmethod
    def done(cls, message: str):
        return cls(outcome=Outcome.DONE, message=message)

    @classmethod
    def confirm(cls, message: str):
        return cls(outcome=Outcome.CONFIRM, message=message)

    @classmethod
    def info(cls, message: str):
        return cls(outcome=Outcome.INFO, message=message)

    @classmethod
    def rejected(cls, message: str):
        return cls(outcome=Outcome.REJECTED, message=message)

    @classmethod
    def error(cls, message: str):
        return cls(outcome=Outcome.ERROR, message=message)


def _clean_user_fields(data: dict) -> dict:
    # managerId is the only field a record may hold as null
    data = {
        k: v for k, v in data.items()
        if k != "id" and (v is not None or k == "managerId")
    }
    if "managerId" in data:
        data["managerId"] = data["managerId"] or None
    if "vacationDates" in data:
        data["vacationDates"] = normalize_vacation_dates(data["vacationDates"])
    return data


class RosterActions:
    def __init__(self, store, paths: CollectionPaths, status: Optional[StatusBoard] = None):
        self.store = store
        self.paths = paths
        self.status = status

    def _report(self, actor: dict, result: ActionResult) -> ActionResult:
        if self.status is not None and result.outcome != Outcome.CONFIRM:
            self.status.post(actor["id"], result.message)
        return result

    def reject(self, actor: dict, message: str) -> ActionResult:
        return self._report(actor, ActionResult.rejected(message))

    async def _write(self, actor, operation, success, failure, event, details=None) -> ActionResult:
        try:
            await operation
        except Exception as e:
            log_error(failure, e, user_id=actor["id"])
            return self._report(actor, ActionResult.error(f"{failure}: {e}"))
        log_event(event, details, user_id=actor["id"])
        return self._report(actor, ActionResult.done(success))

    # Users

    async def create_user(self, actor: dict, data: dict) -> ActionResult:
        data = _clean_user_fields(data)
        try:
            new_id = await self.store.create_document(self.paths.users, data)
        except Exception as e:
            log_error("Error saving user", e, user_id=actor["id"])
            return self._report(actor, ActionResult.error(f"Error saving user: {e}"))
        log_event(EventTypes.USER_CREATED, {"user_id": new_id}, user_id=actor["id"])
        return self._report(actor, ActionResult.done("User added successfully!"))

    async def update_user(self, actor: dict, user: dict, changes: dict) -> ActionResult:
        changes = _clean_user_fields(changes)
        if not changes:
            return self._report(actor, ActionResult.info("Nothing to update."))
        return await self._write(
            actor,
            self.store.update_document(self.paths.users, user["id"], changes),
            "User updated successfully!",
            "Error saving user",
            EventTypes.USER_UPDATED,
            {"user_id": user["id"], "fields": sorted(changes)},
        )

    async def delete_user(self, actor: dict, user: dict, confirm: bool = False) -> ActionResult:
        if not confirm:
            return ActionResult.confirm(
                f'Are you sure you want to delete user "{user.get("name")}"? This action cannot be undone.'
            )
        return await self._write(
            actor,
            self.store.delete_document(self.paths.users, user["id"]),
            "User deleted successfully!",
            "Error deleting user",
            EventTypes.USER_DELETED,
            {"user_id": user["id"]},
        )

    # Skills

    async def create_skill(self, actor: dict, name: str) -> ActionResult:
        name = (name or "").strip()
        if not name:
            return self._report(actor, ActionResult.rejected("Skill name cannot be empty."))
        return await self._write(
            actor,
            self.store.create_document(self.paths.skills, Skill(name=name).model_dump(exclude={"id"})),
            "Skill added successfully!",
            "Error adding skill",
            EventTypes.SKILL_CREATED,
            {"name": name},
        )

    async def update_skill(self, actor: dict, skill: dict, name: str) -> ActionResult:
        name = (name or "").strip()
        if not name:
            return self._report(actor, ActionResult.rejected("Skill name cannot be empty."))
        return await self._write(
            actor,
            self.store.update_document(self.paths.skills, skill["id"], {"name": name}),
            "Skill updated successfully!",
            "Error updating skill",
            EventTypes.SKILL_UPDATED,
            {"skill_id": skill["id"], "name": name},
        )

    async def delete_skill(self, actor: dict, skill: dict, confirm: bool = False) -> ActionResult:
        if not confirm:
            return ActionResult.confirm(
                f'Are you sure you want to delete skill "{skill.get("name")}"? This will remove it from all users.'
            )
        return await self._write(
            actor,
            self.store.delete_document(self.paths.skills, skill["id"]),
            "Skill deleted successfully!",
            "Error deleting skill",
            EventTypes.SKILL_DELETED,
            {"skill_id": skill["id"]},
        )

    # Service requests

    async def assign_sr(self, actor: dict, engineer: dict, force: bool = False) -> ActionResult:
        """Add one SR to an engineer; at or over the threshold this needs ``force``."""
        if engineer.get("role") != Role.ENGINEER.value:
            return self._report(actor, ActionResult.rejected("Selected engineer not found."))
        threshold = engineer.get("srThreshold") or 0
        overriding = at_sr_threshold(engineer)
        if not force and overriding:
            return ActionResult.confirm(
                f"Engineer {engineer.get('name')} has reached their SR threshold ({threshold}). "
                "Do you want to force assign?"
            )
        new_count = (engineer.get("currentSrCount") or 0) + 1
        return await self._write(
            actor,
            self.store.update_document(self.paths.users, engineer["id"], {"currentSrCount": new_count}),
            f"SR assigned to {engineer.get('name')}. New count: {new_count}.",
            "Error assigning SR",
            EventTypes.SR_FORCE_ASSIGNED if overriding else EventTypes.SR_ASSIGNED,
            {"engineer_id": engineer["id"], "count": new_count, "threshold": threshold},
        )

    async def reset_sr(self, actor: dict, engineer: dict, confirm: bool = False) -> ActionResult:
        if engineer.get("role") != Role.ENGINEER.value:
            return self._report(actor, ActionResult.rejected("Selected engineer not found."))
        if not confirm:
            return ActionResult.confirm(
                f"Are you sure you want to reset SR count for {engineer.get('name')} to 0?"
            )
        return await self._write(
            actor,
            self.store.update_document(self.paths.users, engineer["id"], {"currentSrCount": 0}),
            f"SR count for {engineer.get('name')} reset to 0.",
            "Error resetting SR count",
            EventTypes.SR_RESET,
            {"engineer_id": engineer["id"]},
        )

    # Vacations

    async def add_vacation(self, actor: dict, user: dict, date: str, confirm: bool = False) -> ActionResult:
        """Add a vacation date to ``user``, who is either the actor or one of their engineers."""
        own = actor["id"] == user["id"]
        dates, added = add_vacation_date(user.get("vacationDates"), date)
        if not added:
            if own:
                return self._report(actor, ActionResult.info(f"You already have vacation on {date}."))
            return self._report(
                actor, ActionResult.info(f"Engineer {user.get('name')} already has vacation on {date}.")
            )
        if not confirm:
            if own:
                return ActionResult.confirm(f"Request vacation on {date}?")
            return ActionResult.confirm(f"Add vacation for {user.get('name')} on {date}?")
        return await self._write(
            actor,
            self.store.update_document(self.paths.users, user["id"], {"vacationDates": dates}),
            "Vacation request submitted successfully!" if own else f"Vacation added for {user.get('name')} on {date}.",
            "Error submitting vacation request" if own else "Error adding vacation",
            EventTypes.VACATION_ADDED,
            {"user_id": user["id"], "date": date},
        )

    async def remove_vacation(self, actor: dict, user: dict, date: str, confirm: bool = False) -> ActionResult:
        own = actor["id"] == user["id"]
        if date not in (user.get("vacationDates") or []):
            return self._report(actor, ActionResult.info(f"No vacation on {date}."))
        if not confirm:
            if own:
                return ActionResult.confirm(f"Remove your vacation on {date}?")
            return ActionResult.confirm(f"Remove vacation for {user.get('name')} on {date}?")
        return await self._write(
            actor,
            self.store.update_document(
                self.paths.users, user["id"], {"vacationDates": remove_vacation_date(user.get("vacationDates"), date)}
            ),
            "Vacation removed successfully!" if own else f"Vacation removed for {user.get('name')} on {date}.",
            "Error removing vacation request" if own else "Error removing vacation",
            EventTypes.VACATION_REMOVED,
            {"user_id": user["id"], "date": date},
        )
