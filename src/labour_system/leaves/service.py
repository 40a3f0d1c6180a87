from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..common.datetime_utils import now_utc
from ..common.filters import FilterBuilder, Predicate
from ..common.pagination import Page, PageRequest
from ..common.references import expand
from ..common.validators import (
    optional_identifier,
    require_date,
    require_found,
    require_identifier,
    require_non_empty,
)
from ..core.constants import MAX_LEAVE_REASON_LENGTH
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from ..labourers.repository import LabourerRepository
from ..users.model import CurrentUser
from ..users.repository import UserRepository
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

PENDING_ONLY = FilterBuilder().where("status", LeaveStatus.PENDING.value).build()


class LeaveService:
    """Use cases: apply, review (approve/reject), cancel and remark leave requests.

    Review and cancel apply only to pending requests and are written as
    conditional updates guarded on that status.
    """

    def __init__(self, leaves: LeaveRepository, labourers: LabourerRepository, users: UserRepository):
        self._leaves = leaves
        self._labourers = labourers
        self._users = users

    def _expand(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        expand(items, key="labourerId", target="labourer", source=self._labourers)
        expand(items, key="reviewedBy", target="reviewer", source=self._users)
        return items

    def _require(self, leave_id: Any) -> LeaveRequest:
        leave_id = require_identifier(leave_id, "leave request ID")
        return require_found(self._leaves.get_by_id(leave_id), "Leave request not found")

    def _check_owner(self, labourer_id: str, current: CurrentUser, action: str) -> None:
        if current.role == Role.ADMIN:
            return
        labourer = self._labourers.get_by_id(labourer_id)
        if labourer is None or labourer.user_id != current.user_id:
            logger.warning("user %s may not %s leave for labourer %s", current.user_id, action, labourer_id)
            raise AuthorizationError(f"Not authorized to {action} leave for this labourer")

    def apply(self, payload: Mapping[str, Any], *, current: CurrentUser) -> Dict[str, Any]:
        for key in ("labourerId", "fromDate", "toDate", "reason"):
            if payload.get(key) in (None, ""):
                raise ValidationError("labourerId, fromDate, toDate, and reason are required")
        labourer_id = require_identifier(payload["labourerId"], "labourerId")
        from_date = require_date(payload["fromDate"], "fromDate")
        to_date = require_date(payload["toDate"], "toDate")
        if to_date < from_date:
            raise ValidationError("toDate cannot be before fromDate")
        reason = require_non_empty(payload["reason"], "reason", max_len=MAX_LEAVE_REASON_LENGTH)
        require_found(self._labourers.get_by_id(labourer_id), "Labourer not found")
        self._check_owner(labourer_id, current, "apply for")

        leave_id = self._leaves.create(
            {
                "labourer_id": labourer_id,
                "from_date": from_date,
                "to_date": to_date,
                "reason": reason,
                "status": LeaveStatus.PENDING,
                "applied_on": now_utc(),
                "reviewed_by": None,
                "reviewed_at": None,
                "remarks": None,
            }
        )
        logger.info("leave %s applied by labourer %s", leave_id, labourer_id)
        return self.get(leave_id)

    def get(self, leave_id: Any) -> Dict[str, Any]:
        return self._expand([self._require(leave_id).to_dict()])[0]

    def _decide(self, leave_id: Any, status: LeaveStatus, reviewer_id: Optional[str]) -> Dict[str, Any]:
        leave = self._require(leave_id)
        verb = "approve" if status == LeaveStatus.APPROVED else "reject"
        if not reviewer_id:
            raise ValidationError("Invalid reviewedBy user ID")
        if leave.status != LeaveStatus.PENDING:
            raise ConflictError(f"Cannot {verb} a leave request with status '{leave.status.value}'")

        updated = self._leaves.update(
            leave.id,
            {"status": status, "reviewed_by": reviewer_id, "reviewed_at": now_utc()},
            guard=PENDING_ONLY,
        )
        if not updated:
            raise ConflictError("Leave request has already been processed")
        logger.info("leave %s %s by %s", leave.id, status.value, reviewer_id)
        return self.get(leave.id)

    def approve(self, leave_id: Any, *, reviewer_id: Optional[str], reviewed_by: Any = None) -> Dict[str, Any]:
        reviewer = optional_identifier(reviewed_by, "reviewedBy user ID") or reviewer_id
        return self._decide(leave_id, LeaveStatus.APPROVED, reviewer)

    def reject(self, leave_id: Any, *, reviewer_id: Optional[str], reviewed_by: Any = None) -> Dict[str, Any]:
        reviewer = optional_identifier(reviewed_by, "reviewedBy user ID") or reviewer_id
        return self._decide(leave_id, LeaveStatus.REJECTED, reviewer)

    def cancel(self, leave_id: Any, *, current: CurrentUser) -> None:
        leave = self._require(leave_id)
        self._check_owner(leave.labourer_id, current, "cancel")
        if leave.status != LeaveStatus.PENDING:
            raise ConflictError(f"Cannot cancel a leave request with status '{leave.status.value}'")
        if not self._leaves.delete(leave.id, guard=PENDING_ONLY):
            raise ConflictError("Leave request has already been processed")
        logger.info("leave %s cancelled", leave.id)

    def add_remark(self, leave_id: Any, remark: Any) -> Dict[str, Any]:
        leave = self._require(leave_id)
        if not isinstance(remark, str) or not remark.strip():
            raise ValidationError("Remark must be a non-empty string")
        self._leaves.update(leave.id, {"remarks": remark.strip()})
        return self.get(leave.id)

    def _page(self, predicate: Predicate, params: Mapping[str, Any]) -> Page:
        page = self._leaves.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([l.to_dict() for l in page.items]))

    def list_by_labourer(self, labourer_id: Any, params: Mapping[str, Any]) -> Page:
        labourer_id = require_identifier(labourer_id, "labourer ID")
        predicate = (
            FilterBuilder(params)
            .where("labourer_id", labourer_id, identifier=True)
            .enum("status", LeaveStatus, "status")
            .overlap("fromDate", "toDate", start_field="from_date", end_field="to_date")
            .build()
        )
        return self._page(predicate, params)

    def list(self, params: Mapping[str, Any]) -> Page:
        predicate = (
            FilterBuilder(params)
            .identifier("labourerId", "labourer_id")
            .enum("status", LeaveStatus, "status")
            .overlap("fromDate", "toDate", start_field="from_date", end_field="to_date")
            .identifier("reviewedBy", "reviewed_by")
            .build()
        )
        return self._page(predicate, params)