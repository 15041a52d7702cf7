"""Account erasure: removes a user's data subtree and records the outcome.

Runs from the identity provider's account-deleted hook and from the
deletion-request worker. Erasure never raises; the outcome is written to the
top-level audit collection because the user's own subtree is gone afterwards.
"""

from __future__ import annotations

import logging
from typing import Any

from ecomind.application.interfaces.repositories import (
    DocumentTarget,
    IDeletionRequestRepository,
    IUserDataRepository,
)
from ecomind.application.services.audit_logger import AuditLogger
from ecomind.domain.collections import ERASABLE_USER_SUBCOLLECTIONS
from ecomind.domain.enums import DeletionRequestStatus
from ecomind.domain.exceptions import InternalException, NotFoundException
from ecomind.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AccountErasureService:
    """Deletes users/{uid} and its erasable subcollections with batched commits."""

    def __init__(
        self,
        user_data_repo: IUserDataRepository,
        deletion_repo: IDeletionRequestRepository,
        audit: AuditLogger,
        batch_limit: int = 500,
    ) -> None:
        self._user_data_repo = user_data_repo
        self._deletion_repo = deletion_repo
        self._audit = audit
        self._batch_limit = batch_limit

    async def erase_account(self, user_id: str, email: str | None = None) -> dict[str, Any]:
        """Delete every document of the erasable subcollections plus the root profile.

        Returns ``{success, recordCounts, batchCommits}`` or ``{success: False, error}``.
        """
        logger.info("Starting data cleanup for deleted user", extra={"user_id": user_id})
        counts: dict[str, int] = {}
        try:
            targets: list[DocumentTarget] = [DocumentTarget(None, user_id)]
            for subcollection in ERASABLE_USER_SUBCOLLECTIONS:
                docs = await self._user_data_repo.list_documents(user_id, subcollection)
                targets.extend(DocumentTarget(subcollection, doc_id) for doc_id, _ in docs)
                counts[subcollection] = len(docs)
                logger.info(
                    "Queued %d documents from %s for deletion", len(docs), subcollection,
                    extra={"user_id": user_id},
                )
            commits = await self._user_data_repo.delete_documents(
                user_id, targets, self._batch_limit
            )
        except Exception as e:
            logger.exception("Failed to clean up data for deleted user", extra={"user_id": user_id})
            await self._audit.record_account_event(
                user_id,
                "user_deletion_failed",
                {
                    "email": email,
                    "deletedAt": utc_now(),
                    "error": str(e) or type(e).__name__,
                    "dataCleanupCompleted": False,
                    "requiresManualCleanup": True,
                },
            )
            return {"success": False, "error": str(e) or type(e).__name__}

        await self._audit.record_account_event(
            user_id,
            "user_deletion",
            {
                "email": email,
                "deletedAt": utc_now(),
                "recordCounts": counts,
                "batchCommits": commits,
                "dataCleanupCompleted": True,
                "gdprCompliant": True,
            },
        )
        logger.info(
            "Successfully cleaned up data for deleted user",
            extra={"user_id": user_id, "documents": len(targets), "commits": commits},
        )
        return {"success": True, "recordCounts": counts, "batchCommits": commits}

    async def process_deletion_request(self, request_id: str) -> dict[str, Any]:
        """Run a pending deletion request and record its final status."""
        try:
            request = await self._deletion_repo.get(request_id)
        except Exception as e:
            logger.exception("Failed to load deletion request", extra={"deletion_id": request_id})
            raise InternalException("Failed to load deletion request", operation="process_deletion_request") from e
        if request is None:
            raise NotFoundException("deletion_request", request_id, "Deletion request not found")
        if request.get("status") == DeletionRequestStatus.COMPLETED.value:
            return {"success": True, "deletionId": request_id, "status": DeletionRequestStatus.COMPLETED.value}

        user_id = request.get("userId") or ""
        try:
            await self._deletion_repo.update_status(
                request_id,
                {"status": DeletionRequestStatus.PROCESSING.value, "startedAt": utc_now()},
            )
            result = await self.erase_account(user_id, request.get("userEmail"))
            if result["success"]:
                status = DeletionRequestStatus.COMPLETED.value
                fields: dict[str, Any] = {"status": status, "completedAt": utc_now()}
            else:
                status = DeletionRequestStatus.FAILED.value
                fields = {"status": status, "errorMessage": result.get("error")}
            await self._deletion_repo.update_status(request_id, fields)
        except Exception as e:
            logger.exception("Deletion request processing failed", extra={"deletion_id": request_id})
            raise InternalException("Failed to process deletion request", operation="process_deletion_request") from e

        await self._audit.record_account_event(
            user_id,
            f"deletion_request_{status}",
            {
                "deletionId": request_id,
                "status": status,
                "recordCounts": result.get("recordCounts", {}),
                "error": result.get("error"),
                "gdprCompliant": result["success"],
            },
        )
        return {
            "success": result["success"],
            "deletionId": request_id,
            "status": status,
            "recordCounts": result.get("recordCounts", {}),
        }
