from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Sequence, Set

from config.settings import Settings, get_settings
from models import ApprovalResult, ApprovalState, ApprovalUpdateRequest, MessageEntry
from ports import MutationSinkPort, SheetReaderPort
from services.columns import ColumnMap
from services.sink_client import SinkError
from services.url_utils import normalize_url
from sources.base import AdmittedRow, walk_admitted_rows
from sources.message_tab import admit_message_row
from sources.sheet_export import SheetFetchError


logger = logging.getLogger(__name__)


# States a user may move an entry to from each state. SENT is written only by
# the sending system, so it is never a target here and nothing leaves it.
USER_TRANSITIONS: Dict[ApprovalState, FrozenSet[ApprovalState]] = {
    ApprovalState.PENDING: frozenset({ApprovalState.REJECTED}),
    ApprovalState.REJECTED: frozenset({ApprovalState.PENDING}),
    ApprovalState.SENT: frozenset(),
}


class ApprovalUpdateError(Exception):
    summary = "Failed to update message approval status"
    http_status = 500


class TransitionRejected(ApprovalUpdateError):
    summary = "Approval change not allowed"
    http_status = 400


class UpdateInProgress(ApprovalUpdateError):
    summary = "Another update for this message is still in progress"
    http_status = 409


class NotConfigured(ApprovalUpdateError):
    summary = "Approval updates are not configured"


class RowNotFound(ApprovalUpdateError):
    summary = "Message row not found"


class SheetUnavailable(ApprovalUpdateError):
    summary = "Could not read the message tab"


class SinkFailed(ApprovalUpdateError):
    summary = "Failed to update the sheet"


def check_transition(current: Optional[ApprovalState], target: ApprovalState) -> None:
    if target is ApprovalState.SENT:
        raise TransitionRejected("Messages can only be marked sent by the sending system")
    if current is ApprovalState.SENT:
        raise TransitionRejected("Message was already sent and can no longer be changed")
    if current is not None and target not in USER_TRANSITIONS[current]:
        raise TransitionRejected(f"Cannot change approval from {current.value} to {target.value}")


def locate_message_row(rows: Sequence[Sequence[str]], ordinal: int, columns: Optional[ColumnMap] = None) -> AdmittedRow:
    """Find the sheet row holding message ``ordinal`` using the same walk as the loader."""
    checked = 0
    for admitted in walk_admitted_rows(rows, admit_message_row, columns=columns):
        checked = admitted.ordinal
        if admitted.ordinal == ordinal:
            return admitted
    raise RowNotFound(
        f"Row with ordinal {ordinal} not found. Checked {checked} entries in a tab with {len(rows)} rows."
    )


class ApprovalUpdater:
    """Writes an approval change for one message row.

    The message tab has no row id column, so every update re-reads the tab
    and recomputes which sheet row currently carries the requested ordinal.
    Nothing from an earlier load is trusted.
    """

    def __init__(
        self,
        reader: SheetReaderPort,
        sink: Optional[MutationSinkPort],
        settings: Optional[Settings] = None,
    ) -> None:
        self.reader = reader
        self.sink = sink
        self.settings = settings or get_settings()
        self._in_flight: Set[int] = set()
        self._lock = threading.Lock()

    @contextmanager
    def _claim(self, ordinal: int) -> Iterator[None]:
        with self._lock:
            if ordinal in self._in_flight:
                raise UpdateInProgress(f"An update for ordinal {ordinal} is already running")
            self._in_flight.add(ordinal)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.discard(ordinal)

    def is_in_flight(self, ordinal: int) -> bool:
        with self._lock:
            return ordinal in self._in_flight

    def apply(self, request: ApprovalUpdateRequest) -> ApprovalResult:
        """Run :meth:`update` and report the outcome instead of raising."""
        try:
            data = self.update(request)
        except ApprovalUpdateError as e:
            logger.error(
                f"Approval update for ordinal {request.ordinal} failed: {e}",
                extra={"step": "approval", "status": "failed", "error": type(e).__name__},
            )
            return ApprovalResult(
                success=False,
                error=e.summary,
                details=str(e),
                http_status=e.http_status,
            )
        return ApprovalResult(
            success=True,
            message="Message approval status updated successfully",
            data=data,
        )

    def update(self, request: ApprovalUpdateRequest) -> Dict[str, Any]:
        check_transition(request.current_state, request.target_state)
        if self.sink is None:
            raise NotConfigured("No script URL configured (set APPS_SCRIPT_URL) so the sheet cannot be updated")

        with self._claim(request.ordinal):
            rows = self._fetch_message_rows()
            columns = ColumnMap(rows[0])
            approval_idx = columns.index("approval")
            if approval_idx is None:
                raise ApprovalUpdateError(
                    f"Approval column not found. Available columns: {', '.join(columns.visible_headers())}"
                )

            target = locate_message_row(rows, request.ordinal, columns)
            live_state = ApprovalState.parse(columns.cell(target.cells, "approval"))
            check_transition(live_state, request.target_state)
            self._cross_check(request, columns, target)

            payload = {
                "action": "updateApproval",
                "documentId": self.settings.sheet_document_id,
                "tabName": self.settings.message_tab_name,
                "row": target.sheet_row,
                "column": approval_idx + 1,
                "value": request.target_state.display_label,
                "firstName": request.first_name,
                "lastName": request.last_name,
                "linkedinPost": request.post_url,
            }
            logger.info(
                f"Writing {payload['value']} to row {target.sheet_row} column {payload['column']} for ordinal {request.ordinal}",
                extra={"step": "approval", "tab": f"name={self.settings.message_tab_name}"},
            )
            try:
                reply = self.sink.send(payload)
            except SinkError as e:
                raise SinkFailed(str(e)) from e

        logger.info(
            f"Updated approval for ordinal {request.ordinal} to {request.target_state.value}",
            extra={"step": "approval", "status": "ok"},
        )
        return {
            "ordinal": request.ordinal,
            "approval": request.target_state.value,
            "rowNumber": target.sheet_row,
            "sink": reply,
        }

    def _fetch_message_rows(self) -> List[List[str]]:
        tab_name = self.settings.message_tab_name
        try:
            rows = self.reader.fetch_rows(tab_name=tab_name)
        except SheetFetchError as e:
            raise SheetUnavailable(str(e)) from e
        if len(rows) < 2:
            raise SheetUnavailable(f"Tab {tab_name} has no data rows")
        return rows

    @staticmethod
    def _cross_check(request: ApprovalUpdateRequest, columns: ColumnMap, target: AdmittedRow) -> None:
        # Ordinal decides the row; a mismatch is only reported.
        if not (request.first_name and request.last_name and request.post_url):
            return
        found = (
            (columns.cell(target.cells, "first name") or "").lower(),
            (columns.cell(target.cells, "last name") or "").lower(),
            normalize_url(columns.cell(target.cells, "linkedin post")),
        )
        expected = (
            request.first_name.strip().lower(),
            request.last_name.strip().lower(),
            normalize_url(request.post_url),
        )
        if found != expected:
            logger.warning(
                f"Ordinal {request.ordinal} resolved to sheet row {target.sheet_row} but its contents differ: "
                f"expected {expected[0]} {expected[1]} | {expected[2][:50]}, "
                f"found {found[0]} {found[1]} | {found[2][:50]}",
                extra={"step": "approval", "status": "mismatch"},
            )


class ApprovalSession:
    """Message queue as one user sees it, with optimistic approval changes.

    The new state is shown immediately, the entry is locked while the write
    runs, and the previous state comes back if the write fails.
    """

    def __init__(self, updater: ApprovalUpdater, messages: Sequence[MessageEntry]) -> None:
        self.updater = updater
        self._entries: Dict[int, MessageEntry] = {m.ordinal: m.model_copy() for m in messages}
        self._locked: Set[int] = set()

    def entries(self) -> List[MessageEntry]:
        return list(self._entries.values())

    def get(self, ordinal: int) -> Optional[MessageEntry]:
        return self._entries.get(ordinal)

    def is_editable(self, ordinal: int) -> bool:
        entry = self._entries.get(ordinal)
        return (
            entry is not None
            and ordinal not in self._locked
            and entry.approval_state is not ApprovalState.SENT
        )

    def set_state(self, ordinal: int, target: ApprovalState) -> ApprovalResult:
        entry = self._entries.get(ordinal)
        if entry is None:
            return ApprovalResult(success=False, error=RowNotFound.summary, details=f"No message with ordinal {ordinal}", http_status=404)
        if ordinal in self._locked:
            return ApprovalResult(success=False, error=UpdateInProgress.summary, http_status=UpdateInProgress.http_status)

        previous = entry.approval_state
        request = ApprovalUpdateRequest(
            ordinal=ordinal,
            target_state=target,
            post_url=entry.post_url or None,
            first_name=entry.first_name or None,
            last_name=entry.last_name or None,
            current_state=previous,
        )
        try:
            check_transition(previous, target)
        except TransitionRejected as e:
            return ApprovalResult(success=False, error=e.summary, details=str(e), http_status=e.http_status)

        entry.approval_state = target
        self._locked.add(ordinal)
        try:
            result = self.updater.apply(request)
        finally:
            self._locked.discard(ordinal)
        if not result.success:
            entry.approval_state = previous
        return result
