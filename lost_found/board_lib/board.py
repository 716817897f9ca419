"""Presentation-facing facade over the board core."""
from __future__ import annotations

from typing import List, Mapping, Optional, Tuple

from .config import AppConfig
from .errors import StorageCorrupt
from .filtering import apply_filter
from .imaging import ImageBlob
from .models import ANY_STATUS, Report, StatusFilter, parse_status
from .stores import IdentityStore, ReportStore
from .stores.report_store import ConditionListener
from .submission import SubmissionWorkflow


class Board:
    """Wire identity, report store and workflow for one data directory.

    Also mirrors the presentation layer's current status/query selection so
    callers can ask for the visible list without passing it every time.
    """

    def __init__(
        self,
        config: AppConfig,
        identity: IdentityStore,
        store: ReportStore,
        workflow: SubmissionWorkflow,
    ) -> None:
        self.config = config
        self.identity = identity
        self.store = store
        self.workflow = workflow
        self.query = ""
        self.status: StatusFilter = ANY_STATUS
        self.last_load_error: Optional[StorageCorrupt] = None

    @classmethod
    def open(cls, config: AppConfig, on_condition: Optional[ConditionListener] = None) -> "Board":
        identity = IdentityStore(config.identity_path)
        store = ReportStore(config.reports_path, on_condition=on_condition)
        workflow = SubmissionWorkflow(identity, store, config.max_image_bytes)
        board = cls(config, identity, store, workflow)
        board.last_load_error = store.load()
        return board

    async def submit(self, fields: Mapping[str, Optional[str]], image: Optional[ImageBlob] = None) -> Report:
        return await self.workflow.submit(fields, image)

    def set_query(self, text: Optional[str]) -> None:
        self.query = text or ""

    def set_status(self, status: Optional[StatusFilter]) -> None:
        self.status = parse_status(status)

    def visible_items(self) -> List[Report]:
        return apply_filter(self.store.all(), self.status, self.query)

    def all_items(self) -> Tuple[Report, ...]:
        return self.store.all()

    def current_identity(self) -> str:
        return self.identity.get_or_create()
