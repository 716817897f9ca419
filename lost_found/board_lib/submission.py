"""Submission workflow: validate, stamp identity, encode image, store."""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Mapping, Optional

from .errors import MissingFields
from .imaging import ImageBlob, encode_image
from .models import REQUIRED_TEXT_FIELDS, Report, ReportType
from .stores import IdentityStore, ReportStore

logger = logging.getLogger(__name__)

# Form field names used by the browser version of the board.
FIELD_ALIASES = {
    "item-type": "type",
    "item-name": "name",
    "contact-info": "contact",
}


def normalize_fields(fields: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """Map alias keys to canonical names and strip every value."""
    clean: Dict[str, str] = {}
    for key, value in fields.items():
        canonical = FIELD_ALIASES.get(key, key)
        text = "" if value is None else str(value).strip()
        if text or canonical not in clean:
            clean[canonical] = text
    return clean


class SubmissionWorkflow:
    """Run one "add report" transaction against the stores."""

    def __init__(
        self,
        identity: IdentityStore,
        store: ReportStore,
        max_image_bytes: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.identity = identity
        self.store = store
        self.max_image_bytes = max_image_bytes
        self.clock = clock

    async def submit(self, fields: Mapping[str, Optional[str]], image: Optional[ImageBlob] = None) -> Report:
        """Validate input, encode the picture and append the new report.

        Validation runs before identity, image or storage are touched, and
        the image is fully encoded before the store is mutated. A failed
        write is not an error here: the store keeps the report in memory and
        reports StorageWriteFailed through its listener.

        Raises:
            MissingFields: If type or a required text field is blank
            ValueError: If type is not Lost or Found
            IdentityUnavailable: If the local user id cannot be obtained
            ImageTooLarge: If the picture exceeds the cap
            ImageReadFailed: If the picture could not be read
        """
        clean = normalize_fields(fields)
        missing = [key for key in ("type", *REQUIRED_TEXT_FIELDS) if not clean.get(key)]
        if missing:
            raise MissingFields(missing)
        report_type = ReportType.parse(clean["type"])

        reporter_id = self.identity.get_or_create()
        image_uri = await encode_image(image, self.max_image_bytes)

        now_ms = int(self.clock() * 1000)
        report = Report(
            id=str(now_ms),
            type=report_type,
            name=clean["name"],
            description=clean["description"],
            date=clean["date"],
            location=clean["location"],
            contact=clean["contact"],
            reporter_id=reporter_id,
            timestamp=now_ms,
            image=image_uri,
        )
        result = self.store.append(report)
        logger.info(
            "Saved %s report %s (%r, image=%s, persisted=%s)",
            report.type.value,
            report.id,
            report.name,
            "yes" if image_uri else "no",
            result.ok,
        )
        return report
