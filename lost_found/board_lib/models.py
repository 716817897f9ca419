"""Report records and status constraints."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

REQUIRED_TEXT_FIELDS = ("name", "description", "date", "location", "contact")
ANY_STATUS = "any"


class ReportType(str, Enum):
    LOST = "Lost"
    FOUND = "Found"

    @classmethod
    def parse(cls, value: Union[str, "ReportType"]) -> "ReportType":
        if isinstance(value, ReportType):
            return value
        clean = str(value or "").strip().casefold()
        for member in cls:
            if member.value.casefold() == clean:
                return member
        raise ValueError(f"Unknown report type: {value!r}")


StatusFilter = Union[ReportType, str]


def parse_status(value: Optional[StatusFilter]) -> StatusFilter:
    """Map user text to a status constraint ("any", Lost or Found)."""
    if isinstance(value, ReportType):
        return value
    clean = (value or "").strip().casefold()
    if clean in ("", ANY_STATUS, "all"):
        return ANY_STATUS
    return ReportType.parse(clean)


@dataclass(frozen=True)
class Report:
    id: str
    type: ReportType
    name: str
    description: str
    date: str
    location: str
    contact: str
    reporter_id: str
    timestamp: int
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "description": self.description,
            "date": self.date,
            "location": self.location,
            "contact": self.contact,
            "reporterId": self.reporter_id,
            "timestamp": self.timestamp,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Report":
        """Rebuild a report from its stored form.

        Raises:
            ValueError: If a required key is missing or has the wrong type
        """
        if not isinstance(raw, dict):
            raise ValueError("report entry must be an object")
        missing = [key for key in ("id", "type", "reporterId", "timestamp", *REQUIRED_TEXT_FIELDS) if key not in raw]
        if missing:
            raise ValueError(f"report entry is missing {', '.join(missing)}")
        timestamp = raw["timestamp"]
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ValueError("timestamp must be numeric")
        if not math.isfinite(timestamp):
            raise ValueError("timestamp must be finite")
        blank = [key for key in REQUIRED_TEXT_FIELDS if not str(raw[key] or "").strip()]
        if blank:
            raise ValueError(f"report entry has blank {', '.join(blank)}")
        image = raw.get("image")
        if image is not None and not isinstance(image, str):
            raise ValueError("image must be text or null")
        return cls(
            id=str(raw["id"]),
            type=ReportType.parse(raw["type"]),
            name=str(raw["name"]),
            description=str(raw["description"]),
            date=str(raw["date"]),
            location=str(raw["location"]),
            contact=str(raw["contact"]),
            reporter_id=str(raw["reporterId"]),
            timestamp=int(timestamp),
            image=image,
        )
