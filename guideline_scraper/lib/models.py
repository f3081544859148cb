#!/usr/bin/env python3
"""
Data structures shared by the traversal controller, the section extractor
and the sink.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, Any

# section label -> subsection heading -> body text
GuidelineContent = Dict[str, Dict[str, str]]


class EmptyContentError(Exception):
    """Raised when a guideline yields no content, usually because the site blocked the request"""

    pass


@dataclass(frozen=True)
class ElementSnapshot:
    """Serializable view of one DOM element taken in page context"""

    tag: str
    text: str
    ancestors: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElementSnapshot":
        return cls(
            tag=str(data.get("tag") or "").upper(),
            text=str(data.get("text") or ""),
            ancestors=str(data.get("ancestors") or ""),
        )


@dataclass(frozen=True)
class GuidelineRecord:
    """A guideline with the text of its extracted sections"""

    name: str
    url: str
    content: GuidelineContent = field(default_factory=dict)

    def is_empty(self) -> bool:
        """True when no section produced a single subsection"""
        return not any(self.content.values())

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url, "content": self.content}

    def to_json(self) -> str:
        """Serialize as one compact JSON line"""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GuidelineRecord":
        return cls(
            name=data["name"],
            url=data["url"],
            content={
                section: dict(subsections)
                for section, subsections in (data.get("content") or {}).items()
            },
        )

    @classmethod
    def from_json(cls, line: str) -> "GuidelineRecord":
        return cls.from_dict(json.loads(line))
