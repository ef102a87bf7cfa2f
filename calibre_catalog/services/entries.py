"""Plain output records consumed by the feed / page rendering layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class LinkNavigation:
    """Navigation link to another catalog page."""

    href: str
    rel: Optional[str] = None
    title: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"href": self.href}
        if self.rel:
            payload["rel"] = self.rel
        if self.title:
            payload["title"] = self.title
        return payload


@dataclass(frozen=True)
class Entry:
    """One row of a navigation page (a column, or one value of a column)."""

    title: str
    entry_id: str
    content: str
    content_type: str
    links: List[LinkNavigation] = field(default_factory=list)
    css_class: str = ""
    count: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "id": self.entry_id,
            "content": self.content,
            "content_type": self.content_type,
            "links": [link.as_dict() for link in self.links],
            "class": self.css_class,
            "count": self.count,
        }


__all__ = ["Entry", "LinkNavigation"]
