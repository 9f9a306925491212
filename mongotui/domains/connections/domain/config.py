"""Connection domain model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit, urlunsplit


@dataclass(frozen=True)
class Connection:
    """A saved server: a display name and a MongoDB connection string."""

    name: str
    uri: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Connection:
        name = data.get("name")
        uri = data.get("uri")
        if not isinstance(name, str) or not isinstance(uri, str):
            raise TypeError("connection entries need string 'name' and 'uri'")
        return cls(name=name, uri=uri)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "uri": self.uri}

    @property
    def display_uri(self) -> str:
        """The URI with any password masked."""
        try:
            parts = urlsplit(self.uri)
        except ValueError:
            return self.uri
        if not parts.password:
            return self.uri
        userinfo = f"{parts.username}:***@" if parts.username else "***@"
        host = parts.netloc.rsplit("@", 1)[-1]
        return urlunsplit(parts._replace(netloc=userinfo + host))
