"""Typed records and response envelopes for the Duo Admin API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

STAT_OK = "OK"
STAT_FAIL = "FAIL"


def _str(data: dict, key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class User:
    user_id: str
    username: str = ""
    realname: str = ""
    firstname: str = ""
    lastname: str = ""
    email: str = ""
    status: str = ""
    created: Optional[int] = None
    last_login: Optional[int] = None
    notes: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            user_id=_str(data, "user_id"),
            username=_str(data, "username"),
            realname=_str(data, "realname"),
            firstname=_str(data, "firstname"),
            lastname=_str(data, "lastname"),
            email=_str(data, "email"),
            status=_str(data, "status"),
            created=data.get("created"),
            last_login=data.get("last_login"),
            notes=_str(data, "notes"),
        )


@dataclass(frozen=True)
class Group:
    group_id: str
    name: str = ""
    desc: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Group":
        return cls(
            group_id=_str(data, "group_id"),
            name=_str(data, "name"),
            desc=_str(data, "desc"),
            status=_str(data, "status"),
        )


@dataclass(frozen=True)
class Admin:
    admin_id: str
    name: str = ""
    email: str = ""
    role: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Admin":
        return cls(
            admin_id=_str(data, "admin_id"),
            name=_str(data, "name"),
            email=_str(data, "email"),
            role=_str(data, "role"),
            status=_str(data, "status"),
        )


@dataclass(frozen=True)
class Account:
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        return cls(name=_str(data, "name"))


@dataclass(frozen=True)
class Integration:
    name: str = ""
    integration_key: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Integration":
        return cls(
            name=_str(data, "name"),
            integration_key=_str(data, "integration_key"),
        )


@dataclass(frozen=True)
class ListMetadata:
    """Offsets arrive as numbers or numeric strings; both are kept as strings."""

    next_offset: str = ""
    prev_offset: str = ""
    total_objects: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "ListMetadata":
        return cls(
            next_offset=_str(data, "next_offset"),
            prev_offset=_str(data, "prev_offset"),
            total_objects=_str(data, "total_objects"),
        )


@dataclass(frozen=True)
class Envelope:
    """Common shape of every Duo response body."""

    stat: str
    response: Any = None
    code: Optional[int] = None
    message: str = ""
    message_detail: str = ""
    metadata: Optional[ListMetadata] = field(default=None)

    @property
    def failed(self) -> bool:
        return self.stat == STAT_FAIL

    @property
    def next_offset(self) -> str:
        if self.metadata is None:
            return ""
        return self.metadata.next_offset

    @classmethod
    def from_dict(cls, body: dict) -> "Envelope":
        raw_meta = body.get("metadata")
        return cls(
            stat=_str(body, "stat"),
            response=body.get("response"),
            code=body.get("code"),
            message=_str(body, "message"),
            message_detail=_str(body, "message_detail"),
            metadata=ListMetadata.from_dict(raw_meta) if raw_meta else None,
        )
