from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional


class Role(str, Enum):
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"


class NoticeType(str, Enum):
    HOLIDAY = "HOLIDAY"
    EVENT = "EVENT"
    URGENT = "URGENT"


@dataclass(frozen=True)
class User:
    id: str
    reg_number: str
    username: str
    role: Role
    photo_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "regNumber": self.reg_number,
            "username": self.username,
            "role": self.role.value,
        }
        if self.photo_url is not None:
            data["photoUrl"] = self.photo_url
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            id=str(data["id"]),
            reg_number=data["regNumber"],
            username=data["username"],
            role=Role(data["role"]),
            photo_url=data.get("photoUrl"),
        )


@dataclass(frozen=True)
class StudentRecord:
    semester: str
    gpa: float
    attendance: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "semester": self.semester,
            "gpa": self.gpa,
            "attendance": self.attendance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StudentRecord:
        return cls(
            semester=data["semester"],
            gpa=data["gpa"],
            attendance=data["attendance"],
        )


@dataclass(frozen=True)
class Student(User):
    """A roster entry. ``records`` must be kept in chronological order."""

    role: Role = Role.STUDENT
    records: tuple[StudentRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["records"] = [record.to_dict() for record in self.records]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Student:
        return cls(
            id=str(data["id"]),
            reg_number=data["regNumber"],
            username=data["username"],
            role=Role(data.get("role", Role.STUDENT.value)),
            photo_url=data.get("photoUrl"),
            records=tuple(StudentRecord.from_dict(r) for r in data.get("records", [])),
        )

    def as_user(self) -> User:
        return User(
            id=self.id,
            reg_number=self.reg_number,
            username=self.username,
            role=self.role,
            photo_url=self.photo_url,
        )

    def with_records(self, records) -> Student:
        return replace(self, records=tuple(records))


@dataclass(frozen=True)
class Notice:
    id: str
    title: str
    content: str
    date: str
    type: NoticeType

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "date": self.date,
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Notice:
        return cls(
            id=str(data["id"]),
            title=data["title"],
            content=data["content"],
            date=data["date"],
            type=NoticeType(data["type"]),
        )
