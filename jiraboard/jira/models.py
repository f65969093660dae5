"""Data returned by the Jira agile and issue APIs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


def _obj(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _int(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def _number(value: Any) -> float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None


@dataclass
class Board:
    """An agile board."""

    id: int = 0
    name: str = ""
    type: str = ""
    self_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Board":
        data = _obj(data)
        return cls(_int(data, "id"), _str(data, "name"), _str(data, "type"), _str(data, "self"))

    def _to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "type": self.type, "self": self.self_url}


@dataclass
class Sprint:
    """A sprint on a scrum board."""

    id: int = 0
    name: str = ""
    state: str = ""
    goal: str = ""
    start_date: str = ""
    end_date: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Sprint":
        data = _obj(data)
        return cls(
            id=_int(data, "id"),
            name=_str(data, "name"),
            state=_str(data, "state"),
            goal=_str(data, "goal"),
            start_date=_str(data, "startDate"),
            end_date=_str(data, "endDate"),
        )

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "name": self.name, "state": self.state, "goal": self.goal}
        if self.start_date:
            out["startDate"] = self.start_date
        if self.end_date:
            out["endDate"] = self.end_date
        return out


@dataclass
class IssueStatus:
    """An issue's workflow status and its category key."""

    name: str = ""
    category_key: str = ""

    @classmethod
    def _parse(cls, value: Any) -> "IssueStatus":
        data = _obj(value)
        return cls(_str(data, "name"), _str(_obj(data.get("statusCategory")), "key"))

    def _to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "statusCategory": {"key": self.category_key}}


@dataclass
class Assignee:
    """The person an issue is assigned to."""

    display_name: str = ""
    avatar_urls: dict[str, str] | None = None

    @classmethod
    def _parse(cls, value: Any) -> "Assignee | None":
        if not isinstance(value, dict):
            return None
        avatars = value.get("avatarUrls")
        urls = {k: v for k, v in avatars.items() if isinstance(v, str)} if isinstance(avatars, dict) else None
        return cls(_str(value, "displayName"), urls)

    def _to_dict(self) -> dict[str, Any]:
        urls = dict(self.avatar_urls) if self.avatar_urls is not None else None
        return {"displayName": self.display_name, "avatarUrls": urls}


@dataclass
class Priority:
    """An issue's priority."""

    name: str = ""

    @classmethod
    def _parse(cls, value: Any) -> "Priority | None":
        return cls(_str(value, "name")) if isinstance(value, dict) else None

    def _to_dict(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass
class IssueType:
    """An issue's type, such as Story or Bug."""

    name: str = ""
    icon_url: str = ""

    @classmethod
    def _parse(cls, value: Any) -> "IssueType":
        data = _obj(value)
        return cls(_str(data, "name"), _str(data, "iconUrl"))

    def _to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "iconUrl": self.icon_url}


def _optional(value: Any) -> Any:
    return value._to_dict() if value is not None else None


@dataclass
class SubtaskRef:
    """A sub-task as listed inside its parent issue."""

    id: str = ""
    key: str = ""
    summary: str = ""
    status: IssueStatus = field(default_factory=IssueStatus)
    assignee: Assignee | None = None
    priority: Priority | None = None
    issue_type: IssueType = field(default_factory=IssueType)

    @classmethod
    def _parse(cls, value: Any) -> "SubtaskRef":
        data = _obj(value)
        fields = _obj(data.get("fields"))
        return cls(
            id=_str(data, "id"),
            key=_str(data, "key"),
            summary=_str(fields, "summary"),
            status=IssueStatus._parse(fields.get("status")),
            assignee=Assignee._parse(fields.get("assignee")),
            priority=Priority._parse(fields.get("priority")),
            issue_type=IssueType._parse(fields.get("issuetype")),
        )

    def _to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "fields": {
                "summary": self.summary,
                "status": self.status._to_dict(),
                "assignee": _optional(self.assignee),
                "priority": _optional(self.priority),
                "issuetype": self.issue_type._to_dict(),
            },
        }


@dataclass
class IssueFields:
    """The fields of an issue used by the board views."""

    summary: str = ""
    status: IssueStatus = field(default_factory=IssueStatus)
    assignee: Assignee | None = None
    priority: Priority | None = None
    issue_type: IssueType = field(default_factory=IssueType)
    subtasks: list[SubtaskRef] | None = None
    story_points: float | None = None

    @classmethod
    def _parse(cls, value: Any) -> "IssueFields":
        data = _obj(value)
        subtasks = data.get("subtasks")
        return cls(
            summary=_str(data, "summary"),
            status=IssueStatus._parse(data.get("status")),
            assignee=Assignee._parse(data.get("assignee")),
            priority=Priority._parse(data.get("priority")),
            issue_type=IssueType._parse(data.get("issuetype")),
            subtasks=[SubtaskRef._parse(item) for item in subtasks] if isinstance(subtasks, list) else None,
            story_points=_number(data.get("customfield_10032")),
        )

    def _to_dict(self) -> dict[str, Any]:
        subtasks = [item._to_dict() for item in self.subtasks] if self.subtasks is not None else None
        return {
            "summary": self.summary,
            "status": self.status._to_dict(),
            "assignee": _optional(self.assignee),
            "priority": _optional(self.priority),
            "issuetype": self.issue_type._to_dict(),
            "subtasks": subtasks,
            "customfield_10032": self.story_points,
        }


@dataclass
class Issue:
    """An issue on a board or in a sprint."""

    id: str = ""
    key: str = ""
    fields: IssueFields = field(default_factory=IssueFields)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Issue":
        data = _obj(data)
        return cls(_str(data, "id"), _str(data, "key"), IssueFields._parse(data.get("fields")))

    def _to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "key": self.key, "fields": self.fields._to_dict()}


@dataclass
class IssueDetail:
    """A single issue flattened for display."""

    key: str = ""
    summary: str = ""
    description: str = ""
    type: str = ""
    status: str = ""
    assignee: str = ""
    priority: str = ""
    story_points: str = ""
    github_repo: str = ""
    github_base: str = ""
    github_feature: str = ""


@dataclass
class SprintStats:
    """How many issues a sprint has and how many are done."""

    total: int = 0
    done: int = 0


@dataclass
class BoardStoryPointStats:
    """Story point totals for a board's current scope."""

    total_sp: float = 0.0
    story_sp: float = 0.0


@dataclass
class AssigneeStat:
    """Issue count and story points of one assignee."""

    display_name: str = ""
    avatar_url: str = ""
    count: int = 0
    story_points: float = 0.0


@dataclass
class BoardSummary:
    """A board with its current sprint, issues and breakdowns."""

    board: Board = field(default_factory=Board)
    active_sprint: Sprint | None = None
    sprint_stats: SprintStats = field(default_factory=SprintStats)
    issues: list[Issue] | None = None
    total_issues: int = 0
    status_stats: dict[str, int] | None = None
    type_stats: dict[str, int] | None = None
    assignee_stats: list[AssigneeStat] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the summary with its wire field names."""
        out: dict[str, Any] = {"board": self.board._to_dict()}
        if self.active_sprint is not None:
            out["active_sprint"] = self.active_sprint._to_dict()
        out["sprint_stats"] = {"Total": self.sprint_stats.total, "Done": self.sprint_stats.done}
        out["issues"] = [issue._to_dict() for issue in self.issues] if self.issues is not None else None
        out["total_issues"] = self.total_issues
        out["status_stats"] = dict(self.status_stats) if self.status_stats is not None else None
        out["type_stats"] = dict(self.type_stats) if self.type_stats is not None else None
        out["assignee_stats"] = (
            [asdict(stat) for stat in self.assignee_stats] if self.assignee_stats is not None else None
        )
        return out