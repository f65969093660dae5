"""A client for the Jira REST and agile APIs."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any

import requests

from jiraboard.httpclient import new_client
from jiraboard.jira.markup import raw_description, raw_string
from jiraboard.jira.models import (
    AssigneeStat,
    Board,
    BoardStoryPointStats,
    BoardSummary,
    Issue,
    IssueDetail,
    Sprint,
    SprintStats,
)

_REQUEST_TIMEOUT = 10.0
_PER_PAGE = 1000
_BOARDS_PER_PAGE = 50
_STORY_POINTS_FIELD = "customfield_10032"
_ISSUE_FIELDS = "summary,description,status,assignee,priority,issuetype," + _STORY_POINTS_FIELD


class JiraError(Exception):
    """Raised when a Jira request fails or returns an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _int(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def _name(value: Any, key: str) -> str:
    if isinstance(value, dict):
        name = value.get(key)
        if isinstance(name, str):
            return name
    return ""


def _format_story_points(value: Any) -> str:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
        return ""
    points = float(value)
    if points == int(points):
        return str(int(points))
    return f"{points:.1f}"


class JiraClient:
    """Talks to one Jira site with basic authentication."""

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.email = email
        self.api_token = api_token
        self._session = session or new_client(_REQUEST_TIMEOUT)

    def _do(self, path: str) -> Any:
        try:
            response = self._session.request(
                "GET",
                self.base_url + path,
                auth=(self.email, self.api_token),
                headers={"Accept": "application/json"},
            )
        except requests.RequestException as exc:
            raise JiraError(f"executing request: {exc}") from exc
        if response.status_code >= 400:
            raise JiraError(f"jira returned status {response.status_code}", response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise JiraError(f"decoding response: {exc}") from exc

    def _fetch_object(self, path: str) -> dict[str, Any]:
        data = self._do(path)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise JiraError("decoding response: expected a JSON object")
        return data

    def _fetch_board(self, board_id: int) -> Board:
        try:
            return Board.from_dict(self._fetch_object(f"/rest/agile/1.0/board/{board_id}"))
        except JiraError as exc:
            raise JiraError(f"fetching board: {exc}", exc.status_code) from exc

    def _sprints(self, board_id: int, state: str) -> list[Sprint]:
        data = self._fetch_object(f"/rest/agile/1.0/board/{board_id}/sprint?state={state}")
        return [Sprint.from_dict(item) for item in _list(data, "values")]

    def _current_sprint(self, board_id: int) -> Sprint | None:
        """The active sprint, else the last future one; failures yield ``None``."""
        try:
            active = self._sprints(board_id, "active")
        except JiraError:
            active = []
        if active:
            return active[0]
        try:
            return self.get_last_future_sprint(board_id)
        except JiraError:
            return None

    def get_issue(
        self,
        issue_key: str,
        github_repo_field: str = "",
        github_base_field: str = "",
        github_feature_field: str = "",
    ) -> IssueDetail:
        """Fetch one issue, flattened, with optional GitHub custom fields."""
        extra = [name for name in (github_repo_field, github_base_field, github_feature_field) if name]
        fields = ",".join([_ISSUE_FIELDS, *extra])
        raw = self._fetch_object(f"/rest/api/2/issue/{issue_key}?fields={fields}")
        values = raw.get("fields")
        f = values if isinstance(values, dict) else {}

        detail = IssueDetail(
            key=raw_string(raw.get("key")),
            summary=raw_string(f.get("summary")),
            description=raw_description(f.get("description")),
            status=_name(f.get("status"), "name"),
            assignee=_name(f.get("assignee"), "displayName"),
            priority=_name(f.get("priority"), "name"),
            type=_name(f.get("issuetype"), "name"),
            story_points=_format_story_points(f.get(_STORY_POINTS_FIELD)),
        )
        if github_repo_field:
            detail.github_repo = raw_string(f.get(github_repo_field))
        if github_base_field:
            detail.github_base = raw_string(f.get(github_base_field))
        if github_feature_field:
            detail.github_feature = raw_string(f.get(github_feature_field))
        return detail

    def get_boards(self) -> list[Board]:
        """Fetch every board, following pagination."""
        boards: list[Board] = []
        start_at = 0
        while True:
            page = self._fetch_object(
                f"/rest/agile/1.0/board?maxResults={_BOARDS_PER_PAGE}&startAt={start_at}"
            )
            values = [Board.from_dict(item) for item in _list(page, "values")]
            boards.extend(values)
            if page.get("isLast") is True or not values:
                break
            start_at += len(values)
        return boards

    def get_sprint_stats(self, sprint_id: int) -> SprintStats:
        """Count a sprint's issues and its done issues; a failed done count is zero."""
        base = f"/rest/agile/1.0/sprint/{sprint_id}/issue?maxResults=0"
        with ThreadPoolExecutor(max_workers=2) as pool:
            total_future = pool.submit(self._fetch_object, base)
            done_future = pool.submit(self._fetch_object, base + "&jql=statusCategory%3DDone")
            total = _int(total_future.result(), "total")
            try:
                done = _int(done_future.result(), "total")
            except JiraError:
                done = 0
        return SprintStats(total=total, done=done)

    def get_last_future_sprint(self, board_id: int) -> Sprint | None:
        """Return the future sprint with the highest id, or ``None``."""
        sprints = self._sprints(board_id, "future")
        if not sprints:
            return None
        return max(sprints, key=lambda sprint: sprint.id)

    def get_active_sprint(self, board_id: int) -> Sprint | None:
        """Return the board's first active sprint, or ``None``."""
        sprints = self._sprints(board_id, "active")
        return sprints[0] if sprints else None

    def _issue_scope(self, board: Board, board_id: int, sprint: Sprint | None) -> str:
        if sprint is not None:
            return f"/rest/agile/1.0/sprint/{sprint.id}/issue"
        return f"/rest/agile/1.0/board/{board_id}/issue"

    def get_board_story_points(self, board_id: int) -> BoardStoryPointStats:
        """Sum story points over the active sprint, last future sprint or whole board."""
        board = self._fetch_board(board_id)
        sprint = self._current_sprint(board_id) if board.type == "scrum" else None
        base_url = self._issue_scope(board, board_id, sprint)

        stats = BoardStoryPointStats()
        start_at = 0
        while True:
            page = self._fetch_object(
                f"{base_url}?maxResults={_PER_PAGE}&startAt={start_at}"
                f"&fields={_STORY_POINTS_FIELD},issuetype"
            )
            issues = [Issue.from_dict(item) for item in _list(page, "issues")]
            for issue in issues:
                points = issue.fields.story_points
                if points is None:
                    continue
                stats.total_sp += points
                if issue.fields.issue_type.name == "Story":
                    stats.story_sp += points
            if not issues or start_at + len(issues) >= _int(page, "total"):
                break
            start_at += len(issues)
        return stats

    def _fill_issues(self, summary: BoardSummary, base_url: str) -> None:
        all_issues: list[Issue] = []
        start_at = 0
        while True:
            try:
                page = self._fetch_object(f"{base_url}?maxResults={_PER_PAGE}&startAt={start_at}")
            except JiraError:
                return
            issues = [Issue.from_dict(item) for item in _list(page, "issues")]
            all_issues.extend(issues)
            summary.total_issues = _int(page, "total")
            if len(all_issues) >= summary.total_issues or not issues:
                break
            start_at += len(issues)
        summary.issues = all_issues or None

        status_stats: dict[str, int] = {}
        type_stats: dict[str, int] = {}
        assignees: dict[str, AssigneeStat] = {}
        for issue in all_issues:
            fields = issue.fields
            status_stats[fields.status.name] = status_stats.get(fields.status.name, 0) + 1
            if fields.issue_type.name:
                type_stats[fields.issue_type.name] = type_stats.get(fields.issue_type.name, 0) + 1
            if fields.assignee is None:
                continue
            name = fields.assignee.display_name
            stat = assignees.get(name)
            if stat is None:
                avatar = (fields.assignee.avatar_urls or {}).get("32x32", "")
                stat = assignees[name] = AssigneeStat(display_name=name, avatar_url=avatar)
            stat.count += 1
            if fields.story_points is not None:
                stat.story_points += fields.story_points
        summary.status_stats = status_stats
        summary.type_stats = type_stats
        summary.assignee_stats = list(assignees.values()) or None

    def _fill_sprint_stats(self, summary: BoardSummary, sprint_id: int) -> None:
        try:
            summary.sprint_stats = self.get_sprint_stats(sprint_id)
        except JiraError:
            pass

    def get_board_summary(self, board_id: int) -> BoardSummary:
        """Fetch a board with its current sprint, issues and breakdowns."""
        board = self._fetch_board(board_id)
        summary = BoardSummary(board=board)
        if board.type == "scrum":
            summary.active_sprint = self._current_sprint(board_id)

        base_url = self._issue_scope(board, board_id, summary.active_sprint)
        with ThreadPoolExecutor(max_workers=2) as pool:
            tasks = [pool.submit(self._fill_issues, summary, base_url)]
            if summary.active_sprint is not None:
                tasks.append(pool.submit(self._fill_sprint_stats, summary, summary.active_sprint.id))
            for task in tasks:
                task.result()
        return summary