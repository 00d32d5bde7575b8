"""Mutating operations the dispatcher calls, and their parameter records.

Each operation is an async callable taking one parameter record. It either
returns (the change is then observed through the sources) or raises.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Hashable


class FollowAction(enum.Enum):
    FOLLOW = "follow"
    UNFOLLOW = "unfollow"
    TOGGLE = "toggle"


class WatchedAction(enum.Enum):
    WATCHED = "watched"
    UNWATCH = "unwatch"


class SeasonFollowAction(enum.Enum):
    FOLLOW = "follow"
    IGNORE = "ignore"
    IGNORE_PREVIOUS = "ignore_previous"


@dataclass(frozen=True)
class RefreshParams:
    show_id: Hashable
    from_user: bool = False


@dataclass(frozen=True)
class ShowFollowParams:
    show_id: Hashable
    action: FollowAction = FollowAction.TOGGLE


@dataclass(frozen=True)
class SeasonWatchedParams:
    season_id: int
    action: WatchedAction
    only_aired: bool = False
    action_date: datetime | None = None


@dataclass(frozen=True)
class SeasonFollowParams:
    season_id: int
    action: SeasonFollowAction


Operation = Callable[[Any], Awaitable[object]]


@dataclass
class ShowOperations:
    update_show_details: Callable[[RefreshParams], Awaitable[object]]
    update_show_images: Callable[[RefreshParams], Awaitable[object]]
    update_related_shows: Callable[[RefreshParams], Awaitable[object]]
    update_show_seasons: Callable[[RefreshParams], Awaitable[object]]
    change_show_follow_status: Callable[[ShowFollowParams], Awaitable[object]]
    change_season_watched_status: Callable[[SeasonWatchedParams], Awaitable[object]]
    change_season_follow_status: Callable[[SeasonFollowParams], Awaitable[object]]

    def refreshers(self) -> list[tuple[str, Operation]]:
        """The four refresh operations, named, in launch order."""
        return [
            ("update_show_details", self.update_show_details),
            ("update_show_images", self.update_show_images),
            ("update_related_shows", self.update_related_shows),
            ("update_show_seasons", self.update_show_seasons),
        ]
