"""Value types: the entities sources deliver, intents, effects and the snapshot.

Everything here is frozen. A ViewState is replaced, never edited.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


# ─── Entities (as delivered by observed sources) ─────────────────────────────


@dataclass(frozen=True)
class Show:
    id: int = 0
    title: str | None = None
    original_title: str | None = None
    summary: str | None = None
    network: str | None = None
    first_aired: datetime | None = None
    runtime: int | None = None
    genres: tuple[str, ...] = ()
    status: str | None = None
    rating: float | None = None


EMPTY_SHOW = Show()


@dataclass(frozen=True)
class ShowImages:
    poster: str | None = None
    backdrop: str | None = None


@dataclass(frozen=True)
class Episode:
    id: int
    season_id: int
    number: int
    title: str | None = None
    first_aired: datetime | None = None
    watched: bool = False


@dataclass(frozen=True)
class Season:
    id: int
    show_id: int
    number: int
    title: str | None = None
    ignored: bool = False
    episodes: tuple[Episode, ...] = ()

    @property
    def watched_count(self) -> int:
        return sum(1 for e in self.episodes if e.watched)


@dataclass(frozen=True)
class RelatedShow:
    show: Show
    order_index: int = 0


@dataclass(frozen=True)
class NextEpisode:
    episode: Episode
    season: Season | None = None


@dataclass(frozen=True)
class ShowStats:
    episode_count: int = 0
    watched_episode_count: int = 0


# ─── Actions (intents submitted by the UI) ───────────────────────────────────


@dataclass(frozen=True)
class Refresh:
    from_user: bool = False


@dataclass(frozen=True)
class ToggleFollow:
    pass


@dataclass(frozen=True)
class MarkSeasonWatched:
    season_id: int
    only_aired: bool = False
    date: datetime | None = None


@dataclass(frozen=True)
class MarkSeasonUnwatched:
    season_id: int


@dataclass(frozen=True)
class SetSeasonFollowed:
    season_id: int
    followed: bool


@dataclass(frozen=True)
class UnfollowPreviousSeasons:
    season_id: int


@dataclass(frozen=True)
class ClearErrorAction:
    pass


Action = (
    Refresh
    | ToggleFollow
    | MarkSeasonWatched
    | MarkSeasonUnwatched
    | SetSeasonFollowed
    | UnfollowPreviousSeasons
    | ClearErrorAction
)


# ─── Effects (one-shot, never replayed) ──────────────────────────────────────


@dataclass(frozen=True)
class ShowError:
    # Equal only for the same exception object.
    cause: BaseException | None


@dataclass(frozen=True)
class ClearError:
    pass


Effect = ShowError | ClearError


# ─── Snapshot ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ViewState:
    """Everything the show details screen renders, at one instant.

    Field defaults match the defaults the session seeds its bindings with,
    so ViewState() is exactly the snapshot published before any source has
    emitted.
    """

    is_followed: bool = False
    show: Show = EMPTY_SHOW
    poster_image: str | None = None
    backdrop_image: str | None = None
    related_shows: tuple[RelatedShow, ...] = ()
    next_episode_to_watch: NextEpisode | None = None
    seasons: tuple[Season, ...] = ()
    watch_stats: ShowStats | None = None
    refreshing: bool = False
