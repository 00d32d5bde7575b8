"""OperationDispatcher: turns each action into independently running tasks.

The consuming loop only ever launches. Awaiting happens inside the
launched tasks, so a slow refresh never holds up the next action, and
each task has its own failure boundary so one failure never cancels a
sibling.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Hashable

from showdetails.action_queue import ActionQueue
from showdetails.loading import LoadingCounter
from showdetails.models import (
    ClearError,
    ClearErrorAction,
    Effect,
    MarkSeasonUnwatched,
    MarkSeasonWatched,
    Refresh,
    SetSeasonFollowed,
    ShowError,
    ToggleFollow,
    UnfollowPreviousSeasons,
)
from showdetails.operations import (
    FollowAction,
    Operation,
    RefreshParams,
    SeasonFollowAction,
    SeasonFollowParams,
    SeasonWatchedParams,
    ShowFollowParams,
    ShowOperations,
    WatchedAction,
)
from showdetails.stream import EffectChannel

logger = logging.getLogger("showdetails.dispatcher")


class OperationDispatcher:
    """Maps actions for one show to operation tasks."""

    def __init__(
        self,
        show_id: Hashable,
        operations: ShowOperations,
        loading: LoadingCounter,
        effects: EffectChannel[Effect],
    ) -> None:
        self.show_id = show_id
        self._operations = operations
        self._loading = loading
        self._effects = effects
        self._handlers: dict[type, Callable[[Any, asyncio.TaskGroup], list[asyncio.Task]]] = {
            Refresh: self._on_refresh,
            ToggleFollow: self._on_toggle_follow,
            MarkSeasonWatched: self._on_mark_watched,
            MarkSeasonUnwatched: self._on_mark_unwatched,
            SetSeasonFollowed: self._on_set_season_followed,
            UnfollowPreviousSeasons: self._on_unfollow_previous,
            ClearErrorAction: self._on_clear_error,
        }

    async def run(self, queue: ActionQueue, group: asyncio.TaskGroup) -> None:
        """Dispatch every queued action, in order, until the queue closes."""
        async for action in queue.consume():
            if type(action) not in self._handlers:
                logger.error("Skipping unknown action %r for show %r", action, self.show_id)
                continue
            self.dispatch(action, group)

    def dispatch(self, action, group: asyncio.TaskGroup) -> list[asyncio.Task]:
        handler = self._handlers.get(type(action))
        if handler is None:
            raise TypeError(f"Unknown action: {action!r}")
        logger.debug("Dispatching %r for show %r", action, self.show_id)
        return handler(action, group)

    # --- Handlers ---

    def _on_refresh(self, action: Refresh, group):
        params = RefreshParams(self.show_id, action.from_user)
        tasks = []
        for name, operation in self._operations.refreshers():
            # Claimed before launch: `refreshing` is true once the action is dispatched.
            self._loading.add_loader()
            try:
                tasks.append(self._launch(group, name, operation, params, tracked=True))
            except BaseException:
                self._loading.remove_loader()
                raise
        return tasks

    def _on_toggle_follow(self, action: ToggleFollow, group):
        params = ShowFollowParams(self.show_id, FollowAction.TOGGLE)
        return [self._launch(group, "change_show_follow_status",
                             self._operations.change_show_follow_status, params)]

    def _on_mark_watched(self, action: MarkSeasonWatched, group):
        params = SeasonWatchedParams(
            season_id=action.season_id,
            action=WatchedAction.WATCHED,
            only_aired=action.only_aired,
            action_date=action.date,
        )
        return [self._launch(group, "change_season_watched_status",
                             self._operations.change_season_watched_status, params)]

    def _on_mark_unwatched(self, action: MarkSeasonUnwatched, group):
        params = SeasonWatchedParams(season_id=action.season_id, action=WatchedAction.UNWATCH)
        return [self._launch(group, "change_season_watched_status",
                             self._operations.change_season_watched_status, params)]

    def _on_set_season_followed(self, action: SetSeasonFollowed, group):
        follow = SeasonFollowAction.FOLLOW if action.followed else SeasonFollowAction.IGNORE
        params = SeasonFollowParams(season_id=action.season_id, action=follow)
        return [self._launch(group, "change_season_follow_status",
                             self._operations.change_season_follow_status, params)]

    def _on_unfollow_previous(self, action: UnfollowPreviousSeasons, group):
        params = SeasonFollowParams(
            season_id=action.season_id, action=SeasonFollowAction.IGNORE_PREVIOUS
        )
        return [self._launch(group, "change_season_follow_status",
                             self._operations.change_season_follow_status, params)]

    def _on_clear_error(self, action: ClearErrorAction, group):
        return [group.create_task(self._emit_clear_error(), name="showdetails:clear_error")]

    # --- Task bodies ---

    def _launch(self, group, name: str, operation: Operation, params, *, tracked: bool = False):
        return group.create_task(
            self._guarded(name, operation, params, tracked),
            name=f"showdetails:{name}",
        )

    async def _guarded(self, name: str, operation: Operation, params, tracked: bool) -> None:
        try:
            await operation(params)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("%s(%r) failed: %r", name, params, exc)
            self._effects.emit(ShowError(exc))
        finally:
            if tracked:
                self._loading.remove_loader()

    async def _emit_clear_error(self) -> None:
        self._effects.emit(ClearError())
