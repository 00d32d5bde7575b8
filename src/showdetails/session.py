"""ShowDetailsSession: one show's detail screen state, owned end to end.

The session binds the seven observed sources to the show id it was built
with, keeps a ViewState composed from their latest values plus the
refreshing flag, and feeds submitted actions to the dispatcher. Everything
it launches lives in one TaskGroup, so close() (or cancelling run())
tears down every subscription and in-flight operation together.

    session = ShowDetailsSession(show_id, sources, operations)
    async with session:
        session.state.subscribe(render)
        session.submit_action(ToggleFollow())
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Hashable, Mapping

from showdetails.action_queue import ActionQueue
from showdetails.cell import Cell, ReadOnlyCell
from showdetails.config import SessionConfig
from showdetails.dispatcher import OperationDispatcher
from showdetails.loading import LoadingCounter
from showdetails.models import EMPTY_SHOW, Action, Effect, Refresh, ShowError, ViewState
from showdetails.operations import ShowOperations
from showdetails.reaction import Reaction, autorun
from showdetails.sources import ShowSources
from showdetails.store import SourceBindings
from showdetails.stream import EffectChannel

logger = logging.getLogger("showdetails.session")


class ShowDetailsSession:
    """State composer and action entry point for one show."""

    def __init__(
        self,
        show_id: Hashable,
        sources: ShowSources,
        operations: ShowOperations,
        config: SessionConfig | None = None,
    ) -> None:
        self.show_id = show_id
        self.config = config or SessionConfig()
        self.effects: EffectChannel[Effect] = EffectChannel()

        self._loading = LoadingCounter()
        self._actions: ActionQueue[Action] = ActionQueue()
        self._bindings = SourceBindings(
            show_id,
            {
                "follow_status": (sources.follow_status, False),
                "show": (sources.show_details, EMPTY_SHOW),
                "images": (sources.show_images, None),
                "related_shows": (sources.related_shows, ()),
                "seasons": (sources.seasons, ()),
                "next_episode": (sources.next_episode, None),
                "stats": (sources.view_stats, None),
            },
            on_error=self._on_source_error,
        )
        self._dispatcher = OperationDispatcher(show_id, operations, self._loading, self.effects)

        self._state: Cell[ViewState] = Cell(ViewState())
        self.state: ReadOnlyCell[ViewState] = ReadOnlyCell(self._state)
        self._composer: Reaction = autorun(self._publish)

        self._task: asyncio.Task | None = None
        self._closed = False

        if self.config.refresh_on_start:
            self.submit_action(Refresh(from_user=False))

    @classmethod
    def from_saved_state(
        cls,
        saved_state: Mapping[str, object],
        sources: ShowSources,
        operations: ShowOperations,
        config: SessionConfig | None = None,
    ) -> ShowDetailsSession:
        """Build from navigation arguments. "show_id" is required."""
        return cls(saved_state["show_id"], sources, operations, config)

    @property
    def bindings(self) -> SourceBindings:
        return self._bindings

    @property
    def closed(self) -> bool:
        return self._closed

    # --- Inbound ---

    def submit_action(self, action: Action) -> None:
        """Queue an action. Returns immediately."""
        self._actions.submit(action)

    # --- Composition ---

    def _compose(self) -> ViewState:
        images = self._bindings.get("images")
        return ViewState(
            is_followed=self._bindings.get("follow_status"),
            show=self._bindings.get("show"),
            poster_image=images.poster if images is not None else None,
            backdrop_image=images.backdrop if images is not None else None,
            related_shows=tuple(self._bindings.get("related_shows") or ()),
            next_episode_to_watch=self._bindings.get("next_episode"),
            seasons=tuple(self._bindings.get("seasons") or ()),
            watch_stats=self._bindings.get("stats"),
            refreshing=self._loading.observable.get(),
        )

    def _publish(self) -> None:
        self._state.set(self._compose())

    def _on_source_error(self, name: str, exc: Exception) -> None:
        if self.config.report_source_errors:
            self.effects.emit(ShowError(exc))

    # --- Lifecycle ---

    async def run(self) -> None:
        """Own the session scope until cancelled."""
        logger.debug("Session for show %r running", self.show_id)
        try:
            async with asyncio.TaskGroup() as group:
                self._bindings.start_all(group)
                await self._dispatcher.run(self._actions, group)
        finally:
            logger.debug("Session for show %r stopped", self.show_id)

    def start(self) -> asyncio.Task:
        """Schedule run() on the running loop. Idempotent."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(
                self.run(), name=f"showdetails:session:{self.show_id}"
            )
        return self._task

    async def close(self) -> None:
        """Cancel everything the session launched and release its reactions."""
        if self._closed:
            return
        self._closed = True
        self._actions.close()
        try:
            if self._task is not None:
                self._task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._task
        finally:
            self._bindings.dispose()
            self._composer.dispose()
            self.effects.dispose()

    async def __aenter__(self) -> ShowDetailsSession:
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"ShowDetailsSession(show_id={self.show_id!r}, {state})"
