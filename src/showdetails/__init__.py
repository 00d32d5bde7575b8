"""showdetails: reactive state composition and action dispatch for a show details screen."""

from importlib.metadata import version as _version

__version__ = _version("showdetails")

from showdetails._tracking import get_pending_count, transaction
from showdetails.cell import Cell, ReadOnlyCell, set_scheduler
from showdetails.computed import Computed, computed
from showdetails.reaction import Reaction, autorun, reaction
from showdetails.loading import LoadingCounter
from showdetails.stream import EffectChannel
from showdetails.action_queue import ActionQueue
from showdetails.sources import InMemorySource, ObservedSource, ShowSources, SourceBinding
from showdetails.store import SourceBindings
from showdetails.operations import (
    FollowAction,
    RefreshParams,
    SeasonFollowAction,
    SeasonFollowParams,
    SeasonWatchedParams,
    ShowFollowParams,
    ShowOperations,
    WatchedAction,
)
from showdetails.models import (
    EMPTY_SHOW,
    ClearError,
    ClearErrorAction,
    Episode,
    MarkSeasonUnwatched,
    MarkSeasonWatched,
    NextEpisode,
    Refresh,
    RelatedShow,
    Season,
    SetSeasonFollowed,
    Show,
    ShowError,
    ShowImages,
    ShowStats,
    ToggleFollow,
    UnfollowPreviousSeasons,
    ViewState,
)
from showdetails.errors import ConsumerActiveError, LoaderAccountingError, ShowDetailsError
from showdetails.config import SessionConfig
from showdetails.dispatcher import OperationDispatcher
from showdetails.session import ShowDetailsSession
# textual bridge NOT auto-imported, opt-in only

__all__ = [
    "Cell",
    "ReadOnlyCell",
    "Computed",
    "computed",
    "Reaction",
    "autorun",
    "reaction",
    "transaction",
    "get_pending_count",
    "set_scheduler",
    "LoadingCounter",
    "EffectChannel",
    "ActionQueue",
    "ObservedSource",
    "InMemorySource",
    "SourceBinding",
    "SourceBindings",
    "ShowSources",
    "ShowOperations",
    "RefreshParams",
    "ShowFollowParams",
    "SeasonWatchedParams",
    "SeasonFollowParams",
    "FollowAction",
    "WatchedAction",
    "SeasonFollowAction",
    "Show",
    "EMPTY_SHOW",
    "ShowImages",
    "Season",
    "Episode",
    "RelatedShow",
    "NextEpisode",
    "ShowStats",
    "ViewState",
    "Refresh",
    "ToggleFollow",
    "MarkSeasonWatched",
    "MarkSeasonUnwatched",
    "SetSeasonFollowed",
    "UnfollowPreviousSeasons",
    "ClearErrorAction",
    "ShowError",
    "ClearError",
    "ShowDetailsError",
    "LoaderAccountingError",
    "ConsumerActiveError",
    "SessionConfig",
    "OperationDispatcher",
    "ShowDetailsSession",
]
