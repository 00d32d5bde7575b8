"""Textual bridge for ShowDetailsSession. Opt-in, requires textual.

A details screen hands bind_state() its render function and
bind_effects() its error/snackbar handler. Snapshots and effects that
arrive while the app is stopped, or while the screen is rebuilding its
season list, are dropped rather than rendered into a half-built tree.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# ids of apps whose details screen is mid-rebuild
_rebuilding: set[int] = set()


@contextmanager
def pause(app):
    """Mark `app` as rebuilding; bound renders and effect handlers are skipped."""
    key = id(app)
    _rebuilding.add(key)
    try:
        yield
    finally:
        _rebuilding.discard(key)


def is_safe(app) -> bool:
    """True when a snapshot or effect can be delivered to `app`'s widgets."""
    return app.is_running and id(app) not in _rebuilding


def _on_screen(app, fn):
    """Wrap fn so it only runs on the app thread, and only when is_safe(app).

    A widget that is gone (NoMatches) means the screen moved on; that call is dropped.
    """
    main = threading.get_ident()

    def _safe(value):
        try:
            fn(value)
        except NoMatches:
            pass

    def _guarded(value):
        if not is_safe(app):
            return
        if threading.get_ident() != main:
            app.call_from_thread(_safe, value)
        else:
            _safe(value)

    return _guarded


def bind_state(app, session, render):
    """Call render(view_state) with the current snapshot and every new one.

    Other render errors are logged by the state cell and do not reach the
    session. Returns the subscription; .dispose() it when the screen goes away.
    """
    return session.state.subscribe(_on_screen(app, render))


def bind_effects(app, session, handler):
    """Call handler(effect) for effects emitted from now on.

    Returns an unsubscribe callable.
    """
    return session.effects.subscribe(_on_screen(app, handler))
