import logging
from concurrent.futures import ThreadPoolExecutor

from flask import current_app

logger = logging.getLogger(__name__)


class BackgroundDispatcher:
    """
    Runs fire-and-forget work on a bounded thread pool.

    Each task gets its own application context. Exceptions are logged and
    dropped; callers never receive a handle to the outcome. With
    NOTIFICATIONS_SYNC set, tasks run inline in the caller's context instead,
    still swallowing errors.
    """

    def __init__(self, app=None):
        self.executor = None
        self.sync = False
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.sync = app.config.get("NOTIFICATIONS_SYNC", False)
        if not self.sync:
            self.executor = ThreadPoolExecutor(
                max_workers=app.config.get("NOTIFICATION_WORKERS", 4),
                thread_name_prefix="schoolhub-bg",
            )
        app.extensions["background_dispatcher"] = self

    def submit(self, fn, *args, **kwargs):
        if self.sync or self.executor is None:
            self._call(fn, args, kwargs)
            return
        app = current_app._get_current_object()
        self.executor.submit(self._run_in_context, app, fn, args, kwargs)

    def _run_in_context(self, app, fn, args, kwargs):
        with app.app_context():
            self._call(fn, args, kwargs)

    @staticmethod
    def _call(fn, args, kwargs):
        try:
            fn(*args, **kwargs)
        except Exception:
            logger.exception(f"Background task {getattr(fn, '__name__', fn)} failed")

    def shutdown(self, wait=True):
        if self.executor is not None:
            self.executor.shutdown(wait=wait)
