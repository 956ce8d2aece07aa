"""Shared plumbing for the service classes.

A service is constructed with the :class:`Store` and opens its own
transactions. It consults the store's plugin manager for the completion
oracle and for post-commit notifications.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cardball.domain.game import CompletionOracle
    from cardball.infrastructure.store import Store

logger = logging.getLogger(__name__)


class BaseService:
    """Base class holding the store.

    Usage::

        class GameService(BaseService):
            def get_status(self, game_id: int) -> ServiceResult:
                with self._store.read() as txn:
                    ...
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    def _oracle(self) -> CompletionOracle | None:
        plugins = self._store.plugins
        return plugins.completion_oracle() if plugins is not None else None

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Notify plugins after a commit. A failing hook only adds a warning."""
        plugins = self._store.plugins
        if plugins is None:
            return
        try:
            plugins.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
