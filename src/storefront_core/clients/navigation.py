"""
storefront_core.clients.navigation

Navigation capability used for the forced redirect to the login view.
"""

from __future__ import annotations

from typing import Protocol


class Navigator(Protocol):
    @property
    def current_path(self) -> str: ...

    def redirect(self, path: str) -> None: ...


class HeadlessNavigator:
    """
    Navigator for non-browser hosts: tracks the current path and the redirect history.
    """

    def __init__(self, current_path: str = "/") -> None:
        self._current_path = current_path
        self.history: list[str] = []

    @property
    def current_path(self) -> str:
        return self._current_path

    def redirect(self, path: str) -> None:
        self.history.append(path)
        self._current_path = path
