"""
Persisted cart for the current shopper.

The cart lives in memory and is mirrored to a single JSON file holding
the full list of items. The file is read once, on first use; every
change rewrites it completely through a temporary file and an atomic
rename, so a crash never leaves a half-written cart behind.

Reading never fails: a missing, corrupt or unreadable file gives an
empty cart. If the file cannot be read or written at all, the store
keeps working in memory only for the rest of the session.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .schemas import CartItem


logger = logging.getLogger(__name__)

_CART = TypeAdapter(List[CartItem])

Subscriber = Callable[[List[CartItem]], None]


def _duplicate_ids(items: Sequence[CartItem]) -> List[str]:
    seen = set()
    duplicates = []
    for item in items:
        if item.id in seen:
            duplicates.append(item.id)
        seen.add(item.id)
    return duplicates


class CartStore:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None
        # Re-entrant: update() calls load() and replace() while holding it
        self._lock = threading.RLock()
        self._items: Optional[List[CartItem]] = None
        self._persistent = self.path is not None
        self._subscribers: List[Subscriber] = []

    @property
    def persistent(self) -> bool:
        """``False`` when the cart is only kept in memory."""
        return self._persistent

    def _disable(self, exc: OSError) -> None:
        if self._persistent:
            logger.warning(
                "Cart storage %s unavailable (%s); keeping the cart in memory for this session",
                self.path, exc,
            )
        self._persistent = False

    def _read(self) -> List[CartItem]:
        if not self._persistent:
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            return []
        except ValueError as exc:
            logger.warning("Ignoring corrupt cart file %s: %s", self.path, exc)
            return []
        except OSError as exc:
            self._disable(exc)
            return []

        if not isinstance(raw, list):
            logger.warning("Ignoring cart file %s: expected a JSON array", self.path)
            return []
        try:
            items = _CART.validate_python(raw)
        except ValidationError as exc:
            logger.warning("Ignoring invalid cart file %s: %s", self.path, exc)
            return []
        if _duplicate_ids(items):
            logger.warning("Ignoring cart file %s: duplicate book ids", self.path)
            return []
        return items

    def _write(self, items: Sequence[CartItem]) -> None:
        if not self._persistent:
            return
        payload = [item.model_dump(mode="json") for item in items]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".cart-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            self._disable(exc)

    def load(self) -> List[CartItem]:
        """Return the current cart (a new list on each call)."""
        with self._lock:
            if self._items is None:
                self._items = self._read()
            return list(self._items)

    def replace(self, items: Sequence[Any]) -> List[CartItem]:
        """Swap in a whole new cart and persist it.

        ``items`` may be ``CartItem`` models or plain dicts. A cart with
        two entries for the same book is rejected with ``ValueError``.
        """
        new_items = _CART.validate_python(list(items))
        duplicates = _duplicate_ids(new_items)
        if duplicates:
            raise ValueError(f"Duplicate cart entries for book ids: {', '.join(duplicates)}")
        with self._lock:
            self._items = new_items
            self._write(new_items)
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(list(new_items))
        return list(new_items)

    def update(self, change: Callable[[List[CartItem]], Sequence[CartItem]]) -> List[CartItem]:
        """Apply ``change`` to the current cart and persist the result."""
        with self._lock:
            return self.replace(change(self.load()))

    def clear(self) -> List[CartItem]:
        return self.replace([])

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback`` with the new cart after every change.

        Returns a function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe
