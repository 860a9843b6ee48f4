"""Persistence port for storefront state.

The storefront keeps three values: ``products``, ``cart`` and ``coupons``.
Backends only move JSON-compatible data; conversion to and from the models is
done by the codec functions below with pydantic type adapters. Writes are
last-write-wins with no locking.
"""
import json
import logging
import os
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter

from storefront.models import CartItem, Coupon, Product

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "products"
CART_KEY = "cart"
COUPONS_KEY = "coupons"

_ADAPTERS: Dict[str, TypeAdapter] = {
    PRODUCTS_KEY: TypeAdapter(List[Product]),
    CART_KEY: TypeAdapter(List[CartItem]),
    COUPONS_KEY: TypeAdapter(List[Coupon]),
}


def dump_state(key: str, value: list) -> list:
    """Convert a list of models under ``key`` into JSON-compatible data."""
    return _ADAPTERS[key].dump_python(value, mode="json")


def load_state(key: str, data: Any) -> list:
    """Build models from JSON-compatible data stored under ``key``.

    Raises:
        pydantic.ValidationError: If the data does not have the shape of the models
    """
    return _ADAPTERS[key].validate_python(data)


def dumps_state(key: str, value: list) -> str:
    return _ADAPTERS[key].dump_json(value).decode("utf-8")


def loads_state(key: str, text: str) -> list:
    return _ADAPTERS[key].validate_json(text)


class StateStorage:
    """Load/save capability the services persist through.

    Implementations store JSON-compatible values by key and know nothing
    about the models.
    """

    def load(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def save(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class InMemoryStorage(StateStorage):

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def save(self, key: str, value: Any) -> None:
        # stored serialized so callers never share mutable state with the store
        self._data[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(StateStorage):
    """One ``<key>.json`` file per key inside ``directory``.

    Unreadable files fall back to the default and failed writes are logged,
    so a broken store never takes the session down.
    """

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def load(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not os.path.exists(path):
            return default
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Error reading storage key {key!r}: {e}")
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            with open(self._path(key), "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"Error writing storage key {key!r}: {e}")

    def remove(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
