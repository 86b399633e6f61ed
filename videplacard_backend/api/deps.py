"""Shared API dependencies and helpers."""

from flask import current_app, request

from videplacard_backend.services.errors import LLMNotConfiguredError
from videplacard_backend.services.inventory import InventoryStore
from videplacard_backend.services.library import SavedRecipeLibrary
from videplacard_backend.services.llm import LLMClient
from videplacard_backend.services.store import KeyValueStore


def get_store() -> KeyValueStore:
    """Return the key-value store configured for this application."""

    store: KeyValueStore | None = current_app.extensions.get("kv_store")
    if store is None:
        raise RuntimeError("key-value store is not configured")
    return store


def get_inventory() -> InventoryStore:
    return InventoryStore(get_store())


def get_library() -> SavedRecipeLibrary:
    return SavedRecipeLibrary(get_store())


def get_llm_client() -> LLMClient:
    """Return the LLM client, or raise when no API key was configured."""

    client: LLMClient | None = current_app.extensions.get("llm_client")
    if client is None:
        raise LLMNotConfiguredError()
    return client


def is_confirmed() -> bool:
    """Whether the caller confirmed a destructive action."""

    payload = request.get_json(silent=True) or {}
    if isinstance(payload, dict) and payload.get("confirm") is True:
        return True
    return request.args.get("confirm", "").lower() in {"1", "true", "yes"}
