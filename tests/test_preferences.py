"""Summary: Tests for preferences and pinned shortcuts.

Importance: Ensures malformed input is rejected without partial writes.
Alternatives: Validate settings only in the UI.
"""

from __future__ import annotations

import pytest

from quietquotes.preferences import (
    DEFAULT_PREFERENCES,
    MAX_SHORTCUTS,
    InvalidPreferenceError,
    InvalidShortcutError,
    PreferencesService,
    ShortcutService,
    normalize_url,
)
from quietquotes.storage.kv_store import SYNC, InMemoryStore


def test_load_returns_defaults_for_fresh_store() -> None:
    service = PreferencesService(store=InMemoryStore())
    assert service.load() == DEFAULT_PREFERENCES


def test_save_merges_valid_updates() -> None:
    """Summary: Valid updates are stored and merged over defaults.

    Importance: Preferences stay complete after partial updates.
    Alternatives: Require full preference documents.
    """

    store = InMemoryStore()
    service = PreferencesService(store=store)
    prefs = service.save({"fontFamily": "mono", "contextAware": False, "color1": "#FFFFFF"})
    assert prefs["fontFamily"] == "mono"
    assert prefs["contextAware"] is False
    assert prefs["speed"] == DEFAULT_PREFERENCES["speed"]
    assert store.get(SYNC) == {"fontFamily": "mono", "contextAware": False, "color1": "#FFFFFF"}


@pytest.mark.parametrize(
    "updates",
    [
        {"fontFamily": "comic"},
        {"unknown": 1},
        {"contextAware": "yes"},
        {"color2": "red"},
        {"speed": 101},
        {"noiseDensity": True},
        {"bgType": "cube"},
        {"pinnedShortcuts": []},
    ],
)
def test_invalid_updates_are_rejected_without_writes(updates: dict[str, object]) -> None:
    """Summary: Any invalid key or value rejects the whole update.

    Importance: No partial state is committed for malformed input.
    Alternatives: Store the valid subset.
    """

    store = InMemoryStore()
    service = PreferencesService(store=store)
    with pytest.raises(InvalidPreferenceError):
        service.save({"fontSize": "s", **updates})
    assert store.get(SYNC) == {}


def test_reset_keeps_shortcuts() -> None:
    store = InMemoryStore()
    ShortcutService(store=store).add("", "example.com")
    service = PreferencesService(store=store)
    service.save({"speed": 90})
    prefs = service.reset()
    assert prefs["speed"] == DEFAULT_PREFERENCES["speed"]
    assert len(prefs["pinnedShortcuts"]) == 1


def test_normalize_url_rules() -> None:
    """Summary: Bare domains gain https; malformed URLs are rejected.

    Importance: Shortcuts always open a valid web address.
    Alternatives: Accept any string.
    """

    assert normalize_url("example.com") == "https://example.com"
    assert normalize_url(" http://localhost:3000/path ") == "http://localhost:3000/path"
    for bad in ("", "not a url", "ftp://example.com", "javascript:alert(1)", "https://"):
        with pytest.raises(InvalidShortcutError):
            normalize_url(bad)


def test_add_list_and_remove_shortcuts() -> None:
    """Summary: Shortcuts round through the synced namespace.

    Importance: Pinned shortcuts appear on every new tab.
    Alternatives: Keep shortcuts in local storage.
    """

    service = ShortcutService(store=InMemoryStore())
    added = service.add("", "docs.python.org")
    service.add("News", "https://news.ycombinator.com")
    assert added.title == "docs.python.org"
    assert [item.title for item in service.list_shortcuts()] == ["docs.python.org", "News"]
    assert service.remove("docs.python.org") is True
    assert service.remove("docs.python.org") is False
    assert [item.url for item in service.list_shortcuts()] == ["https://news.ycombinator.com"]


def test_shortcut_rejections_do_not_write() -> None:
    """Summary: Invalid, duplicate, and overflow shortcuts are rejected.

    Importance: The shortcut list never holds malformed entries.
    Alternatives: Replace the oldest shortcut when full.
    """

    store = InMemoryStore()
    service = ShortcutService(store=store)
    with pytest.raises(InvalidShortcutError):
        service.add("Broken", "not a url")
    assert store.get(SYNC) == {}
    service.add("", "example.com")
    with pytest.raises(InvalidShortcutError):
        service.add("Again", "https://example.com")
    for index in range(1, MAX_SHORTCUTS):
        service.add("", f"site{index}.example.com")
    with pytest.raises(InvalidShortcutError):
        service.add("", "overflow.example.com")
    assert len(service.list_shortcuts()) == MAX_SHORTCUTS
