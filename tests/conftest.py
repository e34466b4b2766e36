import pytest
from sitesettings.store import SiteSettingsStore, merge_setting


@pytest.fixture
def layered_store() -> SiteSettingsStore:
    store = SiteSettingsStore()

    store = merge_setting(store, "https://*.brave.com", "prop1", 3)
    store = merge_setting(store, "https://*.brave.com", "prop2", 3)
    store = merge_setting(store, "https://*.brave.com", "prop3", 3)

    store = merge_setting(store, "https://www.brave.com", "prop1", 1)

    store = merge_setting(store, "https://www.brave.com:*", "prop1", 2)
    store = merge_setting(store, "https://www.brave.com:*", "prop2", 2)

    store = merge_setting(store, "*", "prop1", 4)
    store = merge_setting(store, "*", "prop2", 4)
    store = merge_setting(store, "*", "prop3", 4)
    store = merge_setting(store, "*", "prop4", 4)
    return store
