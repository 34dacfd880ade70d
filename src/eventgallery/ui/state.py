"""Process-wide store instances for the Streamlit shell."""

import streamlit as st

from eventgallery.services.photo_store import PhotoStore
from eventgallery.services.settings_store import SettingsStore
from eventgallery.storage.base import KeyValueStore
from eventgallery.storage.factory import build_key_value_store


@st.cache_resource
def get_backend() -> KeyValueStore:
    """Durable backend shared by every session of this process."""
    return build_key_value_store()


@st.cache_resource
def get_photo_store() -> PhotoStore:
    return PhotoStore(get_backend())


@st.cache_resource
def get_settings_store() -> SettingsStore:
    return SettingsStore(get_backend())
