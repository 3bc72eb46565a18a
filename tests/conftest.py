# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides an in-memory store with two registered accounts
# - Provides signed Supabase-style access tokens for API tests
# =============================================================================

import os
import time
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-hs256-signing")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from jose import jwt

from core.models.song import SongCategory, SongCreate
from core.repositories import SettingsRepository, SongRepository
from core.storage import InMemoryTableStore


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def owner_id():
    """Account that owns the data under test."""
    return uuid4()


@pytest.fixture
def other_id():
    """A second, unrelated account."""
    return uuid4()


@pytest.fixture
def store(owner_id, other_id):
    """Fresh in-memory store with both accounts registered."""
    store = InMemoryTableStore()
    store.register_account(owner_id)
    store.register_account(other_id)
    return store


@pytest.fixture
def songs(store, owner_id):
    """Song repository for the owner."""
    return SongRepository(store, owner=owner_id)


@pytest.fixture
def other_songs(store, other_id):
    """Song repository for the other account."""
    return SongRepository(store, owner=other_id)


@pytest.fixture
def prompter(store, owner_id):
    """Prompter settings repository for the owner."""
    return SettingsRepository(store, owner=owner_id)


@pytest.fixture
def sample_song():
    """A song whose lyrics need quoting."""
    return SongCreate(
        title="Paranauê",
        category=SongCategory.ANGOLA,
        mnemonic="Para-na-uê",
        lyrics='Paranauê, paranauê paraná\nO "mestre" chegou',
        media_link="https://example.com/paranaue",
    )


@pytest.fixture
def sample_csv():
    """Import file with one song per category and a multi-line field."""
    return (
        "title,category,mnemonic,lyrics,mediaLink\n"
        '"Paranauê",angola,"Para-na-uê","Paranauê, paranauê paraná\n'
        'Paranauê, paranauê paraná",""\n'
        '"Sim Sim Sim",saoBentoPequeno,"Sim sim non non","",""\n'
        '"Volta do Mundo",saoBentoGrande,"","Volta do mundo, camará","https://example.com/volta"\n'
    )


# =============================================================================
# Auth Fixtures
# =============================================================================

def make_token(user_id, secret=None, expires_in=3600, audience="authenticated", **claims):
    """Sign a Supabase-style access token with the test HS256 secret."""
    now = int(time.time())
    payload = {
        "sub": str(user_id),
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
        "role": "authenticated",
        **claims,
    }
    return jwt.encode(payload, secret or os.environ["SUPABASE_JWT_SECRET"], algorithm="HS256")


@pytest.fixture
def token_factory():
    return make_token
