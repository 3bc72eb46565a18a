# =============================================================================
# tests/test_repositories.py - Repository Tests
# =============================================================================
# Covers:
# - Song CRUD for the owner
# - Denial (not filtering) of another account's rows
# - updated_at stamping on every update
# - Prompter settings defaults and updates
# =============================================================================

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from app.exceptions import AuthorizationError, SongNotFoundError
from core.models.prompter import FontSize, PrompterSettingsUpdate
from core.models.song import SongCategory, SongCreate, SongRecord, SongUpdate
from core.repositories import SettingsRepository, SongRepository


def _create(repo, title="Song", category=SongCategory.ANGOLA, **fields):
    return repo.create_song(SongCreate(title=title, category=category, **fields))


# =============================================================================
# Songs
# =============================================================================

class TestSongCrud:
    """Tests for SongRepository as the owner."""

    def test_create_and_get(self, songs, owner_id, sample_song):
        created = songs.create_song(sample_song)

        fetched = songs.get_song(created.id)

        assert fetched.user_id == owner_id
        assert fetched.title == "Paranauê"
        assert fetched.lyrics == sample_song.lyrics
        assert fetched.created_at is not None

    def test_list_is_oldest_first(self, songs):
        first = _create(songs, "first")
        second = _create(songs, "second")

        assert [s.id for s in songs.list_songs()] == [first.id, second.id]

    def test_list_by_category_filter(self, songs):
        _create(songs, "a", SongCategory.ANGOLA)
        _create(songs, "b", SongCategory.SAO_BENTO_GRANDE)

        grande = songs.list_songs(SongCategory.SAO_BENTO_GRANDE)

        assert [s.title for s in grande] == ["b"]

    def test_grouped_listing_has_every_category(self, songs):
        _create(songs, "a", SongCategory.ANGOLA)

        grouped = songs.list_songs_by_category()

        assert list(grouped) == list(SongCategory)
        assert [s.title for s in grouped[SongCategory.ANGOLA]] == ["a"]
        assert grouped[SongCategory.SAO_BENTO_PEQUENO] == []

    def test_grouped_listing_sorted_by_title(self, songs):
        for title in ("Zum zum zum", "Água de beber", "abalou", "Marinheiro"):
            _create(songs, title, SongCategory.ANGOLA)
        _create(songs, "Bela", SongCategory.SAO_BENTO_GRANDE)

        grouped = songs.list_songs_by_category()

        assert [s.title for s in grouped[SongCategory.ANGOLA]] == [
            "abalou",
            "Água de beber",
            "Marinheiro",
            "Zum zum zum",
        ]
        assert [s.title for s in grouped[SongCategory.SAO_BENTO_GRANDE]] == ["Bela"]

    def test_plain_listing_stays_oldest_first(self, songs):
        _create(songs, "Zum zum zum")
        _create(songs, "Abalou")

        assert [s.title for s in songs.list_songs()] == ["Zum zum zum", "Abalou"]

    def test_update_changes_only_sent_fields(self, songs, sample_song):
        created = songs.create_song(sample_song)

        updated = songs.update_song(created.id, SongUpdate(mnemonic="new"))

        assert updated.mnemonic == "new"
        assert updated.title == created.title
        assert updated.lyrics == created.lyrics

    def test_update_can_clear_optional_field(self, songs, sample_song):
        created = songs.create_song(sample_song)

        updated = songs.update_song(created.id, SongUpdate(media_link=None))

        assert updated.media_link is None

    def test_update_ignores_null_title(self, songs):
        created = _create(songs, "keep me")

        updated = songs.update_song(created.id, SongUpdate(title=None, lyrics="la"))

        assert updated.title == "keep me"

    def test_update_restamps_updated_at(self, songs):
        created = _create(songs)
        stale = datetime(2000, 1, 1, tzinfo=timezone.utc)
        songs.table.store.update("songs", "id", str(created.id), {"updated_at": stale})

        updated = songs.update_song(created.id, SongUpdate(title="renamed"))

        assert updated.updated_at > stale

    def test_client_supplied_updated_at_is_overwritten(self, songs):
        created = _create(songs)
        stale = datetime(2000, 1, 1, tzinfo=timezone.utc)

        updated = songs.table.update(created.id, {"title": "x", "updated_at": stale})

        assert updated["updated_at"] > stale

    def test_get_missing_song(self, songs):
        with pytest.raises(SongNotFoundError):
            songs.get_song(uuid4())

    def test_delete_song(self, songs):
        created = _create(songs)

        songs.delete_song(created.id)

        with pytest.raises(SongNotFoundError):
            songs.get_song(created.id)

    def test_delete_selected(self, songs):
        a, b, c = _create(songs, "a"), _create(songs, "b"), _create(songs, "c")

        assert songs.delete_songs([a.id, b.id, a.id]) == 2
        assert [s.id for s in songs.list_songs()] == [c.id]

    def test_delete_selected_missing_id_deletes_nothing(self, songs):
        a = _create(songs)

        with pytest.raises(SongNotFoundError):
            songs.delete_songs([a.id, uuid4()])

        assert len(songs.list_songs()) == 1

    def test_create_songs_in_one_batch(self, songs):
        records = [
            SongRecord(title="a", category=SongCategory.ANGOLA),
            SongRecord(title="", mnemonic="m", category=SongCategory.SAO_BENTO_PEQUENO),
        ]

        created = songs.create_songs(records)

        assert [s.title for s in created] == ["a", ""]
        assert len(songs.list_songs()) == 2

    def test_create_songs_empty(self, songs):
        assert songs.create_songs([]) == []


class TestSongOwnership:
    """Another account's rows are denied, never silently hidden."""

    def test_read_foreign_song_denied(self, songs, other_songs):
        theirs = _create(other_songs)

        with pytest.raises(AuthorizationError) as exc_info:
            songs.get_song(theirs.id)
        assert exc_info.value.status_code == 403

    def test_update_foreign_song_denied(self, songs, other_songs):
        theirs = _create(other_songs, "theirs")

        with pytest.raises(AuthorizationError):
            songs.update_song(theirs.id, SongUpdate(title="mine now"))

        assert other_songs.get_song(theirs.id).title == "theirs"

    def test_delete_foreign_song_denied(self, songs, other_songs):
        theirs = _create(other_songs)

        with pytest.raises(AuthorizationError):
            songs.delete_song(theirs.id)

        assert other_songs.get_song(theirs.id)

    def test_delete_selected_with_one_foreign_id_deletes_nothing(self, songs, other_songs):
        mine = _create(songs)
        theirs = _create(other_songs)

        with pytest.raises(AuthorizationError):
            songs.delete_songs([mine.id, theirs.id])

        assert len(songs.list_songs()) == 1
        assert len(other_songs.list_songs()) == 1

    def test_listing_only_returns_own_songs(self, songs, other_songs):
        _create(songs, "mine")
        _create(other_songs, "theirs")

        assert [s.title for s in songs.list_songs()] == ["mine"]

    def test_delete_all_is_scoped_to_owner(self, songs, other_songs):
        _create(songs)
        _create(songs)
        _create(other_songs)

        assert songs.delete_all_songs() == 2
        assert songs.list_songs() == []
        assert len(other_songs.list_songs()) == 1

    def test_cannot_insert_for_another_owner(self, songs, other_id):
        with pytest.raises(AuthorizationError):
            songs.table.insert([{"title": "x", "category": "angola", "user_id": str(other_id)}])

    def test_cannot_move_song_to_another_owner(self, songs, other_id):
        mine = _create(songs)

        with pytest.raises(AuthorizationError):
            songs.table.update(mine.id, {"user_id": str(other_id)})

    def test_anonymous_repository_denied(self, store):
        anonymous = SongRepository(store, owner=None)

        with pytest.raises(AuthorizationError):
            anonymous.list_songs()
        with pytest.raises(AuthorizationError):
            anonymous.create_song(SongCreate(title="x", category=SongCategory.ANGOLA))


# =============================================================================
# Prompter Settings
# =============================================================================

class TestSettingsRepository:
    """Tests for SettingsRepository."""

    def test_defaults_created_on_first_read(self, prompter, owner_id, store):
        settings = prompter.get_or_create_settings()

        assert settings.user_id == owner_id
        assert settings.rotation_interval == 120
        assert settings.font_size == FontSize.MEDIUM
        assert settings.is_dark_mode is True
        assert settings.use_high_contrast is False
        assert settings.upper_case is False
        assert store.get("prompter_settings", "user_id", owner_id) is not None

    def test_second_read_reuses_row(self, prompter):
        first = prompter.get_or_create_settings()
        second = prompter.get_or_create_settings()

        assert first == second

    def test_update_creates_row_if_missing(self, prompter):
        updated = prompter.update_settings(PrompterSettingsUpdate(font_size=FontSize.XLARGE))

        assert updated.font_size == FontSize.XLARGE
        assert updated.rotation_interval == 120

    def test_partial_update(self, prompter):
        prompter.update_settings(PrompterSettingsUpdate(rotation_interval=30))

        updated = prompter.update_settings(PrompterSettingsUpdate(upper_case=True))

        assert updated.rotation_interval == 30
        assert updated.upper_case is True

    def test_settings_cannot_be_deleted(self, prompter):
        prompter.get_or_create_settings()

        with pytest.raises(AuthorizationError):
            prompter.table.delete([prompter.table.owner])

    def test_each_account_has_its_own_row(self, store, prompter, other_id):
        prompter.update_settings(PrompterSettingsUpdate(is_dark_mode=False))

        theirs = SettingsRepository(store, owner=other_id).get_or_create_settings()

        assert theirs.is_dark_mode is True

    def test_foreign_settings_row_denied(self, store, prompter, other_id):
        SettingsRepository(store, owner=other_id).get_or_create_settings()

        with pytest.raises(AuthorizationError):
            prompter.table.find(other_id)


# =============================================================================
# Account Deletion
# =============================================================================

class TestAccountCascade:
    """Removing an account removes its songs and settings."""

    def test_cascade(self, store, songs, prompter, other_songs, owner_id):
        _create(songs)
        prompter.get_or_create_settings()
        _create(other_songs)

        store.delete_account(owner_id)

        assert store.select("songs", {"user_id": owner_id}) == []
        assert store.get("prompter_settings", "user_id", owner_id) is None
        assert len(other_songs.list_songs()) == 1
