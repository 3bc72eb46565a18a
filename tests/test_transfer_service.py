# =============================================================================
# tests/test_transfer_service.py - CSV Import/Export Service Tests
# =============================================================================

import pytest

from app.exceptions import CsvFormatError, FileReadError, RowValidationError
from core.models.song import SongCategory, SongCreate
from core.services import EXAMPLE_CSV, TransferService
from lib.csv_codec import parse_songs


class TestDecode:
    """Tests for TransferService.decode()."""

    def test_plain_utf8(self):
        assert TransferService.decode("Camará".encode("utf-8"), "a.csv") == "Camará"

    def test_byte_order_mark_dropped(self):
        content = "\ufefftitle,category\n".encode("utf-8")

        assert TransferService.decode(content, "a.csv") == "title,category\n"

    def test_invalid_utf8(self):
        with pytest.raises(FileReadError) as exc_info:
            TransferService.decode(b"title\n\xff\xfe\x00", "bad.csv")
        assert exc_info.value.status_code == 400


class TestImport:
    """Tests for TransferService.import_csv()."""

    def test_imports_every_row(self, songs, sample_csv):
        result = TransferService.import_csv(songs, sample_csv)

        assert result.imported == 3
        assert result.ignored_columns == []
        assert [s.category for s in songs.list_songs()] == [
            SongCategory.ANGOLA,
            SongCategory.SAO_BENTO_PEQUENO,
            SongCategory.SAO_BENTO_GRANDE,
        ]

    def test_songs_belong_to_importer(self, songs, other_songs, sample_csv, owner_id):
        result = TransferService.import_csv(songs, sample_csv)

        assert all(song.user_id == owner_id for song in result.songs)
        assert other_songs.list_songs() == []

    def test_bad_row_writes_nothing(self, songs):
        text = "title,category\nGood,angola\nBad,regional\n"

        with pytest.raises(RowValidationError) as exc_info:
            TransferService.import_csv(songs, text)

        assert exc_info.value.line == 3
        assert songs.list_songs() == []

    def test_header_only_writes_nothing(self, songs):
        with pytest.raises(CsvFormatError):
            TransferService.import_csv(songs, "title,category,mnemonic,lyrics,mediaLink")
        assert songs.list_songs() == []

    def test_extra_columns_reported_not_stored(self, songs):
        result = TransferService.import_csv(songs, "title,category,Notes,level\nA,angola,x,1\n")

        assert result.ignored_columns == ["level", "notes"]
        assert result.imported == 1

    def test_import_appends_to_existing_songs(self, songs, sample_song, sample_csv):
        songs.create_song(sample_song)

        TransferService.import_csv(songs, sample_csv)

        assert len(songs.list_songs()) == 4

    def test_example_file_imports(self, songs):
        result = TransferService.import_csv(songs, EXAMPLE_CSV)

        assert result.imported == 3
        assert "\n" in result.songs[0].lyrics


class TestExport:
    """Tests for TransferService.export_csv()."""

    def test_no_songs_exports_header(self, songs):
        assert TransferService.export_csv(songs) == "title,category,mnemonic,lyrics,mediaLink"

    def test_only_own_songs_exported(self, songs, other_songs):
        other_songs.create_song(SongCreate(title="theirs", category=SongCategory.ANGOLA))

        assert TransferService.export_csv(songs).count("\n") == 0

    def test_export_then_import_round_trip(self, songs, other_songs, sample_song):
        songs.create_song(sample_song)
        songs.create_song(SongCreate(title="Zum zum zum", category=SongCategory.SAO_BENTO_GRANDE))

        exported = TransferService.export_csv(songs)
        TransferService.import_csv(other_songs, exported)

        fields = ("title", "category", "mnemonic", "lyrics", "media_link")
        original = [{f: getattr(s, f) for f in fields} for s in songs.list_songs()]
        copied = [{f: getattr(s, f) for f in fields} for s in other_songs.list_songs()]
        assert copied == original

    def test_export_parses_back(self, songs, sample_song):
        songs.create_song(sample_song)

        records = parse_songs(TransferService.export_csv(songs))

        assert records[0].lyrics == sample_song.lyrics
        assert records[0].media_link == sample_song.media_link
