# =============================================================================
# core/services/transfer_service.py - CSV Import/Export
# =============================================================================
# Bulk import and export of songs.
#
# Import is validate-then-write: the whole file is parsed and every row is
# checked before the single bulk insert, so a bad row never leaves a
# partial import behind.
# =============================================================================

import logging

from app.exceptions import FileReadError
from core.models.song import ImportResult
from core.repositories.song_repository import SongRepository
from lib.csv_codec import parse_songs, serialize_songs

logger = logging.getLogger(__name__)

EXPORT_MEDIA_TYPE = "text/csv; charset=utf-8"

# Template shown to users before their first import
EXAMPLE_CSV = "\n".join([
    "title,category,mnemonic,lyrics,mediaLink",
    '"Paranauê Paranauá",angola,"Para-na-uê","Paranauê, paranauê paraná',
    'Paranauê, paranauê paraná",""',
    '"Sim Sim Sim",saoBentoPequeno,"Sim sim non non","Sim sim sim, não não não',
    'Sim sim sim, não não não",""',
    '"Volta do Mundo",saoBentoGrande,"Vol-ta do mun-do","Volta do mundo, volta do mundo camará',
    'Volta do mundo, volta do mundo camará",""',
])


class TransferService:
    """
    Moves songs between CSV files and a SongRepository.
    """

    @staticmethod
    def decode(content: bytes, filename: str) -> str:
        """
        Decode an uploaded file as UTF-8.

        A leading byte-order mark (as written by spreadsheet tools) is dropped.

        Raises:
            FileReadError: If the bytes are not valid UTF-8
        """
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FileReadError(filename, f"not valid UTF-8 ({e.reason} at byte {e.start})")

    @staticmethod
    def import_csv(repository: SongRepository, text: str) -> ImportResult:
        """
        Import every song in `text` for the repository's owner.

        Args:
            repository: Owner-scoped song repository
            text: Decoded CSV contents

        Returns:
            ImportResult with the created songs and any ignored columns

        Raises:
            CsvFormatError: If the file has no data rows or lacks required columns
            RowValidationError: If any row is invalid (nothing is written)
        """
        records = parse_songs(text)

        ignored = sorted({name for record in records for name in record.extra})
        if ignored:
            logger.info(f"Ignoring non-song columns in import: {ignored}")

        songs = repository.create_songs(records)
        logger.info(f"Imported {len(songs)} song(s) for user {repository.owner}")

        return ImportResult(imported=len(songs), songs=songs, ignored_columns=ignored)

    @staticmethod
    def export_csv(repository: SongRepository) -> str:
        """Serialize all of the owner's songs, oldest first."""
        songs = repository.list_songs()
        logger.info(f"Exporting {len(songs)} song(s) for user {repository.owner}")
        return serialize_songs(songs)
