"""
Session manager for the Launch Tracker backend
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .aggregation import clubs, sessions
from .dedup import deduplicate
from .importer import choose_import
from .models import ImportSummary, Shot
from .normalizer import synthesize_session_id
from .sample import fetch_sample
from .shot_store import ShotStore
from .workbook import read_grid

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the shot collection and every mutation of it.

    The collection is replaced wholesale on import and delete, then handed
    to the store as a new snapshot. If the store refuses the snapshot the
    in-memory collection is left as it was.
    """

    def __init__(self, store: ShotStore):
        """Initialize session manager"""
        self.store = store
        self._shots: List[Shot] = list(store.load())
        logger.info("Loaded %d shots from store", len(self._shots))

    def _replace(self, shots: List[Shot]) -> bool:
        if not self.store.save(shots):
            logger.error("Store rejected snapshot of %d shots", len(shots))
            return False
        self._shots = shots
        return True

    def import_bytes(self, data: bytes, filename: str,
                     imported_at: Optional[datetime] = None) -> ImportSummary:
        """Import one workbook or CSV file.

        Raises:
            ShotImportError: the file could not be read or had no usable rows
            IOError: the store did not accept the new collection
        """
        session_id = synthesize_session_id(filename, imported_at or datetime.now(timezone.utc))
        grid, csv_text = read_grid(data, filename)
        parsed = choose_import(grid, csv_text, session_id)
        result = deduplicate(parsed.shots, self._shots)

        if result.accepted and not self._replace(self._shots + result.accepted):
            raise IOError("Failed to save imported shots")

        summary = ImportSummary(
            filename=os.path.basename(filename),
            source=parsed.kind,
            session_id=session_id,
            imported=result.accepted_count,
            duplicates_skipped=result.duplicates,
            total_rows_considered=parsed.rows_considered,
        )
        logger.info("Imported %d shots from %s (%d duplicates skipped, %s)",
                    summary.imported, summary.filename, summary.duplicates_skipped, summary.source)
        return summary

    def import_file(self, path: str) -> ImportSummary:
        """Import a file from disk"""
        with open(path, "rb") as f:
            data = f.read()
        return self.import_bytes(data, path)

    def load_sample(self) -> ImportSummary:
        """Import the bundled sample session"""
        data, filename = fetch_sample()
        return self.import_bytes(data, filename)

    def delete_session(self, session_id: str) -> bool:
        """Remove every shot of one session"""
        remaining = [shot for shot in self._shots if shot.session_id != session_id]
        if len(remaining) == len(self._shots):
            logger.info("Session %s not found", session_id)
            return False
        removed = len(self._shots) - len(remaining)
        success = self._replace(remaining)
        if success:
            logger.info("Deleted %d shots of session %s", removed, session_id)
        return success

    def delete_all(self) -> bool:
        """Remove every shot"""
        success = self._replace([])
        if success:
            logger.info("Deleted all shots")
        return success

    def get_shots(self) -> List[Shot]:
        return list(self._shots)

    def get_sessions(self) -> List[str]:
        return sessions(self._shots)

    def get_clubs(self) -> List[str]:
        return clubs(self._shots)

    def get_session_summary(self, session_id: str) -> Dict[str, Any]:
        """Shot count, clubs and time span of one session"""
        shots = [shot for shot in self._shots if shot.session_id == session_id]
        if not shots:
            return {"error": f"Session {session_id} not found"}

        times = [shot.timestamp for shot in shots if shot.timestamp is not None]
        return {
            "session_id": session_id,
            "shot_count": len(shots),
            "clubs": clubs(shots),
            "first_shot": min(times).isoformat() if times else None,
            "last_shot": max(times).isoformat() if times else None,
        }
