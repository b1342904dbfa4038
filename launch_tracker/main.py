"""
Main Launch Tracker backend application
"""
import logging
import signal
import sys
from datetime import date
from typing import Dict, List, Optional

from global_config import ALL_SESSIONS, LOG_FORMAT, LOG_LEVEL
from . import aggregation
from .exceptions import ShotImportError
from .export import to_csv
from .filters import filter_shots, gapping_pool
from .models import (
    ClubDistribution,
    ClubRow,
    ConsistencyLeader,
    DispersionPoint,
    FilterCriteria,
    GapReport,
    ImportSummary,
    MetricSummary,
    PersonalRecords,
    ProficiencyScore,
    ProgressPoint,
    Shot,
    ShotShapeSummary,
    SwingMetricAverages,
)
from .session_manager import SessionManager
from .shot_store import ShotStore, create_store

logger = logging.getLogger(__name__)


class LaunchTrackerBackend:
    """Main Launch Tracker backend application"""

    def __init__(self, store: Optional[ShotStore] = None):
        """Initialize the backend"""
        self.store = store if store is not None else create_store()
        self.session_manager = SessionManager(self.store)
        self.criteria = FilterCriteria()

        # Set up signal handlers for graceful shutdown
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals"""
        print("\nShutting down Launch Tracker backend...")
        self.stop()
        sys.exit(0)

    # Collection

    def import_file(self, path: str) -> Optional[ImportSummary]:
        """Import a launch-monitor export.

        :param path: Path to an .xlsx, .xls or .csv file
        :return: ImportSummary, or None if the import failed
        """
        try:
            return self.session_manager.import_file(path)
        except (ShotImportError, OSError) as e:
            logger.error("Import of %s failed: %s", path, e)
            return None

    def load_sample(self) -> Optional[ImportSummary]:
        """Import the bundled sample session.

        :return: ImportSummary, or None if the import failed
        """
        try:
            return self.session_manager.load_sample()
        except (ShotImportError, OSError) as e:
            logger.error("Sample import failed: %s", e)
            return None

    def delete_session(self, session_id: str) -> bool:
        deleted = self.session_manager.delete_session(session_id)
        if deleted and self.criteria.session == session_id:
            self.criteria = self.criteria.model_copy(update={"session": ALL_SESSIONS})
        return deleted

    def delete_all(self) -> bool:
        deleted = self.session_manager.delete_all()
        if deleted:
            self.reset_filters()
        return deleted

    # Filters

    def set_session(self, session_id: str):
        self.criteria = self.criteria.model_copy(update={"session": session_id or ALL_SESSIONS})

    def set_clubs(self, clubs: List[str]):
        self.criteria = self.criteria.model_copy(update={"clubs": set(clubs)})

    def set_date_range(self, date_from: Optional[date], date_to: Optional[date]):
        self.criteria = self.criteria.model_copy(update={"date_from": date_from, "date_to": date_to})

    def set_carry_range(self, carry_min: Optional[float], carry_max: Optional[float]):
        self.criteria = self.criteria.model_copy(update={"carry_min": carry_min, "carry_max": carry_max})

    def set_exclude_outliers(self, enabled: bool):
        self.criteria = self.criteria.model_copy(update={"exclude_outliers": enabled})

    def reset_filters(self):
        self.criteria = FilterCriteria()

    def filtered_shots(self) -> List[Shot]:
        return filter_shots(self.session_manager.get_shots(), self.criteria)

    # Views

    def club_table(self) -> List[ClubRow]:
        return aggregation.club_rows(self.filtered_shots())

    def distributions(self) -> List[ClubDistribution]:
        return aggregation.club_distributions(self.filtered_shots())

    def shot_shapes(self) -> ShotShapeSummary:
        return aggregation.shot_shape(self.filtered_shots())

    def gaps(self) -> GapReport:
        """Gapping over every club, whatever the club filter says"""
        return aggregation.gap_report(gapping_pool(self.session_manager.get_shots(), self.criteria))

    def dispersion(self) -> List[DispersionPoint]:
        return aggregation.dispersion_points(self.filtered_shots())

    def kpis(self) -> Dict[str, MetricSummary]:
        return aggregation.kpis(self.filtered_shots())

    def records(self) -> PersonalRecords:
        return aggregation.personal_records(self.filtered_shots())

    def consistency(self) -> Optional[ConsistencyLeader]:
        """Most consistent club over the pool without the club filter"""
        return aggregation.consistency_leader(gapping_pool(self.session_manager.get_shots(), self.criteria))

    def progress(self) -> List[ProgressPoint]:
        return aggregation.progress_series(self.filtered_shots())

    def swing_metrics(self) -> SwingMetricAverages:
        return aggregation.swing_metric_averages(self.filtered_shots())

    def proficiency(self) -> ProficiencyScore:
        return aggregation.proficiency_score(self.filtered_shots())

    def export_csv(self, path: str) -> int:
        """Write the filtered shots to a CSV file.

        :param path: Destination file
        :return: Number of shots written
        """
        shots = self.filtered_shots()
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(to_csv(shots))
        logger.info("Exported %d shots to %s", len(shots), path)
        return len(shots)

    def stop(self):
        """Stop the backend"""
        logger.info("Launch Tracker backend stopped")

    def get_status(self) -> dict:
        """Get backend status.

        :return: Dictionary containing status information
        """
        shots = self.session_manager.get_shots()
        return {
            "store": type(self.store).__name__,
            "total_shots": len(shots),
            "sessions": len(self.session_manager.get_sessions()) - 1,
            "clubs": len(self.session_manager.get_clubs()),
            "filtered_shots": len(self.filtered_shots()),
            "session_filter": self.criteria.session,
            "club_filter": sorted(self.criteria.clubs),
            "exclude_outliers": self.criteria.exclude_outliers,
        }


def _fmt(value: Optional[float], digits: int = 1) -> str:
    return "-" if value is None else f"{value:.{digits}f}"


def _parse_optional_float(token: str) -> Optional[float]:
    return None if token in ("-", "none") else float(token)


def _parse_optional_date(token: str) -> Optional[date]:
    return None if token in ("-", "none") else date.fromisoformat(token)


def _print_summary(summary: Optional[ImportSummary]):
    if summary is None:
        print("Import failed (see log)")
        return
    print(f"Imported {summary.imported} shots from {summary.filename} "
          f"({summary.duplicates_skipped} duplicates skipped, "
          f"{summary.total_rows_considered} rows considered, {summary.source})")
    print(f"Session: {summary.session_id}")


def main():
    """Main entry point"""
    logging.basicConfig(level=getattr(logging, LOG_LEVEL), format=LOG_FORMAT)
    print("Launch Tracker Backend Starting...")

    backend = LaunchTrackerBackend()

    print("\nLaunch Tracker Backend Ready!")
    print("Available commands:")
    print("  import <path>")
    print("  sample")
    print("  sessions | clubs")
    print("  session <id|ALL>")
    print("  club [name, name ...]      (no names clears the club filter)")
    print("  dates <from|-> <to|->      (YYYY-MM-DD)")
    print("  carry <min|-> <max|->")
    print("  outliers on|off")
    print("  reset")
    print("  table | shapes | gaps | dispersion | kpis | records")
    print("  export <path>")
    print("  delete_session <id>")
    print("  delete_all")
    print("  status")
    print("  quit")

    while True:
        try:
            command = input("\n> ").strip().split()
            if not command:
                continue

            cmd = command[0].lower()

            if cmd == "import" and len(command) >= 2:
                _print_summary(backend.import_file(" ".join(command[1:])))

            elif cmd == "sample":
                _print_summary(backend.load_sample())

            elif cmd == "sessions":
                for session_id in backend.session_manager.get_sessions():
                    print(f"  {session_id}")

            elif cmd == "clubs":
                for club in backend.session_manager.get_clubs():
                    print(f"  {club}")

            elif cmd == "session" and len(command) >= 2:
                backend.set_session(" ".join(command[1:]))

            elif cmd == "club":
                backend.set_clubs([name.strip() for name in " ".join(command[1:]).split(",") if name.strip()])

            elif cmd == "dates" and len(command) >= 3:
                backend.set_date_range(_parse_optional_date(command[1]), _parse_optional_date(command[2]))

            elif cmd == "carry" and len(command) >= 3:
                backend.set_carry_range(_parse_optional_float(command[1]), _parse_optional_float(command[2]))

            elif cmd == "outliers" and len(command) >= 2:
                backend.set_exclude_outliers(command[1].lower() == "on")

            elif cmd == "reset":
                backend.reset_filters()

            elif cmd == "table":
                for row in backend.club_table():
                    print(f"  {row.club:<18} n={row.count:<4} carry {_fmt(row.avg_carry)} "
                          f"(sd {_fmt(row.sd_carry)})  total {_fmt(row.avg_total)}  "
                          f"smash {_fmt(row.avg_smash, 2)}  spin {_fmt(row.avg_spin, 0)}")

            elif cmd == "shapes":
                shapes = backend.shot_shapes()
                for key in ("draw", "straight", "fade", "unclassified"):
                    print(f"  {key}: {getattr(shapes, key)} ({shapes.percentages[key]:.0f}%)")

            elif cmd == "gaps":
                report = backend.gaps()
                for gap in report.gaps:
                    flag = " TIGHT" if gap.tight else (" WIDE" if gap.wide else "")
                    print(f"  {gap.longer} -> {gap.shorter}: {gap.gap:.1f} yds{flag}")

            elif cmd == "dispersion":
                for point in backend.dispersion():
                    print(f"  {point.club}: carry {point.carry:.1f}, lateral {point.lateral:+.1f}")

            elif cmd == "kpis":
                for name, summary in backend.kpis().items():
                    print(f"  {name}: {_fmt(summary.mean, 2)} (n={summary.n}, sd {summary.std:.2f})")

            elif cmd == "records":
                records = backend.records()
                if records.best_carry:
                    print(f"  Longest carry: {records.best_carry.carry_distance_yds:.1f} ({records.best_carry.club})")
                if records.best_total:
                    print(f"  Longest total: {records.best_total.total_distance_yds:.1f} ({records.best_total.club})")
                leader = backend.consistency()
                if leader:
                    print(f"  Most consistent: {leader.club} (sd {leader.sd_carry:.1f})")
                score = backend.proficiency()
                print(f"  Proficiency: {score.score:.0f} / 100 ({score.label})")

            elif cmd == "export" and len(command) >= 2:
                count = backend.export_csv(" ".join(command[1:]))
                print(f"Exported {count} shots")

            elif cmd == "delete_session" and len(command) >= 2:
                if backend.delete_session(command[1]):
                    print(f"Deleted session {command[1]}")
                else:
                    print(f"Session {command[1]} not deleted")

            elif cmd == "delete_all":
                if backend.delete_all():
                    print("Deleted all shots")
                else:
                    print("Failed to delete shots")

            elif cmd == "status":
                status = backend.get_status()
                for key, value in status.items():
                    print(f"  {key}: {value}")

            elif cmd == "quit":
                backend.stop()
                break

            else:
                print("Unknown command. Type 'quit' to exit.")

        except KeyboardInterrupt:
            backend.stop()
            break
        except (ValueError, OSError) as e:
            print(f"Error: {e}")


if __name__ == "__main__":
    main()
