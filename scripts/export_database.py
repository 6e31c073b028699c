"""Export the stored CRM database to a .sqlite file.

    python scripts/export_database.py --out ./backups
    python scripts/export_database.py --report

Reads the snapshot from CRM_STORAGE_DIR (see .env.example). The store is only
read: nothing is created or migrated, so the exported file is exactly what
is stored. Exits with status 1 when no snapshot exists.
"""
import argparse
import logging
import sys
from pathlib import Path

# Resolve project root so imports work when run from any cwd
_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_ROOT))

from db.config import DEFAULT_EXPORT_FILENAME, STORAGE_DIR
from db.database import Database
from db.debug import create_debug_report, download_database
from db.snapshot import SnapshotStore
from db.storage import FileKeyValueStore

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export the local CRM database")
    parser.add_argument("--storage-dir", default=STORAGE_DIR, help="Snapshot directory")
    parser.add_argument("--out", default=".", help="Directory to write the .sqlite file to")
    parser.add_argument("--filename", default=DEFAULT_EXPORT_FILENAME)
    parser.add_argument(
        "--report",
        action="store_true",
        default=False,
        help="Print a diagnostics report instead of writing a file",
    )
    return parser


def main(argv=None) -> int:
    args = _build_arg_parser().parse_args(argv)
    snapshots = SnapshotStore(FileKeyValueStore(args.storage_dir))
    engine = snapshots.load()
    if engine is None:
        logger.error("No stored database found in %s", args.storage_dir)
        return 1

    with Database(engine, snapshots) as db:
        if args.report:
            print(create_debug_report(db))
        else:
            path = download_database(db, args.out, args.filename)
            print(f"  Database exported to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
