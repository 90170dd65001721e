"""
Schema migrations and integrity checks for the POS database.

Migrations are the ``vNNN_name.sql`` files next to this module, applied in
version order and recorded in ``schema_migrations`` with a checksum. An
existing database file is copied aside before anything is applied and put
back if a migration blows up.

Besides SQLite's own checks, ``verify_schema_integrity`` replays the stock
ledger and the sale/refund links, which is the cheapest way to spot a
database edited by hand.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = (
    "products",
    "stock_history",
    "sales",
    "customers",
    "schema_migrations",
)

# name -> query returning the offending ids; run only when every table exists
_LEDGER_CHECKS: dict[str, tuple[str, str]] = {
    "stock_ledger_balance": (
        "products",
        """
        SELECT p.id
        FROM products p
        LEFT JOIN stock_history h ON h.product_id = p.id
        GROUP BY p.id
        HAVING p.stock_quantity != COALESCE(SUM(h.quantity_change), 0)
        """,
    ),
    "returns_within_quantity": (
        "sales",
        """
        SELECT id FROM sales
        WHERE kind = 'sale' AND returned_quantity > quantity
        """,
    ),
    "refund_links": (
        "sales",
        """
        SELECT r.id
        FROM sales r
        LEFT JOIN sales s ON s.id = r.refund_of
        WHERE r.kind = 'refund' AND s.id IS NULL
        """,
    ),
}


@dataclass
class MigrationInfo:
    """One bundled migration file."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=digest[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations() -> list[MigrationInfo]:
    """Bundled migrations in version order; badly named files are skipped."""
    found: list[MigrationInfo] = []
    for path in MIGRATIONS_DIR.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to the checksum they were applied with."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh database
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one migration script and record it."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    start = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - start) * 1000)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            migration.version, migration.name, False, elapsed_ms(), error=str(e)
        )

    result = MigrationResult(migration.version, migration.name, True, elapsed_ms())
    logger.info(
        "migration_applied",
        version=result.version,
        name=result.name,
        execution_time_ms=result.execution_time_ms,
    )
    return result


def create_backup(db_path: Path) -> Path:
    """Copy the database file to ``<name>.<timestamp>.bak`` beside it."""
    stamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    backup_path = db_path.with_name(f"{db_path.name}.{stamp}.bak")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


def _pending(
    discovered: list[MigrationInfo], applied: dict[str, str]
) -> list[MigrationInfo] | None:
    """Migrations still to run, or ``None`` when an applied one was edited."""
    for migration in discovered:
        recorded = applied.get(migration.version)
        if recorded is not None and recorded != migration.checksum:
            logger.error(
                "migration_checksum_changed",
                version=migration.version,
                recorded=recorded,
                current=migration.checksum,
            )
            return None
    return [m for m in discovered if m.version not in applied]


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database up to the latest bundled schema.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Copy an existing file aside while migrating

    Returns:
        One result per migration attempted; empty when already current
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    existed = db_path.exists()

    logger.info("initializing_database", db_path=str(db_path), existed=existed)

    results: list[MigrationResult] = []
    backup_path: Path | None = None

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            pending = _pending(discover_migrations(), await get_applied_migrations(conn))
            if not pending:
                return results

            if create_backup_before and existed:
                backup_path = create_backup(db_path)

            for migration in pending:
                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        if all(r.success for r in results):
            backup_path.unlink()
            logger.debug("database_backup_removed", backup_path=str(backup_path))
        else:
            # executescript commits as it goes, so a failed script can leave half a schema
            restore_backup(db_path, backup_path)

    return results


# Called at application startup
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending versions of the database at ``db_path``."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied, key=int) if applied else None,
        "applied_migrations": sorted(applied, key=int),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "total_migrations": len(discovered),
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """
    Run SQLite's checks and the POS ledger checks.

    Every check is a dict with ``check`` and ``status`` (PASS/FAIL) plus
    details; ledger checks list the offending ids and are skipped when a
    required table is missing.
    """
    db_path = db_path or get_settings().storage.db_path
    checks: list[dict] = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = await cursor.fetchall()
        checks.append({
            "check": "foreign_keys",
            "status": "FAIL" if fk_violations else "PASS",
            "violations": len(fk_violations),
        })

        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()
        checks.append({
            "check": "integrity",
            "status": "PASS" if integrity == "ok" else "FAIL",
            "result": integrity,
        })

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = {row[0] for row in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in tables]
        checks.append({
            "check": "required_tables",
            "status": "FAIL" if missing else "PASS",
            "missing": missing,
        })
        if missing:
            return checks

        for name, (subject, query) in _LEDGER_CHECKS.items():
            cursor = await conn.execute(query)
            offenders = [row[0] for row in await cursor.fetchall()]
            checks.append({
                "check": name,
                "status": "FAIL" if offenders else "PASS",
                subject: offenders,
            })

    return checks


def main() -> None:
    """``pos-migrate``: apply migrations, show status or verify the ledger."""
    import argparse

    parser = argparse.ArgumentParser(description="Boutique POS database migrations")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    sub = parser.add_subparsers(dest="command")
    migrate = sub.add_parser("migrate", help="Apply pending migrations (default)")
    migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration copy")
    sub.add_parser("status", help="Show applied and pending migrations")
    sub.add_parser("verify", help="Check schema integrity and stock ledger balance")
    args = parser.parse_args()

    async def run() -> int:
        if args.command == "status":
            status = await get_migration_status(args.db_path)
            print(f"Database exists:    {status['exists']}")
            print(f"Current version:    {status['current_version'] or '-'}")
            print(f"Pending migrations: {', '.join(status['pending_migrations']) or '-'}")
            return 0

        if args.command == "verify":
            failed = 0
            for check in await verify_schema_integrity(args.db_path):
                print(f"[{check['status']}] {check['check']}")
                if check["status"] != "PASS":
                    failed += 1
                    for key, value in check.items():
                        if key not in ("check", "status"):
                            print(f"       {key}: {value}")
            return 1 if failed else 0

        results = await initialize_database(
            args.db_path,
            create_backup_before=not getattr(args, "no_backup", False),
        )
        if not results:
            print("Schema is up to date")
        for result in results:
            outcome = "OK" if result.success else "FAILED"
            print(f"[{outcome}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"       {result.error}")
        return 0 if all(r.success for r in results) else 1

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
