"""
Database backup and restore.

A backup is a JSON snapshot of every table, optionally gzip-compressed, written
to the backup directory next to a manifest holding its SHA-256 checksum and
per-table row counts. Restores verify the checksum first, then replace the rows
of the selected tables inside one transaction.
"""

from __future__ import annotations

import gzip
import hashlib
import json
import re
import secrets
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Type

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from portfolio_cms.core.database.base import utc_now
from portfolio_cms.core.database.entities import ALL_ENTITIES
from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.operations import (
    BackupInfo,
    BackupRestoreResult,
    BackupStatistics,
    BackupVerifyResult,
)
from portfolio_cms.server.core.config import settings

logger = get_logger(__name__)

BACKUP_FORMAT_VERSION = 1
BACKUP_ID_PATTERN = re.compile(r"^backup-\d{8}-\d{6}-[0-9a-f]{6}$")
TABLES: Dict[str, Type[SQLModel]] = {entity.__tablename__: entity for entity in ALL_ENTITIES}


class BackupError(Exception):
    """A backup could not be created, read or restored."""


class BackupNotFoundError(BackupError):
    pass


def _checksum(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class BackupService:
    """Create, inspect and restore JSON database snapshots."""

    def __init__(self, session: AsyncSession, backup_dir: Optional[str] = None) -> None:
        self.session = session
        self.backup_dir = Path(backup_dir or settings.backup_dir)

    # ------------------------------------------------------------------
    # Paths and manifests
    # ------------------------------------------------------------------

    def _manifest_path(self, backup_id: str) -> Path:
        if not BACKUP_ID_PATTERN.match(backup_id):
            raise BackupNotFoundError(f"Backup '{backup_id}' not found")
        return self.backup_dir / f"{backup_id}.manifest.json"

    def _read_manifest(self, backup_id: str) -> BackupInfo:
        path = self._manifest_path(backup_id)
        if not path.is_file():
            raise BackupNotFoundError(f"Backup '{backup_id}' not found")
        try:
            return BackupInfo.model_validate_json(path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise BackupError(f"Backup manifest for '{backup_id}' is unreadable: {e}") from e

    def _data_path(self, info: BackupInfo) -> Path:
        return self.backup_dir / info.filename

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def create_backup(
        self, backup_type: str = "manual", compress: bool = False, description: Optional[str] = None
    ) -> BackupInfo:
        """
        Snapshot every table.

        Args:
            backup_type: ``manual``, ``scheduled`` or ``pre-restore``
            compress: Write ``.json.gz`` instead of ``.json``
            description: Free-form note stored in the manifest

        Returns:
            The manifest of the new backup.
        """
        now = utc_now()
        backup_id = f"backup-{now.strftime('%Y%m%d-%H%M%S')}-{secrets.token_hex(3)}"

        tables: Dict[str, List[Dict[str, Any]]] = {}
        for name, model in TABLES.items():
            result = await self.session.execute(select(model))
            tables[name] = [row.model_dump(mode="json") for row in result.scalars().all()]

        document = {
            "version": BACKUP_FORMAT_VERSION,
            "id": backup_id,
            "created_at": now.isoformat(),
            "tables": tables,
        }
        data = json.dumps(document, indent=None if compress else 2).encode("utf-8")
        if compress:
            data = gzip.compress(data)

        info = BackupInfo(
            id=backup_id,
            filename=f"{backup_id}.json.gz" if compress else f"{backup_id}.json",
            type=backup_type,
            created_at=now,
            size=len(data),
            compressed=compress,
            checksum=_checksum(data),
            tables={name: len(rows) for name, rows in tables.items()},
            description=description,
        )

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        self._data_path(info).write_bytes(data)
        self._manifest_path(backup_id).write_text(info.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Created {backup_type} backup {backup_id} ({info.size} bytes)")
        return info

    def list_backups(self, limit: int = 50) -> List[BackupInfo]:
        """Backups newest first."""
        if not self.backup_dir.is_dir():
            return []
        backups = []
        for path in self.backup_dir.glob("backup-*.manifest.json"):
            backup_id = path.name[: -len(".manifest.json")]
            try:
                backups.append(self._read_manifest(backup_id))
            except BackupError as e:
                logger.warning(f"Skipping unreadable backup manifest {path.name}: {e}")
        backups.sort(key=lambda info: (info.created_at, info.id), reverse=True)
        return backups[:limit]

    def get_backup(self, backup_id: str) -> BackupInfo:
        return self._read_manifest(backup_id)

    def verify_backup(self, backup_id: str) -> BackupVerifyResult:
        """Check that the data file exists and matches its recorded checksum."""
        info = self._read_manifest(backup_id)
        path = self._data_path(info)
        if not path.is_file():
            return BackupVerifyResult(backup_id=backup_id, valid=False, message="Backup data file is missing")
        if _checksum(path.read_bytes()) != info.checksum:
            return BackupVerifyResult(backup_id=backup_id, valid=False, message="Checksum mismatch")
        return BackupVerifyResult(backup_id=backup_id, valid=True, message="Backup is valid")

    def _load_tables(self, info: BackupInfo) -> Dict[str, List[Dict[str, Any]]]:
        data = self._data_path(info).read_bytes()
        if info.compressed:
            data = gzip.decompress(data)
        document = json.loads(data.decode("utf-8"))
        tables = document.get("tables")
        if not isinstance(tables, dict):
            raise BackupError(f"Backup '{info.id}' has no table data")
        return tables

    async def restore_backup(self, backup_id: str, tables: Optional[Sequence[str]] = None) -> BackupRestoreResult:
        """
        Replace the contents of ``tables`` (all tables when omitted) with the backup rows.

        Raises:
            BackupNotFoundError: Unknown backup id.
            BackupError: Failed verification, unknown table names or a database error.
        """
        verification = self.verify_backup(backup_id)
        if not verification.valid:
            raise BackupError(f"Backup '{backup_id}' failed verification: {verification.message}")

        selected = list(tables) if tables else list(TABLES)
        unknown = [name for name in selected if name not in TABLES]
        if unknown:
            raise BackupError(f"Unknown tables: {', '.join(sorted(unknown))}")

        info = self._read_manifest(backup_id)
        stored = self._load_tables(info)
        restored: Dict[str, int] = {}
        try:
            self.session.expunge_all()
            for name in selected:
                model = TABLES[name]
                rows = stored.get(name, [])
                await self.session.execute(delete(model))
                self.session.add_all([model.model_validate(row) for row in rows])
                restored[name] = len(rows)
            await self.session.commit()
        except (SQLAlchemyError, ValueError) as e:
            await self.session.rollback()
            logger.error(f"Restore of backup {backup_id} failed: {e}", exc_info=True)
            raise BackupError(f"Restore failed: {e}") from e

        logger.warning(f"Restored backup {backup_id} into tables: {', '.join(selected)}")
        return BackupRestoreResult(backup_id=backup_id, tables=restored)

    def delete_backup(self, backup_id: str) -> None:
        info = self._read_manifest(backup_id)
        self._data_path(info).unlink(missing_ok=True)
        self._manifest_path(backup_id).unlink(missing_ok=True)
        logger.info(f"Deleted backup {backup_id}")

    def statistics(self) -> BackupStatistics:
        backups = self.list_backups(limit=10_000)
        return BackupStatistics(
            total_backups=len(backups),
            total_size=sum(info.size for info in backups),
            latest_backup=backups[0] if backups else None,
            oldest_backup=backups[-1] if backups else None,
        )
