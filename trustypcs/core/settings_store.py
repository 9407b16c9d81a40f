"""Settings store implementations."""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trustypcs.core.errors import SettingsStoreError
from trustypcs.core.values import prepare_updates, validate_key
from trustypcs.models.setting import Setting

logger = logging.getLogger(__name__)

_NATIVE_UPSERT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


@dataclass(frozen=True)
class SettingEntry:
    """A single stored setting."""

    key_name: str
    value: str


class SettingsStore(ABC):
    """Key-value store of site settings."""

    @abstractmethod
    def get_settings(self) -> List[SettingEntry]:
        """Return all settings ordered by key."""
        pass

    @abstractmethod
    def get_setting(self, key: str) -> Optional[SettingEntry]:
        """Return one setting or None."""
        pass

    @abstractmethod
    def update_settings(self, updates: Mapping[str, str]) -> Dict[str, str]:
        """
        Upsert a batch of settings atomically.

        All keys are validated before anything is written. Returns the
        applied key/value mapping.
        """
        pass

    @abstractmethod
    def insert_missing(self, defaults: Mapping[str, str]) -> Dict[str, str]:
        """Insert only the keys that do not exist yet. Returns what was inserted."""
        pass

    def update_setting(self, key: str, value: str) -> None:
        """Upsert a single setting."""
        self.update_settings({key: value})

    def as_dict(self) -> Dict[str, str]:
        """Return all settings as a key -> value mapping."""
        return {entry.key_name: entry.value for entry in self.get_settings()}


class InMemorySettingsStore(SettingsStore):
    """Process-local settings store."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = {}
        self._lock = threading.Lock()
        if initial:
            self.update_settings(initial)

    def get_settings(self) -> List[SettingEntry]:
        with self._lock:
            return [SettingEntry(key, value) for key, value in sorted(self._values.items())]

    def get_setting(self, key: str) -> Optional[SettingEntry]:
        with self._lock:
            if key not in self._values:
                return None
            return SettingEntry(key, self._values[key])

    def update_settings(self, updates: Mapping[str, str]) -> Dict[str, str]:
        applied = prepare_updates(updates)
        with self._lock:
            self._values.update(applied)
        return applied

    def insert_missing(self, defaults: Mapping[str, str]) -> Dict[str, str]:
        prepared = prepare_updates(defaults)
        with self._lock:
            inserted = {k: v for k, v in prepared.items() if k not in self._values}
            self._values.update(inserted)
        return inserted


class SqlSettingsStore(SettingsStore):
    """Settings store backed by the `settings` table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get_settings(self) -> List[SettingEntry]:
        session = self._session_factory()
        try:
            rows = session.execute(
                select(Setting.key_name, Setting.value).order_by(Setting.key_name.asc())
            ).all()
            return [SettingEntry(row.key_name, row.value) for row in rows]
        except SQLAlchemyError as e:
            raise SettingsStoreError(f"Failed to read settings: {e}") from e
        finally:
            session.close()

    def get_setting(self, key: str) -> Optional[SettingEntry]:
        session = self._session_factory()
        try:
            setting = session.query(Setting).filter(Setting.key_name == key).first()
            if not setting:
                return None
            return SettingEntry(setting.key_name, setting.value)
        except SQLAlchemyError as e:
            raise SettingsStoreError(f"Failed to read setting {key}: {e}") from e
        finally:
            session.close()

    def update_settings(self, updates: Mapping[str, str]) -> Dict[str, str]:
        applied = prepare_updates(updates)
        if not applied:
            return applied

        session = self._session_factory()
        try:
            for key, value in applied.items():
                self._upsert(session, key, value)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Settings update failed, rolled back {len(applied)} keys: {e}")
            raise SettingsStoreError(f"Failed to update settings: {e}") from e
        finally:
            session.close()
        return applied

    def insert_missing(self, defaults: Mapping[str, str]) -> Dict[str, str]:
        prepared = prepare_updates(defaults)
        session = self._session_factory()
        try:
            existing = {
                key for (key,) in session.execute(
                    select(Setting.key_name).where(Setting.key_name.in_(list(prepared)))
                )
            }
            inserted = {k: v for k, v in prepared.items() if k not in existing}
            for key, value in inserted.items():
                session.add(Setting(key_name=key, value=value))
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise SettingsStoreError(f"Failed to insert default settings: {e}") from e
        finally:
            session.close()
        return inserted

    def _upsert(self, session: Session, key: str, value: str) -> None:
        validate_key(key)
        now = datetime.utcnow()
        insert = _NATIVE_UPSERT.get(session.get_bind().dialect.name)
        if insert is not None:
            stmt = insert(Setting).values(key_name=key, value=value, created_at=now, updated_at=now)
            stmt = stmt.on_conflict_do_update(
                index_elements=[Setting.key_name],
                set_={"value": stmt.excluded["value"], "updated_at": now},
            )
            session.execute(stmt)
            return

        # Generic dialects: no native upsert
        setting = session.query(Setting).filter(Setting.key_name == key).with_for_update().first()
        if setting:
            setting.value = value
            setting.updated_at = now
        else:
            session.add(Setting(key_name=key, value=value))
        session.flush()


def create_settings_store(backend: str = "sql") -> SettingsStore:
    """Build the configured settings store."""
    if backend == "memory":
        logger.warning("Using in-memory settings store, settings will not survive a restart")
        return InMemorySettingsStore()
    if backend == "sql":
        from trustypcs.database import SessionLocal

        return SqlSettingsStore(SessionLocal)
    raise ValueError(f"Unknown settings store backend: {backend}")
