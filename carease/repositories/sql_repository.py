import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from extensions import db
from carease.errors import ConcurrentUpdateError, DuplicateRecordError, NotFoundError
from carease.repositories.base import Repository, T


logger = logging.getLogger("sql_repository")


class SqlRepository(Repository[T]):
    """Repository over a Flask-SQLAlchemy model. Needs an app context."""

    def __init__(self, name: str, model, parse):
        super().__init__(name, parse)
        self.model = model

    def _to_record(self, row) -> T:
        return self.parse({c.name: getattr(row, c.name) for c in row.__table__.columns})

    def all(self) -> List[T]:
        return [self._to_record(row) for row in self.model.query.all()]

    def get(self, record_id: str) -> Optional[T]:
        row = db.session.get(self.model, record_id)
        return self._to_record(row) if row else None

    def find(self, **criteria) -> List[T]:
        return [self._to_record(row) for row in self.model.query.filter_by(**criteria).all()]

    def count(self) -> int:
        return self.model.query.count()

    def add(self, record: T) -> T:
        columns = {c.name for c in self.model.__table__.columns}
        values = {k: v for k, v in record.model_dump().items() if k in columns}
        values.pop("version", None)
        row = self.model(**values)
        try:
            db.session.add(row)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            logger.warning(f"[{self.name}.add] integrity_error id={record.id}: {e.orig}")
            raise DuplicateRecordError(f"{self.name} record violates a uniqueness rule") from e
        except Exception:
            db.session.rollback()
            logger.exception(f"[{self.name}.add] Failed for id={record.id}")
            raise
        return self._to_record(row)

    def update(self, record_id: str, expected_version: Optional[int] = None, **fields) -> T:
        row = db.session.get(self.model, record_id)
        if row is None:
            raise NotFoundError(f"{self.name} record {record_id} not found")
        if expected_version is not None and row.version != expected_version:
            raise ConcurrentUpdateError(
                f"{self.name} record {record_id} is at version {row.version}, not {expected_version}"
            )

        for key, value in fields.items():
            setattr(row, key, value)

        try:
            db.session.commit()
        except StaleDataError as e:
            # Another writer bumped the version between our read and this UPDATE.
            db.session.rollback()
            raise ConcurrentUpdateError(f"{self.name} record {record_id} was modified concurrently") from e
        except IntegrityError as e:
            db.session.rollback()
            raise DuplicateRecordError(f"{self.name} record violates a uniqueness rule") from e
        except Exception:
            db.session.rollback()
            logger.exception(f"[{self.name}.update] Failed for id={record_id} fields={list(fields)}")
            raise
        return self._to_record(row)
