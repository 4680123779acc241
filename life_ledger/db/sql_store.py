from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Type

from sqlalchemy import Date, DateTime, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from life_ledger.db.core import Base, RESOURCE_TABLES, StorageError, ConflictError
from life_ledger.db.store import Store, Record, key_field_for
from life_ledger.logging_config import get_logger
from life_ledger.utils.transformation import to_camel_case, to_snake_case, camel_to_snake

logger = get_logger(__name__)

_UPSERT_DIALECTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


class SqlStore(Store):
    """
    Relational backend over the SQLAlchemy session.

    Every record crosses the camelCase/snake_case boundary here and only here:
    incoming records are renamed to column names before they reach the ORM and
    rows are renamed back before they leave.
    """

    def __init__(self, db: Session):
        self.db = db

    # ===== BOUNDARY =====

    @staticmethod
    def _model(resource: str) -> Type[Base]:
        try:
            return RESOURCE_TABLES[resource]
        except KeyError:
            raise StorageError(f"Unknown resource '{resource}'")

    @staticmethod
    def _to_record(row: Base) -> Record:
        values = {}
        for column in row.__table__.columns:
            value = getattr(row, column.key)
            if isinstance(value, (date, datetime)):
                value = value.isoformat()
            values[column.key] = value
        return to_camel_case(values)

    @staticmethod
    def _to_columns(model: Type[Base], record: Record) -> Dict[str, Any]:
        columns = model.__table__.columns
        values = {}
        for name, value in to_snake_case(record).items():
            if name not in columns:
                logger.debug(f"Ignoring unknown field '{name}' for {model.__tablename__}")
                continue
            column_type = columns[name].type
            if isinstance(value, str) and value:
                if isinstance(column_type, DateTime):
                    value = datetime.fromisoformat(value)
                elif isinstance(column_type, Date):
                    value = date.fromisoformat(value[:10])
            values[name] = value
        return values

    def _query(self, model: Type[Base], user_id: Optional[str]):
        query = self.db.query(model)
        if user_id is not None:
            query = query.filter(model.user_id == user_id)
        return query

    @contextmanager
    def _reading(self, resource: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error while reading {resource}: {e}")
            raise StorageError(f"Could not read {resource}") from e

    def _lookup(self, model: Type[Base], key_field: str, key: Any, user_id: Optional[str]):
        column = getattr(model, camel_to_snake(key_field))
        with self._reading(model.__tablename__):
            return self._query(model, user_id).filter(column == key).first()

    def _refreshed(self, row: Base, resource: str) -> Record:
        with self._reading(resource):
            self.db.refresh(row)
        return self._to_record(row)

    def _commit(self, action: str, resource: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"Constraint violation while trying to {action} {resource}: {e.orig}")
            raise ConflictError(f"Could not {action} {resource}: a record with the same key already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error while trying to {action} {resource}: {e}")
            raise StorageError(f"Could not {action} {resource}") from e

    # ===== STORE INTERFACE =====

    def list(self, resource: str, user_id: Optional[str] = None) -> List[Record]:
        model = self._model(resource)
        with self._reading(resource):
            rows = self._query(model, user_id).order_by(model.id).all()
        return [self._to_record(row) for row in rows]

    def list_between(self, resource: str, field: str, start: Any, end: Any,
                     user_id: Optional[str] = None) -> List[Record]:
        model = self._model(resource)
        name = camel_to_snake(field)
        column = getattr(model, name)
        bounds = [self._to_columns(model, {field: bound})[name] for bound in (start, end)]
        with self._reading(resource):
            rows = (self._query(model, user_id)
                    .filter(column.between(*bounds))
                    .order_by(model.id)
                    .all())
        return [self._to_record(row) for row in rows]

    def get(self, resource: str, key: Any, user_id: Optional[str] = None,
            key_field: Optional[str] = None) -> Optional[Record]:
        model = self._model(resource)
        row = self._lookup(model, key_field or key_field_for(resource), key, user_id)
        return self._to_record(row) if row is not None else None

    def insert(self, resource: str, record: Record, user_id: Optional[str] = None) -> Record:
        model = self._model(resource)
        values = self._to_columns(model, record)
        values.pop("id", None)
        if user_id is not None:
            values["user_id"] = user_id
        row = model(**values)
        self.db.add(row)
        self._commit("create", resource)
        return self._refreshed(row, resource)

    def update(self, resource: str, key: Any, changes: Record, user_id: Optional[str] = None,
               key_field: Optional[str] = None) -> Optional[Record]:
        model = self._model(resource)
        field = key_field or key_field_for(resource)
        row = self._lookup(model, field, key, user_id)
        if row is None:
            return None
        protected = {"id", "user_id", camel_to_snake(field)}
        for name, value in self._to_columns(model, changes).items():
            if name not in protected:
                setattr(row, name, value)
        self._commit("update", resource)
        return self._refreshed(row, resource)

    def delete(self, resource: str, key: Any, user_id: Optional[str] = None,
               key_field: Optional[str] = None) -> bool:
        model = self._model(resource)
        row = self._lookup(model, key_field or key_field_for(resource), key, user_id)
        if row is None:
            return False
        self.db.delete(row)
        self._commit("delete", resource)
        return True

    def upsert(self, resource: str, record: Record, conflict_fields: Sequence[str],
               user_id: Optional[str] = None) -> Record:
        model = self._model(resource)
        values = self._to_columns(model, record)
        values.pop("id", None)
        if user_id is not None:
            values["user_id"] = user_id
        conflict_columns = [camel_to_snake(f) for f in conflict_fields]

        insert = _UPSERT_DIALECTS.get(self.db.get_bind().dialect.name)
        if insert is not None:
            # Let the unique constraint arbitrate between concurrent writers
            statement = insert(model).values(**values)
            statement = statement.on_conflict_do_update(
                index_elements=conflict_columns,
                set_={name: statement.excluded[name] for name in values if name not in conflict_columns},
            )
            try:
                self.db.execute(statement)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Database error while upserting {resource}: {e}")
                raise StorageError(f"Could not save {resource}") from e
            self._commit("save", resource)
        else:
            with self._reading(resource):
                existing = self._query(model, user_id).filter(
                    *[getattr(model, name) == values[name] for name in conflict_columns]
                ).first()
            if existing is None:
                self.db.add(model(**values))
            else:
                for name, value in values.items():
                    setattr(existing, name, value)
            self._commit("save", resource)

        statement = select(model).filter_by(**{name: values[name] for name in conflict_columns})
        with self._reading(resource):
            row = self.db.execute(statement).scalar_one()
        return self._to_record(row)
