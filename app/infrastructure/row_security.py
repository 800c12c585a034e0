"""
Policy-enforcing data access.

``RowSecuredRepository`` is the query boundary every table is reached
through. It applies column constraints first, then the row-level policies of
``app.core.permissions``, and checks foreign keys last:

- select: only rows admitted by a select/all policy are returned, with the
  predicate pushed into the SQL ``WHERE`` clause;
- insert: the new row must satisfy an insert/all policy;
- update: the row must be visible and satisfy an update/all policy both
  before and after the change;
- delete: the row must be visible and satisfy a delete/all policy.

Missing rows and denied rows raise the same ``RowAccessDeniedError``. A write
no policy admits is denied whatever it references.
"""

from typing import Any, Dict, List, Optional
import logging
import uuid

from sqlalchemy import select, Uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ConstraintViolationError,
    RowAccessDeniedError,
    translate_integrity_error,
)
from app.core.permissions import CallerContext, Operation, PolicySet, default_policy_set

logger = logging.getLogger(__name__)


class RowSecuredRepository:
    """Base repository for tables protected by row-level policies"""

    model: Any = None

    def __init__(
        self,
        db: AsyncSession,
        caller: CallerContext,
        policies: Optional[PolicySet] = None
    ):
        self.db = db
        self.caller = caller
        self.policies = policies or default_policy_set

    @property
    def table(self) -> str:
        return self.model.__tablename__

    @property
    def _columns(self):
        return self.model.__table__.columns

    @property
    def _primary_key(self):
        return list(self.model.__table__.primary_key.columns)[0]

    # Constraints

    def _violation(self, field: str, message: str, details: Optional[Dict[str, Any]] = None):
        logger.info(f"Constraint violation on {self.table}.{field}: {message}")
        return ConstraintViolationError(field=field, message=message, details=details)

    def _coerce(self, column, value: Any) -> Any:
        if value is None:
            return None

        enum_columns = getattr(self.model, "__enum_columns__", {})
        if column.key in enum_columns:
            enum_cls = enum_columns[column.key]
            try:
                return enum_cls(value).value
            except ValueError:
                raise self._violation(
                    field=column.key,
                    message=f"Invalid value for {column.key}",
                    details={"allowed": [member.value for member in enum_cls]}
                )

        if isinstance(column.type, Uuid) and not isinstance(value, uuid.UUID):
            try:
                return uuid.UUID(str(value))
            except ValueError:
                raise self._violation(
                    field=column.key,
                    message=f"{column.key} must be a UUID"
                )

        return value

    def validate(self, values: Dict[str, Any], for_insert: bool) -> Dict[str, Any]:
        """Check column-level constraints and return normalized values"""
        data = {}
        for key, value in values.items():
            if key not in self._columns:
                raise self._violation(field=key, message=f"Unknown column {key}")

            column = self._columns[key]
            if not for_insert and column.primary_key:
                raise self._violation(field=key, message=f"{key} cannot be changed")

            value = self._coerce(column, value)
            if value is None and not column.nullable:
                raise self._violation(field=key, message=f"{key} may not be null")
            data[key] = value

        if for_insert:
            for column in self._columns:
                required = (
                    not column.nullable
                    and column.default is None
                    and column.server_default is None
                )
                if required and column.key not in data:
                    raise self._violation(field=column.key, message=f"{column.key} is required")

        if data:
            logger.debug(f"Validated {sorted(data)} for {self.table}")
        return data

    async def check_references(self, data: Dict[str, Any]) -> None:
        """Verify foreign keys point at existing rows.

        Runs without row-level filtering, as the database does for its own
        foreign key checks.
        """
        for column in self._columns:
            value = data.get(column.key)
            if value is None:
                continue
            for fk in column.foreign_keys:
                target = fk.column
                result = await self.db.execute(select(target).where(target == value))
                if result.first() is None:
                    raise self._violation(
                        field=column.key,
                        message="Referenced row does not exist"
                    )

    # Policies

    def can(self, operation: Operation, row: Any) -> bool:
        return self.policies.accessible(self.table, operation, self.caller, row)

    def _deny(self, operation: Operation, key: Any = None):
        logger.warning(
            f"Denied {operation.value} on {self.table} for caller {self.caller.user_id}"
        )
        return RowAccessDeniedError(details={"id": str(key)} if key is not None else None)

    def visible(self):
        """Base SELECT restricted to rows the caller may read"""
        clause = self.policies.where_clause(self.table, Operation.SELECT, self.caller, self.model)
        return select(self.model).where(clause)

    def _snapshot(self, row: Any) -> Dict[str, Any]:
        return {column.key: getattr(row, column.key) for column in self._columns}

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise translate_integrity_error(e, self.table) from e

    # CRUD

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        order_by: Any = None,
        **filters: Any
    ) -> List[Any]:
        """List visible rows with optional equality filters"""
        query = self.visible()
        for key, value in filters.items():
            if value is None:
                continue
            if key not in self._columns:
                raise self._violation(field=key, message=f"Unknown column {key}")
            query = query.where(self._columns[key] == self._coerce(self._columns[key], value))

        if order_by is not None:
            query = query.order_by(order_by)
        query = query.offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get(self, key: Any) -> Optional[Any]:
        """Get a visible row by primary key, or None"""
        key = self._coerce(self._primary_key, key)
        result = await self.db.execute(self.visible().where(self._primary_key == key))
        return result.scalar_one_or_none()

    async def get_or_deny(self, key: Any) -> Any:
        row = await self.get(key)
        if row is None:
            raise RowAccessDeniedError(details={"id": str(key)})
        return row

    async def create(self, values: Dict[str, Any]) -> Any:
        """Insert a row if an insert policy admits it"""
        data = self.validate(values, for_insert=True)

        if not self.can(Operation.INSERT, data):
            raise self._deny(Operation.INSERT)

        # References are checked only for writes a policy admits
        await self.check_references(data)

        row = self.model(**data)
        self.db.add(row)
        await self._commit()
        await self.db.refresh(row)
        return row

    async def update(self, key: Any, values: Dict[str, Any]) -> Any:
        """Update a row if update policies admit it before and after"""
        data = self.validate(values, for_insert=False)

        row = await self.get(key)
        if row is None or not self.can(Operation.UPDATE, row):
            raise self._deny(Operation.UPDATE, key)

        new_state = self._snapshot(row)
        new_state.update(data)
        if not self.can(Operation.UPDATE, new_state):
            raise self._deny(Operation.UPDATE, key)

        await self.check_references(data)

        for field, value in data.items():
            setattr(row, field, value)

        await self._commit()
        await self.db.refresh(row)
        return row

    async def delete(self, key: Any) -> None:
        """Delete a row if a delete policy admits it"""
        row = await self.get(key)
        if row is None or not self.can(Operation.DELETE, row):
            raise self._deny(Operation.DELETE, key)

        await self.db.delete(row)
        await self._commit()
