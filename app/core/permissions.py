"""
Row-level authorization for the MySurgeon schema.

Every table carries a list of named policies. A policy is scoped to an
operation class and holds a predicate of (caller, row). For a given table and
operation the applicable permissive policies are OR-ed together; restrictive
policies, if any, must all pass as well. An operation that no policy admits
is denied.

Each predicate can be evaluated two ways from the same definition:

- ``evaluate(caller, row)`` for a single row (dict or ORM object), used for
  writes and single-row checks;
- ``clause(caller, model)`` as a SQLAlchemy expression, used to push the
  filter into ``SELECT ... WHERE`` for list queries.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import enum
import uuid

from sqlalchemy import and_, false, or_, true
from sqlalchemy.sql.elements import ColumnElement


class Operation(str, enum.Enum):
    """Operation classes a policy can be scoped to"""
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    ALL = "all"


class Role(str, enum.Enum):
    """Application roles stored on the profile"""
    PATIENT = "patient"
    SURGEON = "surgeon"
    ADMIN = "admin"


PROVIDER_ROLES = (Role.SURGEON, Role.ADMIN)


@dataclass(frozen=True)
class CallerContext:
    """The authenticated actor issuing a request.

    ``user_id`` is None for anonymous callers. ``role`` is None when the
    caller has no profile.
    """
    user_id: Optional[uuid.UUID] = None
    role: Optional[Role] = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    def has_role(self, *roles: Role) -> bool:
        return self.role is not None and self.role in roles


ANONYMOUS = CallerContext()


def _row_value(row: Any, column: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(column)
    return getattr(row, column, None)


def _same_id(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


class Predicate:
    """A boolean rule over (caller, row)"""

    name = "predicate"

    def evaluate(self, caller: CallerContext, row: Any) -> bool:
        raise NotImplementedError

    def clause(self, caller: CallerContext, model: Any) -> ColumnElement:
        raise NotImplementedError

    def __or__(self, other: "Predicate") -> "Predicate":
        return AnyOf(self, other)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


class Always(Predicate):
    """Unconditionally true"""

    name = "true"

    def evaluate(self, caller, row):
        return True

    def clause(self, caller, model):
        return true()


class IsCaller(Predicate):
    """True when the row column holds the caller's identity id"""

    def __init__(self, column: str):
        self.column = column
        self.name = f"caller = {column}"

    def evaluate(self, caller, row):
        return _same_id(caller.user_id, _row_value(row, self.column))

    def clause(self, caller, model):
        if caller.is_anonymous:
            return false()
        return getattr(model, self.column) == caller.user_id


class CallerHasRole(Predicate):
    """True when the caller's own profile role is one of ``roles``.

    The role comes from the CallerContext, which is resolved once per
    request by the trusted accessor. No profile lookup happens here.
    """

    def __init__(self, *roles: Role):
        self.roles = tuple(roles)
        self.name = "role in (" + ", ".join(r.value for r in self.roles) + ")"

    def evaluate(self, caller, row):
        return caller.has_role(*self.roles)

    def clause(self, caller, model):
        return true() if caller.has_role(*self.roles) else false()


class AnyOf(Predicate):
    """Logical OR of several predicates"""

    def __init__(self, *predicates: Predicate):
        self.predicates = tuple(predicates)
        self.name = " OR ".join(p.name for p in self.predicates)

    def evaluate(self, caller, row):
        return any(p.evaluate(caller, row) for p in self.predicates)

    def clause(self, caller, model):
        return or_(*(p.clause(caller, model) for p in self.predicates))


@dataclass(frozen=True)
class Policy:
    """A named row-level policy on one table"""
    name: str
    table: str
    operations: Tuple[Operation, ...]
    predicate: Predicate
    restrictive: bool = False

    def applies_to(self, operation: Operation) -> bool:
        return Operation.ALL in self.operations or operation in self.operations


def policy(
    name: str,
    table: str,
    operations: Iterable[Operation],
    predicate: Predicate,
    restrictive: bool = False
) -> Policy:
    return Policy(
        name=name,
        table=table,
        operations=tuple(operations),
        predicate=predicate,
        restrictive=restrictive
    )


SELECT = (Operation.SELECT,)
ALL = (Operation.ALL,)

DEFAULT_POLICIES: List[Policy] = [
    # profiles
    policy("Users can view their own profile", "profiles", SELECT, IsCaller("id")),
    policy("Users can update their own profile", "profiles", (Operation.UPDATE,), IsCaller("id")),
    policy("Users can insert their own profile", "profiles", (Operation.INSERT,), IsCaller("id")),
    policy("Surgeons can view other profiles", "profiles", SELECT, CallerHasRole(Role.SURGEON)),
    policy("Admins can view all profiles", "profiles", ALL, CallerHasRole(Role.ADMIN)),

    # patient_details
    policy("Patients can manage their own details", "patient_details", ALL, IsCaller("user_id")),
    policy("Surgeons can view patient details", "patient_details", SELECT, CallerHasRole(*PROVIDER_ROLES)),

    # surgeon_details
    policy("Surgeons can manage their own details", "surgeon_details", ALL, IsCaller("user_id")),
    policy("Public can view surgeon details", "surgeon_details", SELECT, Always()),

    # vital_signs
    policy("Patients can view their own vital signs", "vital_signs", SELECT, IsCaller("patient_id")),
    policy("Patients can insert their own vital signs", "vital_signs", (Operation.INSERT,), IsCaller("patient_id")),
    policy("Healthcare providers can manage vital signs", "vital_signs", ALL, CallerHasRole(*PROVIDER_ROLES)),

    # surgical_history
    policy("Patients can view their own surgical history", "surgical_history", SELECT, IsCaller("patient_id")),
    policy("Surgeons can view and manage surgical history", "surgical_history", ALL, CallerHasRole(*PROVIDER_ROLES)),

    # surgical_cases
    policy("Patients can view their own cases", "surgical_cases", SELECT, IsCaller("patient_id")),
    policy(
        "Surgeons can manage their cases", "surgical_cases", ALL,
        IsCaller("surgeon_id") | CallerHasRole(Role.ADMIN)
    ),

    # historical_surgical_data
    policy("Admins can manage historical data", "historical_surgical_data", ALL, CallerHasRole(Role.ADMIN)),
    policy("Surgeons can view historical data", "historical_surgical_data", SELECT, CallerHasRole(*PROVIDER_ROLES)),
]


class PolicySet:
    """Policies grouped by table, with PostgreSQL RLS combination rules"""

    def __init__(self, policies: Iterable[Policy]):
        self._by_table: Dict[str, List[Policy]] = {}
        for p in policies:
            self._by_table.setdefault(p.table, []).append(p)

    def for_table(self, table: str, operation: Operation) -> List[Policy]:
        return [p for p in self._by_table.get(table, []) if p.applies_to(operation)]

    def _split(self, table: str, operation: Operation):
        applicable = self.for_table(table, operation)
        permissive = [p for p in applicable if not p.restrictive]
        restrictive = [p for p in applicable if p.restrictive]
        return permissive, restrictive

    def matching_policies(
        self,
        table: str,
        operation: Operation,
        caller: CallerContext,
        row: Any
    ) -> List[str]:
        """Names of the permissive policies that admit ``row``"""
        permissive, _ = self._split(table, operation)
        return [p.name for p in permissive if p.predicate.evaluate(caller, row)]

    def accessible(
        self,
        table: str,
        operation: Operation,
        caller: CallerContext,
        row: Any
    ) -> bool:
        permissive, restrictive = self._split(table, operation)
        if not any(p.predicate.evaluate(caller, row) for p in permissive):
            return False
        return all(p.predicate.evaluate(caller, row) for p in restrictive)

    def where_clause(
        self,
        table: str,
        operation: Operation,
        caller: CallerContext,
        model: Any
    ) -> ColumnElement:
        permissive, restrictive = self._split(table, operation)
        if not permissive:
            return false()
        clause = or_(*(p.predicate.clause(caller, model) for p in permissive))
        if restrictive:
            clause = and_(clause, *(p.predicate.clause(caller, model) for p in restrictive))
        return clause

    def with_policies(self, *extra: Policy) -> "PolicySet":
        """Return a new set with ``extra`` policies added"""
        combined = [p for policies in self._by_table.values() for p in policies]
        return PolicySet(combined + list(extra))


default_policy_set = PolicySet(DEFAULT_POLICIES)


def accessible(
    table: str,
    operation: Operation,
    caller: CallerContext,
    row: Any,
    policies: Optional[PolicySet] = None
) -> bool:
    """Decide whether ``caller`` may perform ``operation`` on ``row``"""
    return (policies or default_policy_set).accessible(table, operation, caller, row)
