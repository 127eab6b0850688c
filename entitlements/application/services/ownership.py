"""Ownership filter: restricts row visibility and mutation to the creating actor.

Helpers are applied by business modules at four points:

- apply_ownership_predicate on every row-returning query,
- check_ownership / assert_ownership before an update or delete,
- assign_owner on creation,
- strip_owner on every update payload, so the owner is never rewritten.

Elevated actors see and mutate every row but are still recorded as owner of
what they create.

Actor ids are strings. Owner columns of another type (e.g. an integer
``created_by``) are compared against the actor id converted to the column's
Python type; an actor id that does not convert owns nothing there.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from sqlalchemy import Select, false

from entitlements.application.dtos.actor import Actor
from entitlements.domain.decisions import AccessDecision, DenialReason

_Draft = TypeVar("_Draft")


class OwnershipFilter:
    """Row gate keyed on a single owner attribute (default ``owner_id``)."""

    def __init__(self, owner_attribute: str = "owner_id") -> None:
        self.owner_attribute = owner_attribute

    def apply_ownership_predicate(
        self, actor: Actor, query: Select, owner_column: Any = None
    ) -> Select:
        """Return query unchanged for elevated actors, else add ``owner = actor.id``.

        owner_column defaults to the owner attribute of the query's first entity.
        """
        if actor.is_elevated:
            return query
        if owner_column is None:
            owner_column = self._owner_column(query)
        owner = _coerce_owner(actor.id, owner_column)
        if owner is None:
            return query.where(false())
        return query.where(owner_column == owner)

    def check_ownership(
        self, actor: Actor, row: Any, resource_type: str | None = None
    ) -> AccessDecision:
        """Allow if elevated or the row's owner is the actor; otherwise Deny(ownership)."""
        if actor.is_elevated:
            return AccessDecision.allow(elevated=True)
        owner = self._owner_of(row)
        if owner is not None and str(owner) == actor.id:
            return AccessDecision.allow()
        return AccessDecision.deny(DenialReason.ownership(resource_type))

    def assert_ownership(
        self, actor: Actor, row: Any, resource_type: str | None = None
    ) -> None:
        """Raise OwnershipDeniedException unless check_ownership allows."""
        self.check_ownership(actor, row, resource_type).raise_if_denied()

    def assign_owner(self, actor: Actor, draft: _Draft) -> _Draft:
        """Overwrite the draft's owner with actor.id, ignoring any client value.

        Mappings are copied (a new dict is returned); objects are updated in place.
        """
        if isinstance(draft, Mapping):
            return {**draft, self.owner_attribute: actor.id}  # type: ignore[return-value]
        column = getattr(type(draft), self.owner_attribute, None)
        owner = _coerce_owner(actor.id, column)
        if owner is None:
            raise ValueError(
                f"Actor id {actor.id!r} cannot be stored in {self.owner_attribute!r}"
            )
        setattr(draft, self.owner_attribute, owner)
        return draft

    def strip_owner(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of an update payload without the owner attribute."""
        return {k: v for k, v in changes.items() if k != self.owner_attribute}

    def _owner_of(self, row: Any) -> Any:
        if isinstance(row, Mapping):
            return row.get(self.owner_attribute)
        return getattr(row, self.owner_attribute, None)

    def _owner_column(self, query: Select) -> Any:
        descriptions = query.column_descriptions
        entity = descriptions[0].get("entity") if descriptions else None
        column = getattr(entity, self.owner_attribute, None) if entity else None
        if column is None:
            raise ValueError(
                f"Cannot derive owner column {self.owner_attribute!r} from query; "
                "pass owner_column explicitly"
            )
        return column


def _coerce_owner(actor_id: str, column: Any) -> Any:
    """actor_id as the column's Python type; None if it does not convert."""
    try:
        python_type = column.type.python_type
    except (AttributeError, NotImplementedError):
        return actor_id
    if python_type is str:
        return actor_id
    try:
        return python_type(actor_id)
    except (TypeError, ValueError):
        return None
