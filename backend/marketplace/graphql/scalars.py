"""
Marketplace Backend — Date Scalar
==================================

What:  The `Date` custom scalar: epoch milliseconds on the wire, timezone-aware
       `datetime` inside the service.
How:   `Date` annotates fields; `DateScalar` is registered for it through the
       schema's `scalar_map`.

Coercion rules:
    serialize      datetime            → int ms   | anything else → TypeMismatchError
    parse_value    int / float (vars)  → datetime | anything else → TypeMismatchError
    parse_literal  Int literal (inline)→ datetime | any other literal → None

A bad variable is rejected; a bad inline literal becomes null.

Conversion is done with integer timedelta arithmetic against the epoch, so
`serialize(parse_value(n)) == n` holds exactly for every integer n.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, NewType, Optional

import strawberry
from graphql import IntValueNode, ValueNode

from marketplace.exceptions import TypeMismatchError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_MS = timedelta(milliseconds=1)


def to_epoch_millis(value: Any) -> int:
    """Outgoing: datetime → integer milliseconds since the epoch."""
    # bool/int/str and plain `date` objects are not datetimes
    if not isinstance(value, datetime):
        raise TypeMismatchError(expected="a datetime", received=value)
    if value.tzinfo is None:
        # SQLite hands back naive datetimes; everything is stored as UTC
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // ONE_MS


def from_epoch_millis(value: Any) -> datetime:
    """Incoming variable: number of milliseconds → datetime (UTC)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatchError(expected="a number", received=value)
    if isinstance(value, float):
        return EPOCH + timedelta(milliseconds=value)
    return EPOCH + value * ONE_MS


def parse_date_literal(
    node: ValueNode,
    variables: Optional[Dict[str, Any]] = None,
) -> Optional[datetime]:
    """Incoming inline literal: only Int literals convert; the rest is null."""
    if isinstance(node, IntValueNode):
        return from_epoch_millis(int(node.value, 10))
    return None


Date = NewType("Date", datetime)

DateScalar = strawberry.scalar(
    name="Date",
    description="Date custom scalar type (milliseconds since the Unix epoch)",
    serialize=to_epoch_millis,
    parse_value=from_epoch_millis,
    parse_literal=parse_date_literal,
)
