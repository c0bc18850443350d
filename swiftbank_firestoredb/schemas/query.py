import json
from typing import Any, Literal, Sequence, Union

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from pydantic import BaseModel, Field


class Where(BaseModel):
    kind: Literal["where"] = "where"
    field: str
    op: str
    value: Any

    def apply(self, query):
        return query.where(filter=FieldFilter(self.field, self.op, self.value))


class OrderBy(BaseModel):
    kind: Literal["orderBy"] = "orderBy"
    field: str
    direction: Literal["asc", "desc"] = "asc"

    def apply(self, query):
        direction = firestore.Query.DESCENDING if self.direction == "desc" else firestore.Query.ASCENDING
        return query.order_by(self.field, direction=direction)


class Limit(BaseModel):
    kind: Literal["limit"] = "limit"
    count: int = Field(gt=0)

    def apply(self, query):
        return query.limit(self.count)


QueryConstraint = Union[Where, OrderBy, Limit]


def where(field: str, op: str, value: Any) -> Where:
    return Where(field=field, op=op, value=value)


def order_by(field: str, direction: str = "asc") -> OrderBy:
    return OrderBy(field=field, direction=direction)


def limit(count: int) -> Limit:
    return Limit(count=count)


def apply_constraints(query, constraints: Sequence[QueryConstraint]):
    for constraint in constraints:
        query = constraint.apply(query)
    return query


def constraints_signature(constraints: Sequence[QueryConstraint]) -> str:
    """JSON form of the constraints, in the order given."""
    return json.dumps([constraint.model_dump(mode="json") for constraint in constraints], default=str)
