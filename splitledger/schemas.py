"""
Request payloads accepted by the HTTP API.

Keys are camelCase on the wire and snake_case in Python.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class AddMemberRequest(_Payload):
    name: str = Field(..., min_length=1, description="Display name, not necessarily unique")

    @field_validator("name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class SplitInput(_Payload):
    member_id: int
    amount: Decimal = Field(..., ge=0)


class AddExpenseRequest(_Payload):
    description: str = ""
    amount: Decimal = Field(..., gt=0)
    payer_id: int
    splits: List[SplitInput] = Field(..., min_length=1)


class AddEqualExpenseRequest(_Payload):
    description: str = ""
    amount: Decimal = Field(..., gt=0)
    payer_id: int
    member_ids: List[int]


# =============================================================================
# STATELESS CALCULATION
# =============================================================================


class MemberInput(_Payload):
    id: int
    name: str


class ExpenseInput(_Payload):
    """
    One expense of a posted snapshot.

    Either ``splits`` lists explicit shares, or ``involved`` names the members
    who share the amount equally.
    """

    id: int
    payer_id: int
    amount: Decimal = Field(..., gt=0)
    splits: Optional[List[SplitInput]] = None
    involved: Optional[List[int]] = None

    @model_validator(mode="after")
    def validate_split_source(self) -> "ExpenseInput":
        if (self.splits is None) == (self.involved is None):
            raise ValueError("exactly one of 'splits' or 'involved' is required")
        if self.involved is not None and not self.involved:
            raise ValueError("'involved' must name at least one member")
        return self


class CalculateRequest(_Payload):
    members: List[MemberInput]
    expenses: List[ExpenseInput] = Field(default_factory=list)
