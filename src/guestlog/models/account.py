"""Guest account record models."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, StrictStr

from guestlog.store.snowflake import id_to_timestamp, parse_id_str


class GuestUser(BaseModel):
    id_str: StrictStr


class GuestAccount(BaseModel):
    """The only part of a stored record that pruning looks at.

    Any other fields are ignored and preserved verbatim in the raw line.
    """

    user: GuestUser


@dataclass(frozen=True)
class Record:
    """One stored line: raw text plus an on-demand structured view."""

    text: str

    def account(self) -> GuestAccount:
        """Parse the line. Raises ``pydantic.ValidationError`` on bad input."""
        return GuestAccount.model_validate_json(self.text)

    def snowflake_id(self) -> int:
        return parse_id_str(self.account().user.id_str)

    def created_at(self) -> int:
        """Creation time in Unix seconds decoded from the identifier."""
        return id_to_timestamp(self.snowflake_id())
