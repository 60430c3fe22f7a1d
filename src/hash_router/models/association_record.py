"""AssociationRecord: a Discord message routed to a trade hash.

Identity is trade_hash (one record per hash); message_id is also unique across
the store. Records are created once and never mutated or deleted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DISCORD_MESSAGE_LINK = "https://discord.com/channels/{guild_id}/{channel_id}/{message_id}"


def _parse_snowflake(row: Mapping[str, Any], field: str) -> int:
    """Read an integer id from a row; accepts JSON numbers and numeric strings."""
    raw = row.get(field)
    if isinstance(raw, bool):
        raise ValueError(f"{field} must be an integer, got bool")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    raise ValueError(f"{field} must be an integer, got {type(raw).__name__}")


@dataclass(frozen=True, slots=True)
class AssociationRecord:
    """Association between a Discord message and the trade hash it announces.

    No range checks happen here; HashRouter validates ids before building a record.
    """

    message_id: int
    """Discord message snowflake."""
    channel_id: int
    """Channel the message was posted in."""
    guild_id: int
    """Guild (server) the channel belongs to."""
    trade_hash: str
    """Opaque trade identifier produced upstream; primary correlation key."""

    def message_link(self) -> str:
        """Return the deep link to the Discord message (used by embeds)."""
        return DISCORD_MESSAGE_LINK.format(
            guild_id=self.guild_id,
            channel_id=self.channel_id,
            message_id=self.message_id,
        )

    def to_row(self) -> dict[str, Any]:
        """Return the record as a hash_router table row."""
        return {
            "message_id": self.message_id,
            "channel_id": self.channel_id,
            "guild_id": self.guild_id,
            "trade_hash": self.trade_hash,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> AssociationRecord:
        """Build a record from a table row. Extra columns (id, created_at) are ignored.

        Raises:
            ValueError: If a column is missing or has the wrong type.
        """
        trade_hash = row.get("trade_hash")
        if not isinstance(trade_hash, str) or not trade_hash:
            raise ValueError("trade_hash must be a non-empty string")
        return cls(
            message_id=_parse_snowflake(row, "message_id"),
            channel_id=_parse_snowflake(row, "channel_id"),
            guild_id=_parse_snowflake(row, "guild_id"),
            trade_hash=trade_hash,
        )
