"""
Terminal and JSON renderers for almanax entries.

All formatters accept a list of ``AlmanaxEntry`` and return plain strings
suitable for ``typer.echo()``. No third-party dependencies (no ``rich``).

Table layout::

  Date        Bonus                 Offering                     Kamas       XP
  ----------  --------------------  ---------------------------  -----  -------
  2024-05-01  Pet's                 10 x Gobball Wool              500     1000
"""

from __future__ import annotations

import json

from dofus_almanax.models.almanax import AlmanaxEntry

_BONUS_WIDTH = 20
_OFFERING_WIDTH = 27


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def format_entries_table(entries: list[AlmanaxEntry], show_images: bool = False) -> str:
    """Format entries as a fixed-width ASCII table, one row per day.

    Args:
        entries:     Canonical entries in display order.
        show_images: Append an ``Image:`` line under each row.

    Returns:
        The table, or a one-line notice when ``entries`` is empty.
    """
    if not entries:
        return "  No almanax entries available."

    header = (
        f"  {'Date':<10}  {'Bonus':<{_BONUS_WIDTH}}  {'Offering':<{_OFFERING_WIDTH}}"
        f"  {'Kamas':>7}  {'XP':>9}"
    )
    rule = (
        f"  {'-' * 10}  {'-' * _BONUS_WIDTH}  {'-' * _OFFERING_WIDTH}"
        f"  {'-' * 7}  {'-' * 9}"
    )
    lines = [header, rule]
    for entry in entries:
        offering = _clip(f"{entry.quantity} x {entry.loot}", _OFFERING_WIDTH)
        lines.append(
            f"  {entry.date:<10}  {_clip(entry.bonus, _BONUS_WIDTH):<{_BONUS_WIDTH}}"
            f"  {offering:<{_OFFERING_WIDTH}}"
            f"  {entry.reward_kamas:>7}  {entry.reward_xp:>9}"
        )
        if entry.description:
            lines.append(f"  {'':<10}  {entry.description}")
        if show_images:
            lines.append(f"  {'':<10}  Image: {entry.image or '(none)'}")
    return "\n".join(lines)


def entries_to_json(entries: list[AlmanaxEntry], indent: int | None = 2) -> str:
    """Serialise entries as a JSON array with snake_case keys."""
    return json.dumps([entry.model_dump() for entry in entries], indent=indent, ensure_ascii=False)
