from typing import Sequence

from shopkeep.domain.models.curation import ShopEntry


def format_item_list(entries: Sequence[ShopEntry]) -> str:
    if not entries:
        return "No items found."

    lines: list[str] = []
    for entry in entries:
        lines.append(f"• **{entry.name}** - {entry.cost:,} gp")
        details = entry.rarity
        if entry.description:
            details = f"{details}; {entry.description}" if details else entry.description
        if details:
            lines.append(f"  *{details}*")
    return "\n".join(lines) + "\n"
