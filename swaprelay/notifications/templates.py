from __future__ import annotations

import html
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from swaprelay.core.config import settings

COLOR_SUCCESS = 3066993
COLOR_ERROR = 0xFF0000


@dataclass
class EmbedField:
    name: str
    value: str
    inline: bool = False


@dataclass
class Embed:
    """Chat-agnostic rich message (Discord embed shape)."""

    title: str
    description: str
    color: int = COLOR_SUCCESS
    fields: List[EmbedField] = field(default_factory=list)
    footer: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_error(self) -> bool:
        return self.color == COLOR_ERROR

    def to_payload(self) -> dict:
        payload = {
            "title": self.title,
            "color": self.color,
            "description": self.description,
            "fields": [{"name": f.name, "value": f.value, "inline": f.inline} for f in self.fields],
            "timestamp": self.timestamp.isoformat(),
        }
        if self.footer:
            payload["footer"] = {"text": self.footer}
        return payload

    def to_telegram_html(self) -> str:
        lines = [f"<b>{html.escape(self.title)}</b>", _markdown_code_to_html(self.description)]
        for f in self.fields:
            lines.append(f"<b>{html.escape(f.name)}</b> {_markdown_code_to_html(f.value)}")
        if self.footer:
            lines.append(f"<i>{html.escape(self.footer)}</i>")
        return "\n".join(lines)


def _markdown_code_to_html(text: str) -> str:
    """Render ```block``` and `inline` code spans as Telegram HTML."""
    out: List[str] = []
    if text.startswith("```") and text.endswith("```") and len(text) >= 6:
        return f"<pre>{html.escape(text[3:-3])}</pre>"
    for i, part in enumerate(text.split("`")):
        # odd parts sit between backticks
        out.append(f"<code>{html.escape(part)}</code>" if i % 2 else html.escape(part))
    return "".join(out)


def create_embed(title: str, description: str, color: int = COLOR_SUCCESS) -> Embed:
    return Embed(title=title, description=description, color=color, footer=settings.ALERT_FOOTER_TEXT)


def swap_alert_embed(description: str, signature: str) -> Embed:
    embed = create_embed("Swap Alert", description)
    embed.fields.append(EmbedField(name="Tx:", value=f"`{signature}`", inline=False))
    return embed
