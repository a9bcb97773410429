"""Tests for embed rendering."""

from __future__ import annotations

from swaprelay.notifications.templates import COLOR_ERROR, Embed, EmbedField, create_embed, swap_alert_embed


def test_swap_alert_embed_shape() -> None:
    embed = swap_alert_embed("W swapped 1 SOL for 5 of `TOK`", "sig-1")

    assert embed.title == "Swap Alert"
    assert embed.color == 3066993
    assert [(f.name, f.value, f.inline) for f in embed.fields] == [("Tx:", "`sig-1`", False)]
    assert embed.footer


def test_payload_omits_empty_footer() -> None:
    payload = Embed(title="t", description="d").to_payload()
    assert "footer" not in payload
    assert payload["fields"] == []


def test_error_color() -> None:
    assert create_embed("Error", "bad", COLOR_ERROR).is_error
    assert not create_embed("Success", "good").is_error


class TestTelegramHtml:
    def test_inline_code_and_escaping(self) -> None:
        embed = Embed(
            title="Swap <Alert>",
            description="W swapped 1 SOL for 5 of `TOK&X`",
            fields=[EmbedField(name="Tx:", value="`sig`")],
            footer="footer",
        )
        assert embed.to_telegram_html() == (
            "<b>Swap &lt;Alert&gt;</b>\n"
            "W swapped 1 SOL for 5 of <code>TOK&amp;X</code>\n"
            "<b>Tx:</b> <code>sig</code>\n"
            "<i>footer</i>"
        )

    def test_code_block(self) -> None:
        embed = Embed(title="Addresses List", description="```A\nB```")
        assert embed.to_telegram_html() == "<b>Addresses List</b>\n<pre>A\nB</pre>"
