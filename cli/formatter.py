"""Output formatting for replies and transcripts."""

from datetime import datetime
from typing import TextIO

_SENDER_LABELS = {"user": "You", "ai": "Assistant"}


class ResponseFormatter:
    """Writes replies, transcripts and errors to a text stream."""

    def __init__(self, output: TextIO):
        self.output = output

    def reply(self, body: dict) -> None:
        self._print(f"\nAssistant: {body.get('message', '')}\n\n")

    def transcript(self, messages: list[dict]) -> None:
        if not messages:
            self._print("(no messages yet)\n\n")
            return
        for message in messages:
            label = _SENDER_LABELS.get(message.get("sender", ""), "?")
            stamp = _format_timestamp(message.get("timestamp"))
            self._print(f"[{stamp}] {label}: {message.get('text', '')}\n")
        self._print("\n")

    def error(self, message: str) -> None:
        self._print(f"\n❌ Error: {message}\n\n")

    def _print(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()


def _format_timestamp(value: str | None) -> str:
    if not value:
        return "--:--:--"
    try:
        return datetime.fromisoformat(value).strftime("%H:%M:%S")
    except ValueError:
        return value
