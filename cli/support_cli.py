"""Main CLI loop for interactive chat."""

import logging
import sys
from typing import TextIO

from .client import ChatAPIClient, ChatAPIError
from .config import CLIConfig
from .formatter import ResponseFormatter

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("exit", "quit", "q")
NEW_COMMAND = "/new"
HISTORY_COMMAND = "/history"


class SupportChatCLI:
    """Interactive CLI for the support chat API.

    Keeps the conversation id returned by the first reply so follow-up
    messages share history.
    """

    def __init__(
        self,
        config: CLIConfig,
        input_stream: TextIO = sys.stdin,
        output_stream: TextIO = sys.stdout,
        client: ChatAPIClient | None = None,
    ):
        self.config = config
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.client = client or ChatAPIClient(config)
        self.formatter = ResponseFormatter(output_stream)
        self.conversation_id: str | None = None

    async def run(self) -> None:
        """Run the interactive CLI loop."""
        try:
            self._print_welcome()
            while True:
                try:
                    line = self._get_user_input()
                    if not line.strip():
                        continue

                    command = line.strip().lower()
                    if command in EXIT_COMMANDS:
                        self._print("Goodbye!\n")
                        break
                    if command == NEW_COMMAND:
                        self.conversation_id = None
                        self._print("Started a new conversation.\n\n")
                        continue
                    if command == HISTORY_COMMAND:
                        await self._show_history()
                        continue

                    await self._send(line)

                except KeyboardInterrupt:
                    self._print("\n\nInterrupted. Use 'exit' or 'quit' to exit.\n")
                except EOFError:
                    self._print("\nGoodbye!\n")
                    break
        finally:
            await self.client.close()

    async def _send(self, message: str) -> None:
        try:
            body = await self.client.send(message, self.conversation_id)
        except ChatAPIError as e:
            self.formatter.error(str(e))
            return
        self.conversation_id = body.get("conversationId", self.conversation_id)
        self.formatter.reply(body)

    async def _show_history(self) -> None:
        if self.conversation_id is None:
            self._print("No conversation yet. Send a message first.\n\n")
            return
        try:
            messages = await self.client.history(self.conversation_id)
        except ChatAPIError as e:
            self.formatter.error(str(e))
            return
        self.formatter.transcript(messages)

    def _get_user_input(self) -> str:
        self._print("> ")
        line = self.input_stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n\r")

    def _print_welcome(self) -> None:
        self._print("Support Chat CLI\n")
        self._print(f"Connected to: {self.config.chat_url}\n")
        self._print(
            "Type your message and press Enter. "
            "'/new' starts a new conversation, '/history' shows the transcript, "
            "'exit' quits.\n\n"
        )

    def _print(self, text: str) -> None:
        self.output_stream.write(text)
        self.output_stream.flush()


async def main(
    host: str = "localhost",
    port: int = 8080,
    api_prefix: str = "/api",
    debug: bool = False,
) -> None:
    """Main entry point for the CLI."""
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    config = CLIConfig(host=host, port=port, api_prefix=api_prefix)
    cli = SupportChatCLI(config)
    await cli.run()
