"""Main CLI loop for asking questions about one CSV file."""

import logging
import sys
from pathlib import Path
from typing import TextIO

import httpx

from .client import ChatAPIClient
from .config import CLIConfig
from .formatter import ResponseFormatter

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("exit", "quit", "q")
RESET_COMMAND = "/reset"


class CsvChatCLI:
    """Interactive CLI: one CSV upload, many questions."""

    def __init__(
        self,
        config: CLIConfig,
        csv_content: str,
        input_stream: TextIO = sys.stdin,
        output_stream: TextIO = sys.stdout,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the CLI.

        Parameters
        ----------
        config
            CLI configuration.
        csv_content
            Raw text of the loaded CSV file.
        input_stream
            Input stream for user input (default: stdin).
        output_stream
            Output stream for responses (default: stdout).
        transport
            Optional httpx transport, used to point the client at an
            in-process app.
        """
        self.config = config
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.client = ChatAPIClient(config, csv_content, transport=transport)
        self.formatter = ResponseFormatter(output_stream)

    async def run(self) -> None:
        """Run the interactive CLI loop."""
        try:
            self._print_welcome()
            while True:
                try:
                    query = self._get_user_input().strip()
                    if not query:
                        continue

                    if query.lower() in EXIT_COMMANDS:
                        self._print("Goodbye!\n")
                        break

                    if query.lower() == RESET_COMMAND:
                        self.client.history.clear()
                        self._print("Conversation cleared.\n\n")
                        continue

                    await self._process_query(query)

                except KeyboardInterrupt:
                    self._print("\n\nInterrupted. Use 'exit' or 'quit' to exit.\n")
                except EOFError:
                    self._print("\nGoodbye!\n")
                    break
        finally:
            await self.client.close()

    async def _process_query(self, query: str) -> None:
        """Send one question and render the outcome."""
        self._print("Analyzing...\n")
        reply = await self.client.ask(query)
        if reply.ok:
            self.formatter.show_answer(reply.text)
        else:
            self.formatter.show_error(reply.error, reply.status_code)
        self._print("\n")

    def _get_user_input(self) -> str:
        self._print("> ")
        line = self.input_stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n\r")

    def _print_welcome(self) -> None:
        csv_lines = self.client.csv_content.strip().splitlines()
        self._print("csvchat - Ask questions about your CSV data\n")
        self._print(f"Connected to: {self.config.chat_url}\n")
        self._print(f"Loaded {max(len(csv_lines) - 1, 0)} data rows.\n")
        self._print(
            "Type a question and press Enter. "
            f"'{RESET_COMMAND}' clears the conversation, 'exit' quits.\n\n"
        )

    def _print(self, text: str) -> None:
        self.output_stream.write(text)
        self.output_stream.flush()


def read_csv_file(path: Path) -> str:
    """Read *path* as text, dropping a byte-order mark; sent otherwise verbatim."""
    return path.read_text(encoding="utf-8-sig")


async def main(
    csv_path: Path,
    host: str = "localhost",
    port: int = 8080,
    api_path: str = "/api/v1/chat",
    debug: bool = False,
) -> None:
    """Main entry point for the CLI.

    Parameters
    ----------
    csv_path
        CSV file to discuss.
    host
        Server host.
    port
        Server port.
    api_path
        API path.
    debug
        Enable debug logging.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    config = CLIConfig(host=host, port=port, api_path=api_path)
    cli = CsvChatCLI(config, read_csv_file(csv_path))
    await cli.run()
