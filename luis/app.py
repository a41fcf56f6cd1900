import asyncio
import logging
from typing import Optional
from luis.core.config import Config
from luis.core.client import LUISClient
from luis.core.contracts import PredictionResult
from luis.core.errors import InputError, LUISError


class NothingToReplyTo(InputError):
    """Raised when reply is asked for without an open dialog."""


def format_result(result: PredictionResult) -> str:
    """Render a prediction the way the demo shows it."""
    lines = [f"Query: {result.query}"]
    top = result.top_scoring_intent
    lines.append(f"Top Intent: {top.intent if top else '(none)'}")
    lines.append("Entities:")
    for i, entity in enumerate(result.entities, start=1):
        lines.append(f"{i}- {entity.entity}")
    if result.dialog is not None:
        lines.append(f"Dialog Status: {result.dialog.status}")
        if not result.dialog.is_finished():
            lines.append(f"Dialog Parameter Name: {result.dialog.parameter_name}")
            lines.append(f"Dialog Prompt: {result.dialog.prompt}")
    return "\n".join(lines)


class DialogSession:
    """
    Caller-side holder of the previous prediction.

    The client itself is stateless; replies continue whatever dialog this
    session last saw. A finished dialog clears it.
    """

    def __init__(self, client: LUISClient):
        self.client = client
        self.previous: Optional[PredictionResult] = None
        self.log = logging.getLogger("session")

    @property
    def can_reply(self) -> bool:
        return self.previous is not None and self.previous.dialog is not None

    async def predict(self, text: str) -> PredictionResult:
        result = await self.client.predict(text)
        self._remember(result)
        return result

    async def reply(self, text: str) -> PredictionResult:
        if not self.can_reply:
            raise NothingToReplyTo("Nothing to reply to!")
        result = await self.client.reply(text, self.previous)
        self._remember(result)
        return result

    def reset(self) -> None:
        self.previous = None

    def _remember(self, result: PredictionResult) -> None:
        if result.dialog is not None and result.dialog.is_finished():
            self.log.info("Dialog %s finished", result.dialog.context_id)
            self.previous = None
        else:
            self.previous = result


async def handle_line(session: DialogSession, line: str) -> str:
    """Run one REPL line and return what to print."""
    command, _, rest = line.partition(" ")
    if command == "/reset":
        session.reset()
        return "Dialog cleared."
    try:
        if command == "/reply":
            result = await session.reply(rest)
        else:
            result = await session.predict(line)
    except LUISError as e:
        return str(e)
    return format_result(result)


async def repl(session: DialogSession) -> None:
    """Tiny REPL: plain text predicts, '/reply TEXT' continues the dialog, '/reset' forgets it."""
    print("\nLUIS Interactive Mode")
    print("Type a query to predict, '/reply <text>' to answer a dialog prompt, '/reset' to drop it. Type 'quit' to exit.")

    while True:
        try:
            print("\n> ", end="", flush=True)
            # input in worker thread to keep event loop responsive
            user_input = await asyncio.to_thread(input)
            user_input = user_input.strip()

            if user_input.lower() in ["quit", "exit", "q"]:
                break

            if user_input:
                print(await handle_line(session, user_input))

        except KeyboardInterrupt:
            break
        except EOFError:
            break


async def main(client: Optional[LUISClient] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    Config.print_config()
    if client is None:
        client = Config.get_client()
    await repl(DialogSession(client))
    print("Stopped.")


if __name__ == "__main__":
    asyncio.run(main())
