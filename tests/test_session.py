import pytest
import httpx

from luis.app import DialogSession, NothingToReplyTo, format_result, handle_line
from luis.core.client import create_client
from luis.core.response import normalize_payload

pytestmark = pytest.mark.asyncio

QUESTION = {
    "query": "book a flight to cairo",
    "topScoringIntent": {"intent": "BookFlight"},
    "entities": [{"entity": "cairo"}, {"entity": "economy"}],
    "dialog": {"status": "Question", "contextId": "ctx-1", "parameterName": "date", "prompt": "When?"},
}
FINISHED = {
    "query": "tomorrow",
    "topScoringIntent": {"intent": "BookFlight"},
    "entities": [],
    "dialog": {"status": "Finished", "contextId": "ctx-1"},
}
PLAIN = {"query": "hello", "intents": [{"intent": "Greeting"}], "entities": []}


@pytest.fixture
def replies():
    """Queue of bodies the fake service returns, in order."""
    return []


@pytest.fixture
def requests():
    return []


@pytest.fixture
def session(replies, requests):
    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=replies.pop(0))

    client = create_client({"app_id": "app1", "app_key": "key1", "preview": True},
                           transport=httpx.MockTransport(handler))
    return DialogSession(client)


async def test_reply_without_previous(session, requests):
    with pytest.raises(NothingToReplyTo, match="Nothing to reply to!"):
        await session.reply("tomorrow")
    assert requests == []


async def test_dialog_round_trip(session, replies, requests):
    replies.extend([QUESTION, FINISHED])

    first = await session.predict("book a flight to cairo")
    assert session.previous is first
    assert session.can_reply

    second = await session.reply("tomorrow")
    assert second.dialog.is_finished()
    assert requests[1].url.params["contextid"] == "ctx-1"
    # finished dialogs are forgotten
    assert session.previous is None
    assert not session.can_reply


async def test_result_without_dialog_cannot_be_replied_to(session, replies):
    replies.append(PLAIN)
    await session.predict("hello")
    assert session.previous is not None
    with pytest.raises(NothingToReplyTo):
        await session.reply("again")


async def test_handle_line_reports_errors(session):
    assert await handle_line(session, "/reply tomorrow") == "Nothing to reply to!"


async def test_handle_line_predicts(session, replies):
    replies.append(PLAIN)
    out = await handle_line(session, "hello")
    assert "Top Intent: Greeting" in out


async def test_format_unfinished_dialog():
    text = format_result(normalize_payload(QUESTION))
    assert text.splitlines() == [
        "Query: book a flight to cairo",
        "Top Intent: BookFlight",
        "Entities:",
        "1- cairo",
        "2- economy",
        "Dialog Status: Question",
        "Dialog Parameter Name: date",
        "Dialog Prompt: When?",
    ]


async def test_format_finished_dialog_hides_prompt():
    text = format_result(normalize_payload(FINISHED))
    assert "Dialog Status: Finished" in text
    assert "Prompt" not in text


async def test_reset_forgets_open_dialog(session, replies, requests):
    replies.append(QUESTION)
    await session.predict("book a flight to cairo")
    assert session.can_reply

    assert await handle_line(session, "/reset") == "Dialog cleared."

    assert session.previous is None
    assert await handle_line(session, "/reply tomorrow") == "Nothing to reply to!"
    assert len(requests) == 1


async def test_handle_line_with_odd_shaped_body(session, replies):
    replies.append({"query": "hello", "intents": 5, "entities": 5})
    out = await handle_line(session, "hello")
    assert out.splitlines()[:3] == ["Query: hello", "Top Intent: (none)", "Entities:"]
