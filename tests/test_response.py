import json
import pytest

from luis.core.contracts import Intent, DialogState
from luis.core.errors import ProtocolError
from luis.core.response import normalize_response, normalize_payload


def test_top_scoring_intent_fills_intents():
    result = normalize_response(json.dumps({"query": "hi", "topScoringIntent": {"intent": "X"}, "entities": []}))
    assert result.intents == [Intent(intent="X")]
    assert result.to_dict()["intents"] == [{"intent": "X"}]
    assert result.top_scoring_intent.intent == "X"


def test_intents_fill_top_scoring_intent():
    result = normalize_response(json.dumps({"intents": [{"intent": "Y", "score": 0.9}, {"intent": "None", "score": 0.1}]}))
    assert result.top_scoring_intent == Intent(intent="Y", score=0.9)
    assert result.to_dict()["topScoringIntent"] == {"intent": "Y", "score": 0.9}
    assert len(result.intents) == 2


def test_both_intent_forms_are_kept():
    payload = {
        "topScoringIntent": {"intent": "A", "score": 0.8},
        "intents": [{"intent": "A", "score": 0.8}, {"intent": "B", "score": 0.2}],
    }
    result = normalize_payload(payload)
    assert [i.intent for i in result.intents] == ["A", "B"]
    assert result.top_scoring_intent.intent == "A"


def test_no_intents_at_all():
    result = normalize_response('{"query": "hello", "entities": []}')
    assert result.top_scoring_intent is None
    assert result.intents == []
    assert "topScoringIntent" not in result.to_dict()


def test_finished_dialog():
    result = normalize_response(json.dumps({"dialog": {"status": "Finished", "contextId": "c1"}}))
    assert result.dialog.is_finished()
    assert result.dialog.finished
    assert result.dialog.context_id == "c1"
    assert result.to_dict()["dialog"]["isFinished"] is True


def test_running_dialog():
    body = {
        "dialog": {
            "status": "Question",
            "contextId": "c2",
            "parameterName": "location",
            "prompt": "Where would you like to go?",
        }
    }
    result = normalize_response(json.dumps(body))
    assert not result.dialog.is_finished()
    assert result.dialog.parameter_name == "location"
    assert result.dialog.prompt == "Where would you like to go?"
    assert DialogState.from_dict({"status": "Running"}).is_finished() is False


def test_entities_pass_through():
    body = {
        "query": "book a flight to cairo",
        "entities": [{"entity": "cairo", "type": "Location", "startIndex": 17, "endIndex": 21, "score": 0.95, "extra": 1}],
    }
    result = normalize_response(json.dumps(body).encode())
    entity = result.entities[0]
    assert entity.entity == "cairo"
    assert entity.type == "Location"
    assert entity.start_index == 17
    assert result.to_dict()["entities"][0]["extra"] == 1


@pytest.mark.parametrize("body", [None, "", b""])
def test_empty_body(body):
    with pytest.raises(ProtocolError, match="Invalid Application Id"):
        normalize_response(body)


def test_malformed_json():
    with pytest.raises(ProtocolError):
        normalize_response("{not json")


def test_non_object_json():
    with pytest.raises(ProtocolError):
        normalize_response("[1, 2, 3]")


def test_status_code_envelope():
    with pytest.raises(ProtocolError, match="Invalid Subscription Key"):
        normalize_response('{"statusCode": 401, "message": "Access denied"}')


def test_non_list_intents_and_entities_pass_through():
    result = normalize_response('{"query": "x", "intents": 5, "entities": "none", "dialog": 3}')
    assert result.intents == []
    assert result.entities == []
    assert result.top_scoring_intent is None
    assert result.dialog is None
    out = result.to_dict()
    assert out["intents"] == 5
    assert out["entities"] == "none"
    assert out["dialog"] == 3


def test_non_dict_items_pass_through():
    result = normalize_response('{"query": "x", "intents": ["Greeting"], "entities": ["cairo", {}]}')
    assert result.top_scoring_intent.intent == ""
    out = result.to_dict()
    assert out["intents"] == ["Greeting"]
    assert out["topScoringIntent"] == "Greeting"
    assert out["entities"] == ["cairo", {}]
