"""Tests for the alternate responder and its local fallback."""
import asyncio
import json

import httpx
import pytest

from whodunit.config import ResponderConfig
from whodunit.domain.enums import SecretType
from whodunit.investigation.actions import ask_with_responder
from whodunit.investigation.results import ReplySource
from whodunit.presentation.evidence import DisclosureRecord
from whodunit.responder import ResponderClient, ResponderError, build_system_prompt, parse_reply

CHAT_URL = "http://responder.test/api/chat"


def _client(handler):
    config = ResponderConfig(base_url=CHAT_URL, timeout=2.0, enabled=True)
    return ResponderClient(config, transport=httpx.MockTransport(handler))


def _reply(text):
    def handler(request):
        return httpx.Response(200, json={"content": [{"type": "text", "text": text}]})

    return handler


def test_reveal_tag_is_stripped():
    parsed = parse_reply("I'm the family lawyer. [REVEAL:NAME]")
    assert parsed.text == "I'm the family lawyer."
    assert parsed.evidence_update.name_revealed is True
    assert parsed.disclosure is None


def test_unknown_reveal_category_is_ignored():
    parsed = parse_reply("Hmm. [REVEAL:SHOES]")
    assert parsed.text == "Hmm."
    assert parsed.evidence_update is None


def test_secret_tag_takes_the_stored_category(case):
    speaker, other = case.characters[0], case.characters[1]
    relationship = speaker.facts.relationship_with(other.id)
    parsed = parse_reply(f"Between us... [SECRET:{other.id}:{relationship.secret}]", speaker)
    assert parsed.text == "Between us..."
    assert parsed.disclosure.about_character_id == other.id
    assert parsed.disclosure.info == relationship.secret
    assert parsed.disclosure.info_type == relationship.secret_type


def test_secret_tag_without_speaker_is_general():
    parsed = parse_reply("Ask the cook. [SECRET:sarah:She hid the key]")
    assert parsed.disclosure.info_type == SecretType.GENERAL


def test_system_prompt_carries_the_facts(case):
    guilty = case.guilty
    innocent = case.others(guilty.id)[0]
    record = DisclosureRecord(
        from_character_id=innocent.id,
        about_character_id=guilty.id,
        info="They were seen in the garden",
    )
    prompt = build_system_prompt(guilty, case, [record])
    assert guilty.suspect.name in prompt
    assert guilty.facts.alibi.description in prompt
    assert "YES. You killed" in prompt
    assert f'{innocent.suspect.name} told the detective: "They were seen in the garden"' in prompt

    innocent_prompt = build_system_prompt(innocent, case)
    assert "You are innocent" in innocent_prompt
    assert "EVIDENCE PRESENTED AGAINST YOU" not in innocent_prompt


def test_responder_answer_is_folded_into_the_ledger(case, ledger):
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        return httpx.Response(
            200, json={"content": [{"text": "I was by the study door. [REVEAL:OPPORTUNITY]"}]}
        )

    target = case.characters[1]
    result = asyncio.run(
        ask_with_responder("Where were you?", target.id, case, ledger, _client(handler))
    )
    assert result.source == ReplySource.RESPONDER
    assert result.text == "I was by the study door."
    assert ledger.evidence_for(target.id).opportunity_revealed is True
    assert ledger.questions_asked == 1
    assert requests[0]["messages"][-1] == {"role": "user", "content": "Where were you?"}
    assert target.suspect.name in requests[0]["system"]


def test_history_is_sent_with_the_next_question(case, ledger):
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        return httpx.Response(200, json={"content": [{"text": "Indeed."}]})

    target = case.characters[0]
    client = _client(handler)
    asyncio.run(ask_with_responder("First?", target.id, case, ledger, client))
    asyncio.run(ask_with_responder("Second?", target.id, case, ledger, client))
    assert requests[1]["messages"] == [
        {"role": "user", "content": "First?"},
        {"role": "assistant", "content": "Indeed."},
        {"role": "user", "content": "Second?"},
    ]


def test_secret_about_unknown_character_is_dropped(case, ledger):
    target = case.characters[0]
    client = _client(_reply("Ask the gardener. [SECRET:ghost:Walks at night]"))
    result = asyncio.run(ask_with_responder("Anything odd?", target.id, case, ledger, client))
    assert result.text == "Ask the gardener."
    assert ledger.disclosures == []


def test_network_failure_falls_back_to_local_engine(case, ledger):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    target = case.characters[0]
    result = asyncio.run(
        ask_with_responder("What is your name?", target.id, case, ledger, _client(handler))
    )
    assert result.source == ReplySource.LOCAL
    assert target.suspect.name in result.text
    assert ledger.questions_asked == 1


def test_malformed_payload_falls_back(case, ledger):
    def handler(request):
        return httpx.Response(200, json={"unexpected": True})

    target = case.characters[0]
    result = asyncio.run(
        ask_with_responder("Lovely weather.", target.id, case, ledger, _client(handler))
    )
    assert result.source == ReplySource.LOCAL
    assert result.text.strip()


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, content=b"not json"),
        httpx.Response(200, json={"content": []}),
        httpx.Response(200, json={"content": [{"text": "[REVEAL:NAME]"}]}),
    ],
)
def test_client_raises_typed_errors(case, response):
    client = _client(lambda request: response)
    with pytest.raises(ResponderError):
        asyncio.run(client.respond("Hello?", case.characters[0], case))


def test_disabled_client_is_never_called(case, ledger):
    def handler(request):
        raise AssertionError("backend should not be contacted")

    config = ResponderConfig(base_url=CHAT_URL, enabled=False)
    client = ResponderClient(config, transport=httpx.MockTransport(handler))
    result = asyncio.run(
        ask_with_responder("What is your name?", case.characters[0].id, case, ledger, client)
    )
    assert result.source == ReplySource.LOCAL


def test_health_check(case):
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(200, json={"status": "ok"})

    assert asyncio.run(_client(handler).is_available()) is True
    assert seen == ["/api/health"]


def test_health_check_swallows_network_errors():
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    assert asyncio.run(_client(handler).is_available()) is False


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("WHODUNIT_RESPONDER_URL", CHAT_URL)
    monkeypatch.setenv("WHODUNIT_RESPONDER_TIMEOUT", "3.5")
    monkeypatch.setenv("WHODUNIT_RESPONDER_ENABLED", "yes")
    config = ResponderConfig.from_env()
    assert config == ResponderConfig(base_url=CHAT_URL, timeout=3.5, enabled=True)


def test_unusable_url_falls_back_to_local_engine(case, ledger):
    config = ResponderConfig(base_url="http://exa\x00mple.com/api/chat", enabled=True)
    client = ResponderClient(config)
    with pytest.raises(ResponderError):
        asyncio.run(client.respond("Hello?", case.characters[0], case))
    assert asyncio.run(client.is_available()) is False

    target = case.characters[0]
    result = asyncio.run(
        ask_with_responder("What is your name?", target.id, case, ledger, client)
    )
    assert result.source == ReplySource.LOCAL
    assert target.suspect.name in result.text
