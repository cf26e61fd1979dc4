"""
Tests for rule matching end to end.
"""

import logging

import pytest

from core.rules import RuleEngine, get_rule_engine


@pytest.fixture
def engine():
    return RuleEngine(cache_size=16)


def test_intent_rule(engine, context_factory):
    """#weather holds exactly when the intent is weather."""
    assert engine.matches("#weather", context_factory(intent="weather"))
    assert not engine.matches("#weather", context_factory(intent="music"))
    assert not engine.matches("#weather", context_factory(request_type="LaunchRequest"))


def test_session_string_rule(engine, context_factory):
    """session.count == '3' holds when the session holds the string "3"."""
    assert engine.matches("session.count == '3'", context_factory(attributes={"count": "3"}))
    assert not engine.matches("session.count == '3'", context_factory(attributes={"count": "4"}))
    assert not engine.matches("session.count == '3'", context_factory(attributes={}))


def test_slot_rule(engine, context_factory):
    ctx = context_factory(intent="weather", slots={"city": "beijing"})
    assert engine.matches("#weather && slot.city == 'beijing'", ctx)
    assert not engine.matches("#weather && slot.city == 'shanghai'", ctx)
    assert engine.matches("!slot.date", ctx)


def test_request_type_rule(engine, context_factory):
    assert engine.matches("LaunchRequest", context_factory(request_type="LaunchRequest"))
    assert not engine.matches("LaunchRequest", context_factory(request_type="IntentRequest"))


def test_session_value_with_quotes(engine, context_factory):
    """Substituted strings containing quotes still evaluate correctly."""
    ctx = context_factory(attributes={"phrase": "say \"hi\" it's"})
    assert engine.matches("session.phrase == 'say \"hi\" it\\'s'", ctx)


def test_concatenation_with_placeholders(engine, context_factory):
    ctx = context_factory(intent="weather", slots={"city": "bei"}, attributes={"suffix": "jing"})
    assert engine.matches("slot.city . session.suffix == 'beijing'", ctx)


def test_empty_rule_never_matches(engine, context_factory):
    assert not engine.matches("", context_factory(intent="weather"))


def test_unterminated_rule_never_matches(engine, context_factory, caplog):
    """Tokenization failures mean no match, with a warning."""
    with caplog.at_level(logging.WARNING, logger="core.rules.engine"):
        assert not engine.matches("#weather || 'open", context_factory(intent="weather"))
    assert "tokenization failed" in caplog.text


def test_malformed_rule_never_matches(engine, context_factory):
    assert not engine.matches("#weather &&", context_factory(intent="weather"))
    assert not engine.matches("LaunchRequest && true", context_factory(request_type="LaunchRequest"))


def test_render(engine, context_factory):
    ctx = context_factory(intent="weather", attributes={"count": 2})
    assert engine.render("#weather && session.count > '1'", ctx) == "true && 2 > '1'"
    assert engine.render("'open", ctx) is None


def test_token_cache_is_bounded(context_factory):
    engine = RuleEngine(cache_size=2)
    ctx = context_factory(intent="weather")
    for rule in ("#a", "#b", "#c", "#a"):
        engine.matches(rule, ctx)
    assert list(engine._token_cache) == ["#c", "#a"]


def test_cache_size_from_settings():
    from config import settings
    assert RuleEngine().cache_size == settings.RULE_CACHE_SIZE


def test_shared_engine_keeps_tokens_across_calls(context_factory):
    engine = get_rule_engine()
    assert get_rule_engine() is engine

    rule = "#weather && session.shared_cache_marker == null"
    engine.matches(rule, context_factory(intent="weather"))
    assert rule in engine._token_cache
