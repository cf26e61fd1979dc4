"""
Tests for placeholder substitution.
"""

import pytest

from core.rules import PlaceholderSubstitutor, tokenize, to_literal


@pytest.fixture
def substitutor():
    return PlaceholderSubstitutor()


def test_intent_placeholder(substitutor, context_factory):
    """#name becomes true only for the current intent."""
    ctx = context_factory(intent="weather")
    assert substitutor.substitute("#weather", ctx) == "true"
    assert substitutor.substitute("#music", ctx) == "false"
    assert substitutor.substitute("#weather || #music", ctx) == "true || false"


def test_intent_placeholder_with_dots(substitutor, context_factory):
    """Intent names may contain dots."""
    ctx = context_factory(intent="ai.dueros.common.default_intent")
    assert substitutor.substitute("#ai.dueros.common.default_intent", ctx) == "true"


def test_intent_placeholder_without_nlu(substitutor, context_factory):
    """Without NLU no intent placeholder holds."""
    ctx = context_factory(request_type="LaunchRequest")
    assert substitutor.substitute("#weather", ctx) == "false"


def test_session_placeholder(substitutor, context_factory):
    """session.path becomes a JSON-style literal of the session value."""
    ctx = context_factory(attributes={"count": "3", "user": {"city": "beijing", "age": 30}})
    assert substitutor.substitute("session.count == ", ctx) == '"3" == '
    assert substitutor.substitute("session.user.city", ctx) == '"beijing"'
    assert substitutor.substitute("session.user.age > 18", ctx) == "30 > 18"


def test_missing_session_field_is_null(substitutor, context_factory):
    """Unresolved session fields degrade to null."""
    ctx = context_factory(attributes={"user": {"city": "beijing"}})
    assert substitutor.substitute("session.missing", ctx) == "null"
    assert substitutor.substitute("session.user.city.name", ctx) == "null"


def test_slot_placeholder(substitutor, context_factory):
    """slot.name becomes the first intent's slot value."""
    ctx = context_factory(intent="weather", slots={"city": "beijing"})
    assert substitutor.substitute("slot.city", ctx) == '"beijing"'
    assert substitutor.substitute("slot.date", ctx) == "null"


def test_slot_placeholder_without_nlu(substitutor, context_factory):
    """Slots resolve to null when there is no NLU result."""
    ctx = context_factory(request_type="LaunchRequest")
    assert substitutor.substitute("slot.city", ctx) == "null"


def test_request_type_placeholder_whole_segment(substitutor, context_factory):
    """LaunchRequest / SessionEndedRequest only match a whole segment."""
    launch = context_factory(request_type="LaunchRequest")
    ended = context_factory(request_type="SessionEndedRequest")
    assert substitutor.substitute("LaunchRequest", launch) == "true"
    assert substitutor.substitute("LaunchRequest", ended) == "false"
    assert substitutor.substitute("SessionEndedRequest", ended) == "true"
    assert substitutor.substitute("LaunchRequest && true", launch) == "LaunchRequest && true"


def test_values_are_not_rescanned(substitutor, context_factory):
    """Placeholder syntax inside a resolved value stays literal text."""
    ctx = context_factory(intent="weather", attributes={"note": "#weather slot.city"})
    assert substitutor.substitute("session.note", ctx) == '"#weather slot.city"'


def test_identifier_boundary(substitutor, context_factory):
    """session./slot. embedded in a longer word are left alone."""
    ctx = context_factory(attributes={"x": 1})
    assert substitutor.substitute("mysession.x", ctx) == "mysession.x"


def test_trailing_dot_is_concatenation(substitutor, context_factory):
    """A trailing dot is not part of the session path."""
    ctx = context_factory(attributes={"name": "bob"})
    assert substitutor.substitute("session.name.", ctx) == '"bob".'


def test_render_keeps_literals(substitutor, context_factory):
    """Literal tokens pass through untouched."""
    ctx = context_factory(intent="weather", attributes={"count": "3"})
    tokens = tokenize("#weather && session.count == '#weather'")
    assert substitutor.render(tokens, ctx) == "true && \"3\" == '#weather'"


@pytest.mark.parametrize("value,literal", [
    (None, "null"),
    (True, "true"),
    (False, "false"),
    (3, "3"),
    (2.5, "2.5"),
    ("it's \"x\"", '"it\'s \\"x\\""'),
    ("北京", '"\\u5317\\u4eac"'),
    ("\ud800", '"\\ud800"'),
    ({"a": 1}, "true"),
    ([], "false"),
    (float("nan"), "null"),
])
def test_to_literal(value, literal):
    assert to_literal(value) == literal
