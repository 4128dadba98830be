from __future__ import annotations

import copy

from area.dispatch.templating import render_value, resolve_path, substitute


PAYLOAD = {
    "issue": {"number": 42, "labels": [{"name": "bug"}, {"name": "urgent"}], "locked": False},
    "repository": {"name": "acme", "owner": {"login": "octo"}},
    "commits": ["a1", "b2"],
    "score": 1.5,
    "assignee": None,
}


def test_issue_message_example():
    config = {"message": "New issue #{{issue.number}} in {{repository.name}}"}
    assert substitute(config, {"issue": {"number": 42}, "repository": {"name": "acme"}}) == {
        "message": "New issue #42 in acme"
    }


def test_missing_path_becomes_empty_string():
    assert substitute({"m": "x{{issue.missing}}y"}, PAYLOAD) == {"m": "xy"}


def test_unresolvable_paths_never_raise():
    assert substitute("{{issue.number.deeper}}", PAYLOAD) == ""
    assert substitute("{{commits.5}}", PAYLOAD) == ""
    assert substitute("{{commits.first}}", PAYLOAD) == ""
    assert substitute("{{commits.-1}}", PAYLOAD) == ""
    assert substitute("{{}}", PAYLOAD) == ""
    assert substitute("{{issue..number}}", PAYLOAD) == ""


def test_sequence_index_segments():
    assert substitute("{{issue.labels.1.name}}", PAYLOAD) == "urgent"
    assert substitute("{{commits.0}}", PAYLOAD) == "a1"


def test_numeric_key_on_mapping_is_a_key_lookup():
    assert substitute("{{by_id.7}}", {"by_id": {"7": "seven"}}) == "seven"


def test_whitespace_inside_braces():
    assert substitute("{{ repository.owner.login }}", PAYLOAD) == "octo"


def test_scalars_use_canonical_form():
    assert substitute("{{issue.locked}}", PAYLOAD) == "false"
    assert substitute("{{score}}", PAYLOAD) == "1.5"
    assert substitute("{{assignee}}", PAYLOAD) == ""


def test_structured_values_are_compact_json():
    assert substitute("{{repository.owner}}", PAYLOAD) == '{"login":"octo"}'
    assert substitute("{{commits}}", PAYLOAD) == '["a1","b2"]'


def test_shape_is_preserved_and_only_strings_change():
    config = {
        "title": "#{{issue.number}}",
        "count": 3,
        "enabled": True,
        "tags": ["{{repository.name}}", 7, None],
        "nested": {"{{issue.number}}": {"deep": "{{commits.1}}"}},
        "pair": ("{{commits.0}}", "literal"),
    }
    result = substitute(config, PAYLOAD)
    assert result == {
        "title": "#42",
        "count": 3,
        "enabled": True,
        "tags": ["acme", 7, None],
        "nested": {"{{issue.number}}": {"deep": "b2"}},
        "pair": ("a1", "literal"),
    }
    assert isinstance(result["tags"], list)
    assert isinstance(result["pair"], tuple)


def test_inputs_are_not_mutated():
    config = {"a": ["{{issue.number}}"], "b": {"c": "{{repository.name}}"}}
    config_before = copy.deepcopy(config)
    payload_before = copy.deepcopy(PAYLOAD)

    result = substitute(config, PAYLOAD)

    assert config == config_before
    assert PAYLOAD == payload_before
    assert result is not config
    assert result["a"] is not config["a"]


def test_string_without_tokens_is_unchanged():
    assert substitute("plain {text}", PAYLOAD) == "plain {text}"


def test_resolve_path():
    assert resolve_path(PAYLOAD, "issue.number") == (True, 42)
    assert resolve_path(PAYLOAD, "assignee") == (True, None)
    assert resolve_path(PAYLOAD, "nope") == (False, None)
    assert resolve_path(["x", "y"], "1") == (True, "y")


def test_render_value():
    assert render_value(True) == "true"
    assert render_value(0) == "0"
    assert render_value({"a": [1, 2]}) == '{"a":[1,2]}'
    assert render_value("é") == "é"
