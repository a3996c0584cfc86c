"""Timeline parsing and request mapping of the replay script."""

import json

import pytest

import replay_scenario


def test_build_request_maps_action_to_route(monkeypatch):
    monkeypatch.setattr(replay_scenario, "BASE_URL", "http://pos.local")
    method, url, body = replay_scenario.build_request(
        {"roomId": "R201", "type": "add_order", "payload": {"menuItemId": "M003", "quantity": 6}}
    )
    assert method == "POST"
    assert url == "http://pos.local/rooms/R201/session/orders"
    assert body == {"menuItemId": "M003", "quantity": 6}


def test_build_request_without_payload():
    method, url, body = replay_scenario.build_request({"roomId": "R101", "type": "status"})
    assert method == "PUT"
    assert url.endswith("/rooms/R101/status")
    assert body == {}


def test_unknown_action_type():
    with pytest.raises(ValueError):
        replay_scenario.build_request({"roomId": "R101", "type": "dance"})


def test_builtin_timeline_only_uses_known_actions():
    for actions in replay_scenario.TIMELINE.values():
        for action in actions:
            assert action["type"] in replay_scenario.ACTION_ROUTES


def test_coerce_timeline():
    assert replay_scenario.coerce_timeline({"0": [], 15: [{"type": "pause"}]}) == {0: [], 15: [{"type": "pause"}]}
    with pytest.raises(ValueError):
        replay_scenario.coerce_timeline({"soon": []})
    with pytest.raises(ValueError):
        replay_scenario.coerce_timeline({"5": {"type": "pause"}})


def test_load_config_from_json(tmp_path, monkeypatch):
    monkeypatch.setattr(replay_scenario, "BASE_URL", replay_scenario.BASE_URL)
    monkeypatch.setattr(replay_scenario, "TIMELINE", replay_scenario.TIMELINE)
    path = tmp_path / "night.json"
    path.write_text(json.dumps({"baseUrl": "http://pos:9000/", "timeline": {"10": [{"roomId": "R101", "type": "end"}]}}))

    replay_scenario.load_config(str(path))

    assert replay_scenario.BASE_URL == "http://pos:9000"
    assert replay_scenario.TIMELINE == {10: [{"roomId": "R101", "type": "end"}]}


def test_load_config_missing_file():
    with pytest.raises(FileNotFoundError):
        replay_scenario.load_config("does-not-exist.yaml")
