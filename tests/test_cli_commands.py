import json

import pytest

import main


def test_place_then_cooldown_status(tmp_data_dir, capsys):
	main.main(["place", "--x", "10", "--y", "20", "--color", "#112233", "--user-id", "u1", "--user-name", "Alice"])
	out = capsys.readouterr().out
	assert "Placed #112233 at (10, 20)" in out
	assert "Next placement at" in out

	main.main(["cooldown-status", "--user-id", "u1"])
	assert "must wait 10 more minute(s)" in capsys.readouterr().out

	main.main(["cooldown-status", "--user-id", "u2"])
	assert "u2 can place a pixel now" in capsys.readouterr().out


def test_place_conflict_exits_nonzero(tmp_data_dir, capsys):
	main.main(["place", "--x", "1", "--y", "1", "--color", "#000000", "--user-id", "u1"])
	capsys.readouterr()
	with pytest.raises(SystemExit) as ei:
		main.main(["place", "--x", "1", "--y", "1", "--color", "#ffffff", "--user-id", "u2"])
	assert ei.value.code == 1
	body = json.loads(capsys.readouterr().out)
	assert body["reason"] == "position_taken"


def test_list_pixels_json(tmp_data_dir, capsys):
	main.main(["place", "--x", "2", "--y", "3", "--color", "#abcdef", "--user-id", "u1", "--link", "https://example.com"])
	capsys.readouterr()
	main.main(["list-pixels", "--json"])
	pixels = json.loads(capsys.readouterr().out)
	assert len(pixels) == 1
	assert pixels[0]["color"] == "#ABCDEF"
	assert pixels[0]["link"] == "https://example.com"


def test_serve_runs_uvicorn(tmp_data_dir, monkeypatch):
	calls = {}

	def fake_run(app, host, port):
		calls["app"] = app
		calls["host"] = host
		calls["port"] = port

	monkeypatch.setattr(main.uvicorn, "run", fake_run)
	main.main(["serve", "--port", "9999"])
	assert calls["port"] == 9999
	assert calls["host"] == "0.0.0.0"
	assert calls["app"].title == "Pixelboard"


def test_cooldown_status_requires_user_id(tmp_data_dir, capsys):
	with pytest.raises(SystemExit) as ei:
		main.main(["cooldown-status", "--user-id", ""])
	assert ei.value.code == 1
	body = json.loads(capsys.readouterr().out)
	assert body["reason"] == "missing_fields"
	assert body["field"] == "user_id"


def test_cooldown_status_strips_user_id(tmp_data_dir, capsys):
	main.main(["place", "--x", "4", "--y", "4", "--color", "#445566", "--user-id", "u1"])
	capsys.readouterr()
	main.main(["cooldown-status", "--user-id", " u1 "])
	assert "u1 must wait 10 more minute(s)" in capsys.readouterr().out
