import csv

import pytest

from eco_sim.main import build_parser, settings_from_args, run


def test_parser_maps_flags_to_settings():
    args = build_parser().parse_args(
        ["--regen", "4", "--cap", "80", "--herb", "12", "--no-flocking", "--no-season", "--vision", "90"])
    s = settings_from_args(args)
    assert (s.plant_regen, s.plant_cap, s.init_herbivores, s.vision_range) == (4.0, 80, 12, 90.0)
    assert s.flocking is False and s.season is False
    assert s.territory is True and s.memory is True


def test_run_writes_one_session_to_csv(tmp_path, capsys):
    path = tmp_path / "history.csv"
    assert run(["--seconds", "2", "--seed", "1", "--csv", str(path), "--print-every", "2"]) == 0

    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) >= 3
    assert len({r["session_id"] for r in rows}) == 1
    times = [float(r["time"]) for r in rows]
    assert times == sorted(times)

    out = capsys.readouterr().out
    assert "[eco_sim] t=" in out
    assert f"samples -> {path}" in out


def test_run_without_csv(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert run(["--seconds", "0.5", "--csv", ""]) == 0
    out = capsys.readouterr().out
    assert "session" not in out
    assert list(tmp_path.iterdir()) == []


def test_paused_run_keeps_population(capsys):
    run(["--paused", "--seconds", "1", "--csv", "", "--herb", "4", "--carn", "1",
         "--plants", "0", "--regen", "0"])
    out = capsys.readouterr().out
    assert "H=   4 C=   1 P=   0" in out


@pytest.mark.parametrize("argv", [
    ["--regen", "-1"],
    ["--herb-speed", "9"],
    ["--fps", "0"],
])
def test_invalid_arguments_exit_with_usage_error(argv):
    with pytest.raises(SystemExit) as exc:
        run(argv + ["--csv", ""])
    assert exc.value.code == 2
