import pandas as pd
import pytest

import analyze_history as ah


def _frame():
    return pd.DataFrame(dict(
        session_id=["a", "a", "b", "b"],
        time=[0.5, 1.0, 0.5, 1.0],
        plants=["10", "12", "20", "22"],
        herbivores=[5, 6, 7, 8],
        carnivores=[1, 1, 3, 3],
        avg_herb_speed=[1.5, 1.6, 1.7, 1.8],
    ))


def test_latest_session_is_last_in_file_order():
    assert ah.latest_session_id(_frame()) == "b"
    assert ah.latest_session_id(pd.DataFrame(dict(time=[0.5]))) is None


def test_filter_session():
    df = _frame()
    assert list(ah.filter_session(df, "latest")["session_id"]) == ["b", "b"]
    assert list(ah.filter_session(df, "a")["herbivores"]) == [5, 6]
    assert len(ah.filter_session(df, "")) == 4


def test_clean_single_session_casts_and_drops_session():
    clean = ah.clean_history(ah.filter_session(_frame(), "a"))
    assert list(clean.columns) == ["time", "plants", "herbivores", "carnivores", "avg_herb_speed"]
    assert clean["plants"].tolist() == [10, 12]


def test_clean_averages_sessions_per_time():
    clean = ah.clean_history(_frame())
    assert clean["time"].tolist() == [0.5, 1.0]
    assert clean["plants"].tolist() == [15.0, 17.0]
    assert clean["carnivores"].tolist() == [2.0, 2.0]


def test_main_writes_summary_and_plot(tmp_path):
    history = tmp_path / "history.csv"
    _frame().to_csv(history, index=False)
    out = tmp_path / "reports"
    assert ah.main(["--history", str(history), "--outdir", str(out), "--tag", "t", "--session", "latest"]) == 0
    names = sorted(p.name for p in out.iterdir())
    assert any(n.startswith("history_summary_") and n.endswith("__t.csv") for n in names)
    assert any(n.endswith("__t.png") for n in names)


def test_missing_history_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        ah.load_history(str(tmp_path / "nope.csv"))
    assert exc.value.code == 1
