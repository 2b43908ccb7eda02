from kanto.cli import run


def test_wild_demo_runs_to_completion(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert run(["--seed", "3", "--fast", "--species", "25", "--level", "30"]) == 0
    out = capsys.readouterr().out
    assert "A wild Magikarp appeared!" in out
    assert "Result:" in out


def test_trainer_demo_runs(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert run(["--seed", "1", "--fast", "--trainer", "1", "--species", "7", "--level", "25"]) == 0
    assert "Youngster Joey" in capsys.readouterr().out


def test_unknown_trainer_fails_cleanly(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert run(["--fast", "--trainer", "999"]) == 1
