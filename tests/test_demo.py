"""
Smoke test for the demo script.
"""
import demo


def test_demo_runs(tmp_path, monkeypatch, capsys):
    """Demo runs end to end without an engine config file"""
    monkeypatch.chdir(tmp_path)
    results = demo.main(num_sims=50, random_seed=3)
    output = capsys.readouterr().out

    assert "Demo completed successfully!" in output
    assert "Deterministic Projection" in output
    assert results.wealth_paths.shape[0] == 50
