import logging

import galaxy_sim


def test_bad_scenario_exits_cleanly(tmp_path, caplog):
    path = tmp_path / "broken.csv"
    path.write_text("1.0,10\nA,Planet,0,0,0,0,inf\n", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        assert galaxy_sim.main([str(path)]) == 1
    assert "finite positive mass" in caplog.text


def test_missing_scenario_exits_cleanly(tmp_path):
    assert galaxy_sim.main([str(tmp_path / "nowhere.json")]) == 1


def test_parse_args_defaults():
    args = galaxy_sim.parse_args([])
    assert args.scenario is None
    assert args.preset == "earth-moon"
    assert not args.verbose
