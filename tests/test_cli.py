import json

from shadowing.cli import build_parser, main


def _city(tmp_path):
    path = tmp_path / "city.json"
    path.write_text(json.dumps({"buildings": [
        {"id": 1, "outline": [[40, -10], [60, -10], [60, 10], [40, 10]]},
    ]}), encoding="utf-8")
    return path


def test_parser_defaults():
    args = build_parser().parse_args(["link", "--sender", "0", "0", "--receiver", "10", "0"])
    assert args.model is None
    assert args.sender == [0.0, 0.0]
    assert args.p_send_mw == 20.0


def test_link_command(tmp_path, capsys):
    city = _city(tmp_path)
    main(["--buildings", str(city), "--model", "shadow", "link",
          "--sender", "0", "0", "--receiver", "100", "0", "--frequency", "2.4e9", "--p-send-mw", "1"])
    out = capsys.readouterr().out
    assert out.startswith("shadow:")
    assert "-86.00 dBm" in out


def test_scenario_command_with_ini(tmp_path, capsys):
    city = _city(tmp_path)
    ini = tmp_path / "omnetpp.ini"
    ini.write_text('**.propagationModel = "PenetrationPropagationLossModel"\n', encoding="utf-8")
    links = tmp_path / "links.json"
    links.write_text(json.dumps({"links": [
        {"sender": [0, 0], "receiver": [100, 0], "frequency_hz": 2.4e9, "p_send_mw": 1},
        {"sender": [0, 50], "receiver": [100, 50], "frequency_hz": 2.4e9, "p_send_mw": 1},
    ]}), encoding="utf-8")
    main(["--buildings", str(city), "--ini", str(ini), "scenario", "--links", str(links)])
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 3
    assert lines[1].split()[-1] == "no"
    assert lines[2].split()[-1] == "yes"


def test_coverage_command(tmp_path, capsys):
    city = _city(tmp_path)
    out = tmp_path / "cov.png"
    main(["--buildings", str(city), "--model", "diffraction", "coverage",
          "--sender", "0", "0", "--half-size", "40", "--step", "20", "--out", str(out)])
    assert out.exists()
    assert "Saved coverage map" in capsys.readouterr().out
