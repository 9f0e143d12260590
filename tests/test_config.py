import pytest

from shadowing.config import (
    ShadowingParameters,
    load_params_from_ini_file,
    load_params_from_json_file,
    normalize_model_name,
    parse_ini_text_to_params,
    params_from_dict,
)


INI = """
[General]
**.mapManager.offsetx = -12.5
**.mapManager.offsety = 30
**.mapManager.database = "city.db"
**.nic.radio.sensitivity = -89dBm
**.nic.radio.signalLossFactorWall = 8.5
**.nic.radio.signalLossFactorBuilding = 0.4
**.nic.radio.TransmiterAntennaHigh = 1.8
# **.nic.radio.ReceiverAntennaHigh = 9
**.nic.radio.propagationModel = "DiffractionPropagationLossModel"
"""


def test_ini_values_are_picked_up():
    p = parse_ini_text_to_params(INI)
    assert p.model == "diffraction"
    assert p.sensitivity_dbm == -89.0
    assert p.penetration.wall_loss_db == 8.5
    assert p.penetration.meter_loss_db == 0.4
    assert p.two_ray.tx_height_m == 1.8
    assert (p.map.offset_x, p.map.offset_y) == (-12.5, 30.0)
    assert p.map.database == "city.db"


def test_ini_comments_and_defaults():
    p = parse_ini_text_to_params(INI)
    # Commented line keeps the default receiver height.
    assert p.two_ray.rx_height_m == 1.5
    assert p.two_ray.dielectric_constant == 4.0
    assert p.diffraction.log == "ln"
    assert p.diffraction.conversion == "dbm"


def test_sensitivity_reaches_every_model_block():
    p = parse_ini_text_to_params(INI)
    assert p.penetration.sensitivity_dbm == -89.0
    assert p.diffraction.sensitivity_dbm == -89.0


def test_empty_ini_gives_defaults():
    assert parse_ini_text_to_params("") == ShadowingParameters()


def test_ini_file(tmp_path):
    path = tmp_path / "omnetpp.ini"
    path.write_text("**.diffractionLog = log10\n**.diffractionConversion = attenuation\n", encoding="utf-8")
    p = load_params_from_ini_file(path)
    assert p.diffraction.log == "log10"
    assert p.diffraction.conversion == "attenuation"


def test_model_aliases():
    assert normalize_model_name("FreeSpace") == "free_space"
    assert normalize_model_name('"ShadowPropagationLossModel"') == "shadow"
    assert normalize_model_name("two_ray") == "two_ray"
    with pytest.raises(ValueError):
        normalize_model_name("hata")


def test_json_config(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(
        '{"model": "penetration", "sensitivity_dbm": -90,'
        ' "penetration": {"wall_loss_db": 12},'
        ' "diffraction": {"sensitivity_dbm": -80, "log": "log10"},'
        ' "map": {"offset_x": 5}}',
        encoding="utf-8",
    )
    p = load_params_from_json_file(path)
    assert p.model == "penetration"
    assert p.penetration.sensitivity_dbm == -90.0
    assert p.penetration.wall_loss_db == 12
    assert p.penetration.meter_loss_db == 0.5
    assert p.diffraction.sensitivity_dbm == -80
    assert p.diffraction.log == "log10"
    assert p.map.offset_x == 5


def test_params_from_empty_dict():
    assert params_from_dict({}) == ShadowingParameters()
