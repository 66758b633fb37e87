import numpy as np
import pytest

from optichi.ecophysiology import (
    KINETICS_PARAMS, PhotosynLimiters, WaterDensity, calc_ftemp_kphio, calc_kc, calc_ko,
    co2_compensation_point, michaelis_menten_K, ns_star, water_density, water_viscosity,
)


def test_water_viscosity_reference_value():
    assert water_viscosity(15, 101325) == pytest.approx(1.138e-3, rel=5e-3)


def test_water_viscosity_decreases_with_temperature():
    mu = water_viscosity(np.array([5.0, 15.0, 25.0, 35.0]), 101325)
    assert np.all(np.diff(mu) < 0)


@pytest.mark.parametrize("method", ["Fisher", "Chen"])
def test_water_density(method):
    assert water_density(4, 101325, method=method) == pytest.approx(1000.0, rel=1e-3)
    assert water_density(25, 101325, method=method) == pytest.approx(997.05, rel=1e-3)


def test_water_density_unknown_method():
    with pytest.raises(ValueError):
        WaterDensity(20, 101325, method="Approx")


def test_water_density_warns_when_very_cold():
    with pytest.warns(UserWarning):
        WaterDensity(-35, 101325)


def test_ns_star_is_one_at_reference():
    assert ns_star(15, 101325) == pytest.approx(1.0)
    assert ns_star(25, 101325) < 1.0


def test_michaelis_menten_K_combines_co2_and_o2_constants():
    po2 = 209476.0 * 1e-6 * 99100
    expected = 39.97 * (1 + po2 / 27480.0)
    assert michaelis_menten_K(25, 99100) == pytest.approx(expected)
    assert michaelis_menten_K(25, 99100) == pytest.approx(70.16, rel=1e-3)


def test_kc_reference_calibration_point():
    assert calc_kc(25) == pytest.approx(40.13, rel=0.01)
    assert calc_ko(25) == pytest.approx(27480.0)


def test_compensation_point_reference_calibration_point():
    assert co2_compensation_point(25, 99100) == pytest.approx(4.24, rel=0.01)


def test_compensation_point_refixation():
    gammastar = co2_compensation_point(20, 101325)
    assert co2_compensation_point(20, 101325, alpha=0.3) == pytest.approx(0.7 * gammastar)
    assert co2_compensation_point(20, 101325, alpha=0.0) == pytest.approx(gammastar)


def test_chloroplast_basis_uses_its_own_constants():
    assert KINETICS_PARAMS['cc'] != KINETICS_PARAMS['ci']
    assert michaelis_menten_K(25, 101325, basis='cc') < michaelis_menten_K(25, 101325, basis='ci')
    assert co2_compensation_point(25, 101325, basis='cc') < co2_compensation_point(25, 101325, basis='ci')


def test_unknown_basis():
    with pytest.raises(ValueError, match="basis"):
        michaelis_menten_K(25, 101325, basis='cs')


def test_kinetics_increase_with_temperature():
    tc = np.array([10.0, 20.0, 30.0])
    assert np.all(np.diff(michaelis_menten_K(tc, 101325)) > 0)
    assert np.all(np.diff(co2_compensation_point(tc, 101325)) > 0)


def test_ftemp_kphio():
    assert calc_ftemp_kphio(25) == pytest.approx(0.352 + 0.022 * 25 - 3.4e-4 * 625)


def test_ftemp_kphio_clipped_at_zero():
    ftemp = calc_ftemp_kphio(np.array([-25.0, -15.0, 0.0, 80.0, 90.0]))
    np.testing.assert_array_equal(ftemp[[0, 1, 3, 4]], 0.0)
    assert ftemp[2] == pytest.approx(0.352)


def test_wang17_factor():
    limiters = PhotosynLimiters(0.8)
    assert limiters.f_v == pytest.approx(np.sqrt(1 - (0.41 / 0.8) ** (2 / 3)))
    assert limiters.f_j == pytest.approx(np.sqrt((0.8 / 0.41) ** (2 / 3) - 1))


def test_wang17_floors_undefined_values_to_zero():
    limiters = PhotosynLimiters(np.array([0.3, 0.41, np.nan, -0.2, 0.9]))
    np.testing.assert_array_equal(limiters.f_v[:4], 0.0)
    assert limiters.f_v[4] > 0


def test_simple_limiters():
    limiters = PhotosynLimiters(0.5, method='simple')
    assert limiters.f_v == 1.0
    assert limiters.f_j == 1.0
    with pytest.raises(ValueError):
        PhotosynLimiters(0.5, method='smith19')
