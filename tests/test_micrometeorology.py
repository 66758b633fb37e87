import numpy as np
import pandas as pd
import pytest

from optichi.micrometeorology import atmospheric_pressure, arrhenius_factor, co2_ppm_to_pa, vpd_kpa_to_pa
from optichi.validation import DomainError


def test_sea_level_pressure_is_standard_atmosphere():
    assert atmospheric_pressure(0) == 101325.0


def test_pressure_decreases_with_elevation():
    patm = atmospheric_pressure(np.linspace(0, 5000, 101))
    assert isinstance(patm, np.ndarray)
    assert np.all(np.diff(patm) < 0)


def test_pressure_at_1000m():
    assert atmospheric_pressure(1000) == pytest.approx(89875.0, rel=1e-3)


def test_pressure_beyond_formula_validity_is_nan():
    with np.errstate(invalid='ignore'):
        assert np.isnan(atmospheric_pressure(50000))


def test_pressure_strict_rejects_extreme_elevation():
    with pytest.raises(DomainError, match="elevation"):
        atmospheric_pressure([0, 50000], strict=True)


def test_arrhenius_factor_is_one_at_reference():
    assert arrhenius_factor(298.15, 50000) == 1.0


def test_arrhenius_factor_increases_with_temperature():
    factors = arrhenius_factor(np.array([283.15, 298.15, 313.15]), 37830)
    assert factors[0] < 1.0 < factors[2]


def test_co2_conversion():
    assert co2_ppm_to_pa(400, 101325) == pytest.approx(40.53)


def test_co2_conversion_accepts_series():
    ca = co2_ppm_to_pa(pd.Series([300.0, 400.0]), 100000.0)
    np.testing.assert_allclose(ca, [30.0, 40.0])


@pytest.mark.parametrize("ca, patm", [(0.0, 101325.0), (-10.0, 101325.0), (400.0, -1.0)])
def test_co2_conversion_strict(ca, patm):
    with pytest.raises(DomainError):
        co2_ppm_to_pa(ca, patm, strict=True)


def test_vpd_conversion():
    assert vpd_kpa_to_pa(1.5) == pytest.approx(1500.0)
