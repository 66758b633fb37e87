import numpy as np
import pytest

from optichi.ecophysiology import co2_compensation_point
from optichi.micrometeorology import atmospheric_pressure
from optichi.optimality import (
    beta_complex, beta_meso, beta_simple, chc_complex, chc_simple, chi_complex, chi_simple, xi,
)
from optichi.validation import DomainError

DRIVERS = dict(tc=20.0, elv=500.0, vpd=1.2, ca=400.0)


@pytest.mark.parametrize("tc", [0.0, 10.0, 25.0, 35.0])
@pytest.mark.parametrize("vpd", [0.1, 1.0, 3.0])
@pytest.mark.parametrize("beta", [20.0, 146.0, 500.0])
def test_chi_complex_is_a_ratio(tc, vpd, beta):
    chi = chi_complex(tc, 300.0, vpd, 400.0, beta)
    assert 0.0 < chi < 1.0


def test_chi_complex_exceeds_simple_form():
    chi_s = chi_simple(DRIVERS['tc'], DRIVERS['elv'], DRIVERS['vpd'], 146.0)
    chi_c = chi_complex(**DRIVERS, beta=146.0)
    assert chi_s < chi_c


def test_chi_simple_matches_xi():
    xi_val = xi(DRIVERS['tc'], DRIVERS['elv'], 146.0, with_gammastar=False)
    expected = xi_val / (xi_val + np.sqrt(DRIVERS['vpd'] * 1e3))
    assert chi_simple(DRIVERS['tc'], DRIVERS['elv'], DRIVERS['vpd'], 146.0) == pytest.approx(expected)


def test_chi_complex_without_vpd_is_one():
    assert chi_complex(20.0, 0.0, 0.0, 400.0, 146.0) == pytest.approx(1.0)


def test_chi_decreases_with_vpd():
    chi = chi_complex(20.0, 0.0, np.array([0.5, 1.0, 2.0, 4.0]), 400.0, 146.0)
    assert chi.shape == (4,)
    assert np.all(np.diff(chi) < 0)


def test_chi_increases_with_beta():
    chi = chi_complex(20.0, 0.0, 1.0, 400.0, np.array([50.0, 146.0, 300.0]))
    assert np.all(np.diff(chi) > 0)


def test_chc_below_chi():
    chi = chi_complex(**DRIVERS, beta=146.0)
    chc = chc_complex(**DRIVERS, beta=146.0, theta=1.0)
    assert 0.0 < chc < chi


def test_chc_rises_with_mesophyll_conductance():
    chc = chc_complex(**DRIVERS, beta=146.0, theta=np.array([0.5, 1.0, 5.0, 50.0]))
    assert np.all(np.diff(chc) > 0)


def test_chc_simple_is_a_ratio():
    chc = chc_simple(DRIVERS['tc'], DRIVERS['elv'], DRIVERS['vpd'], 146.0, 2.0)
    assert 0.0 < chc < chi_simple(DRIVERS['tc'], DRIVERS['elv'], DRIVERS['vpd'], 146.0)


@pytest.mark.parametrize("beta0", [10.0, 146.0, 800.0])
@pytest.mark.parametrize("tc, elv, vpd, ca", [(5.0, 0.0, 0.3, 280.0), (20.0, 500.0, 1.2, 400.0), (32.0, 2500.0, 3.5, 600.0)])
def test_beta_complex_inverts_chi_complex(beta0, tc, elv, vpd, ca):
    chi = chi_complex(tc, elv, vpd, ca, beta0)
    assert beta_complex(tc, elv, vpd, ca, chi) == pytest.approx(beta0, rel=1e-6)


@pytest.mark.parametrize("beta0", [10.0, 146.0, 800.0])
def test_beta_simple_inverts_chi_simple(beta0):
    chi = chi_simple(15.0, 100.0, 0.8, beta0)
    assert beta_simple(15.0, 100.0, 0.8, chi) == pytest.approx(beta0, rel=1e-6)


@pytest.mark.parametrize("theta", [0.5, 1.0, 4.0])
def test_beta_meso_inverts_chc_complex(theta):
    chc = chc_complex(**DRIVERS, beta=146.0, theta=theta)
    assert beta_meso(**DRIVERS, chc=chc, theta=theta) == pytest.approx(146.0, rel=1e-6)


def test_beta_inversion_vectorised():
    beta0 = np.array([50.0, 100.0, 200.0])
    chi = chi_complex(**DRIVERS, beta=beta0)
    np.testing.assert_allclose(beta_complex(**DRIVERS, chi=chi), beta0, rtol=1e-6)


def test_beta_is_singular_at_chi_one():
    with np.errstate(divide='ignore'):
        assert np.isinf(beta_complex(**DRIVERS, chi=1.0))
        assert np.isinf(beta_simple(DRIVERS['tc'], DRIVERS['elv'], DRIVERS['vpd'], 1.0))


def test_strict_beta_rejects_chi_of_one():
    with pytest.raises(DomainError, match="chi"):
        beta_complex(**DRIVERS, chi=1.0, strict=True)


def test_strict_beta_rejects_chi_below_compensation_ratio():
    patm = atmospheric_pressure(DRIVERS['elv'])
    gamma_ratio = co2_compensation_point(DRIVERS['tc'], patm) / (400e-6 * patm)
    with pytest.raises(DomainError, match="Gstar/ca"):
        beta_complex(**DRIVERS, chi=0.5 * gamma_ratio, strict=True)
    # without strict mode the formula is still evaluated
    assert np.isfinite(beta_complex(**DRIVERS, chi=0.5 * gamma_ratio))


def test_strict_beta_simple_rejects_ratio_outside_unit_interval():
    with pytest.raises(DomainError):
        beta_simple(20.0, 0.0, 1.0, np.array([0.5, 1.2]), strict=True)


def test_strict_chi_rejects_invalid_drivers():
    with pytest.raises(DomainError, match="ca"):
        chi_complex(20.0, 0.0, 1.0, 0.0, 146.0, strict=True)
    with pytest.raises(DomainError, match="beta"):
        chi_complex(20.0, 0.0, 1.0, 400.0, -1.0, strict=True)
    with pytest.raises(DomainError, match="vpd"):
        chi_simple(20.0, 0.0, -1.0, 146.0, strict=True)
    with pytest.raises(DomainError, match="theta"):
        chc_complex(20.0, 0.0, 1.0, 400.0, 146.0, 0.0, strict=True)


def test_zero_co2_propagates_without_strict():
    with np.errstate(divide='ignore', invalid='ignore'):
        assert not np.isfinite(chi_complex(20.0, 0.0, 1.0, 0.0, 146.0))
