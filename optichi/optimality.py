"""
Least-cost optimality of the ci:ca ratio (Prentice et al., 2014; Wang et al., 2017).

The forward solvers give the optimal ratio of leaf-internal (chi = ci/ca) or
chloroplastic (chc = cc/ca) to ambient CO2 for a given cost ratio beta. The
inverse solvers recover the beta implied by an observed ratio, e.g. one
derived from carbon isotope data.

References
----------
- Prentice, I. C. et al. (2014). Balancing the costs of carbon gain and water transport:
  testing a new theoretical framework for plant functional ecology. Ecology Letters, 17(1), 82–91.
- Wang, H. et al. (2017). Towards a universal model for carbon dioxide uptake by plants.
  Nature Plants, 3(9), 734–741.
- Stocker, B. D. et al. (2020). P-model v1.0: An optimality-based light use efficiency model
  for simulating ecosystem gross primary production. Geoscientific Model Development, 13(3), 1545–1581.
"""
import numpy as np

from optichi.ecophysiology import co2_compensation_point, michaelis_menten_K, ns_star
from optichi.micrometeorology import atmospheric_pressure, co2_ppm_to_pa, vpd_kpa_to_pa
from optichi.utilities import as_array, as_output
from optichi.validation import check_non_negative, check_open_interval, check_positive


def _environment(tc, elv, vpd, basis, strict=False, patm=None):
    """Pressure, kinetics and viscosity terms shared by every solver; `patm` overrides `elv`."""
    if patm is None:
        patm = as_array(atmospheric_pressure(elv, strict=strict))
    else:
        patm = as_array(patm)
    if strict:
        check_non_negative("vpd (kPa)", vpd)
    vpd_pa = as_array(vpd_kpa_to_pa(vpd))
    return {
        'patm': patm,
        'vpd_pa': vpd_pa,
        'kmm': as_array(michaelis_menten_K(tc, patm, basis=basis)),
        'gammastar': as_array(co2_compensation_point(tc, patm, basis=basis)),
        'ns_star': as_array(ns_star(tc, patm)),
    }


def _mesophyll_factor(theta, strict=False):
    """(1 + 1/theta): the extra mesophyll resistance in series with the stomata."""
    if theta is None:
        return 1.0
    theta = as_array(theta)
    if strict:
        check_positive("theta", theta)
    return 1.0 + 1.0 / theta

# ========================================================================================================================
# Forward solvers
# ========================================================================================================================

def xi(tc, elv, beta, theta=None, basis=None, with_gammastar=True, strict=False):
    """
    Sensitivity of chi to VPD, reflecting the carbon cost of water use (Pa^1/2).

    Parameters
    ----------
    tc : float or np.ndarray
        Air temperature (°C).
    elv : float or np.ndarray
        Elevation (m).
    beta : float or np.ndarray
        Unit cost ratio of carboxylation to transpiration capacity (-).
    theta : float or np.ndarray, optional
        Ratio of mesophyll to stomatal conductance (-). If given, the diffusive term
        is reduced by 1 + 1/theta and the chloroplast basis is used by default.
    basis : str, optional
        Kinetics basis, 'ci' or 'cc'. Defaults to 'cc' when theta is given, else 'ci'.
    with_gammastar : bool, optional
        If True (default) Γ* is added to K, otherwise only K is used.
    """
    if basis is None:
        basis = 'ci' if theta is None else 'cc'
    env = _environment(tc, elv, 0.0, basis, strict=strict)
    return as_output(_xi(env, beta, theta, with_gammastar, strict))


def _xi(env, beta, theta, with_gammastar, strict):
    beta = as_array(beta)
    if strict:
        check_positive("beta", beta)
    kinetics = env['kmm'] + env['gammastar'] if with_gammastar else env['kmm']
    return np.sqrt(beta * kinetics / (1.6 * env['ns_star'] * _mesophyll_factor(theta, strict)))


def _ratio_simple(tc, elv, vpd, beta, theta, basis, strict):
    env = _environment(tc, elv, vpd, basis, strict=strict)
    xi_val = _xi(env, beta, theta, False, strict)
    return as_output(xi_val / (xi_val + np.sqrt(env['vpd_pa'])))


def _ratio_from_env(env, ca_pa, beta, theta, strict=False):
    xi_val = _xi(env, beta, theta, True, strict)
    gamma_ratio = env['gammastar'] / ca_pa
    return gamma_ratio + (1.0 - gamma_ratio) * xi_val / (xi_val + np.sqrt(env['vpd_pa']))


def _ratio_complex(tc, elv, vpd, ca, beta, theta, basis, strict):
    env = _environment(tc, elv, vpd, basis, strict=strict)
    ca_pa = as_array(co2_ppm_to_pa(ca, env['patm'], strict=strict))
    return as_output(_ratio_from_env(env, ca_pa, beta, theta, strict))


def chi_simple(tc, elv, vpd, beta, strict=False):
    """
    Optimal ci:ca ratio ignoring the CO2 compensation point.

    chi = xi / (xi + sqrt(D)), with xi = sqrt(beta K / (1.6 ns*)).

    Parameters
    ----------
    tc : float or np.ndarray
        Air temperature (°C).
    elv : float or np.ndarray
        Elevation (m).
    vpd : float or np.ndarray
        Vapour pressure deficit (kPa).
    beta : float or np.ndarray
        Unit cost ratio (-).
    strict : bool, optional
        If True, raise DomainError for negative vpd or non-positive beta.

    Returns
    -------
    chi : float or np.ndarray
        ci:ca ratio (-).
    """
    return _ratio_simple(tc, elv, vpd, beta, None, 'ci', strict)


def chi_complex(tc, elv, vpd, ca, beta, strict=False):
    """
    Optimal ci:ca ratio accounting for the photorespiratory compensation point.

    chi = Γ*/ca + (1 - Γ*/ca) xi / (xi + sqrt(D)), with xi = sqrt(beta (K + Γ*) / (1.6 ns*)).

    Parameters
    ----------
    tc : float or np.ndarray
        Air temperature (°C).
    elv : float or np.ndarray
        Elevation (m).
    vpd : float or np.ndarray
        Vapour pressure deficit (kPa).
    ca : float or np.ndarray
        Ambient CO2 concentration (ppm).
    beta : float or np.ndarray
        Unit cost ratio (-).
    strict : bool, optional
        If True, raise DomainError for non-positive ca or beta, or negative vpd.

    Returns
    -------
    chi : float or np.ndarray
        ci:ca ratio (-).

    Example
    -------
    chi = chi_complex(tc=20, elv=0, vpd=1, ca=400, beta=146)
    print(f"ci:ca = {chi:.3f}")
    """
    return _ratio_complex(tc, elv, vpd, ca, beta, None, 'ci', strict)


def chc_simple(tc, elv, vpd, beta, theta, strict=False):
    """Optimal cc:ca ratio ignoring Γ*, with mesophyll conductance theta = gm/gs (chloroplast basis)."""
    return _ratio_simple(tc, elv, vpd, beta, theta, 'cc', strict)


def chc_complex(tc, elv, vpd, ca, beta, theta, strict=False):
    """
    Optimal cc:ca ratio accounting for Γ* and finite mesophyll conductance.

    chc = Γ*/ca + (1 - Γ*/ca) xi / (xi + sqrt(D)), with
    xi = sqrt(beta (K + Γ*) / (1.6 ns* (1 + 1/theta))) and K, Γ* on the chloroplast basis.
    """
    return _ratio_complex(tc, elv, vpd, ca, beta, theta, 'cc', strict)

# ========================================================================================================================
# Inverse solvers
# ========================================================================================================================

def beta_simple(tc, elv, vpd, chi, strict=False):
    """
    Cost ratio beta implied by an observed ci:ca ratio, inverting chi_simple.

    beta = 1.6 ns* D chi² / ((1 - chi)² K)

    chi = 1 is singular and returns inf; strict mode raises DomainError for chi outside (0, 1).
    """
    env = _environment(tc, elv, vpd, 'ci', strict=strict)
    chi = as_array(chi)
    if strict:
        check_open_interval("chi", chi)
    return as_output(
        1.6 * env['ns_star'] * env['vpd_pa'] * chi**2 / ((1.0 - chi) ** 2 * env['kmm'])
    )


def _beta_from_ratio(env, ca, ratio, name, strict):
    ca_pa = as_array(co2_ppm_to_pa(ca, env['patm'], strict=strict))
    ratio = as_array(ratio)
    gamma_ratio = env['gammastar'] / ca_pa
    if strict:
        check_open_interval(name, ratio, lower=gamma_ratio, lower_name="Gstar/ca")
    return (
        1.6 * env['ns_star'] * env['vpd_pa'] * (ratio - gamma_ratio) ** 2
        / ((1.0 - ratio) ** 2 * (env['kmm'] + env['gammastar']))
    )


def beta_complex(tc, elv, vpd, ca, chi, strict=False):
    """
    Cost ratio beta implied by an observed ci:ca ratio, inverting chi_complex.

    beta = 1.6 ns* D (chi - Γ*/ca)² / ((1 - chi)² (K + Γ*))

    Parameters
    ----------
    tc : float or np.ndarray
        Air temperature (°C).
    elv : float or np.ndarray
        Elevation (m).
    vpd : float or np.ndarray
        Vapour pressure deficit (kPa).
    ca : float or np.ndarray
        Ambient CO2 concentration (ppm).
    chi : float or np.ndarray
        Observed ci:ca ratio (-).
    strict : bool, optional
        If True, raise DomainError unless Γ*/ca < chi < 1.

    Returns
    -------
    beta : float or np.ndarray
        Unit cost ratio (-). inf at chi = 1; values with chi < Γ*/ca have no
        physical meaning.
    """
    env = _environment(tc, elv, vpd, 'ci', strict=strict)
    return as_output(_beta_from_ratio(env, ca, chi, "chi", strict))


def beta_meso(tc, elv, vpd, ca, chc, theta, strict=False):
    """
    Cost ratio beta implied by an observed cc:ca ratio, inverting chc_complex.

    beta = 1.6 ns* D (chc - Γ*/ca)² / ((1 - chc)² (K + Γ*)) (1 + 1/theta), chloroplast basis.
    """
    env = _environment(tc, elv, vpd, 'cc', strict=strict)
    return as_output(
        _beta_from_ratio(env, ca, chc, "chc", strict) * _mesophyll_factor(theta, strict)
    )

