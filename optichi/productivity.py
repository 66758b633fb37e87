"""
Gross primary production from light use efficiency under the coordination hypothesis.

LUE = phi0(T) M_c m sqrt(1 - (c*/m)^(2/3)) (Wang et al., 2017), and GPP = LUE fAPAR PPFD.
"""
import logging

import numpy as np

from optichi.ecophysiology import PhotosynLimiters, calc_ftemp_kphio
from optichi.micrometeorology import co2_ppm_to_pa
from optichi.optimality import _environment
from optichi.utilities import as_array, as_output
from optichi.validation import check_positive

logger = logging.getLogger(__name__)

# Molecular mass of carbon (12.0107, g/mol)
k_c_molmass = 12.0107


def calc_max_quantum_efficiency(tc, cphi=0.081785):
    """
    Temperature-scaled maximum quantum efficiency in carbon units (gC mol⁻¹ photons).

    maxQE = cphi (0.352 + 0.022 T - 3.4e-4 T²) M_c
    """
    return as_output(cphi * as_array(calc_ftemp_kphio(tc)) * k_c_molmass)


def _co2_limitation(env, ca_pa, beta):
    """m = (ca - Γ*) / (ca + 2Γ* + 3Γ* sqrt(1.6 ns* D / beta / (K + Γ*)))"""
    gammastar = env['gammastar']
    return (ca_pa - gammastar) / (
        ca_pa + 2.0 * gammastar
        + 3.0 * gammastar * np.sqrt(1.6 * env['ns_star'] * env['vpd_pa'] / as_array(beta) / (env['kmm'] + gammastar))
    )


def _lue_from_env(env, ca_pa, tc, cphi, beta):
    with np.errstate(invalid='ignore', divide='ignore'):
        m = _co2_limitation(env, ca_pa, beta)
        f_v = as_array(PhotosynLimiters(m, method='wang17').f_v)
        # no viable operating point where m <= c* or m is undefined
        M = np.where(f_v > 0, m * f_v, 0.0)
    return M * as_array(calc_max_quantum_efficiency(tc, cphi))


def calc_lue(tc, elv, ca, vpd, cphi=0.081785, beta=146.0, strict=False, patm=None):
    """
    Light use efficiency (gC mol⁻¹ photons).

    Parameters
    ----------
    tc : float or np.ndarray
        Air temperature (°C).
    elv : float or np.ndarray
        Elevation (m). Ignored if `patm` is given.
    ca : float or np.ndarray
        Ambient CO2 concentration (ppm).
    vpd : float or np.ndarray
        Vapour pressure deficit (kPa).
    cphi : float, optional
        Intrinsic quantum yield of photosynthesis (-), default 0.081785.
    beta : float, optional
        Unit cost ratio (-), default 146.
    strict : bool, optional
        If True, raise DomainError for non-positive ca or beta, or negative vpd.
    patm : float or np.ndarray, optional
        Atmospheric pressure (Pa), overrides the pressure derived from `elv`.

    Returns
    -------
    lue : float or np.ndarray
        Light use efficiency, 0 where the CO2 limitation term is below c* = 0.41.
    """
    env = _environment(tc, elv, vpd, 'ci', strict=strict, patm=patm)
    ca_pa = as_array(co2_ppm_to_pa(ca, env['patm'], strict=strict))
    if strict:
        check_positive("beta", beta)
    return as_output(_lue_from_env(env, ca_pa, tc, cphi, beta))


def GPP(tc, elv, ca, vpd, PPFD, fAPAR, cphi=0.081785, beta=146.0, strict=False):
    """
    Gross primary production from the P-model light use efficiency.

    Parameters
    ----------
    tc : float or np.ndarray
        Air temperature (°C).
    elv : float or np.ndarray
        Elevation (m).
    ca : float or np.ndarray
        Ambient CO2 concentration (ppm).
    vpd : float or np.ndarray
        Vapour pressure deficit (kPa).
    PPFD : float or np.ndarray
        Photosynthetic photon flux density (mol m⁻² time⁻¹).
    fAPAR : float or np.ndarray
        Fraction of absorbed PAR (0–1).
    cphi : float, optional
        Intrinsic quantum yield of photosynthesis (-), default 0.081785.
    beta : float, optional
        Unit cost ratio (-), default 146.
    strict : bool, optional
        If True, raise DomainError for non-positive ca or beta, or negative vpd.

    Returns
    -------
    gpp : float or np.ndarray
        Gross primary production (gC m⁻² time⁻¹), in the time unit of PPFD.

    Example
    -------
    gpp = GPP(tc=20, elv=0, ca=400, vpd=1, PPFD=40, fAPAR=0.8)  # PPFD in mol m⁻² d⁻¹
    print(f"GPP: {gpp:.2f} gC m⁻² d⁻¹")
    """
    lue = as_array(calc_lue(tc, elv, ca, vpd, cphi=cphi, beta=beta, strict=strict))
    gpp = lue * as_array(fAPAR) * as_array(PPFD)

    n_zero = np.count_nonzero(lue == 0)
    if n_zero:
        logger.debug("GPP: %d value(s) without a viable light-limited operating point", n_zero)
    return as_output(gpp)


def calc_iwue(ca_pa, ci_pa, patm):
    """
    Intrinsic water use efficiency (µmol mol⁻¹) from ambient and intercellular CO2 (Pa).

    iWUE = (ca - ci) / 1.6
    """
    ca_pa = as_array(ca_pa)
    ci_pa = as_array(ci_pa)
    return as_output((5 / 8 * (ca_pa - ci_pa)) / (1e-6 * as_array(patm)))
