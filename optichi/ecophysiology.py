import logging
import warnings

import numpy as np

from optichi.micrometeorology import arrhenius_factor
from optichi.utilities import as_array, as_output

logger = logging.getLogger(__name__)

# ========================================================================================================================
# Module WaterDensity
# ========================================================================================================================

class WaterDensity:
    """
    Calculate water density (kg/m³) from temperature (°C) and atmospheric pressure (Pa).

    Supports two formulations:
    - 'Fisher' (default): Tumlirz equation with the Fisher & Dial (1975) coefficients,
      accurate over a wide temperature and pressure range.
    - 'Chen' : Chen et al. (2008), alternative high-accuracy empirical fit.

    Neither formulation checks its inputs: both are fitted over roughly 0–100°C near
    atmospheric pressure and extrapolation is the caller's risk.

    Parameters
    ----------
    Ta : float or np.ndarray
        Water temperature (°C).
    Patm : float or np.ndarray
        Atmospheric pressure (Pa).
    method : str, optional
        Calculation method ('Fisher' or 'Chen'), default = 'Fisher'.

    Raises
    ------
    ValueError
        If the method is unknown.

    Attributes
    ----------
    rho : float or np.ndarray
        Water density (kg/m³).

    Example
    -------
    rho = WaterDensity(20, 101325).rho
    print(f"Water density: {rho:.3f} kg/m³")
    """

    def __init__(self, Ta, Patm, method = 'Fisher') -> None:
        Ta = as_array(Ta)
        Patm = as_array(Patm)
        if Ta.size and np.nanmin(Ta) < -30:
            warnings.warn("Water density calculations below about -30°C are unstable")

        if method == "Fisher":
            rho = WaterDensity._calc_water_density_Fisher(Ta, Patm)

        elif method == "Chen":
            rho = WaterDensity._calc_water_density_Chen(Ta, Patm)

        else:
            raise ValueError(f"Unknown method provided to calculate water density: {method}")

        self.rho = as_output(rho)

    @staticmethod
    def _evaluate_horner_polynomial(x, cf):
        """Evaluates a polynomial with coefficients `cf` at `x` using Horner's method."""
        y = np.zeros_like(x)
        for c in reversed(cf):
            y = x * y + c
        return y

    @staticmethod
    def _calc_water_density_Chen(Ta, Patm):
        """Calculate the density of water using Chen et al 2008."""

        # Density at 1 atm (g/cm^3)
        chen_po = np.array([
            0.99983952, 6.788260e-5, -9.08659e-6, 1.022130e-7, -1.35439e-9,
            1.471150e-11, -1.11663e-13, 5.044070e-16, -1.00659e-18,
        ])
        po = WaterDensity._evaluate_horner_polynomial(Ta, chen_po)

        # Bulk modulus at 1 atm (bar)
        chen_ko = np.array([19652.17, 148.1830, -2.29995, 0.01281, -4.91564e-5, 1.035530e-7])
        ko = WaterDensity._evaluate_horner_polynomial(Ta, chen_ko)

        # Temperature dependent coefficients
        chen_ca = np.array([3.26138, 5.223e-4, 1.324e-4, -7.655e-7, 8.584e-10])
        ca = WaterDensity._evaluate_horner_polynomial(Ta, chen_ca)

        chen_cb = np.array([7.2061e-5, -5.8948e-6, 8.69900e-8, -1.0100e-9, 4.3220e-12])
        cb = WaterDensity._evaluate_horner_polynomial(Ta, chen_cb)

        # Pa -> bar
        pbar = (1.0e-5) * Patm

        pw = ko + ca * pbar + cb * pbar**2.0
        pw /= ko + ca * pbar + cb * pbar**2.0 - pbar
        pw *= (1e3) * po
        return pw

    @staticmethod
    def _calc_water_density_Fisher(Ta, Patm):
        """Calculate water density with the Tumlirz equation (Fisher & Dial, 1975)."""

        # lambda, (bar cm^3)/g
        fisher_dial_lambda = np.array([1788.316, 21.55053, -0.4695911, 0.003096363, -7.341182e-06])
        lambda_val = WaterDensity._evaluate_horner_polynomial(Ta, fisher_dial_lambda)

        # po, bar
        fisher_dial_Po = np.array([5918.499, 58.05267, -1.1253317, 0.0066123869, -1.4661625e-05])
        po_val = WaterDensity._evaluate_horner_polynomial(Ta, fisher_dial_Po)

        # vinf, cm^3/g
        fisher_dial_Vinf = np.array([
            0.6980547, -0.0007435626, 3.704258e-05, -6.315724e-07, 9.829576e-09,
            -1.197269e-10, 1.005461e-12, -5.437898e-15, 1.69946e-17, -2.295063e-20
        ])
        vinf_val = WaterDensity._evaluate_horner_polynomial(Ta, fisher_dial_Vinf)

        # Pa -> bar
        pbar = 1e-5 * Patm

        # Specific volume (cm^3 g^-1)
        spec_vol = vinf_val + lambda_val / (po_val + pbar)

        # g cm^-3 -> kg m^-3
        rho = 1e3 / spec_vol
        return rho


def water_density(tc, patm, method='Fisher'):
    """Water density (kg/m³) at temperature `tc` (°C) and pressure `patm` (Pa)."""
    return WaterDensity(tc, patm, method=method).rho

# ========================================================================================================================
# Water viscosity
# ========================================================================================================================

# Temperature and mass density dependent parameterisation of Hij in Huber et al. (2009), Table 3.
# Rows are powers of (rbar - 1), columns powers of (1/tbar - 1).
HUBER_H_IJ = np.array([
    [0.520094, 0.0850895, -1.08374, -0.289555, 0.0, 0.0],
    [0.222531, 0.999115, 1.88797, 1.26613, 0.0, 0.120573],
    [-0.281378, -0.906851, -0.772479, -0.489837, -0.25704, 0.0],
    [0.161913, 0.257399, 0.0, 0.0, 0.0, 0.0],
    [-0.0325372, 0.0, 0.0, 0.0698452, 0.0, 0.0],
    [0.0, 0.0, 0.0, 0.0, 0.00872102, 0.0],
    [0.0, 0.0, 0.0, -0.00435673, 0.0, -0.000593264],
])


def water_viscosity(tc, patm):
    """
    Calculate the dynamic viscosity of water (Pa s) following Huber et al. (2009).

    Parameters
    ----------
    tc : float or np.ndarray
        Water temperature (°C).
    patm : float or np.ndarray
        Atmospheric pressure (Pa).

    Returns
    -------
    mu : float or np.ndarray
        Viscosity of water (Pa s), ~1.138e-3 at 15°C and 101325 Pa.
    """
    tc = as_array(tc)
    patm = as_array(patm)

    # Density of water, kg/m^3
    rho = as_array(WaterDensity(tc, patm).rho)

    # Huber reference temperature (647.096, Kelvin)
    huber_tk_ast = 647.096
    # Huber reference density (322.0, kg/m^3)
    huber_rho_ast = 322.0
    tbar = (tc + 273.15) / huber_tk_ast
    rbar = rho / huber_rho_ast

    # mu0 (Eq. 11 & Table 2, Huber et al., 2009)
    huber_H_i = np.array([1.67752, 2.20462, 0.6366564, -0.241605])
    mu0 = huber_H_i[0] + huber_H_i[1] / tbar
    mu0 += huber_H_i[2] / (tbar * tbar)
    mu0 += huber_H_i[3] / (tbar * tbar * tbar)
    mu0 = (1e2 * np.sqrt(tbar)) / mu0

    # mu1 (Eq. 12 & Table 3, Huber et al., 2009)
    ctbar = (1.0 / tbar) - 1.0
    mu1 = 0.0
    for i in range(HUBER_H_IJ.shape[1]):
        cf1 = ctbar**i
        cf2 = 0.0
        for j in range(HUBER_H_IJ.shape[0]):
            cf2 += HUBER_H_IJ[j, i] * (rbar - 1.0) ** j
        mu1 += cf1 * cf2
    mu1 = np.exp(rbar * mu1)

    # mu_bar (Eq. 2, Huber et al., 2009), assumes mu2 = 1
    mu_bar = mu0 * mu1

    # Huber reference viscosity (1.0e-6, Pa s)
    huber_mu_ast = 1e-06
    return as_output(mu_bar * huber_mu_ast)


def ns_star(tc, patm, tc_ref=15.0, patm_ref=101325.0):
    """
    Calculate the viscosity of water relative to its value at the reference state.

    Parameters
    ----------
    tc : float or np.ndarray
        Air temperature (°C).
    patm : float or np.ndarray
        Atmospheric pressure (Pa).
    tc_ref : float, optional
        Reference temperature (°C), default 15.
    patm_ref : float, optional
        Reference pressure (Pa), default 101325 (standard atmosphere).

    Returns
    -------
    ns_star : float or np.ndarray
        Relative viscosity of water (-).
    """
    visc_env = as_array(water_viscosity(tc, patm))
    visc_std = water_viscosity(tc_ref, patm_ref)
    return as_output(visc_env / visc_std)

# ========================================================================================================================
# Enzyme kinetics
# ========================================================================================================================

# Reference values at 25°C and activation energies for Rubisco kinetics.
# 'ci' (stomatal basis): Bernacchi et al. (2001), values on an intercellular CO2 basis.
# 'cc' (chloroplast basis): Bernacchi et al. (2002), values corrected for mesophyll conductance.
# K = Kc (1 + pO2/Ko) is about 70.16 Pa at 25°C and 99.1 kPa. The often quoted
# 40.13 Pa is Kc alone (404.9 µmol mol-1 x 99.1 kPa), not K.
KINETICS_PARAMS = {
    'ci': {
        'kc25': 39.97,      # Pa, reported as 404.9 µmol mol-1
        'ko25': 27480.0,    # Pa, reported as 278.4 mmol mol-1
        'dhac': 79430.0,    # J/mol
        'dhao': 36380.0,    # J/mol
        'gs25': 4.332,      # Pa, reported as 42.75 µmol mol-1
        'dhag': 37830.0,    # J/mol
    },
    'cc': {
        'kc25': 27.238,     # Pa, reported as 272.38 µmol mol-1
        'ko25': 16582.0,    # Pa, reported as 165.82 mmol mol-1
        'dhac': 80990.0,    # J/mol
        'dhao': 23720.0,    # J/mol
        'gs25': 3.743,      # Pa, reported as 37.43 µmol mol-1
        'dhag': 24460.0,    # J/mol
    },
}


def _kinetics(basis):
    try:
        return KINETICS_PARAMS[basis]
    except KeyError:
        raise ValueError(f"Unknown kinetics basis: {basis!r}, expected one of {sorted(KINETICS_PARAMS)}")


def calc_kc(tc, basis='ci'):
    """Michaelis-Menten constant of Rubisco for CO2 (Pa)."""
    params = _kinetics(basis)
    tk = as_array(tc) + 273.15
    return as_output(params['kc25'] * as_array(arrhenius_factor(tk, params['dhac'])))


def calc_ko(tc, basis='ci'):
    """Michaelis-Menten constant of Rubisco for O2 (Pa)."""
    params = _kinetics(basis)
    tk = as_array(tc) + 273.15
    return as_output(params['ko25'] * as_array(arrhenius_factor(tk, params['dhao'])))


def michaelis_menten_K(tc, patm, basis='ci'):
    """
    Calculate the effective Michaelis-Menten coefficient of Rubisco-limited assimilation.

    Parameters
    ----------
    tc : float or np.ndarray
        Air temperature (°C).
    patm : float or np.ndarray
        Atmospheric pressure (Pa).
    basis : str, optional
        'ci' for the stomatal basis (Bernacchi et al., 2001), 'cc' for the chloroplast
        basis accounting for finite mesophyll conductance (Bernacchi et al., 2002).

    Returns
    -------
    K : float or np.ndarray
        Michaelis-Menten coefficient (Pa).
    """
    kc = as_array(calc_kc(tc, basis=basis))
    ko = as_array(calc_ko(tc, basis=basis))

    # O2 partial pressure, Standard Atmosphere (209476.0, ppm)
    PO2_ref = 209476.0
    po = PO2_ref * 1e-6 * as_array(patm)

    return as_output(kc * (1.0 + po / ko))


def co2_compensation_point(tc, patm, basis='ci', alpha=None):
    """
    Calculate the photorespiratory CO2 compensation point (Γ*).

    Parameters
    ----------
    tc : float or np.ndarray
        Air temperature (°C).
    patm : float or np.ndarray
        Atmospheric pressure (Pa).
    basis : str, optional
        'ci' (stomatal) or 'cc' (chloroplast). Must match the basis of K in the same computation.
    alpha : float or np.ndarray, optional
        Fraction of photorespired CO2 refixed by the leaf (0–1). If given, Γ* is
        reduced to Γ* (1 - alpha).

    Returns
    -------
    gammastar : float or np.ndarray
        CO2 compensation point (Pa).
    """
    params = _kinetics(basis)
    # Standard reference atmosphere (Allen, 1973) (101325.0, Pa)
    Patm_ref = 101325.0
    tk = as_array(tc) + 273.15

    gammastar = (
        params['gs25'] * as_array(patm) / Patm_ref
        * as_array(arrhenius_factor(tk, params['dhag']))
    )
    if alpha is not None:
        gammastar = gammastar * (1.0 - as_array(alpha))
    return as_output(gammastar)


def calc_ftemp_kphio(tc):
    """
    Quadratic temperature scaling of the intrinsic quantum yield of C3 photosynthesis
    (Bernacchi et al., 2003), clipped at 0 outside roughly -14 to 79 °C.
    """
    tc = as_array(tc)
    ftemp = 0.352 + 0.022 * tc - 3.4e-4 * tc**2
    return as_output(np.clip(ftemp, 0.0, None))

# ========================================================================================================================
# Module PhotosynLimiters
# ========================================================================================================================

class PhotosynLimiters:
    """
    Limitation factors for electron transport (Jmax) and carboxylation under the
    coordination hypothesis.

    Methods
    -------
    wang17(mj)
        Factors following Wang et al., 2017, with the unit cost of maintaining
        electron transport capacity c* = 0.41. Where mj <= c* (or mj is undefined)
        there is no viable operating point and both factors are set to 0.
    simple()
        Unity factors (no Jmax limitation).

    Parameters
    ----------
    mj : float or np.ndarray
        CO2 limitation term m = (ci - Γ*) / (ci + 2Γ*).
    method : str
        'wang17' (default) or 'simple'.

    Attributes
    ----------
    f_j : float or np.ndarray
        Limitation factor for electron transport (Jmax).
    f_v : float or np.ndarray
        Limitation factor for carboxylation / assimilation.

    Example
    -------
    limiters = PhotosynLimiters(mj=0.5, method='wang17')
    limiters.f_j, limiters.f_v
    """
    # Unit carbon cost for the maintenance of electron transport capacity
    wang17_c = 0.41

    def __init__(self, mj, method='wang17') -> None:
        mj = as_array(mj)
        if method == 'wang17':
            f_j, f_v = self.wang17(mj)
        elif method == 'simple':
            f_j, f_v = self.simple(mj)
        else:
            raise ValueError(f"Unknown limitation method: {method}")
        self.f_j = as_output(f_j)
        self.f_v = as_output(f_v)

    @staticmethod
    def wang17(mj):
        """Calculate limitation factors following :cite:`Wang:2017go`."""
        c = PhotosynLimiters.wang17_c
        mj = as_array(mj)

        # nan compares False, so undefined m falls on the floor too
        vals_defined = np.greater(mj, c)
        with np.errstate(invalid='ignore', divide='ignore'):
            f_v = np.where(vals_defined, np.sqrt(1 - (c / mj) ** (2.0 / 3.0)), 0.0)
            f_j = np.where(vals_defined, np.sqrt((mj / c) ** (2.0 / 3.0) - 1), 0.0)

        n_floored = np.size(vals_defined) - np.count_nonzero(vals_defined)
        if n_floored:
            logger.debug("wang17: %d value(s) with m <= %.2f set to zero", n_floored, c)
        return f_j, f_v

    @staticmethod
    def simple(mj):
        """Apply the 'simple' form of the equations."""
        f_v = np.ones_like(mj)  # no limitation for carboxylation
        f_j = np.ones_like(mj)  # no limitation for electron transport
        return f_j, f_v
