import numpy as np

from optichi.utilities import as_array, as_output
from optichi.validation import check_positive

# ========================================================================================================================
# Function atmospheric_pressure
# ========================================================================================================================

def atmospheric_pressure(elv, strict=False):
    """
    Calculate atmospheric pressure (Pa) from elevation using the barometric formula
    of the standard atmosphere (Allen, 1973).

    Parameters
    ----------
    elv : float or np.ndarray
        Elevation above sea level (m).
    strict : bool, optional
        If True, raise DomainError for elevations at or beyond T0 / L (≈44.3 km),
        where the formula has no real solution. Otherwise nan is returned there.

    Returns
    -------
    patm : float or np.ndarray
        Atmospheric pressure (Pa).

    Example
    -------
    patm = atmospheric_pressure(1500)
    print(f"Atmospheric pressure at 1500 m: {patm:.1f} Pa")
    """
    # Standard atmosphere at sea level (101325.0, Pa)
    P0 = 101325.0
    # Adiabatic lapse rate (0.0065, K/m)
    L = 0.0065
    # Standard temperature (288.15, K)
    T0 = 288.15
    # Gravitational acceleration (9.80665, m/s^2)
    g = 9.80665
    # Molecular weight of dry air (0.028963, kg/mol)
    M = 0.028963
    # Universal gas constant used by Allen (1973) (8.3143, J/mol/K)
    R = 8.3143

    elv = as_array(elv)
    base = 1.0 - L * elv / T0
    if strict:
        check_positive("1 - L*elv/T0 (elevation below 44.3 km)", base)

    # np.power keeps negative bases as nan rather than complex
    patm = P0 * np.power(base, g * M / (R * L))
    return as_output(patm)

# ========================================================================================================================
# Function arrhenius_factor
# ========================================================================================================================

def arrhenius_factor(tk, dha, tk_ref=298.15):
    """
    Calculate the Arrhenius-type temperature scaling factor of enzyme kinetics.

    Parameters
    ----------
    tk : float or np.ndarray
        Temperature (K), must be > 0.
    dha : float
        Activation energy (J/mol).
    tk_ref : float, optional
        Reference temperature (K), default 298.15 (25°C).

    Returns
    -------
    factor : float or np.ndarray
        Multiplicative factor, 1 at tk == tk_ref.
    """
    # Universal gas constant (8.3145, J/mol/K)
    R = 8.3145

    tk = as_array(tk)
    return as_output(np.exp(dha * (tk - tk_ref) / (tk_ref * R * tk)))

# ========================================================================================================================
# Unit conversions
# ========================================================================================================================

def co2_ppm_to_pa(ca_ppm, patm, strict=False):
    """
    Convert CO2 concentration (ppm) to partial pressure (Pa).

    Parameters
    ----------
    ca_ppm : float or np.ndarray
        Atmospheric CO2 concentration (ppm, µmol mol⁻¹).
    patm : float or np.ndarray
        Atmospheric pressure (Pa).
    strict : bool, optional
        If True, raise DomainError for non-positive CO2 or pressure.

    Returns
    -------
    ca_pa : float or np.ndarray
        Ambient CO2 partial pressure (Pa).
    """
    ca_ppm = as_array(ca_ppm)
    patm = as_array(patm)
    if strict:
        check_positive("ca (ppm)", ca_ppm)
        check_positive("patm (Pa)", patm)
    return as_output(1.0e-6 * ca_ppm * patm)


def vpd_kpa_to_pa(vpd):
    """Convert vapour pressure deficit from kPa to Pa."""
    return as_output(1.0e3 * as_array(vpd))
