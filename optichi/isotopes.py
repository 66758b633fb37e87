"""
Carbon isotope discrimination (Δ13C, ‰) predicted from the optimal ci:ca and cc:ca ratios.

Three levels of the Farquhar et al. (1982) model are provided:

- simple: Δ = a + (b - a) chi
- with photorespiration: Δ = a + (b - a) chi - f Γ*/ca
- with mesophyll conductance: Δ = a (1 - chi) + am (chi - chc) + b chc - f Γ*/ca

chi always comes from the complete solver (chi_complex) and chc from chc_complex.

References
----------
- Farquhar, G. D., O'Leary, M. H. & Berry, J. A. (1982). On the relationship between carbon
  isotope discrimination and the intercellular carbon dioxide concentration in leaves.
  Australian Journal of Plant Physiology, 9, 121–137.
- Ubierna, N. & Farquhar, G. D. (2014). Advances in measurements and models of photosynthetic
  carbon isotope discrimination in C3 plants. Plant, Cell & Environment, 37, 1494–1498.
- Lavergne, A. et al. (2020). Historical changes in the stomatal limitation of photosynthesis:
  empirical support for an optimality principle. New Phytologist, 225, 2484–2497.
"""
from optichi.ecophysiology import co2_compensation_point
from optichi.micrometeorology import atmospheric_pressure, co2_ppm_to_pa
from optichi.optimality import chc_complex, chi_complex
from optichi.utilities import as_array, as_output

# Fractionation during diffusion of CO2 through the stomata (4.4, ‰)
FRAC_A = 4.4
# Fractionation during dissolution and diffusion through the mesophyll (1.8, ‰)
FRAC_AM = 1.8


def _gamma_ratio(tc, elv, ca, basis, strict):
    patm = atmospheric_pressure(elv, strict=strict)
    ca_pa = as_array(co2_ppm_to_pa(ca, patm, strict=strict))
    return as_array(co2_compensation_point(tc, patm, basis=basis)) / ca_pa


def D13C_simple(tc, elv, ca, vpd, b=27.0, beta=146.0, a=FRAC_A, strict=False):
    """
    Δ13C without photorespiration or mesophyll effects (‰).

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
    b : float, optional
        Effective fractionation by Rubisco (‰), default 27.
    beta : float, optional
        Unit cost ratio (-), default 146.
    a : float, optional
        Fractionation by diffusion through the stomata (‰), default 4.4.

    Returns
    -------
    D13C : float or np.ndarray
        Carbon isotope discrimination (‰).
    """
    chi = as_array(chi_complex(tc, elv, vpd, ca, beta, strict=strict))
    return as_output(a + (b - a) * chi)


def D13C_photorespiration(tc, elv, ca, vpd, b=29.0, f=12.0, beta=146.0, a=FRAC_A, strict=False):
    """
    Δ13C including the photorespiratory fractionation term f Γ*/ca (‰).

    `f` is the fractionation during photorespiration (‰), default 12
    (Ubierna & Farquhar, 2014); Γ* is on the stomatal basis.
    """
    chi = as_array(chi_complex(tc, elv, vpd, ca, beta, strict=strict))
    gamma_ratio = _gamma_ratio(tc, elv, ca, 'ci', strict)
    return as_output(a + (b - a) * chi - f * gamma_ratio)


def D13C_mesophyll(tc, elv, ca, vpd, theta, b=29.0, f=12.0, beta=146.0, a=FRAC_A, am=FRAC_AM,
                   strict=False):
    """
    Δ13C including photorespiration and a finite mesophyll conductance (‰).

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
    theta : float or np.ndarray
        Ratio of mesophyll to stomatal conductance (-).
    b : float, optional
        Fractionation by Rubisco (‰), default 29.
    f : float, optional
        Fractionation during photorespiration (‰), default 12.
    beta : float, optional
        Unit cost ratio (-), default 146.
    a : float, optional
        Fractionation by diffusion through the stomata (‰), default 4.4.
    am : float, optional
        Fractionation through the mesophyll (‰), default 1.8.

    Returns
    -------
    D13C : float or np.ndarray
        Carbon isotope discrimination (‰). chc and Γ* are on the chloroplast basis.
    """
    chi = as_array(chi_complex(tc, elv, vpd, ca, beta, strict=strict))
    chc = as_array(chc_complex(tc, elv, vpd, ca, beta, theta, strict=strict))
    gamma_ratio = _gamma_ratio(tc, elv, ca, 'cc', strict)
    return as_output(a * (1.0 - chi) + am * (chi - chc) + b * chc - f * gamma_ratio)
