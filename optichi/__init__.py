import logging

from optichi.micrometeorology import atmospheric_pressure, arrhenius_factor, co2_ppm_to_pa, vpd_kpa_to_pa
from optichi.ecophysiology import (
    KINETICS_PARAMS, WaterDensity, PhotosynLimiters, water_density, water_viscosity, ns_star,
    calc_kc, calc_ko, michaelis_menten_K, co2_compensation_point, calc_ftemp_kphio,
)
from optichi.optimality import (
    xi, chi_simple, chi_complex, chc_simple, chc_complex, beta_simple, beta_complex, beta_meso,
)
from optichi.isotopes import D13C_simple, D13C_photorespiration, D13C_mesophyll
from optichi.productivity import calc_max_quantum_efficiency, calc_lue, GPP, calc_iwue
from optichi.pmodel import Optimality
from optichi.utilities import shortwave_down_to_PPFD
from optichi.validation import DomainError

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
