import logging

import numpy as np
import pandas as pd

from optichi.micrometeorology import atmospheric_pressure, co2_ppm_to_pa
from optichi.optimality import _environment, _ratio_from_env, _xi
from optichi.productivity import _lue_from_env, calc_iwue
from optichi.utilities import as_array, as_output

logger = logging.getLogger(__name__)

# ========================================================================================================================
# Module Optimality
# ========================================================================================================================

class Optimality:
    """
    Optimality-based model for the carbon assimilation–transpiration trade-off.

    This class evaluates the core physiological relationships of the
    **P-model** (Stocker et al. 2020) for a set of environmental drivers:

    - Ambient CO₂ partial pressure
    - Photorespiratory CO₂ compensation point (Γ*)
    - Relative water viscosity (η*)
    - Michaelis–Menten coefficient (Kₘₘ)
    - Optimal ci:ca ratio (χ) and, with a mesophyll conductance ratio, cc:ca
    - Intrinsic water use efficiency, light use efficiency and GPP

    References
    ----------
    - Stocker, B. D. et al. (2020). *P-model v1.0: An optimality-based light use efficiency model for simulating ecosystem gross primary production.*
      Geoscientific Model Development, 13(3), 1545–1581.
    - Prentice, I. C. et al. (2014). *Balancing the costs of carbon gain and water transport:
      testing a new theoretical framework for plant functional ecology.*
      Ecology Letters, 17(1), 82–91.
    - Wang, H. et al. (2017). *Towards a universal model for carbon dioxide uptake by plants.*
      Nature Plants, 3(9), 734–741.

    Parameters
    ----------
    env_params : dict or pd.DataFrame
        Environmental drivers, with keys:
        - 'Ta' : Air temperature (°C)
        - 'elv' : Elevation (m), or 'Patm' : Atmospheric pressure (Pa)
        - 'VPD' : Vapour pressure deficit (kPa)
        - 'CO2' : Atmospheric CO₂ concentration (ppm)
        - Optional: 'FAPAR' (-) and 'PPFD' (mol m-2 time-1) for GPP
        The mapping is left unchanged.
    beta : float, optional
        Unit cost ratio of carboxylation to transpiration capacity, default 146.
    cphi : float, optional
        Intrinsic quantum yield of photosynthesis, default 0.081785.
    theta : float, optional
        Ratio of mesophyll to stomatal conductance; if given, 'chc' is evaluated.

    Attributes
    ----------
    results : dict
        - 'Patm' : Atmospheric pressure (Pa)
        - 'Ca' : Ambient CO₂ partial pressure (Pa)
        - 'gammastar' : Photorespiratory compensation point (Pa)
        - 'kmm' : Michaelis–Menten coefficient (Pa)
        - 'ns_star' : Relative water viscosity (-)
        - 'xi' : Sensitivity of χ to vapour pressure deficit (Pa^1/2)
        - 'chi' : Optimal ci:ca ratio (-)
        - 'Ci' : Intercellular CO₂ partial pressure (Pa)
        - 'iwue' : Intrinsic water use efficiency (µmol mol-1)
        - 'lue' : Light use efficiency (gC mol-1 photons)
        - 'chc' : Optimal cc:ca ratio (-), only if theta is given
        - 'gpp' : Gross primary production (gC m-2 time-1), only if PPFD and FAPAR are given

    Example
    -------
    opt_model = Optimality({
        'Ta': 11,
        'elv': 100,
        'VPD': 0.35,
        'CO2': 410,
        'PPFD': 30,
        'FAPAR': 0.8,
    })
    print(opt_model.results['chi'], opt_model.results['gpp'])
    """
    def __init__(self, env_params, beta=146.0, cphi=0.081785, theta=None) -> None:
        self.env_params = env_params
        self.beta = beta
        self.cphi = cphi
        self.theta = theta

        Ta = as_array(env_params['Ta'])
        if 'Patm' in env_params:
            Patm = as_array(env_params['Patm'])
        elif 'elv' in env_params:
            Patm = as_array(atmospheric_pressure(as_array(env_params['elv'])))
        else:
            raise KeyError("env_params requires either 'elv' (m) or 'Patm' (Pa)")

        env = _environment(Ta, None, as_array(env_params['VPD']), 'ci', patm=Patm)
        Ca = as_array(co2_ppm_to_pa(as_array(env_params['CO2']), Patm))

        results = {
            'Patm': Patm,
            'Ca': Ca,
            'gammastar': env['gammastar'],
            'kmm': env['kmm'],
            'ns_star': env['ns_star'],
            'xi': _xi(env, beta, None, True, False),
            'chi': _ratio_from_env(env, Ca, beta, None),
        }
        results['Ci'] = results['chi'] * Ca
        results['iwue'] = as_array(calc_iwue(Ca, results['Ci'], Patm))
        results['lue'] = _lue_from_env(env, Ca, Ta, cphi, beta)

        if theta is not None:
            env_cc = _environment(Ta, None, as_array(env_params['VPD']), 'cc', patm=Patm)
            results['chc'] = _ratio_from_env(env_cc, Ca, beta, theta)

        if 'PPFD' in env_params and 'FAPAR' in env_params:
            results['gpp'] = results['lue'] * as_array(env_params['FAPAR']) * as_array(env_params['PPFD'])

        logger.debug("Optimality evaluated %s", ", ".join(results))
        self.results = {key: as_output(value) for key, value in results.items()}

    def to_frame(self):
        """Return the results as a pandas DataFrame, one row per driver record."""
        columns = {key: np.atleast_1d(value) for key, value in self.results.items()}
        length = max(len(value) for value in columns.values())
        columns = {key: np.broadcast_to(value, (length,)) for key, value in columns.items()}
        index = self.env_params.index if isinstance(self.env_params, pd.DataFrame) else None
        return pd.DataFrame(columns, index=index)
