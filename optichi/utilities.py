import numpy as np
import pandas as pd

# ========================================================================================================================
# Array helpers
# ========================================================================================================================

def as_array(x):
    """Coerce a scalar, sequence or pandas object to a float numpy array."""
    if isinstance(x, (pd.DataFrame, pd.Series)):
        x = x.values
    return np.asarray(x, dtype=float)


def as_output(x):
    """Return 0-d results as python floats, arrays unchanged."""
    x = np.asarray(x)
    return x.item() if np.ndim(x) == 0 else x

# ========================================================================================================================
# Function shortwave_down_to_PPFD
# ========================================================================================================================

def shortwave_down_to_PPFD(shortwave_down, fAPAR=1.0) -> tuple:
    """
    Convert incoming shortwave radiation (SW) to absorbed photosynthetic photon flux density
    in both µmol and mol photon units.

    Parameters
    ----------
    shortwave_down : float or np.ndarray
        Incoming shortwave radiation (W m⁻²).
    fAPAR : float or np.ndarray, optional
        Fraction of absorbed Photosynthetically Active Radiation (dimensionless, 0–1).
        Default 1.0 returns the incident PPFD.

    Returns
    -------
    tuple
        (PPFD_umol, PPFD_mol)
        - PPFD_umol : Absorbed PPFD (µmol photons m⁻² s⁻¹)
        - PPFD_mol : Absorbed PPFD (mol photons m⁻² s⁻¹)

    Notes
    -----
    - Assumes ~50% of total shortwave radiation is within the PAR range (400–700 nm).
    - Uses the standard conversion: 1 W m⁻² ≈ 4.57 µmol photons m⁻² s⁻¹ for sunlight at ~550 nm.

    Example
    -------
    PPFD_umol, PPFD_mol = shortwave_down_to_PPFD(800, fAPAR=0.6)
    print(f"Absorbed PPFD (µmol m⁻² s⁻¹): {PPFD_umol:.2f}")
    """
    shortwave_down = as_array(shortwave_down)
    fAPAR = as_array(fAPAR)

    # ~50% of solar shortwave energy is PAR; 4.57 µmol photons per J
    PPFD_total = shortwave_down * 0.5 * 4.57

    PPFD_umol = fAPAR * PPFD_total
    PPFD_mol = PPFD_umol * 1e-6  # 1 µmol = 1e⁻⁶ mol

    return as_output(PPFD_umol), as_output(PPFD_mol)
