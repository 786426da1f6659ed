# -- Double-Density Kernel -- #

'''
Linear proximity kernel used by double-density relaxation.

The kernel value for a pair at distance r with cutoff R is

    q = 1 - r / R,   0 <= r < R

which is one for co-located particles and falls to zero at the
cutoff. Density accumulates q^2 and near-density q^3, so the
near terms fall off more steeply and dominate only at short range.

References:
-----------
Clavet, Beaudoin & Poulin (2005) -- Particle-based viscoelastic
    fluid simulation

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np


class DoubleDensityKernel:
    '''
    Linear kernel q = 1 - r/R with squared and cubed density weights.

    Parameters:
    -----------
    cutoffRadius : float
        Interaction radius R
    '''

    def __init__(self, cutoffRadius: float) -> None:
        self._cutoffRadius = cutoffRadius

    @property
    def cutoffRadius(self) -> float:
        '''Interaction radius R.'''
        return self._cutoffRadius

    def evaluate(self, r: float) -> float:
        '''Kernel value q for a single distance, 0.0 outside the cutoff.'''
        if r >= self._cutoffRadius:
            return 0.0
        return 1.0 - r / self._cutoffRadius

    def evaluateBatch(self, r: np.ndarray) -> np.ndarray:
        '''
        Vectorized kernel value q for an array of distances.

        Parameters:
        -----------
        r : np.ndarray
            Pair distances, shape (M,)

        Returns:
        --------
        np.ndarray : q values, zero where r >= R, shape (M,)
        '''
        q = 1.0 - r / self._cutoffRadius
        return np.where(r < self._cutoffRadius, q, 0.0)

    def densityWeights(self, r: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        '''
        Density and near-density contributions for each pair.

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] : (q^2, q^3)
        '''
        q = self.evaluateBatch(r)
        qSq = q * q
        return (qSq, qSq * q)
