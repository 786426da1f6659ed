# -- Soft Wall Boundary -- #

'''
Soft wall constraints for the rectangular simulation domain.

Particles that leave the domain are not clamped. Instead each crossed
wall adds a linear spring force proportional to the penetration depth,
pulling the particle back over the following ticks, which permits a
brief overshoot. The visual position, used only for display, is
clamped to the wall on the same tick so the LED grid never shows a
particle outside the box.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import numpy as np

from ledFluidSim.sph.particles import ParticleSystem


class SoftWallBoundary:
    '''
    Linear spring walls on all four sides of a rectangle.

    Parameters:
    -----------
    domainMin : np.ndarray
        Lower-left corner (-halfWidth, floor)
    domainMax : np.ndarray
        Upper-right corner (halfWidth, ceiling)
    wallStiffness : float
        Spring constant; force = -penetration * wallStiffness
    '''

    def __init__(
        self,
        domainMin: np.ndarray,
        domainMax: np.ndarray,
        wallStiffness: float = 1.0,
    ) -> None:
        self._domainMin = np.asarray(domainMin, dtype=float).copy()
        self._domainMax = np.asarray(domainMax, dtype=float).copy()
        self._wallStiffness = wallStiffness

    @property
    def domainMin(self) -> np.ndarray:
        return self._domainMin

    @property
    def domainMax(self) -> np.ndarray:
        return self._domainMax

    def outsideMask(self, positions: np.ndarray) -> np.ndarray:
        '''Boolean mask of positions lying outside the domain on any axis.'''
        below = positions < self._domainMin
        above = positions > self._domainMax
        return np.any(below | above, axis=1)

    def enforceBoundary(self, particles: ParticleSystem) -> None:
        '''
        Add wall spring forces and clamp visual positions.

        Must run after the force accumulators are reset to the external
        force for the tick, since the spring is added on top of it.

        Parameters:
        -----------
        particles : ParticleSystem
            The particle system to constrain
        '''
        positions = particles.positions
        forces = particles.forces
        visual = particles.visualPositions

        for d in range(2):
            lower = self._domainMin[d]
            upper = self._domainMax[d]

            belowMin = positions[:, d] < lower
            forces[belowMin, d] -= (positions[belowMin, d] - lower) * self._wallStiffness
            visual[belowMin, d] = lower

            aboveMax = positions[:, d] > upper
            forces[aboveMax, d] -= (positions[aboveMax, d] - upper) * self._wallStiffness
            visual[aboveMax, d] = upper
