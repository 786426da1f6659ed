# -- Position-Based Time Integration -- #

'''
Predictive integration step for the particle system.

Implements a semi-implicit (symplectic) Euler kick-drift where the
explicit velocity is not trusted across steps. After the drift the
velocity is re-derived from the position history:

    v <- v + f          (kick, f is a per-tick velocity increment)
    x <- x + v          (drift, uses the updated velocity)
    v <- x - x_prev     (velocity from position delta, Verlet-style)

Velocities faster than the speed limit are scaled down by a fixed
damping factor rather than clamped.

References:
-----------
Clavet, Beaudoin & Poulin (2005) -- Particle-based viscoelastic
    fluid simulation
Hairer et al. (2003) -- Geometric Numerical Integration

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np

from ledFluidSim.sph.particles import ParticleSystem


######################################################################
# -- Time Integrator Protocol -- #
######################################################################

class TimeIntegrator(Protocol):
    '''Protocol for per-tick integration schemes.'''

    def integrate(self, particles: ParticleSystem) -> None:
        '''
        Advance every particle by one tick.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle system to advance in place
        '''
        ...


######################################################################
# -- Position Verlet Integrator -- #
######################################################################

class PositionVerlet:
    '''
    Kick-drift integrator with velocity re-derived from positions.

    Also refreshes the visual positions, which the boundary handler
    clamps afterwards.

    Parameters:
    -----------
    maxSpeed : float
        Speed above which velocities are damped
    velocityDamping : float
        Factor applied to velocities faster than maxSpeed
    '''

    def __init__(self, maxSpeed: float, velocityDamping: float) -> None:
        self._maxSpeed = maxSpeed
        self._velocityDamping = velocityDamping

    def integrate(self, particles: ParticleSystem) -> None:
        p = particles

        p.previousPositions[:] = p.positions

        # Kick, then drift with the updated velocity
        p.velocities += p.forces
        p.positions += p.velocities
        p.visualPositions[:] = p.positions

        # Only the position history is trusted
        p.velocities[:] = p.positions - p.previousPositions

        tooFast = p.speeds() > self._maxSpeed
        if np.any(tooFast):
            p.velocities[tooFast] *= self._velocityDamping
