# -- Particle System State -- #

'''
Dataclass holding the particle state of the fluid simulation.

Every per-particle quantity is a contiguous NumPy array with one
row per particle, so the solver can operate on all particles (or all
neighbor pairs) at once. Vector quantities have shape (N, 2), scalar
quantities shape (N,).

The particle count is fixed at construction; there is no add or
remove path.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class ParticleSystem:
    '''
    Particle state for the double-density simulation.

    Parameters:
    -----------
    positions : np.ndarray
        True particle positions, unconstrained, shape (N, 2)
    previousPositions : np.ndarray
        Positions at the start of the current step, shape (N, 2)
    visualPositions : np.ndarray
        Positions clamped to the domain, used only for display, shape (N, 2)
    velocities : np.ndarray
        Per-tick velocities derived from the position delta, shape (N, 2)
    forces : np.ndarray
        Force accumulators (per-tick velocity increments), shape (N, 2)
    densities : np.ndarray
        Density accumulators, shape (N,)
    nearDensities : np.ndarray
        Near-density accumulators, shape (N,)
    pressures : np.ndarray
        Pressures from the linear equation of state, shape (N,)
    nearPressures : np.ndarray
        Near-pressures, shape (N,)
    '''

    positions: np.ndarray
    previousPositions: np.ndarray
    visualPositions: np.ndarray
    velocities: np.ndarray
    forces: np.ndarray
    densities: np.ndarray
    nearDensities: np.ndarray
    pressures: np.ndarray
    nearPressures: np.ndarray

    @property
    def nParticles(self) -> int:
        '''Number of particles.'''
        return self.positions.shape[0]

    def speeds(self) -> np.ndarray:
        '''Per-particle speed |v|, shape (N,).'''
        return np.linalg.norm(self.velocities, axis=1)

    def maxSpeed(self) -> float:
        '''Largest particle speed, 0.0 for an empty system.'''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(self.speeds()))

    def kineticEnergy(self) -> float:
        '''
        Total kinetic energy with unit particle mass.

        KE = (1/2) * sum_i |v_i|^2
        '''
        return 0.5 * float(np.sum(self.velocities * self.velocities))

    def resetAccumulators(self) -> None:
        '''Zero the density accumulators before a new neighbor pass.'''
        self.densities[:] = 0.0
        self.nearDensities[:] = 0.0

    def flatVisualPositions(self) -> list[float]:
        '''Visual positions flattened to [x0, y0, x1, y1, ...].'''
        return self.visualPositions.ravel().tolist()

    @classmethod
    def fromPositions(
        cls,
        positions: np.ndarray,
        initialForce: np.ndarray,
        velocities: np.ndarray | None = None,
    ) -> ParticleSystem:
        '''
        Create a particle system at explicit positions.

        Previous and visual positions start equal to the positions;
        densities and pressures start at zero.

        Parameters:
        -----------
        positions : np.ndarray
            Initial positions, shape (N, 2)
        initialForce : np.ndarray
            Force vector every accumulator starts from, shape (2,)
        velocities : np.ndarray | None
            Initial velocities, shape (N, 2); zero when omitted

        Returns:
        --------
        ParticleSystem : Initialized particle system
        '''
        positions = np.array(positions, dtype=float).reshape(-1, 2)
        nParticles = positions.shape[0]

        if velocities is None:
            velocities = np.zeros((nParticles, 2))
        else:
            velocities = np.array(velocities, dtype=float).reshape(nParticles, 2)

        forces = np.tile(np.asarray(initialForce, dtype=float), (nParticles, 1))

        return cls(
            positions=positions,
            previousPositions=positions.copy(),
            visualPositions=positions.copy(),
            velocities=velocities,
            forces=forces,
            densities=np.zeros(nParticles),
            nearDensities=np.zeros(nParticles),
            pressures=np.zeros(nParticles),
            nearPressures=np.zeros(nParticles),
        )

    @classmethod
    def createRandom(
        cls,
        count: int,
        spawnMin: np.ndarray,
        spawnMax: np.ndarray,
        initialForce: np.ndarray,
        seed: int | None = None,
    ) -> ParticleSystem:
        '''
        Create particles at independent uniform positions in a rectangle.

        Parameters:
        -----------
        count : int
            Number of particles
        spawnMin : np.ndarray
            Lower-left corner (xmin, ymin) of the spawn rectangle
        spawnMax : np.ndarray
            Upper-right corner (xmax, ymax) of the spawn rectangle
        initialForce : np.ndarray
            Force vector every accumulator starts from, shape (2,)
        seed : int | None
            Random seed; None draws fresh entropy

        Returns:
        --------
        ParticleSystem : Particle system with all particles at rest
        '''
        if count < 0:
            raise ValueError(f'Particle count must be non-negative, got {count}')

        spawnMin = np.asarray(spawnMin, dtype=float)
        spawnMax = np.asarray(spawnMax, dtype=float)
        if np.any(spawnMax < spawnMin):
            raise ValueError(
                f'Spawn rectangle is inverted: min={spawnMin.tolist()}, max={spawnMax.tolist()}'
            )

        rng = np.random.default_rng(seed)
        positions = rng.uniform(spawnMin, spawnMax, size=(count, 2))

        return cls.fromPositions(positions, initialForce)
