# -- Double-Density Relaxation Solver -- #

'''
Particle fluid solver based on double-density relaxation.

Pressure comes from a linear equation of state on two densities: the
ordinary density (q^2 kernel) drives particles toward a rest density,
while the near-density (q^3 kernel) with a much stiffer constant
keeps particles from clumping at short range. A linear viscosity
impulse damps approaching pairs.

Density and pressure are vectorized with NumPy over the arrays of
neighbor pairs and scattered back onto particles with np.add.at,
which merges the per-pair contributions onto each particle without
lost updates. Viscosity is resolved pair by pair in (i, j) order,
since each impulse depends on the velocities the previous pairs left.

Algorithm per tick:
    1. Predictive integration (kick, drift, velocity from position delta,
       damping above the speed limit)
    2. Reset forces to the external force vector for the tick
    3. Soft wall springs and visual position clamping
    4. Neighbor search and density / near-density accumulation
    5. Pressure / near-pressure from the linear equation of state
    6. Pressure forces (action on j per pair, reaction on i summed once)
    7. Viscosity impulses on approaching pairs, applied sequentially

References:
-----------
Clavet, Beaudoin & Poulin (2005) -- Particle-based viscoelastic
    fluid simulation

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import math

import numpy as np

from ledFluidSim.sph.protocols import SimulationConfig, SimulationState
from ledFluidSim.sph.kernels import DoubleDensityKernel
from ledFluidSim.sph.particles import ParticleSystem
from ledFluidSim.sph.neighborSearch import NeighborSearch, createNeighborSearch
from ledFluidSim.sph.boundaryHandling import SoftWallBoundary
from ledFluidSim.sph.timeIntegration import PositionVerlet


class DoubleDensitySolver:
    '''
    Double-density relaxation solver for a fixed set of particles.

    Parameters:
    -----------
    config : SimulationConfig
        Immutable simulation configuration
    boundaryHandler : SoftWallBoundary | None
        Wall handler (defaults to soft walls on the config domain)
    neighborSearch : NeighborSearch | None
        Pair search backend (defaults to config.neighborSearch)
    '''

    def __init__(
        self,
        config: SimulationConfig,
        boundaryHandler: SoftWallBoundary | None = None,
        neighborSearch: NeighborSearch | None = None,
    ) -> None:
        self._config = config
        self._kernel = DoubleDensityKernel(config.cutoffRadius)
        self._boundaryHandler = boundaryHandler or SoftWallBoundary(
            domainMin=config.domainMin,
            domainMax=config.domainMax,
            wallStiffness=config.wallStiffness,
        )
        self._neighborSearch = neighborSearch or createNeighborSearch(
            config.neighborSearch, config.cutoffRadius,
        )
        self._integrator = PositionVerlet(
            maxSpeed=config.maxSpeed,
            velocityDamping=config.velocityDamping,
        )

        self._particles: ParticleSystem | None = None
        self._step: int = 0
        self._neighborPairs: tuple[np.ndarray, np.ndarray] = (
            np.array([], dtype=np.int64),
            np.array([], dtype=np.int64),
        )

    @classmethod
    def withRandomParticles(
        cls,
        config: SimulationConfig,
        count: int,
        spawnMin: np.ndarray,
        spawnMax: np.ndarray,
        seed: int | None = None,
    ) -> DoubleDensitySolver:
        '''
        Create a solver owning `count` particles spawned uniformly in a rectangle.

        Force accumulators start at the config's default external force.
        '''
        particles = ParticleSystem.createRandom(
            count=count,
            spawnMin=spawnMin,
            spawnMax=spawnMax,
            initialForce=config.defaultForce.vector,
            seed=seed,
        )
        solver = cls(config)
        solver.initialize(particles)
        return solver

    ######################################################################
    # -- Initialization -- #
    ######################################################################

    def initialize(self, particles: ParticleSystem) -> None:
        '''
        Take ownership of the particle system.

        Parameters:
        -----------
        particles : ParticleSystem
            Particles to simulate; the count stays fixed for the run
        '''
        self._particles = particles
        self._step = 0

    ######################################################################
    # -- Main Time Step -- #
    ######################################################################

    def step(
        self,
        forceMagnitude: float | None = None,
        forceAngle: float | None = None,
    ) -> None:
        '''
        Advance the simulation by one tick.

        Parameters:
        -----------
        forceMagnitude : float | None
            External force magnitude for the tick (config default if None)
        forceAngle : float | None
            External force angle [rad] for the tick (config default if None)
        '''
        p = self._particles
        if forceMagnitude is None:
            forceMagnitude = self._config.forceMagnitude
        if forceAngle is None:
            forceAngle = self._config.forceAngle

        # 1. Predictive integration
        self._integrator.integrate(p)

        # 2. Reset forces to the external force (polar -> Cartesian)
        p.forces[:, 0] = math.cos(forceAngle) * forceMagnitude
        p.forces[:, 1] = math.sin(forceAngle) * forceMagnitude

        # 3. Wall springs on top of the fresh external force
        self._boundaryHandler.enforceBoundary(p)

        # 4. Neighbor pairs and densities
        self._computeDensity()

        # 5. Linear equation of state
        self._computePressure()

        # 6. Pressure forces
        self._applyPressureForces()

        # 7. Viscosity impulses
        self._applyViscosity()

        self._step += 1

    ######################################################################
    # -- Density (Vectorized) -- #
    ######################################################################

    def _computeDensity(self) -> None:
        '''
        Find in-range pairs and accumulate density and near-density.

        rho_i      = sum_j q_ij^2
        rho_near_i = sum_j q_ij^3

        Each unordered pair contributes identically to both particles.
        There is no self-contribution.
        '''
        p = self._particles
        p.resetAccumulators()

        self._neighborSearch.build(p.positions)
        self._neighborPairs = self._neighborSearch.queryPairs(self._config.cutoffRadius)

        iIdx, jIdx = self._neighborPairs
        if len(iIdx) == 0:
            return

        dist = self._pairDistances(iIdx, jIdx)
        qSq, qCu = self._kernel.densityWeights(dist)

        np.add.at(p.densities, iIdx, qSq)
        np.add.at(p.densities, jIdx, qSq)
        np.add.at(p.nearDensities, iIdx, qCu)
        np.add.at(p.nearDensities, jIdx, qCu)

    ######################################################################
    # -- Pressure (Equation of State) -- #
    ######################################################################

    def _computePressure(self) -> None:
        '''
        p      = K * (rho - rho_0)
        p_near = K_near * rho_near

        Pressure may go negative below rest density, which pulls
        sparse particles together.
        '''
        p = self._particles
        p.pressures[:] = self._config.stiffness * (p.densities - self._config.restDensity)
        p.nearPressures[:] = self._config.nearStiffness * p.nearDensities

    ######################################################################
    # -- Pressure Forces (Vectorized) -- #
    ######################################################################

    def _applyPressureForces(self) -> None:
        '''
        Apply pairwise pressure forces along each pair's separation.

        For a pair (i, j) with r_ij = x_j - x_i and d = |r_ij| > 0:
            P   = (p_i + p_j) q^2 + (p_near_i + p_near_j) q^3
            f   = r_ij * P / d
        f is added to j directly, while every f involving i as the
        lower index is summed first and subtracted from i once.
        Co-located pairs (d == 0) have no direction and are skipped.
        '''
        p = self._particles
        iIdx, jIdx = self._neighborPairs
        if len(iIdx) == 0:
            return

        dr = p.positions[jIdx] - p.positions[iIdx]
        dist = np.sqrt(np.sum(dr * dr, axis=1))

        valid = dist != 0.0
        if not np.any(valid):
            return
        iIdx, jIdx, dr, dist = iIdx[valid], jIdx[valid], dr[valid], dist[valid]

        q = self._kernel.evaluateBatch(dist)
        totalPressure = (
            (p.pressures[iIdx] + p.pressures[jIdx]) * (q * q)
            + (p.nearPressures[iIdx] + p.nearPressures[jIdx]) * (q * q * q)
        )
        contrib = dr * (totalPressure / dist)[:, np.newaxis]

        # Action on j, per pair
        np.add.at(p.forces, jIdx, contrib)

        # Reaction on i, accumulated over all of i's pairs then applied once
        reaction = np.zeros_like(p.forces)
        np.add.at(reaction, iIdx, contrib)
        p.forces -= reaction

    ######################################################################
    # -- Viscosity (Sequential) -- #
    ######################################################################

    def _applyViscosity(self) -> None:
        '''
        Linear viscosity impulses between approaching pairs.

        With n = (x_j - x_i) / d and u = (v_i - v_j) . n:
            I = (1 - d/R) * sigma * u * n      (only when u > 0)
            v_i -= I / 2,   v_j += I / 2
        Separating and co-located pairs are left untouched.

        Pairs are resolved in place in (i, j) order, so each pair sees
        the velocities left by the pairs before it. Geometry is fixed
        during the pass and is computed for all pairs up front.
        '''
        p = self._particles
        iIdx, jIdx = self._neighborPairs
        if len(iIdx) == 0:
            return

        dr = p.positions[jIdx] - p.positions[iIdx]
        dist = np.sqrt(np.sum(dr * dr, axis=1))

        valid = dist > 0.0
        if not np.any(valid):
            return
        iIdx, jIdx, dr, dist = iIdx[valid], jIdx[valid], dr[valid], dist[valid]

        normals = dr / dist[:, np.newaxis]
        weights = (1.0 - dist / self._config.cutoffRadius) * self._config.viscositySigma

        velocities = p.velocities
        for k in range(len(iIdx)):
            i, j = iIdx[k], jIdx[k]
            n = normals[k]
            approachSpeed = (velocities[i, 0] - velocities[j, 0]) * n[0] \
                + (velocities[i, 1] - velocities[j, 1]) * n[1]
            if approachSpeed <= 0.0:
                continue

            halfImpulse = 0.5 * weights[k] * approachSpeed * n
            velocities[i] -= halfImpulse
            velocities[j] += halfImpulse

    ######################################################################
    # -- Helpers -- #
    ######################################################################

    def _pairDistances(self, iIdx: np.ndarray, jIdx: np.ndarray) -> np.ndarray:
        dr = self._particles.positions[jIdx] - self._particles.positions[iIdx]
        return np.sqrt(np.sum(dr * dr, axis=1))

    ######################################################################
    # -- Queries -- #
    ######################################################################

    def getVisualPositions(self) -> list[float]:
        '''Flat [x0, y0, x1, y1, ...] list of visual positions, particle order.'''
        return self._particles.flatVisualPositions()

    def neighborLists(self) -> list[list[int]]:
        '''
        Neighbors recorded during the last step, keyed by the lower index.

        Particle i lists every in-range j > i; the relation is not
        mirrored onto j.
        '''
        lists: list[list[int]] = [[] for _ in range(self._particles.nParticles)]
        for i, j in zip(*self._neighborPairs):
            lists[int(i)].append(int(j))
        return lists

    ######################################################################
    # -- Properties -- #
    ######################################################################

    @property
    def currentState(self) -> SimulationState:
        '''Diagnostics snapshot after the last step.'''
        p = self._particles
        nParticles = p.nParticles

        return SimulationState(
            step=self._step,
            nParticles=nParticles,
            nNeighborPairs=len(self._neighborPairs[0]),
            maxSpeed=p.maxSpeed(),
            meanDensity=float(np.mean(p.densities)) if nParticles else 0.0,
            maxDensity=float(np.max(p.densities)) if nParticles else 0.0,
            kineticEnergy=p.kineticEnergy(),
            nOutside=int(np.sum(self._boundaryHandler.outsideMask(p.positions))),
        )

    @property
    def particles(self) -> ParticleSystem:
        '''Access the particle system.'''
        return self._particles

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def neighborPairs(self) -> tuple[np.ndarray, np.ndarray]:
        '''(iIndices, jIndices) of the pairs found in the last step.'''
        return self._neighborPairs

    @property
    def stepCount(self) -> int:
        '''Number of completed steps.'''
        return self._step
