# -- Particle Simulation Package -- #

'''
Double-density particle fluid engine.

Provides the particle state, linear kernel, neighbor search backends,
soft wall boundaries, position-based integration, and the solver
that ties them together one tick at a time.

Sean Bowman [10/19/2026]
'''

from ledFluidSim.sph.protocols import ExternalForce, SimulationConfig, SimulationState
from ledFluidSim.sph.particles import ParticleSystem
from ledFluidSim.sph.kernels import DoubleDensityKernel
from ledFluidSim.sph.neighborSearch import (
    BruteForcePairSearch,
    SpatialHashGrid,
    KdTreePairSearch,
    createNeighborSearch,
)
from ledFluidSim.sph.doubleDensitySolver import DoubleDensitySolver
