# -- Particle Simulation Protocols -- #

'''
Configuration, force, and state dataclasses for the particle simulation,
plus the solver protocol the runner drives.

SimulationConfig is frozen: every constant the solver consumes is fixed
for the lifetime of a run.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import json
import math
from dataclasses import dataclass, asdict
from typing import Protocol, TYPE_CHECKING

import numpy as np

from ledFluidSim import constants as const

if TYPE_CHECKING:
    from ledFluidSim.sph.particles import ParticleSystem


# Neighbor search backends accepted by SimulationConfig.neighborSearch
neighborSearchNames: tuple[str, ...] = ('bruteForce', 'hashGrid', 'kdTree')


######################################################################
# -- External Force -- #
######################################################################

@dataclass(frozen=True)
class ExternalForce:
    '''
    Environment-driven force applied to every particle each tick.

    Given in polar form; the solver converts it to a Cartesian
    vector when it resets the particle force accumulators.

    Parameters:
    -----------
    magnitude : float
        Force magnitude per tick (non-negative)
    angle : float
        Direction [rad], measured counter-clockwise from +x
    '''

    magnitude: float = const.gravityMagnitude
    angle: float = const.gravityAngle

    def __post_init__(self) -> None:
        if self.magnitude < 0.0:
            raise ValueError(f'Force magnitude must be non-negative, got {self.magnitude}')

    @property
    def vector(self) -> np.ndarray:
        '''Cartesian force vector (fx, fy).'''
        return np.array([
            math.cos(self.angle) * self.magnitude,
            math.sin(self.angle) * self.magnitude,
        ])

    @classmethod
    def fromDegrees(cls, magnitude: float, angleDeg: float) -> ExternalForce:
        '''Build a force from an angle given in degrees.'''
        return cls(magnitude=magnitude, angle=math.radians(angleDeg))


######################################################################
# -- Simulation Configuration -- #
######################################################################

@dataclass(frozen=True)
class SimulationConfig:
    '''
    Immutable configuration for the double-density particle simulation.

    Parameters:
    -----------
    halfWidth : float
        Domain half-width; x spans [-halfWidth, halfWidth]
    floor : float
        Lower y bound of the domain
    ceiling : float
        Upper y bound of the domain
    cutoffRadius : float
        Interaction radius R; pairs at distance >= R do not interact
    stiffness : float
        Pressure stiffness K
    nearStiffness : float
        Near-pressure stiffness K_near
    restDensity : float
        Rest density of the linear equation of state
    viscositySigma : float
        Linear viscosity coefficient sigma
    maxSpeed : float
        Speed threshold above which velocity is damped
    velocityDamping : float
        Proportional damping factor in (0, 1]
    wallStiffness : float
        Soft wall spring constant
    forceMagnitude : float
        Default external force magnitude (initial force accumulator)
    forceAngle : float
        Default external force angle [rad]
    neighborSearch : str
        Neighbor search backend: 'bruteForce', 'hashGrid' or 'kdTree'
    '''

    halfWidth: float = const.simHalfWidth
    floor: float = const.simFloor
    ceiling: float = const.simCeiling
    cutoffRadius: float = const.cutoffRadius
    stiffness: float = const.stiffness
    nearStiffness: float = const.nearStiffness
    restDensity: float = const.restDensity
    viscositySigma: float = const.viscositySigma
    maxSpeed: float = const.maxSpeed
    velocityDamping: float = const.velocityDamping
    wallStiffness: float = const.wallStiffness
    forceMagnitude: float = const.gravityMagnitude
    forceAngle: float = const.gravityAngle
    neighborSearch: str = 'bruteForce'

    def __post_init__(self) -> None:
        if self.halfWidth <= 0.0:
            raise ValueError(f'halfWidth must be positive, got {self.halfWidth}')
        if self.ceiling <= self.floor:
            raise ValueError(
                f'ceiling ({self.ceiling}) must be above floor ({self.floor})'
            )
        if self.cutoffRadius <= 0.0:
            raise ValueError(f'cutoffRadius must be positive, got {self.cutoffRadius}')
        if self.stiffness < 0.0 or self.nearStiffness < 0.0:
            raise ValueError('Stiffness constants must be non-negative')
        if not 0.0 < self.velocityDamping <= 1.0:
            raise ValueError(
                f'velocityDamping must lie in (0, 1], got {self.velocityDamping}'
            )
        if self.forceMagnitude < 0.0:
            raise ValueError(f'forceMagnitude must be non-negative, got {self.forceMagnitude}')
        if self.neighborSearch not in neighborSearchNames:
            raise ValueError(f'Unknown neighbor search: {self.neighborSearch}')

    @property
    def domainMin(self) -> np.ndarray:
        '''Lower-left corner of the domain.'''
        return np.array([-self.halfWidth, self.floor])

    @property
    def domainMax(self) -> np.ndarray:
        '''Upper-right corner of the domain.'''
        return np.array([self.halfWidth, self.ceiling])

    @property
    def defaultForce(self) -> ExternalForce:
        '''External force the particle accumulators start from.'''
        return ExternalForce(self.forceMagnitude, self.forceAngle)

    def toDict(self) -> dict:
        '''Plain dict of all fields (JSON-serializable).'''
        return asdict(self)

    @classmethod
    def fromDict(cls, data: dict) -> SimulationConfig:
        '''
        Build a configuration from parsed JSON data.

        Reads the 'simulation' (domain, neighbor search, default force)
        and 'fluid' (stiffness, viscosity, damping) sections. Missing
        keys fall back to the module defaults.

        Parameters:
        -----------
        data : dict
            Parsed configuration document

        Returns:
        --------
        SimulationConfig : Loaded configuration
        '''
        simSection = data.get('simulation', {})
        fluidSection = data.get('fluid', {})

        forceAngle = simSection.get('forceAngle', const.gravityAngle)
        if 'forceAngleDeg' in simSection:
            forceAngle = math.radians(simSection['forceAngleDeg'])

        return cls(
            halfWidth=simSection.get('halfWidth', const.simHalfWidth),
            floor=simSection.get('floor', const.simFloor),
            ceiling=simSection.get('ceiling', const.simCeiling),
            forceMagnitude=simSection.get('forceMagnitude', const.gravityMagnitude),
            forceAngle=forceAngle,
            neighborSearch=simSection.get('neighborSearch', 'bruteForce'),
            cutoffRadius=fluidSection.get('cutoffRadius', const.cutoffRadius),
            stiffness=fluidSection.get('stiffness', const.stiffness),
            nearStiffness=fluidSection.get('nearStiffness', const.nearStiffness),
            restDensity=fluidSection.get('restDensity', const.restDensity),
            viscositySigma=fluidSection.get('viscositySigma', const.viscositySigma),
            maxSpeed=fluidSection.get('maxSpeed', const.maxSpeed),
            velocityDamping=fluidSection.get('velocityDamping', const.velocityDamping),
            wallStiffness=fluidSection.get('wallStiffness', const.wallStiffness),
        )

    @classmethod
    def fromJson(cls, configPath: str) -> SimulationConfig:
        '''Load configuration from a JSON file (see fromDict).'''
        with open(configPath, 'r') as f:
            data = json.load(f)
        return cls.fromDict(data)


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Diagnostics snapshot taken after a simulation step.

    Parameters:
    -----------
    step : int
        Number of completed steps
    nParticles : int
        Particle count
    nNeighborPairs : int
        In-range pairs found during the last step
    maxSpeed : float
        Largest particle speed [units/tick]
    meanDensity : float
        Mean particle density
    maxDensity : float
        Largest particle density
    kineticEnergy : float
        0.5 * sum |v|^2 (unit particle mass)
    nOutside : int
        Particles whose true position lies outside the domain
    '''

    step: int
    nParticles: int
    nNeighborPairs: int
    maxSpeed: float
    meanDensity: float
    maxDensity: float
    kineticEnergy: float
    nOutside: int


######################################################################
# -- Solver Protocol -- #
######################################################################

class ParticleSolver(Protocol):
    '''Protocol for particle solvers driven one tick at a time.'''

    def step(self, forceMagnitude: float, forceAngle: float) -> None:
        '''Advance one tick under the given external force.'''
        ...

    def getVisualPositions(self) -> list[float]:
        '''Flat [x0, y0, x1, y1, ...] list of display positions.'''
        ...

    @property
    def currentState(self) -> SimulationState:
        '''Diagnostics after the last step.'''
        ...

    @property
    def particles(self) -> ParticleSystem:
        '''Access the particle system.'''
        ...
