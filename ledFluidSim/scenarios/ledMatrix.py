# -- LED Matrix Scenario -- #

'''
Fluid-on-an-LED-matrix scenario.

Spawns a block of particles inside the simulation box and pairs the
solver with a quantizer whose grid covers the box cell for cell. The
default 9x16 matrix with 0.1 cells spans exactly the
[-0.8, 0.8] x [0, 0.9] domain.

The scenario creates:
1. A SimulationConfig and GridConfig
2. A DoubleDensitySolver owning randomly spawned particles
3. A GridQuantizer for the matrix

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import json
from dataclasses import dataclass, field

import numpy as np

from ledFluidSim import constants as const
from ledFluidSim.sph.protocols import SimulationConfig
from ledFluidSim.sph.doubleDensitySolver import DoubleDensitySolver
from ledFluidSim.display.gridQuantizer import GridConfig, GridQuantizer


######################################################################
# -- LED Matrix Configuration -- #
######################################################################

@dataclass
class LedMatrixConfig:
    '''
    Configuration for an LED matrix fluid run.

    Parameters:
    -----------
    particleCount : int
        Number of particles
    spawnMin : tuple[float, float]
        Lower-left corner of the spawn rectangle
    spawnMax : tuple[float, float]
        Upper-right corner of the spawn rectangle
    seed : int | None
        Spawn seed (None for a different layout every run)
    simulation : SimulationConfig
        Particle simulation constants
    grid : GridConfig
        LED grid geometry and brightness levels
    ticks : int
        Number of ticks the runner executes
    exportInterval : int
        Record a frame for export every exportInterval ticks
    '''

    particleCount: int = const.particleCount
    spawnMin: tuple[float, float] = (-const.simHalfWidth, const.simFloor)
    spawnMax: tuple[float, float] = (const.simHalfWidth, const.simCeiling)
    seed: int | None = None
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    grid: GridConfig = field(default_factory=GridConfig)
    ticks: int = 600
    exportInterval: int = 5

    @classmethod
    def default9x16(cls) -> LedMatrixConfig:
        '''
        Standard 9x16 matrix with three brightness levels.

        250 particles spawned over the whole box.
        '''
        return cls()

    @classmethod
    def binary9x16(cls) -> LedMatrixConfig:
        '''9x16 matrix with on/off cells only.'''
        return cls(grid=GridConfig(binCount=2))

    @classmethod
    def dense9x16(cls) -> LedMatrixConfig:
        '''
        Heavier fill: 400 particles dropped from the upper half,
        five brightness levels, hash-grid neighbor search.
        '''
        return cls(
            particleCount=400,
            spawnMin=(-const.simHalfWidth, 0.5 * const.simCeiling),
            spawnMax=(const.simHalfWidth, const.simCeiling),
            simulation=SimulationConfig(neighborSearch='hashGrid'),
            grid=GridConfig(binCount=5),
        )

    @classmethod
    def fromDict(cls, data: dict) -> LedMatrixConfig:
        '''
        Build a scenario from a parsed config document.

        Reads the 'scene' section here and delegates 'simulation' /
        'fluid' to SimulationConfig and 'grid' to GridConfig.
        '''
        sceneSection = data.get('scene', {})
        simulation = SimulationConfig.fromDict(data)

        defaultMin = (-simulation.halfWidth, simulation.floor)
        defaultMax = (simulation.halfWidth, simulation.ceiling)

        return cls(
            particleCount=sceneSection.get('particleCount', const.particleCount),
            spawnMin=tuple(sceneSection.get('spawnMin', defaultMin)),
            spawnMax=tuple(sceneSection.get('spawnMax', defaultMax)),
            seed=sceneSection.get('seed'),
            simulation=simulation,
            grid=GridConfig.fromDict(data),
            ticks=sceneSection.get('ticks', 600),
            exportInterval=sceneSection.get('exportInterval', 5),
        )

    @classmethod
    def fromJson(cls, configPath: str) -> LedMatrixConfig:
        '''Load a scenario from a JSON file (see fromDict).'''
        with open(configPath, 'r') as f:
            data = json.load(f)
        return cls.fromDict(data)

    def toDict(self) -> dict:
        '''Config document in the layout fromDict reads.'''
        sim = self.simulation
        return {
            'scene': {
                'particleCount': self.particleCount,
                'spawnMin': list(self.spawnMin),
                'spawnMax': list(self.spawnMax),
                'seed': self.seed,
                'ticks': self.ticks,
                'exportInterval': self.exportInterval,
            },
            'simulation': {
                'halfWidth': sim.halfWidth,
                'floor': sim.floor,
                'ceiling': sim.ceiling,
                'forceMagnitude': sim.forceMagnitude,
                'forceAngle': sim.forceAngle,
                'neighborSearch': sim.neighborSearch,
            },
            'fluid': {
                'cutoffRadius': sim.cutoffRadius,
                'stiffness': sim.stiffness,
                'nearStiffness': sim.nearStiffness,
                'restDensity': sim.restDensity,
                'viscositySigma': sim.viscositySigma,
                'maxSpeed': sim.maxSpeed,
                'velocityDamping': sim.velocityDamping,
                'wallStiffness': sim.wallStiffness,
            },
            'grid': self.grid.toDict(),
        }


######################################################################
# -- Scenario Creation -- #
######################################################################

def createLedMatrixScene(
    sceneConfig: LedMatrixConfig,
) -> tuple[DoubleDensitySolver, GridQuantizer]:
    '''
    Create the solver and quantizer for an LED matrix run.

    Parameters:
    -----------
    sceneConfig : LedMatrixConfig
        Scenario configuration

    Returns:
    --------
    tuple[DoubleDensitySolver, GridQuantizer] :
        Solver with spawned particles, and the grid quantizer
    '''
    solver = DoubleDensitySolver.withRandomParticles(
        config=sceneConfig.simulation,
        count=sceneConfig.particleCount,
        spawnMin=np.array(sceneConfig.spawnMin, dtype=float),
        spawnMax=np.array(sceneConfig.spawnMax, dtype=float),
        seed=sceneConfig.seed,
    )
    quantizer = GridQuantizer(sceneConfig.grid)

    return (solver, quantizer)
