# -- LedFluidSim Package -- #

'''
Particle fluid simulation for small LED matrices.

A double-density particle fluid is stepped once per tick under an
external (tilt-driven) force, and its particle positions are binned
into a brightness grid for the display.

Sean Bowman [10/19/2026]
'''

__version__ = '0.1.0'

from ledFluidSim.runner import LedFluidRunner
from ledFluidSim.scenarios.ledMatrix import LedMatrixConfig
from ledFluidSim.export.frameExporter import FrameExporter
