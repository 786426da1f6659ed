# -- Simulation Scenarios Package -- #

'''
Pre-configured LED matrix fluid scenarios.

Sean Bowman [10/19/2026]
'''

from ledFluidSim.scenarios.ledMatrix import LedMatrixConfig, createLedMatrixScene
