# -- Display Package -- #

'''
Brightness grid quantization and console rendering for the LED matrix.

Sean Bowman [10/19/2026]
'''

from ledFluidSim.display.gridQuantizer import GridConfig, GridQuantizer, quantizePositions
from ledFluidSim.display.terminalRender import renderFrame
