# -- Export Package -- #

'''
Data export utilities for LED fluid runs.

Exports brightness frames and diagnostics as JSON.

Sean Bowman [10/19/2026]
'''

from ledFluidSim.export.frameExporter import FrameExporter
