# -- Visualization Package -- #

'''
Plotly views of LED brightness frames and run diagnostics.

Sean Bowman [10/19/2026]
'''

from ledFluidSim.visualization.framePlots import plotFrame, plotFrameAnimation, plotDiagnostics
