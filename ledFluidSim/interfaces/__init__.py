# -- External Interfaces Package -- #

'''
Force sources and frame sinks the simulation loop talks to.

Sean Bowman [10/19/2026]
'''

from ledFluidSim.interfaces.protocols import ForceSource, FrameSink
from ledFluidSim.interfaces.forceSources import (
    ConstantForceSource,
    RotatingForceSource,
    TiltSample,
    TiltForceMapper,
    TiltReplaySource,
    loadTiltSamples,
    createForceSource,
)
from ledFluidSim.interfaces.frameSinks import RecordingFrameSink, TerminalFrameSink
