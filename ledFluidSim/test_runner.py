# -- Runner, Config, and Export Tests -- #

'''
End-to-end checks of the tick loop on a small scene, config loading,
JSON export, and the plotly frame figures.

Sean Bowman [10/19/2026]
'''

import json
import math
import os

import numpy as np
import pytest

from ledFluidSim.runner import LedFluidRunner, buildParser, main
from ledFluidSim.scenarios.ledMatrix import LedMatrixConfig, createLedMatrixScene
from ledFluidSim.sph.protocols import SimulationConfig
from ledFluidSim.display.gridQuantizer import GridConfig
from ledFluidSim.interfaces.forceSources import (
    ConstantForceSource,
    TiltSample,
    TiltReplaySource,
)
from ledFluidSim.interfaces.frameSinks import RecordingFrameSink
from ledFluidSim.export.frameExporter import FrameExporter
from ledFluidSim.visualization import theme
from ledFluidSim.visualization.framePlots import plotFrame, plotFrameAnimation, plotDiagnostics

SAMPLE_CONFIG = os.path.join(os.path.dirname(__file__), 'configs', 'led_9x16.json')


def smallScene(**overrides):
    params = dict(particleCount=30, seed=1, ticks=10, exportInterval=2)
    params.update(overrides)
    return LedMatrixConfig(**params)


#--------------------------------------------------------------------#
# -- Tick Loop -- #
#--------------------------------------------------------------------#

def testRunSendsEveryFrameAndRecordsEveryInterval():
    sink = RecordingFrameSink()
    runner = LedFluidRunner()

    result = runner.run(smallScene(), ConstantForceSource(), sinks=[sink], quiet=True)

    assert sink.nFrames == 10
    assert runner.exporter.nFrames == 5
    assert runner.exporter.diagnostics['steps'] == [2, 4, 6, 8, 10]
    assert result['finalState'].step == 10
    assert result['finalState'].nParticles == 30
    assert result['exportPath'] is None

    frame = result['finalFrame']
    assert frame.shape == (9, 16)
    assert frame.dtype == np.uint8
    np.testing.assert_array_equal(frame, sink.frames[-1])


def testRunIsDeterministicForSeed():
    first = LedFluidRunner().run(smallScene(), ConstantForceSource(), quiet=True)
    second = LedFluidRunner().run(smallScene(), ConstantForceSource(), quiet=True)

    np.testing.assert_array_equal(first['finalFrame'], second['finalFrame'])


def testReplaySourceKeepsLastForce():
    samples = [TiltSample(0.0, 1.0)]
    runner = LedFluidRunner()
    runner.run(smallScene(ticks=4), TiltReplaySource(samples), quiet=True)

    # The one sample turns gravity toward +x, later ticks keep it
    angles = [f['forceAngle'] for f in runner.exporter.frames]
    assert angles == [0.0, 0.0]


def testSecondRunStartsWithEmptyExporter(tmp_path):
    runner = LedFluidRunner()
    runner.run(smallScene(), ConstantForceSource(), quiet=True)
    result = runner.run(
        smallScene(ticks=4), ConstantForceSource(),
        doExport=True, exportDir=str(tmp_path), quiet=True,
    )

    assert runner.exporter.nFrames == 2
    assert runner.exporter.diagnostics['steps'] == [2, 4]
    assert FrameExporter.load(result['exportPath'])['meta']['nFrames'] == 2


def testSceneCreation():
    solver, quantizer = createLedMatrixScene(smallScene())

    positions = solver.particles.positions
    assert positions.shape == (30, 2)
    assert np.all(positions >= [-0.8, 0.0])
    assert np.all(positions <= [0.8, 0.9])
    assert quantizer.config.shape == (9, 16)


#--------------------------------------------------------------------#
# -- Export -- #
#--------------------------------------------------------------------#

def testExportWritesLoadableJson(tmp_path):
    runner = LedFluidRunner()
    result = runner.run(
        smallScene(), ConstantForceSource(),
        doExport=True, exportDir=str(tmp_path), quiet=True,
    )

    data = FrameExporter.load(result['exportPath'])

    assert data['meta']['type'] == 'ledFluid'
    assert data['meta']['rows'] == 9 and data['meta']['cols'] == 16
    assert data['meta']['nFrames'] == 5
    assert len(data['frames']) == 5
    assert data['frames'][-1]['brightness'] == result['finalFrame'].astype(int).tolist()
    assert LedMatrixConfig.fromDict(data['config']) == smallScene()


def testExporterFrameArrays():
    exporter = FrameExporter()
    solver, quantizer = createLedMatrixScene(smallScene())
    solver.step()
    frame = quantizer.quantize(solver.getVisualPositions())

    exporter.addFrame(solver.currentState, frame, forceAngle=-math.pi / 2)

    arrays = exporter.frameArrays()
    assert len(arrays) == 1
    np.testing.assert_array_equal(arrays[0], frame)
    assert exporter.diagnostics['litCells'] == [int(np.count_nonzero(frame))]


#--------------------------------------------------------------------#
# -- Configuration -- #
#--------------------------------------------------------------------#

def testSampleConfigLoads():
    sceneConfig = LedMatrixConfig.fromJson(SAMPLE_CONFIG)

    assert sceneConfig.particleCount == 250
    assert sceneConfig.seed == 7
    assert sceneConfig.simulation.neighborSearch == 'hashGrid'
    assert sceneConfig.simulation.forceAngle == pytest.approx(-math.pi / 2)
    assert sceneConfig.grid == GridConfig()

    simConfig = SimulationConfig.fromJson(SAMPLE_CONFIG)
    assert simConfig == sceneConfig.simulation


def testSceneConfigJsonRoundTrip(tmp_path):
    original = LedMatrixConfig.dense9x16()
    path = tmp_path / 'scene.json'
    path.write_text(json.dumps(original.toDict()))

    assert LedMatrixConfig.fromJson(str(path)) == original


def testMissingSectionsFallBackToDefaults():
    assert SimulationConfig.fromDict({}) == SimulationConfig()
    assert LedMatrixConfig.fromDict({}) == LedMatrixConfig()


def testConfigValidation():
    with pytest.raises(ValueError):
        SimulationConfig(ceiling=0.0)
    with pytest.raises(ValueError):
        SimulationConfig(velocityDamping=0.0)
    with pytest.raises(ValueError):
        SimulationConfig(neighborSearch='octree')
    with pytest.raises(ValueError):
        SimulationConfig(cutoffRadius=-0.1)


def testPresets():
    assert LedMatrixConfig.binary9x16().grid.binCount == 2
    dense = LedMatrixConfig.dense9x16()
    assert dense.particleCount == 400
    assert dense.grid.binCount == 5
    assert dense.spawnMin[1] == pytest.approx(0.45)


#--------------------------------------------------------------------#
# -- CLI -- #
#--------------------------------------------------------------------#

def testParserDefaults():
    args = buildParser().parse_args([])
    assert args.preset == 'default'
    assert args.force_source == 'constant'
    assert not args.render and not args.export and not args.plot


def testMainRunsShortSimulation(capsys):
    main(['--ticks', '3', '--seed', '1', '--preset', 'binary'])
    out = capsys.readouterr().out

    assert 'RUN SUMMARY' in out
    assert ['Total', 'ticks:', '3'] in [line.split() for line in out.splitlines()]


def testMainExportsAndPlots(tmp_path, capsys):
    main([
        '--ticks', '10', '--seed', '2',
        '--force-source', 'rotating', '--rotation-deg-per-tick', '5',
        '--export', '--plot', '--output-dir', str(tmp_path),
    ])
    written = sorted(os.listdir(tmp_path))

    assert 'ledFluid_frames.html' in written
    assert 'ledFluid_diagnostics.html' in written
    assert any(name.startswith('ledFluid_ledMatrix_') for name in written)


def testMainReplaysTiltFile(capsys):
    tiltFile = os.path.join(os.path.dirname(__file__), 'configs', 'tilt_sweep.json')
    main(['--ticks', '5', '--seed', '3', '--force-source', 'tilt', '--tilt-file', tiltFile])
    out = capsys.readouterr().out

    assert ['Total', 'ticks:', '5'] in [line.split() for line in out.splitlines()]


def testMainTiltNeedsFile():
    with pytest.raises(SystemExit):
        main(['--ticks', '1', '--force-source', 'tilt'])


#--------------------------------------------------------------------#
# -- Plots -- #
#--------------------------------------------------------------------#

def testPlotFrame():
    frame = np.zeros((9, 16), dtype=np.uint8)
    frame[0, 3] = 255
    fig = plotFrame(frame)

    assert len(fig.data) == 1
    assert fig.data[0].z[0][3] == 255


def testPlotFrameAnimation():
    frames = [np.zeros((9, 16), dtype=np.uint8), np.full((9, 16), 128, dtype=np.uint8)]
    fig = plotFrameAnimation(frames, stepLabels=[5, 10])

    assert len(fig.frames) == 2
    assert fig.frames[1].name == '10'

    with pytest.raises(ValueError):
        plotFrameAnimation([])


def testPlotDiagnostics():
    diagnostics = {'steps': [1, 2], 'maxSpeed': [0.1, 0.2],
                   'meanDensity': [1.0, 1.1], 'litCells': [10, 12]}
    fig = plotDiagnostics(diagnostics)
    assert len(fig.data) == 3


def testDiagnosticsUseThemeColors():
    diagnostics = {'steps': [1], 'maxSpeed': [0.1], 'meanDensity': [1.0], 'litCells': [3]}
    fig = plotDiagnostics(diagnostics)

    assert [trace.line.color for trace in fig.data] == [theme.RED, theme.BLUE, theme.GREEN]


def testDomainCorners():
    config = SimulationConfig(halfWidth=0.5, floor=0.1, ceiling=0.7)
    np.testing.assert_array_equal(config.domainMin, [-0.5, 0.1])
    np.testing.assert_array_equal(config.domainMax, [0.5, 0.7])
