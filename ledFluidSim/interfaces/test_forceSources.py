# -- Force Source and Frame Sink Tests -- #

'''
Sean Bowman [10/19/2026]
'''

import io
import json
import math

import numpy as np
import pytest

from ledFluidSim.sph.protocols import ExternalForce
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


def testExternalForceVector():
    force = ExternalForce(magnitude=2.0, angle=math.pi / 2)
    np.testing.assert_allclose(force.vector, [0.0, 2.0], atol=1e-12)

    down = ExternalForce.fromDegrees(0.005, -90.0)
    np.testing.assert_allclose(down.vector, [0.0, -0.005], atol=1e-12)


def testExternalForceRejectsNegativeMagnitude():
    with pytest.raises(ValueError):
        ExternalForce(magnitude=-1.0, angle=0.0)


def testConstantSourceRepeats():
    force = ExternalForce(0.01, 0.3)
    source = ConstantForceSource(force)
    assert source.read() == force
    assert source.read() == force


def testRotatingSourceAdvancesAndWraps():
    source = RotatingForceSource(magnitude=1.0, startAngle=0.0, ratePerTick=math.pi / 2)
    angles = [source.read().angle for _ in range(5)]

    np.testing.assert_allclose(angles[:3], [0.0, math.pi / 2, math.pi])
    # Angles stay within [-pi, pi]
    assert all(-math.pi <= a <= math.pi for a in angles)
    assert math.isclose(math.cos(angles[4]), 1.0)


def testMapperDefaultsSteerDirectionOnly():
    mapper = TiltForceMapper(baseMagnitude=0.005, baseAngle=-math.pi / 2)
    force = mapper.toForce(TiltSample(angleDeg=180.0, magnitude=0.25))

    assert force.magnitude == pytest.approx(0.005)
    assert force.angle == pytest.approx(math.pi)


def testMapperScalesMagnitudeWithFixedAngle():
    mapper = TiltForceMapper(
        baseMagnitude=0.004,
        baseAngle=-math.pi / 2,
        tiltSetsAngle=False,
        tiltScalesMagnitude=True,
    )
    force = mapper.toForce(TiltSample(angleDeg=45.0, magnitude=0.5))

    assert force.magnitude == pytest.approx(0.002)
    assert force.angle == pytest.approx(-math.pi / 2)


def testMapperClampsNegativeTiltMagnitude():
    mapper = TiltForceMapper(tiltScalesMagnitude=True)
    force = mapper.toForce(TiltSample(angleDeg=0.0, magnitude=-0.3))
    assert force.magnitude == 0.0


def testReplaySourceEndsWithNone():
    samples = [TiltSample(0.0, 1.0), TiltSample(90.0, 1.0)]
    source = TiltReplaySource(samples)

    first = source.read()
    second = source.read()

    assert first.angle == pytest.approx(0.0)
    assert second.angle == pytest.approx(math.pi / 2)
    assert source.read() is None
    assert source.read() is None


def testCreateForceSource():
    constant = createForceSource('constant', magnitude=0.01, angle=0.0)
    rotating = createForceSource('rotating', magnitude=0.01, angle=0.0, ratePerTick=0.1)

    assert isinstance(constant, ConstantForceSource)
    assert isinstance(rotating, RotatingForceSource)
    assert constant.read().magnitude == pytest.approx(0.01)

    with pytest.raises(ValueError):
        createForceSource('serial')


def testRecordingSinkCopiesAndTrims():
    sink = RecordingFrameSink(maxFrames=2)
    frame = np.zeros((2, 2), dtype=np.uint8)

    for value in (10, 20, 30):
        frame[0, 0] = value
        sink.send(frame)

    assert sink.nFrames == 2
    assert [f[0, 0] for f in sink.frames] == [20, 30]


def testTerminalSinkSkipsFrames():
    stream = io.StringIO()
    sink = TerminalFrameSink(stream=stream, everyNth=2)
    frame = np.full((2, 3), 255, dtype=np.uint8)

    for _ in range(3):
        sink.send(frame)

    # Frames 1 and 3 drawn, two grid rows each
    assert stream.getvalue().count('|@@@|') == 4
    assert '\x1b[' not in stream.getvalue()


def testLoadTiltSamples(tmp_path):
    path = tmp_path / 'tilt.json'
    path.write_text(json.dumps({'samples': [
        {'angleDeg': -90.0, 'magnitude': 1.0},
        {'angleDeg': 45.0},
    ]}))

    samples = loadTiltSamples(str(path))

    assert samples == [TiltSample(-90.0, 1.0), TiltSample(45.0, 1.0)]


def testLoadTiltSamplesRejectsMissingList(tmp_path):
    path = tmp_path / 'tilt.json'
    path.write_text(json.dumps({'angles': [1, 2]}))

    with pytest.raises(ValueError):
        loadTiltSamples(str(path))


def testCreateTiltSourceReplaysFile(tmp_path):
    path = tmp_path / 'tilt.json'
    path.write_text(json.dumps({'samples': [{'angleDeg': 180.0, 'magnitude': 0.5}]}))

    source = createForceSource(
        'tilt', magnitude=0.004, tiltFile=str(path), tiltScalesMagnitude=True,
    )
    force = source.read()

    assert isinstance(source, TiltReplaySource)
    assert force.angle == pytest.approx(math.pi)
    assert force.magnitude == pytest.approx(0.002)
    assert source.read() is None

    with pytest.raises(ValueError):
        createForceSource('tilt')
