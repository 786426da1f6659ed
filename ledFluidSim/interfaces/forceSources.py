# -- External Force Sources -- #

'''
Providers of the per-tick external force.

The tilt sensor path delivers samples as (angle in degrees, tilt
magnitude). How such a sample becomes a force is configurable on two
independent switches in TiltForceMapper:

    tiltSetsAngle        use the tilt angle as the force direction
    tiltScalesMagnitude  multiply the base magnitude by the tilt magnitude

The defaults (angle on, scaling off) keep a constant gravity
magnitude and steer only its direction.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Iterable, Iterator

from ledFluidSim import constants as const
from ledFluidSim.sph.protocols import ExternalForce


######################################################################
# -- Simple Sources -- #
######################################################################

class ConstantForceSource:
    '''Returns the same force every tick.'''

    def __init__(self, force: ExternalForce | None = None) -> None:
        self._force = force or ExternalForce()

    def read(self) -> ExternalForce:
        return self._force


class RotatingForceSource:
    '''
    Force of fixed magnitude whose angle advances every tick.

    Stands in for a slowly tilted display when no sensor is attached.

    Parameters:
    -----------
    magnitude : float
        Force magnitude
    startAngle : float
        Angle of the first sample [rad]
    ratePerTick : float
        Angle increment per read [rad]
    '''

    def __init__(
        self,
        magnitude: float = const.gravityMagnitude,
        startAngle: float = const.gravityAngle,
        ratePerTick: float = math.radians(0.5),
    ) -> None:
        self._magnitude = magnitude
        self._angle = startAngle
        self._ratePerTick = ratePerTick

    def read(self) -> ExternalForce:
        force = ExternalForce(self._magnitude, self._angle)
        self._angle = math.remainder(self._angle + self._ratePerTick, 2.0 * math.pi)
        return force


######################################################################
# -- Tilt Mapping -- #
######################################################################

@dataclass(frozen=True)
class TiltSample:
    '''
    One tilt reading from an orientation sensor.

    Parameters:
    -----------
    angleDeg : float
        Tilt direction [degrees]
    magnitude : float
        Tilt strength, nominally in [0, 1]
    '''

    angleDeg: float
    magnitude: float


@dataclass(frozen=True)
class TiltForceMapper:
    '''
    Converts tilt samples into external forces.

    Parameters:
    -----------
    baseMagnitude : float
        Force magnitude before any tilt scaling
    baseAngle : float
        Force angle [rad] used when tiltSetsAngle is off
    tiltSetsAngle : bool
        Take the force direction from the tilt angle
    tiltScalesMagnitude : bool
        Scale baseMagnitude by the tilt magnitude
    '''

    baseMagnitude: float = const.gravityMagnitude
    baseAngle: float = const.gravityAngle
    tiltSetsAngle: bool = True
    tiltScalesMagnitude: bool = False

    def toForce(self, sample: TiltSample) -> ExternalForce:
        angle = math.radians(sample.angleDeg) if self.tiltSetsAngle else self.baseAngle
        magnitude = self.baseMagnitude
        if self.tiltScalesMagnitude:
            magnitude *= max(0.0, sample.magnitude)
        return ExternalForce(magnitude, angle)


class TiltReplaySource:
    '''
    Plays back a sequence of tilt samples through a mapper.

    Once the samples run out read() returns None, and the caller keeps
    the last force it applied.

    Parameters:
    -----------
    samples : Iterable[TiltSample]
        Tilt readings in arrival order
    mapper : TiltForceMapper | None
        Sample-to-force conversion (defaults to angle-only mapping)
    '''

    def __init__(
        self,
        samples: Iterable[TiltSample],
        mapper: TiltForceMapper | None = None,
    ) -> None:
        self._samples: Iterator[TiltSample] = iter(samples)
        self._mapper = mapper or TiltForceMapper()

    def read(self) -> ExternalForce | None:
        sample = next(self._samples, None)
        if sample is None:
            return None
        return self._mapper.toForce(sample)


def loadTiltSamples(filepath: str) -> list[TiltSample]:
    '''
    Read recorded tilt samples from a JSON file.

    Expected layout:
        { "samples": [ { "angleDeg": -90.0, "magnitude": 1.0 }, ... ] }

    Raises:
    -------
    ValueError : If the file has no 'samples' list
    '''
    with open(filepath, 'r') as f:
        data = json.load(f)

    samples = data.get('samples') if isinstance(data, dict) else None
    if not isinstance(samples, list):
        raise ValueError(f'No "samples" list in tilt file: {filepath}')

    return [
        TiltSample(angleDeg=float(s['angleDeg']), magnitude=float(s.get('magnitude', 1.0)))
        for s in samples
    ]


def createForceSource(
    sourceType: str,
    magnitude: float = const.gravityMagnitude,
    angle: float = const.gravityAngle,
    ratePerTick: float = math.radians(0.5),
    tiltFile: str | None = None,
    tiltScalesMagnitude: bool = False,
) -> ConstantForceSource | RotatingForceSource | TiltReplaySource:
    '''
    Create a force source by name.

    Parameters:
    -----------
    sourceType : str
        'constant', 'rotating' or 'tilt'
    magnitude : float
        Force magnitude (base magnitude for 'tilt')
    angle : float
        Force angle (start angle for 'rotating') [rad]
    ratePerTick : float
        Angle increment per tick for 'rotating' [rad]
    tiltFile : str | None
        JSON file of tilt samples, required for 'tilt'
    tiltScalesMagnitude : bool
        Let the tilt magnitude scale the force for 'tilt'

    Raises:
    -------
    ValueError : If the source type is unknown or 'tilt' has no file
    '''
    if sourceType == 'constant':
        return ConstantForceSource(ExternalForce(magnitude, angle))
    elif sourceType == 'rotating':
        return RotatingForceSource(magnitude, angle, ratePerTick)
    elif sourceType == 'tilt':
        if tiltFile is None:
            raise ValueError('The tilt force source needs a tilt sample file')
        mapper = TiltForceMapper(
            baseMagnitude=magnitude,
            baseAngle=angle,
            tiltScalesMagnitude=tiltScalesMagnitude,
        )
        return TiltReplaySource(loadTiltSamples(tiltFile), mapper)
    else:
        raise ValueError(f'Unknown force source type: {sourceType}')
