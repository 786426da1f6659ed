# -- Default Constants for the LED Fluid Simulation -- #

'''
Default physical, numerical, and display constants.

The simulation runs in abstract "tick" units: forces are applied
directly as per-tick velocity increments and velocities as per-tick
position increments. Lengths are in domain units where the LED
matrix spans [-simHalfWidth, simHalfWidth] x [simFloor, simCeiling].

Sean Bowman [10/19/2026]
'''

import math

#--------------------------------------------------------------------#
# -- Domain Geometry -- #
#--------------------------------------------------------------------#

# Half-width of the simulation box (x in [-simHalfWidth, simHalfWidth])
simHalfWidth: float = 0.8

# Vertical extent of the simulation box (y in [simFloor, simCeiling])
simFloor: float = 0.0
simCeiling: float = 0.9

#--------------------------------------------------------------------#
# -- External Force (Gravity Analog) -- #
#--------------------------------------------------------------------#

# Per-tick gravity magnitude
gravityMagnitude: float = 0.02 * 0.25

# Gravity direction [rad], straight down
gravityAngle: float = -0.5 * math.pi

#--------------------------------------------------------------------#
# -- Double-Density Relaxation Parameters -- #
#--------------------------------------------------------------------#

# Nominal particle spacing, sets stiffness and cutoff radius
particleSpacing: float = 0.12

# Pressure stiffness K
stiffness: float = particleSpacing / 1000.0

# Near-pressure stiffness, an order of magnitude stiffer than K
nearStiffness: float = stiffness * 10.0

# Rest density the linear equation of state relaxes toward
restDensity: float = 1.0

# Interaction cutoff radius R
cutoffRadius: float = particleSpacing * 1.25

# Linear viscosity coefficient
viscositySigma: float = 0.2

# Speed above which velocities get damped [units/tick]
maxSpeed: float = 2.0

# Proportional velocity damping applied above maxSpeed
velocityDamping: float = 0.5

# Soft wall spring constant
wallStiffness: float = 1.0

#--------------------------------------------------------------------#
# -- LED Matrix -- #
#--------------------------------------------------------------------#

ledRows: int = 9
ledCols: int = 16

# Edge length of one LED cell in domain units
ledCellSize: float = 0.1

# Number of brightness levels (2 = on/off)
brightnessBins: int = 3

# Default particle count
particleCount: int = 250
