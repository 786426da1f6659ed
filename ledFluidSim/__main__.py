# -- LedFluidSim CLI -- #

from ledFluidSim.runner import main

main()
