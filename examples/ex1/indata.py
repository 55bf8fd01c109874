import os

cdir = os.path.dirname(os.path.abspath(__file__))
path = os.path.join(cdir, 'outdata')

############ MATERIALS #############

# region 1 (thickness coordinate below the border), region 2
materials = ['InGaAs', 'GaAs']
compositions = [0.2, 0.0]
symmetry = 'ZincBlende2D'

# lattice constants taken from the materials, relative to region 1
avgc = 1

############ GEOMETRY #############

scale = [20.0, 400.0] # [nm] thickness, length
mb = 0.3              # region 1 share of the thickness

############ SOLVER #############

strainm = 'NonlinearStrain'
full_nonlin = True
use_emb = True
nsteps = 4
maxits = 50
tres = 1e-12

femorder = 2
nrefs = 1

############ OUTPUT #############

nsamples = 41
magnification = 5.0
