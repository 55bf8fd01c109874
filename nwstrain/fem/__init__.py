from .mesh import BimetalGeometry, BimetalMesh
from .shape import GaussParams, ShapeFunctionLagrange
from .element import FiniteElement, FemSpace
from .problem import Elasticity
from .solver import EmbeddingSchedule, NonlinearSystem, solve_by_embedding, solve_by_damping, delete_from_csr
