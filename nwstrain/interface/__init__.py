from .bimetal import BimetalProblem
