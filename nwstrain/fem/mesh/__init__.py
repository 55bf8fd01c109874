from .mesh import BimetalGeometry, BimetalMesh, ChangeP1toPkMesh
