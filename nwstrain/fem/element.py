import numpy as np

from nwstrain.exceptions import GeometryInconsistency
from nwstrain.fem.shape import ShapeFunctionLagrange

"""
Finite element class
"""
class FiniteElement:
    """
    Finite element class

    Init Parameters
    ----------
    iel : int, index element
    fs : FemSpace, finite element space the element belongs to

    Attributes
    ----------
    nods : ndarray, nodes indices
    nreg : int, region index
    material : str, material label
    el_v : ndarray, vertex coordinates
    J : ndarray, jacobian matrix, columns v_i - v_0
    Jinv : ndarray, inverse jacobian matrix
    detJ : float, jacobian
    """
    def __init__(self, iel, fs):
        self.iel = iel
        self.fs = fs
        self.shape = fs.shape

        self.nods = fs.conec[iel]
        self.nodelm = self.nods.shape[0]

        self.el_v = fs.mesh.vertices[fs.mesh.elements[iel]]
        self.J = fs.J[iel]
        self.Jinv = fs.Jinv[iel]
        self.detJ = fs.detJ[iel]

        self.nreg = fs.mesh.t_l[iel]
        self.material = fs.mesh.material[iel]

    def get_refcoord(self, x):
        x = np.atleast_2d(x)
        return (x - self.el_v[0]) @ self.Jinv.T

    def interp_sol(self, x, snod):
        # snod : nodal values of this element (nodelm, ncom)
        N, _ = self.shape.evaluate(self.get_refcoord(x))
        return N @ snod


########## FINITE ELEMENT SPACE ############

class FemSpace:
    """
    Vector Lagrange finite element space over a BimetalMesh

    Init Parameters
    ----------
    mesh : BimetalMesh
    order : int, polynomial order
    ncom : int, components per node (default: mesh dimension)

    Attributes
    ----------
    nodes : ndarray (ng_nodes, dim), coordinates of all Lagrange nodes
    conec : ndarray (nelem, nodelm), "CONEC" table
    ndof : int, total number of dof (ng_nodes * ncom)
    G : ndarray (nelem, ng, nodelm, dim), physical shape gradients at the Gauss points
    wdet : ndarray (nelem, ng), Gauss weights times |detJ|
    bn : ndarray, clamped nodes
    """
    def __init__(self, mesh, order, ncom=None):
        self.mesh = mesh
        self.order = order
        self.dim = mesh.dim
        self.ncom = ncom if ncom is not None else mesh.dim

        mesh.geometry.check_order(order)

        self.shape = ShapeFunctionLagrange(order, dim=self.dim)
        self.nodes, self.conec = mesh.ChangeP1toPkMesh(order)
        self.ng_nodes = self.nodes.shape[0]
        self.ndof = self.ng_nodes * self.ncom
        self.nodelm = self.conec.shape[1]

        self._set_jacobian()
        self._set_gradients()
        self._set_borders()

        # list of finite elements
        self.felems = [FiniteElement(iel, self) for iel in mesh.elems]

        self.total_area = self.get_total_area()

    def _set_jacobian(self):
        v = self.mesh.vertices[self.mesh.elements]
        self.J = np.swapaxes(v[:, 1:, :] - v[:, :1, :], 1, 2)
        self.detJ = np.linalg.det(self.J)
        if np.any(np.isclose(self.detJ, 0.0)):
            raise GeometryInconsistency("degenerate element in mesh")
        self.Jinv = np.linalg.inv(self.J)

    def _set_gradients(self):
        self.G = np.einsum('qbj,ejd->eqbd', self.shape.dN, self.Jinv)
        self.wdet = self.shape.gpar.wts[None, :] * np.abs(self.detJ)[:, None]

    def _set_borders(self):
        axis = self.mesh.geometry.length_axis
        self.bn = np.where(np.isclose(self.nodes[:, axis], 0.0))[0]

    def get_total_area(self):
        """Return total mesh area (volume in 3D)"""
        return self.wdet.sum()

    def get_region_area(self, region_identifiers):
        mask = np.isin(self.mesh.t_l, region_identifiers)
        return self.wdet[mask].sum()

    def get_el_areas(self):
        return self.wdet.sum(axis=1)

    def find_elements(self, points, tol=1e-9):
        """
        Index of an element containing each point

        The matplotlib trifinder is used in 2D, points it does not locate
        (and all points in 3D) are searched by barycentric coordinates.
        """
        points = np.atleast_2d(points)
        iels = np.full(points.shape[0], -1, dtype=int)
        if self.mesh.trifinder is not None:
            iels = np.asarray(self.mesh.trifinder(points[:, 0], points[:, 1]), dtype=int)

        missing = np.where(iels < 0)[0]
        if missing.shape[0] > 0:
            v0 = self.mesh.vertices[self.mesh.elements[:, 0]]
            csi = np.einsum('eij,pej->pei', self.Jinv, points[missing][:, None, :] - v0[None, :, :])
            lam = np.concatenate([1.0 - csi.sum(axis=2, keepdims=True), csi], axis=2)
            minlam = lam.min(axis=2)
            best = np.argmax(minlam, axis=1)
            inside = minlam[np.arange(missing.shape[0]), best] >= -tol
            if not np.all(inside):
                raise GeometryInconsistency(f"points outside the mesh: {points[missing][~inside]}")
            iels[missing] = best
        return iels

    def interp(self, points, snod):
        """
        Interpolate nodal values at arbitrary points

        Parameters
        ----------
        points : ndarray (npt, dim)
        snod : ndarray (ng_nodes, ncom), nodal values

        Returns
        -------
        ndarray (npt, ncom)
        """
        points = np.atleast_2d(points)
        iels = self.find_elements(points)
        out = np.zeros((points.shape[0], snod.shape[1]))
        for ip, iel in enumerate(iels):
            fel = self.felems[iel]
            out[ip] = fel.interp_sol(points[ip], snod[fel.nods])[0]
        return out
