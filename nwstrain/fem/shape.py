import itertools
import numpy as np

from nwstrain.exceptions import GeometryInconsistency

"""
Lagrange shape functions on the reference simplex.

Reference simplex: vertices v0 = origin, v_i = e_i (i = 1..dim).
Barycentric coordinates: lambda_0 = 1 - sum(csi), lambda_i = csi_i.

A node of the order-k element is a multi-index alpha with sum(alpha) = k,
its reference coordinates are csi = alpha[1:] / k and its shape function is

    phi_alpha = prod_i P_{alpha_i}(lambda_i),   P_n(l) = prod_{j<n} (k l - j) / (j + 1)
"""


class GaussParams:
    """
    Collapsed Gauss-Legendre quadrature on the reference simplex

    Init Parameters
    ----------
    n : int, number of Gauss-Legendre points per direction
    dim : int, 2 (triangle) or 3 (tetrahedron)

    Attributes
    ----------
    pts : ndarray (ng, dim), reference coordinates
    wts : ndarray (ng,), weights, summing up to the reference volume
    """
    def __init__(self, n, dim=2):
        self.dim = dim
        x, w = np.polynomial.legendre.leggauss(n)

        # map to [0, 1]
        t = 0.5 * (x + 1.0)
        w = 0.5 * w

        if dim == 2:
            u, v = [a.flatten() for a in np.meshgrid(t, t, indexing='ij')]
            wu, wv = [a.flatten() for a in np.meshgrid(w, w, indexing='ij')]
            self.pts = np.column_stack([u, v * (1 - u)])
            self.wts = wu * wv * (1 - u)
        elif dim == 3:
            u, v, s = [a.flatten() for a in np.meshgrid(t, t, t, indexing='ij')]
            wu, wv, ws = [a.flatten() for a in np.meshgrid(w, w, w, indexing='ij')]
            self.pts = np.column_stack([u, v * (1 - u), s * (1 - u) * (1 - v)])
            self.wts = wu * wv * ws * (1 - u)**2 * (1 - v)
        else:
            raise GeometryInconsistency(f"invalid simplex dimension {dim}")

        self.n = self.wts.shape[0]


def _lagrange_factor(lam, n, k):
    # value and derivative of P_n(lam) for the order-k lattice
    val = np.ones_like(lam)
    der = np.zeros_like(lam)
    for j in range(n):
        f = (k * lam - j) / (j + 1)
        df = k / (j + 1)
        der = der * f + val * df
        val = val * f
    return val, der


def lagrange_multi_indices(order, dim):
    """Node multi-indices, vertices first (in vertex order), then the remaining nodes"""
    alphas = [
        a for a in itertools.product(range(order + 1), repeat=dim + 1)
        if sum(a) == order
    ]
    vertices = []
    for i in range(dim + 1):
        a = [0] * (dim + 1)
        a[i] = order
        vertices.append(tuple(a))
    others = sorted(a for a in alphas if a not in vertices)
    return np.array(vertices + others, dtype=int)


class ShapeFunctionLagrange:
    """
    Lagrange shape functions of arbitrary order on triangles (dim=2) or tetrahedra (dim=3)

    Init Parameters
    ----------
    order : int, polynomial order >= 1
    dim : int, 2 or 3
    ngauss : int, Gauss points per direction (default order + 2)

    Attributes
    ----------
    alphas : ndarray (nnod, dim+1), node multi-indices
    ref_nodes : ndarray (nnod, dim), reference node coordinates
    N : ndarray (nnod, ng), shape functions at the Gauss points
    dN : ndarray (ng, nnod, dim), reference gradients at the Gauss points
    """
    def __init__(self, order, dim=2, ngauss=None):
        if order < 1:
            raise GeometryInconsistency(f"invalid element order {order}")
        self.order = order
        self.dim = dim
        self.alphas = lagrange_multi_indices(order, dim)
        self.nnod = self.alphas.shape[0]
        self.ref_nodes = self.alphas[:, 1:] / order

        if ngauss is None:
            ngauss = order + 2
        self.gpar = GaussParams(ngauss, dim)

        self._get_shape()

    def evaluate(self, csi):
        """
        Shape functions and reference gradients at reference points

        Parameters
        ----------
        csi : ndarray (npt, dim)

        Returns
        -------
        N : ndarray (npt, nnod)
        dN : ndarray (npt, nnod, dim)
        """
        csi = np.atleast_2d(csi)
        npt = csi.shape[0]
        k = self.order
        lam = np.column_stack([1.0 - csi.sum(axis=1), csi])

        N = np.ones((npt, self.nnod))
        # derivatives with respect to the barycentric coordinates
        dNl = np.zeros((npt, self.nnod, self.dim + 1))
        for a, alpha in enumerate(self.alphas):
            vals = []
            ders = []
            for i in range(self.dim + 1):
                v, d = _lagrange_factor(lam[:, i], alpha[i], k)
                vals.append(v)
                ders.append(d)
            vals = np.array(vals)
            N[:, a] = np.prod(vals, axis=0)
            for i in range(self.dim + 1):
                others = np.prod(np.delete(vals, i, axis=0), axis=0)
                dNl[:, a, i] = ders[i] * others

        # chain rule, d lambda_0 / d csi_j = -1, d lambda_j / d csi_j = 1
        dN = dNl[:, :, 1:] - dNl[:, :, :1]
        return N, dN

    def _get_shape(self):
        N, dN = self.evaluate(self.gpar.pts)
        self.N = N.T
        self.dN = dN
