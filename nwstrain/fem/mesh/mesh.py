import itertools
import logging
import numpy as np
import matplotlib.tri as tri

from nwstrain.exceptions import ConfigurationError, GeometryInconsistency
from nwstrain.fem.shape import lagrange_multi_indices

logger = logging.getLogger(__name__)


class BimetalGeometry:
    """
    Two-region strip

    Init Parameters
    ----------
    scale : sequence of 2 or 3 positive lengths [nm]
        scale[0] is the thickness axis, scale[-1] the length axis
        (scale[1] is the width in 3D)
    material_border : float, fraction mb in (0, 1) of the thickness occupied by region 1

    Attributes
    ----------
    dim : int, 2 or 3
    thickness, length : float
    border : float, thickness coordinate of the material border
    region_widths : ndarray, [mb*scale[0], (1-mb)*scale[0]]
    """
    def __init__(self, scale, material_border):
        scale = np.array(scale, dtype=float).flatten()
        if scale.shape[0] not in (2, 3):
            logger.error(f"You entered scale = {scale}")
            raise GeometryInconsistency("scale must have 2 or 3 components")
        if np.any(scale <= 0.0) or not np.all(np.isfinite(scale)):
            logger.error(f"You entered scale = {scale}")
            raise GeometryInconsistency("scale lengths must be positive")
        if not (0.0 < material_border < 1.0):
            logger.error(f"You entered material_border = {material_border}")
            raise GeometryInconsistency("material border must be strictly between 0 and 1")

        self.scale = scale
        self.scale.setflags(write=False)
        self.mb = float(material_border)
        self.dim = scale.shape[0]

        self.thickness = scale[0]
        self.length = scale[-1]
        self.width = scale[1] if self.dim == 3 else None

        self.border = self.mb * self.thickness
        self.region_widths = np.array([self.border, self.thickness - self.border])

    @property
    def length_axis(self):
        return self.dim - 1

    def check_order(self, femorder):
        """Discretization order >= 1, order above 2 only in 2D"""
        if int(femorder) != femorder or femorder < 1:
            raise GeometryInconsistency(f"invalid discretization order {femorder}")
        if femorder > 2 and self.dim != 2:
            raise GeometryInconsistency(
                f"discretization order {femorder} is only available in 2D, got dim = {self.dim}"
            )

    def region_of(self, points):
        """Region tag (1 or 2) of points, by the thickness coordinate"""
        points = np.atleast_2d(points)
        return np.where(points[:, 0] < self.border, 1, 2)

    def __repr__(self):
        return f"BimetalGeometry(scale={list(self.scale)}, mb={self.mb})"


class BimetalMesh:
    """
    Structured simplex mesh of a bimetal strip

    The thickness axis is split in ncells cells with a node line on the
    material border, the other axes in cells of aspect ratio <= max_aspect.
    Rectangles are split in 2 triangles, boxes in 6 Kuhn tetrahedra.
    Every refinement doubles the number of cells along each axis.

    Init Parameters
    ----------
    geometry : BimetalGeometry
    nrefs : int, number of uniform refinements
    ncells : int, cells across the thickness before refinement
    max_aspect : float, maximum cell aspect ratio along the other axes
    reg2mat : dict, region tag -> material label

    Attributes
    ----------
    vertices : ndarray (ng_nodes, dim)
    elements : ndarray (nelem, dim+1), vertex indices
    t_l : ndarray (nelem,), region tags
    material : ndarray (nelem,), material label per element
    bn : ndarray, clamped vertices (length coordinate 0)
    """
    def __init__(self, geometry, nrefs=0, ncells=4, max_aspect=4.0, reg2mat=None):
        if nrefs < 0:
            raise ConfigurationError(f"invalid refinement count {nrefs}")
        if ncells < 2:
            raise ConfigurationError(f"at least 2 cells across the thickness are needed, got {ncells}")

        self.geometry = geometry
        self.dim = geometry.dim
        self.nrefs = nrefs
        self.ncells = ncells
        self.max_aspect = max_aspect

        self._set_axes()
        self._build()
        self._set_regions()
        self._set_borders()

        if reg2mat is not None:
            self.reg2mat = reg2mat
        else:
            self.reg2mat = {key: "Unknown material" for key in self.region_labels}
        self._set_material()

        self.trifinder = None
        if self.dim == 2:
            self._set_trifinder()

    def _set_axes(self):
        geo = self.geometry
        h = geo.thickness
        mb = geo.mb

        # cells on each side of the material border
        n1 = int(max(1, round(self.ncells * mb)))
        n1 = min(n1, self.ncells - 1)
        n2 = self.ncells - n1
        dx = h / self.ncells

        f = 2**self.nrefs
        x = np.concatenate([
            np.linspace(0.0, geo.border, n1 * f + 1),
            np.linspace(geo.border, h, n2 * f + 1)[1:]
        ])
        axes = [x]
        for L in geo.scale[1:]:
            n = int(max(1, np.ceil(L / (dx * self.max_aspect))))
            axes.append(np.linspace(0.0, L, n * f + 1))
        self.axes = axes
        self.shape = tuple(a.shape[0] for a in axes)

    def _build(self):
        grids = np.meshgrid(*self.axes, indexing='ij')
        self.vertices = np.column_stack([g.flatten() for g in grids])
        self.ng_nodes = self.vertices.shape[0]

        ids = np.arange(self.ng_nodes).reshape(self.shape)
        if self.dim == 2:
            n00 = ids[:-1, :-1].flatten()
            n10 = ids[1:, :-1].flatten()
            n01 = ids[:-1, 1:].flatten()
            n11 = ids[1:, 1:].flatten()
            elements = np.vstack([
                np.column_stack([n00, n10, n11]),
                np.column_stack([n00, n11, n01]),
            ])
        else:
            corner = {}
            for b in itertools.product((0, 1), repeat=3):
                sl = tuple(slice(1, None) if bi else slice(None, -1) for bi in b)
                corner[b] = ids[sl].flatten()
            tets = []
            # Kuhn subdivision, one tetrahedron per path from corner 000 to 111
            for perm in itertools.permutations(range(3)):
                path = [(0, 0, 0)]
                b = [0, 0, 0]
                for axis in perm:
                    b[axis] = 1
                    path.append(tuple(b))
                tets.append(np.column_stack([corner[p] for p in path]))
            elements = np.vstack(tets)
        self.elements = elements
        self.nelem = elements.shape[0]
        self.elems = np.arange(self.nelem)

    def _set_regions(self):
        centroids = self.vertices[self.elements].mean(axis=1)
        self.t_l = self.geometry.region_of(centroids)
        self.region_labels = np.unique(self.t_l)
        if self.region_labels.shape[0] != 2:
            raise GeometryInconsistency("mesh does not resolve both regions")

    def _set_borders(self):
        axis = self.geometry.length_axis
        self.bn = np.where(np.isclose(self.vertices[:, axis], 0.0))[0]

    def _set_material(self):
        self.material = np.array([self.reg2mat[reg] for reg in self.t_l])

    def _set_trifinder(self):
        self.triangulation = tri.Triangulation(self.vertices[:, 0], self.vertices[:, 1], self.elements)
        self.trifinder = self.triangulation.get_trifinder()

    def ChangeP1toPkMesh(self, order):
        """Nodes and connectivity of the order-k Lagrange mesh"""
        return ChangeP1toPkMesh(self.vertices, self.elements, order)

    def size_print(self):
        logger.info(f"mesh: {self.nelem} elements, {self.ng_nodes} vertices, cells per axis {[s - 1 for s in self.shape]}")


##############################################################################
##############################################################################

# COMMON FUNCTIONS
def ChangeP1toPkMesh(p, t, order):
    """
    Insert the Lagrange nodes of order k in a simplex mesh.

    A node is identified by the vertices of the element with a nonzero
    multi-index component, so nodes on shared edges and faces are shared.
    The first ng_vertices nodes are the mesh vertices.

    Returns
    -------
    nodes : ndarray (nnodes, dim)
    conec : ndarray (nelem, nnod), node ordering of lagrange_multi_indices
    """
    nv, dim = p.shape
    alphas = lagrange_multi_indices(order, dim)

    keys = {((iv, order),): iv for iv in range(nv)}
    nodes = [pt for pt in p]
    conec = np.zeros((t.shape[0], alphas.shape[0]), dtype=int)
    for iel, verts in enumerate(t):
        for a, alpha in enumerate(alphas):
            key = tuple(sorted((int(verts[i]), int(alpha[i])) for i in range(dim + 1) if alpha[i] > 0))
            inod = keys.get(key)
            if inod is None:
                inod = len(nodes)
                keys[key] = inod
                nodes.append(np.dot(alpha / order, p[verts]))
            conec[iel, a] = inod
    return np.array(nodes), conec
