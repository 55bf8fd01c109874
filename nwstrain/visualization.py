import numpy as np
import matplotlib.pyplot as plt
from matplotlib.tri import UniformTriRefiner
import matplotlib.tri as tri
import matplotlib.gridspec as gridspec
from mpl_toolkits.axes_grid1.inset_locator import inset_axes

from nwstrain.physics import centerline


def plot_deformed(solution, subdiv=1, magnification=1.0, cmapin='rainbow', levels=21, fontsize=15, figsize=(10, 4)):
    """
    Displacement magnitude on the deformed strip.

    In 2D the mesh triangulation is refined subdiv times and the finite element
    displacement is interpolated on the refined vertices, in 3D the deformed
    centerline is drawn in the (length, thickness) plane.
    """
    fs = solution.fs
    mesh = fs.mesh
    geometry = mesh.geometry

    fig = plt.figure(figsize=figsize)
    gs = gridspec.GridSpec(1, 1, left=0.08, right=0.95, top=0.95, bottom=0.12)
    ax = fig.add_subplot(gs[0,0])
    ax.tick_params('both', labelsize=fontsize)

    if geometry.dim == 2:
        trigrid = tri.Triangulation(mesh.vertices[:,0], mesh.vertices[:,1], mesh.elements)
        if subdiv > 0:
            trigrid = UniformTriRefiner(trigrid).refine_triangulation(subdiv=subdiv)
        vert = np.vstack([trigrid.x, trigrid.y]).T
        u = solution.interp(vert)
        pos = vert + magnification * u

        # length axis horizontal
        ch2D = ax.tricontourf(
            pos[:,1],
            pos[:,0],
            trigrid.triangles,
            np.linalg.norm(u, axis=1),
            levels=levels,
            cmap=cmapin
        )
        cbaxes = inset_axes(ax, width="3%", height="80%", loc='center right')
        cbar = plt.colorbar(ch2D, cax=cbaxes, orientation='vertical')
        cbar.ax.tick_params(labelsize=fontsize-3)
        cbar.ax.set_ylabel(r'$|u|$ [nm]', fontsize=fontsize)
    else:
        X = centerline(geometry, nsamples=101)
        p = X + magnification * solution.interp(X)
        ax.plot(X[:,-1], X[:,0], color='grey', ls='--', lw=2)
        ax.plot(p[:,-1], p[:,0], color='red', lw=3)

    ax.set_xlabel('length [nm]', size=fontsize)
    ax.set_ylabel('thickness [nm]', size=fontsize)
    ax.set_aspect('equal', adjustable='datalim')
    return fig


def plot_bending_sweep(lattice_mismatch, curves, title=None, fontsize=12):
    """
    Simulated and analytic curvature and bending angle vs lattice mismatch.

    Args:
        lattice_mismatch (array): lattice factors of the sweep
        curves (dict): label -> dict with arrays 'curvature', 'analytic_curvature',
            'angle', 'analytic_angle' and optionally 'lattice_mismatch'
    """
    marker = ["o", "s", "^", "D"]
    color = ["red", "blue", "green", "black"]

    fig, (ax1, ax2) = plt.subplots(2, 1, sharex=True, figsize=(7, 7))
    for j, (label, c) in enumerate(curves.items()):
        # a curve may carry its own lattice factors (skipped configurations)
        x = 100 * np.asarray(c.get('lattice_mismatch', lattice_mismatch))
        m = marker[j % len(marker)]
        col = color[j % len(color)]
        ax1.plot(x, c['curvature'], color=col, marker=m, label=f'simulation, {label}')
        ax1.plot(x, c['analytic_curvature'], color=col, linestyle='--', label=f'analytic, {label}')
        ax2.plot(x, c['angle'], color=col, marker=m, label=f'simulation, {label}')
        ax2.plot(x, c['analytic_angle'], color=col, linestyle='--', label=f'analytic, {label}')

    if title is not None:
        ax1.set_title(title, fontsize=fontsize)
    ax1.set_ylabel('curvature [1/nm]', fontsize=fontsize)
    ax2.set_ylabel('angle [deg]', fontsize=fontsize)
    ax2.set_xlabel('lattice mismatch (%)', fontsize=fontsize)
    ax1.legend(fontsize=fontsize-3)
    ax2.legend(fontsize=fontsize-3)
    return fig
