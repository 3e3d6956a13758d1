"""Taichi-based analytic ray tracer for four spatial dimensions.

The renderer casts one primary ray per pixel into a scene of hyperspheres
and finite hyperplane slabs, finds the nearest hit and shades it with a hard
directional light over a sky gradient. Slabs are placed with motors, the
16-coefficient rigid motions of 4D projective geometric algebra.

Subpackages:
    algebra: Blade products, motor construction and reference transforms
        (pure NumPy, safe to import before ``ti.init``)
    core: Device-side motor algebra, rays, shading, dispatch and the renderer
    geometry: Hypersphere and hyperplane slab intersection
    scene: Primitive storage, traversal, validation and scene files
    camera: Camera records, camera rigs and primary rays
    preview: PNG export

Modules that create Taichi fields must be imported after ``ti.init``.
"""

__version__ = "0.1.0"
