"""Taichi-based Monte Carlo path tracer for scenes made of spheres.

This package renders spheres with Lambertian, metal and dielectric materials
under a sky gradient, through a thin-lens camera with depth of field, and
writes plain PPM (or PNG) images.

Subpackages:
    core: Ray and vector utilities, the integrator and progressive rendering
    geometry: Sphere primitive and ray-sphere intersection
    materials: Material registry and scattering models
    scene: Sphere storage, scene manager and ready-made scenes
    camera: Thin-lens camera with ray generation
    preview: Image export and Matplotlib preview

Taichi must be initialized (see spheretrace.config.init_taichi) before any
subpackage is imported.
"""

__version__ = "0.1.0"
