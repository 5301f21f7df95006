"""Taichi-based Whitted-style ray tracer for small animated scenes.

This package renders one traced color per pixel with support for:
- Spheres, triangles and one infinite reflective floor plane
- Phong shading from a single point light with hard shadows
- Perspective and orthographic look-at cameras
- Per-frame animation driven by an explicit frame context

Subpackages:
    core: Ray and vector utilities, shading, tracer, frame driver, animation
    geometry: Shape primitives and intersection algorithms
    scene: Scene storage, scene manager and the default demo scene
    camera: Look-at camera with ray generation
    preview: Image export, matplotlib display and interactive window
"""

__version__ = "0.1.0"
