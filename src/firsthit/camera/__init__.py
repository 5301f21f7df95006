"""Camera module for view basis and primary ray generation.

Components:
    view: Look-at camera with perspective and orthographic projection

Ray generation uses normalized device coordinates:
    x in [-1, 1]: left to right across the image
    y in [-1, 1]: bottom to top across the image

Primary rays are generated per pixel inside the frame kernel.
"""

from .view import (
    Projection,
    ViewCamera,
    build_view_basis,
    generate_ray,
    get_camera_info,
    get_pixel_ray,
    get_ray,
    orbit_eye,
    pixel_to_ndc,
    setup_camera,
)

__all__ = [
    "Projection",
    "ViewCamera",
    "build_view_basis",
    "setup_camera",
    "get_ray",
    "get_pixel_ray",
    "generate_ray",
    "get_camera_info",
    "orbit_eye",
    "pixel_to_ndc",
]
