"""Camera module for view and ray generation.

Components:
    thin_lens: Look-at camera with a finite aperture (depth of field)

Ray generation uses normalized image coordinates:
    s in [0, 1]: left to right across image
    t in [0, 1]: bottom to top across image
"""

from .thin_lens import (
    ThinLensCamera,
    get_camera_info,
    get_ray,
    get_ray_jittered,
    is_camera_ready,
    reset_camera,
    setup_camera,
)

__all__ = [
    "ThinLensCamera",
    "setup_camera",
    "reset_camera",
    "is_camera_ready",
    "get_ray",
    "get_ray_jittered",
    "get_camera_info",
]
