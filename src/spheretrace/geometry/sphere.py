"""Sphere primitive with ray-sphere intersection.

This module provides a Sphere dataclass and the intersection routine used by
the scene aggregate. The intersection solves the quadratic in its reduced
(half-b) form and reports the nearest root inside the requested interval.

A negative radius describes an inward-facing shell: the intersection distances
are unchanged but the outward normal (P - C) / r flips, which is how hollow
glass spheres are modelled.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from spheretrace.geometry.sphere import Sphere, HitRecord, hit_sphere
    >>> sphere = Sphere(center=vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import Ray, ray_at, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. Negative values flip the normal.
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: Whether the ray intersected the sphere (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the sphere.
            Only valid if hit == 1.
        normal: The unit surface normal at the intersection point, oriented
            against the incoming ray. Only valid if hit == 1.
        front_face: 1 if the outward normal already opposed the ray (the ray
            arrived from outside), 0 otherwise. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def _in_interval(t: ti.f64, t_min: ti.f64, t_max: ti.f64) -> ti.i32:
    """Accept roots in the half-open interval (t_min, t_max]."""
    return t > t_min and t <= t_max


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f64, t_max: ti.f64) -> HitRecord:
    """Test for ray-sphere intersection.

    The intersection is found by solving:
        |ray.origin + t * ray.direction - center|^2 = radius^2

    which, with oc = origin - center, is the quadratic
        a*t^2 + 2*h*t + c = 0

    where:
        a = dot(direction, direction)
        h = dot(oc, direction)  (half of the traditional 'b')
        c = dot(oc, oc) - radius^2

    The smaller root is tried first and the larger one only if the smaller
    lies outside (t_min, t_max].

    Args:
        ray: The ray to test. The direction need not be normalized.
        sphere: The sphere to test intersection against.
        t_min: Exclusive lower bound on t (avoids self-intersection).
        t_max: Inclusive upper bound on t.

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    oc = ray.origin - sphere.center
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(oc, ray.direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    # Taichi requires outer-scope declaration of the result fields
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        t = (-h - sqrt_d) / a
        valid = _in_interval(t, t_min, t_max)

        if not valid:
            t = (-h + sqrt_d) / a
            valid = _in_interval(t, t_min, t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = ray_at(ray, t)

            # Sign follows the radius: negative radius points inward
            outward_normal = (hit_point - sphere.center) / sphere.radius

            if tm.dot(ray.direction, outward_normal) < 0.0:
                is_front_face = 1
                hit_normal = outward_normal
            else:
                is_front_face = 0
                hit_normal = -outward_normal

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
    )


@ti.func
def make_sphere(center: vec3, radius: ti.f64) -> Sphere:
    """Create a sphere from center and radius inside a Taichi kernel."""
    return Sphere(center=center, radius=radius)
