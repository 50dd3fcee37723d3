"""Parallel Phong renderer running as a Taichi kernel.

This module renders a whole image in one data-parallel kernel launch. Every
pixel runs the same pipeline as the serial Python path (Camera.ray_for_pixel,
World.color_at) on single-precision Taichi vectors:

    ray for pixel -> nearest forward hit -> normal and over point
                  -> per-light Phong term, gated by a shadow ray

Scene data lives in preallocated Taichi fields. upload_world() flattens a
World into them (inverse and inverse-transpose matrices, material
parameters, lights) and setup_camera() writes the camera state. Pixels share
no mutable state, so the result does not depend on scheduling and repeated
renders are identical.

Taichi must be initialized before this module is imported because the fields
are allocated at import time.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.caster.camera.camera import Camera
    >>> from src.caster.core.integrator import render_image
    >>> from src.caster.scene.world import World
    >>>
    >>> image = render_image(World.default(), Camera(64, 48, 1.0))
    >>> image.shape
    (48, 64, 3)
"""

import logging
import time
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.caster.core.color import Color
from src.caster.preview.canvas import Canvas
from src.caster.scene.world import SHADOW_OFFSET

if TYPE_CHECKING:
    from src.caster.camera.camera import Camera
    from src.caster.scene.world import World

logger = logging.getLogger(__name__)

vec3 = tm.vec3
vec4 = tm.vec4

# =============================================================================
# Scene Storage
# =============================================================================

# Maximum scene size (preallocated to avoid kernel recompilation)
MAX_OBJECTS = 256
MAX_LIGHTS = 16

# Parameter reported when a ray hits nothing
_NO_HIT_T = 3.0e38

# Per-object inverse transform and its transpose (for normals)
_object_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_OBJECTS)
_object_normal_matrix = ti.Matrix.field(4, 4, dtype=ti.f32, shape=MAX_OBJECTS)

# Per-object material: color, and (ambient, diffuse, specular, shininess)
_object_color = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
_object_phong = ti.Vector.field(4, dtype=ti.f32, shape=MAX_OBJECTS)
_num_objects = ti.field(dtype=ti.i32, shape=())

_light_position = ti.Vector.field(4, dtype=ti.f32, shape=MAX_LIGHTS)
_light_intensity = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
_num_lights = ti.field(dtype=ti.i32, shape=())


def upload_world(world: "World") -> None:
    """Copy a world's objects and lights into the kernel's fields.

    Objects and lights keep their order, so ties between equally distant
    hits resolve the same way as in World.intersect_world().

    Args:
        world: The world to upload.

    Raises:
        ValueError: If the world has more than MAX_OBJECTS objects or more
            than MAX_LIGHTS lights.
    """
    if len(world.objects) > MAX_OBJECTS:
        raise ValueError(f"Maximum objects ({MAX_OBJECTS}) exceeded: {len(world.objects)}")
    if len(world.lights) > MAX_LIGHTS:
        raise ValueError(f"Maximum lights ({MAX_LIGHTS}) exceeded: {len(world.lights)}")

    inverses = np.zeros((MAX_OBJECTS, 4, 4), dtype=np.float32)
    normal_matrices = np.zeros((MAX_OBJECTS, 4, 4), dtype=np.float32)
    colors = np.zeros((MAX_OBJECTS, 3), dtype=np.float32)
    phong = np.zeros((MAX_OBJECTS, 4), dtype=np.float32)
    for k, obj in enumerate(world.objects):
        inverse = obj.inverse_transform.to_numpy()
        inverses[k] = inverse
        normal_matrices[k] = inverse.T
        material = obj.material
        colors[k] = material.color.to_numpy()
        phong[k] = (material.ambient, material.diffuse, material.specular, material.shininess)

    positions = np.zeros((MAX_LIGHTS, 4), dtype=np.float32)
    intensities = np.zeros((MAX_LIGHTS, 3), dtype=np.float32)
    for k, light in enumerate(world.lights):
        positions[k] = light.position.to_numpy()
        intensities[k] = light.intensity.to_numpy()

    _object_inverse.from_numpy(inverses)
    _object_normal_matrix.from_numpy(normal_matrices)
    _object_color.from_numpy(colors)
    _object_phong.from_numpy(phong)
    _num_objects[None] = len(world.objects)

    _light_position.from_numpy(positions)
    _light_intensity.from_numpy(intensities)
    _num_lights[None] = len(world.lights)

    logger.debug("Uploaded %d objects and %d lights", len(world.objects), len(world.lights))


# =============================================================================
# Camera State
# =============================================================================

_camera_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=())
_camera_half_width = ti.field(dtype=ti.f32, shape=())
_camera_half_height = ti.field(dtype=ti.f32, shape=())
_camera_pixel_size = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: "Camera") -> None:
    """Write a camera's geometry and inverse view transform to the fields."""
    _camera_inverse.from_numpy(camera.inverse_transform.to_numpy())
    _camera_half_width[None] = camera.half_width
    _camera_half_height[None] = camera.half_height
    _camera_pixel_size[None] = camera.pixel_size


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Indexed [x, y], preallocated to the maximum size
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the color buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to black."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Return the active (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Geometry
# =============================================================================


@ti.func
def _intersect_unit_sphere(origin: vec4, direction: vec4):
    """Intersect a canonical-space ray with the unit sphere.

    Returns:
        A tuple (hit, t1, t2) with t1 <= t2; the roots are only valid when
        hit == 1.
    """
    sphere_to_ray = origin - vec4(0.0, 0.0, 0.0, 1.0)
    a = tm.dot(direction, direction)
    b = 2.0 * tm.dot(direction, sphere_to_ray)
    c = tm.dot(sphere_to_ray, sphere_to_ray) - 1.0
    discriminant = b * b - 4.0 * a * c

    hit = 0
    t1 = 0.0
    t2 = 0.0
    if discriminant >= 0.0:
        sqrt_disc = tm.sqrt(discriminant)
        hit = 1
        t1 = (-b - sqrt_disc) / (2.0 * a)
        t2 = (-b + sqrt_disc) / (2.0 * a)
    return hit, t1, t2


@ti.func
def _nearest_hit(origin: vec4, direction: vec4):
    """Find the nearest non-negative hit over all objects.

    Objects are scanned in order and a candidate only replaces the current
    best when strictly closer, so ties go to the earliest record.

    Returns:
        A tuple (object_index, t); object_index is -1 on a miss.
    """
    best_index = -1
    best_t = _NO_HIT_T
    for k in range(_num_objects[None]):
        local_origin = _object_inverse[k] @ origin
        local_direction = _object_inverse[k] @ direction
        hit, t1, t2 = _intersect_unit_sphere(local_origin, local_direction)
        if hit == 1:
            if t1 >= 0.0 and t1 < best_t:
                best_t = t1
                best_index = k
            if t2 >= 0.0 and t2 < best_t:
                best_t = t2
                best_index = k
    return best_index, best_t


@ti.func
def _normal_at(index: ti.i32, world_point: vec4) -> vec4:
    object_point = _object_inverse[index] @ world_point
    object_normal = tm.normalize(object_point - vec4(0.0, 0.0, 0.0, 1.0))
    world_normal = _object_normal_matrix[index] @ object_normal
    world_normal[3] = 0.0
    return tm.normalize(world_normal)


@ti.func
def _is_shadowed(position: vec4, light: ti.i32) -> ti.i32:
    to_light = _light_position[light] - position
    distance = tm.length(to_light)
    index, t = _nearest_hit(position, to_light / distance)

    shadowed = 0
    if index >= 0 and t < distance:
        shadowed = 1
    return shadowed


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _lighting(
    index: ti.i32,
    light: ti.i32,
    position: vec4,
    eye: vec4,
    normal: vec4,
    in_shadow: ti.i32,
) -> vec3:
    """Phong contribution of one light; mirrors materials.phong.lighting()."""
    phong = _object_phong[index]
    intensity = _light_intensity[light]
    effective_color = _object_color[index] * intensity

    color = effective_color * phong[0]
    if in_shadow == 0:
        light_dir = tm.normalize(_light_position[light] - position)
        light_dot_normal = tm.dot(light_dir, normal)
        if light_dot_normal >= 0.0:
            color += effective_color * phong[1] * light_dot_normal

            reflect_dir = tm.reflect(-light_dir, normal)
            reflect_dot_eye = tm.dot(reflect_dir, eye)
            if reflect_dot_eye >= 0.0:
                color += intensity * phong[2] * (reflect_dot_eye ** phong[3])
    return color


@ti.func
def _color_at(origin: vec4, direction: vec4) -> vec3:
    color = vec3(0.0, 0.0, 0.0)
    index, t = _nearest_hit(origin, direction)
    if index >= 0:
        position = origin + direction * t
        normal = _normal_at(index, position)
        eye = -direction
        if tm.dot(normal, eye) < 0.0:
            normal = -normal
        over_point = position + normal * SHADOW_OFFSET

        for light in range(_num_lights[None]):
            shadowed = _is_shadowed(over_point, light)
            color += _lighting(index, light, over_point, eye, normal, shadowed)
    return color


@ti.func
def _ray_for_pixel(px: ti.i32, py: ti.i32):
    """Mirror of Camera.ray_for_pixel(); returns (origin, unit direction)."""
    pixel_size = _camera_pixel_size[None]
    world_x = _camera_half_width[None] - (ti.cast(px, ti.f32) + 0.5) * pixel_size
    world_y = _camera_half_height[None] - (ti.cast(py, ti.f32) + 0.5) * pixel_size

    inverse = _camera_inverse[None]
    pixel = inverse @ vec4(world_x, world_y, -1.0, 1.0)
    origin = inverse @ vec4(0.0, 0.0, 0.0, 1.0)
    return origin, tm.normalize(pixel - origin)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32):
    for i, j in ti.ndrange(width, height):
        origin, direction = _ray_for_pixel(i, j)
        _color_buffer[i, j] = _color_at(origin, direction)


@ti.kernel
def _render_single_pixel(px: ti.i32, py: ti.i32) -> vec3:
    origin, direction = _ray_for_pixel(px, py)
    return _color_at(origin, direction)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_sample(px: int, py: int) -> Color:
    """Shade a single pixel of the uploaded scene.

    For testing and debugging; use render_image() for whole frames.

    Args:
        px: Pixel x-coordinate (0 = left).
        py: Pixel y-coordinate (0 = top).

    Returns:
        The pixel color.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    color = _render_single_pixel(px, py)
    return Color(float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Return the active region of the color buffer.

    Returns:
        Unclamped float32 array of shape (height, width, 3), indexed
        image[y, x] with row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()

    # Buffer is indexed [x, y]; images are [row, column]
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))
    return np.ascontiguousarray(image, dtype=np.float32)


def render_image(world: "World", camera: "Camera") -> npt.NDArray[np.float32]:
    """Render a full frame in parallel.

    Uploads the world and camera, sizes the render target to the camera and
    launches one kernel over all pixels.

    Args:
        world: Scene to render.
        camera: Camera to render through.

    Returns:
        Float32 array of shape (camera.vsize, camera.hsize, 3).

    Raises:
        ValueError: If the scene or image exceeds the preallocated capacity.
    """
    upload_world(world)
    setup_camera(camera)
    setup_render_target(camera.hsize, camera.vsize)

    logger.debug("Launching render kernel for %dx%d pixels", camera.hsize, camera.vsize)
    start = time.perf_counter()
    _render_kernel(camera.hsize, camera.vsize)
    ti.sync()
    logger.info("Parallel render finished in %.2fs", time.perf_counter() - start)

    return get_image_numpy()


def render_canvas(world: "World", camera: "Camera") -> Canvas:
    """Render a full frame in parallel into a Canvas."""
    return Canvas.from_array(render_image(world, camera))
