"""Phong ray caster with a serial Python path and a parallel Taichi kernel.

This package renders still images of sphere scenes:
- Homogeneous point/vector algebra and affine transforms
- Unit spheres placed by per-object transforms
- Phong shading with point lights and shadow rays
- PPM and PNG output

Subpackages:
    core: Vectors, colors, matrices, rays and the Taichi batch renderer
    geometry: The unit sphere primitive, objects and hit records
    materials: Phong material and reflectance model
    scene: Lights, worlds, scene configuration and the demo scene
    camera: Pinhole camera and per-pixel rays
    preview: Canvas, image export and Matplotlib preview
"""

__version__ = "0.1.0"
