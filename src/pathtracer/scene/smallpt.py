"""The SmallPT box scene.

Nine spheres: six of radius 1e5 approximate the walls, floor and ceiling
of an open-fronted box (red left wall, blue right wall, black wall behind
the camera), two 16.5-unit spheres stand on the floor, and a large sphere
poking through the ceiling acts as the light.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.scene.smallpt import create_smallpt_scene
    >>> from src.pathtracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_smallpt_scene()
    >>> setup_camera(camera, 1024, 768)
"""

from dataclasses import dataclass

from src.pathtracer.camera.pinhole import PinholeCamera
from src.pathtracer.materials.types import MaterialType
from src.pathtracer.scene.manager import SceneManager

# =============================================================================
# Scene Parameters
# =============================================================================


@dataclass
class SmallptParams:
    """Tunable parts of the SmallPT box.

    Attributes:
        light_emission: Emitted radiance of the ceiling light.
        left_wall_albedo: Albedo of the left wall (red by default).
        right_wall_albedo: Albedo of the right wall (blue by default).
        neutral_albedo: Albedo of the back wall, floor and ceiling.
        glossy_left_sphere: Use GLOSSY_PHONG for the left sphere instead
            of a perfect mirror.
    """

    light_emission: tuple[float, float, float] = (12.0, 12.0, 12.0)
    left_wall_albedo: tuple[float, float, float] = (0.75, 0.25, 0.25)
    right_wall_albedo: tuple[float, float, float] = (0.25, 0.25, 0.75)
    neutral_albedo: tuple[float, float, float] = (0.75, 0.75, 0.75)
    glossy_left_sphere: bool = False


WALL_RADIUS = 1e5
SPHERE_RADIUS = 16.5
LIGHT_RADIUS = 600.0
SPHERE_ALBEDO = (0.999, 0.999, 0.999)
BLACK = (0.0, 0.0, 0.0)


# =============================================================================
# Scene Factory
# =============================================================================


def create_smallpt_scene(
    params: SmallptParams | None = None,
) -> tuple[SceneManager, PinholeCamera]:
    """Build the SmallPT scene in the live scene fields.

    Args:
        params: Optional overrides for the light and wall colors.

    Returns:
        A tuple (scene, camera) where camera is the default PinholeCamera
        looking into the box from its open front.

    Example:
        >>> scene, camera = create_smallpt_scene()
        >>> len(scene)
        9
        >>> scene.get_light_count()
        1
    """
    if params is None:
        params = SmallptParams()

    scene = SceneManager()
    r = WALL_RADIUS

    # Walls
    scene.add_diffuse_sphere((r + 1.0, 40.8, 81.6), r, params.left_wall_albedo)  # Left
    scene.add_diffuse_sphere((-r + 99.0, 40.8, 81.6), r, params.right_wall_albedo)  # Right
    scene.add_diffuse_sphere((50.0, 40.8, r), r, params.neutral_albedo)  # Back
    scene.add_diffuse_sphere((50.0, 40.8, -r + 170.0), r, BLACK)  # Front
    scene.add_diffuse_sphere((50.0, r, 81.6), r, params.neutral_albedo)  # Floor
    scene.add_diffuse_sphere((50.0, -r + 81.6, 81.6), r, params.neutral_albedo)  # Ceiling

    # Objects
    left_material = (
        MaterialType.GLOSSY_PHONG if params.glossy_left_sphere else MaterialType.REFLECTIVE
    )
    scene.add_sphere((27.0, 16.5, 47.0), SPHERE_RADIUS, BLACK, SPHERE_ALBEDO, left_material)
    scene.add_glass_sphere((73.0, 16.5, 78.0), SPHERE_RADIUS, SPHERE_ALBEDO)

    # Light
    scene.add_light((50.0, 681.6 - 0.27, 81.6), LIGHT_RADIUS, params.light_emission)

    return scene, PinholeCamera()

