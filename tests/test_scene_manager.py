"""Tests for SphereRecord, SceneManager and the SmallPT scene factory.

Note: Imports are done inside test methods so that conftest.py initializes
Taichi first.
"""

import math

import pytest


class TestSphereRecord:
    """Tests for SphereRecord validation and serialization."""

    def test_valid_record(self):
        from src.pathtracer.materials.types import MaterialType
        from src.pathtracer.scene.manager import SphereRecord

        record = SphereRecord(radius=2, center=(1, 2, 3), albedo=(0.5, 0.5, 0.5))
        assert record.radius == 2.0
        assert record.center == (1.0, 2.0, 3.0)
        assert record.emission == (0.0, 0.0, 0.0)
        assert record.material is MaterialType.DIFFUSE_LAMBERTIAN
        assert not record.is_emissive

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"radius": 0.0, "center": (0, 0, 0)}, "radius"),
            ({"radius": -1.0, "center": (0, 0, 0)}, "radius"),
            ({"radius": math.inf, "center": (0, 0, 0)}, "radius"),
            ({"radius": 1.0, "center": (0, math.nan, 0)}, "center"),
            ({"radius": 1.0, "center": (0, 0)}, "3 components"),
            ({"radius": 1.0, "center": (0, 0, 0), "albedo": (-0.1, 0, 0)}, "albedo"),
            ({"radius": 1.0, "center": (0, 0, 0), "emission": (math.inf, 0, 0)}, "emission"),
            ({"radius": 1.0, "center": (0, 0, 0), "material": "plastic"}, "Unknown material"),
            ({"radius": 1.0, "center": (0, 0, 0), "material": 9}, "Unknown material"),
        ],
    )
    def test_invalid_records_raise(self, kwargs, message):
        from src.pathtracer.scene.manager import SphereRecord

        with pytest.raises(ValueError, match=message):
            SphereRecord(**kwargs)

    def test_material_by_name_or_value(self):
        from src.pathtracer.materials.types import MaterialType
        from src.pathtracer.scene.manager import SphereRecord

        by_name = SphereRecord(1.0, (0, 0, 0), material="reflective")
        by_value = SphereRecord(1.0, (0, 0, 0), material=1)
        assert by_name.material is MaterialType.REFLECTIVE
        assert by_value.material is MaterialType.GLOSSY_PHONG

    def test_dict_round_trip(self):
        from src.pathtracer.materials.types import MaterialType
        from src.pathtracer.scene.manager import SphereRecord

        record = SphereRecord(
            16.5,
            (73, 16.5, 78),
            albedo=(0.999, 0.999, 0.999),
            material=MaterialType.REFLECTIVE_AND_REFRACTIVE,
        )
        data = record.to_dict()
        assert data["material"] == "REFLECTIVE_AND_REFRACTIVE"
        assert SphereRecord.from_dict(data) == record

    def test_from_dict_requires_radius_and_center(self):
        from src.pathtracer.scene.manager import SphereRecord

        with pytest.raises(ValueError, match="missing"):
            SphereRecord.from_dict({"radius": 1.0})


class TestSceneManager:
    """Tests for SceneManager."""

    def test_add_helpers_set_materials(self):
        from src.pathtracer.materials.types import MaterialType
        from src.pathtracer.scene.intersection import sphere_materials
        from src.pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        indices = [
            scene.add_diffuse_sphere((0, 0, 0), 1.0, (0.5, 0.5, 0.5)),
            scene.add_glossy_sphere((3, 0, 0), 1.0),
            scene.add_mirror_sphere((6, 0, 0), 1.0),
            scene.add_glass_sphere((9, 0, 0), 1.0),
            scene.add_light((0, 10, 0), 2.0, (4, 4, 4)),
        ]
        assert indices == [0, 1, 2, 3, 4]
        assert len(scene) == 5
        assert scene.get_sphere_count() == 5
        assert scene.get_light_count() == 1

        expected = [
            MaterialType.DIFFUSE_LAMBERTIAN,
            MaterialType.GLOSSY_PHONG,
            MaterialType.REFLECTIVE,
            MaterialType.REFLECTIVE_AND_REFRACTIVE,
            MaterialType.DIFFUSE_LAMBERTIAN,
        ]
        for i, material in enumerate(expected):
            assert sphere_materials[i] == int(material)
            assert scene.get_sphere(i).material is material

    def test_invalid_sphere_is_not_added(self):
        from src.pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError):
            scene.add_sphere((0, 0, 0), -1.0)
        assert len(scene) == 0
        assert scene.get_sphere_count() == 0

    def test_clear(self):
        from src.pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_light((0, 0, 0), 1.0, (1, 1, 1))
        scene.clear()
        assert len(scene) == 0
        assert scene.get_sphere_count() == 0

    def test_upload_restores_fields(self):
        from src.pathtracer.scene.intersection import clear_scene, sphere_radii
        from src.pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_mirror_sphere((0, 0, 0), 3.0)
        clear_scene()
        assert scene.get_sphere_count() == 0

        scene.upload()
        assert scene.get_sphere_count() == 1
        assert sphere_radii[0] == 3.0

    def test_dict_round_trip(self):
        from src.pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_diffuse_sphere((0, 0, 0), 1.0, (0.25, 0.5, 0.75))
        scene.add_glass_sphere((2, 0, 0), 0.5)
        data = scene.to_dict()

        other = SceneManager()
        other.from_dict(data)
        assert other.spheres == scene.spheres
        assert other.get_sphere_count() == 2

    def test_from_dict_validates_before_clearing(self):
        from src.pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_mirror_sphere((0, 0, 0), 1.0)
        bad = {
            "spheres": [
                {"radius": 1.0, "center": (0, 0, 0)},
                {"radius": -2.0, "center": (0, 0, 0)},
            ]
        }

        with pytest.raises(ValueError):
            scene.from_dict(bad)
        assert len(scene) == 1
        assert scene.get_sphere_count() == 1

    def test_repr(self):
        from src.pathtracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_light((0, 0, 0), 1.0, (1, 1, 1))
        assert repr(scene) == "SceneManager(spheres=1, lights=1)"


class TestSmallptScene:
    """Tests for the SmallPT scene factory."""

    def test_nine_spheres_one_light(self):
        from src.pathtracer.materials.types import MaterialType
        from src.pathtracer.scene.smallpt import create_smallpt_scene

        scene, camera = create_smallpt_scene()
        assert len(scene) == 9
        assert scene.get_sphere_count() == 9
        assert scene.get_light_count() == 1

        materials = [s.material for s in scene.spheres]
        assert materials.count(MaterialType.DIFFUSE_LAMBERTIAN) == 7
        assert materials[6] is MaterialType.REFLECTIVE
        assert materials[7] is MaterialType.REFLECTIVE_AND_REFRACTIVE

        light = scene.get_sphere(8)
        assert light.radius == 600.0
        assert light.emission == (12.0, 12.0, 12.0)
        assert light.albedo == (0.0, 0.0, 0.0)

        assert camera.eye == (50.0, 52.0, 295.6)
        assert camera.fov == 0.5135

    def test_front_wall_is_black(self):
        from src.pathtracer.scene.smallpt import create_smallpt_scene

        scene, _ = create_smallpt_scene()
        front = scene.get_sphere(3)
        assert front.center == (50.0, 40.8, -1e5 + 170.0)
        assert front.albedo == (0.0, 0.0, 0.0)

    def test_glossy_variant(self):
        from src.pathtracer.materials.types import MaterialType
        from src.pathtracer.scene.smallpt import SmallptParams, create_smallpt_scene

        scene, _ = create_smallpt_scene(SmallptParams(glossy_left_sphere=True))
        assert scene.get_sphere(6).material is MaterialType.GLOSSY_PHONG
