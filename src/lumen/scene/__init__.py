"""Scene module.

Components:
    scene_object: SceneObject, which places a shared primitive in the world
        and maps rays between world and object space
    scene: Scene container and nearest-hit query
"""

from .scene import Scene, SceneHit
from .scene_object import SceneObject

__all__ = ["Scene", "SceneHit", "SceneObject"]
