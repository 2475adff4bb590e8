"""Cubie-level geometry: the settled model that feeds the facelet extractor."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .moves import (
    AXIS_INDEX,
    CLOCKWISE_ANGLE_DEG,
    FACE_AXIS_LAYER,
    FACE_ORDER,
    FACE_SPECS,
    rotation_matrix,
    split_token,
)
from .state_codec import Sticker

# Colour carried by each outward face of a cubie in the solved orientation.
HOME_COLORS = {FACE_SPECS[face]["normal"]: face for face in FACE_ORDER}


def _rotation_matrix_float(axis: str, angle_rad: float) -> np.ndarray:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    if axis == "x":
        return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]], dtype=np.float64)
    if axis == "y":
        return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]], dtype=np.float64)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]], dtype=np.float64)


@dataclass
class Cubie:
    coords: np.ndarray  # lattice position, entries in {-1, 0, 1}
    orientation: np.ndarray  # 3x3 rotation from local to world frame
    colors: dict[tuple[int, int, int], str]  # local outward normal -> colour


class CubeModel:
    """26 cubies with lattice coordinates and orientations.

    ``turn`` settles a whole face turn at once; ``stickers`` can also report a
    layer caught part-way through a turn, which the extractor rejects.
    """

    def __init__(self):
        self.cubies: list[Cubie] = []
        self.reset()

    def reset(self) -> None:
        self.cubies = []
        for x in (-1, 0, 1):
            for y in (-1, 0, 1):
                for z in (-1, 0, 1):
                    if x == 0 and y == 0 and z == 0:
                        continue
                    coords = np.array([x, y, z], dtype=np.int8)
                    colors = {
                        normal: face
                        for normal, face in HOME_COLORS.items()
                        if int(np.dot(coords, normal)) == 1
                    }
                    self.cubies.append(Cubie(coords=coords, orientation=np.eye(3, dtype=np.int8), colors=colors))

    def _layer(self, face: str) -> list[Cubie]:
        axis, layer = FACE_AXIS_LAYER[face]
        axis_idx = AXIS_INDEX[axis]
        return [c for c in self.cubies if int(c.coords[axis_idx]) == layer]

    def turn(self, token: str) -> None:
        face, turns = split_token(token)
        axis, _ = FACE_AXIS_LAYER[face]
        rot = rotation_matrix(axis, CLOCKWISE_ANGLE_DEG[face] * turns)
        for cubie in self._layer(face):
            cubie.coords = rot @ cubie.coords
            cubie.orientation = rot @ cubie.orientation

    def play(self, tokens) -> None:
        for token in tokens:
            self.turn(token)

    def stickers(self, turning: tuple[str, float] | None = None) -> list[Sticker]:
        """Report every visible sticker; ``turning`` is ``(token, fraction done)``."""
        partial: np.ndarray | None = None
        moving: set[int] = set()
        if turning is not None:
            token, fraction = turning
            face, turns = split_token(token)
            axis, _ = FACE_AXIS_LAYER[face]
            angle = math.radians(CLOCKWISE_ANGLE_DEG[face] * turns * float(fraction))
            partial = _rotation_matrix_float(axis, angle)
            moving = {id(c) for c in self._layer(face)}

        out: list[Sticker] = []
        for cubie in self.cubies:
            for local_normal, color in cubie.colors.items():
                normal = cubie.orientation @ np.array(local_normal, dtype=np.float64)
                if partial is not None and id(cubie) in moving:
                    normal = partial @ normal
                out.append(
                    Sticker(
                        color=color,
                        normal=tuple(float(v) for v in normal),
                        coords=tuple(float(v) for v in cubie.coords),
                    )
                )
        return out
