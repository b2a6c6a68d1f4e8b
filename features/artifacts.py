"""Flag edge data model and its JSON form."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from core.grid import SIDES
from core.image_utils import load_image
from .edge_signatures import EdgeInfo, build_side_info, side_pixels


@dataclass
class FlagEdges:
    """
    Reduced border information for one flag image.

    Attributes:
        id: Flag identifier (image file stem)
        top, right, bottom, left: (color, proportion) runs along each border
    """
    id: str
    top: EdgeInfo = field(default_factory=list)
    right: EdgeInfo = field(default_factory=list)
    bottom: EdgeInfo = field(default_factory=list)
    left: EdgeInfo = field(default_factory=list)

    def side(self, side: str) -> EdgeInfo:
        return getattr(self, side)

    @classmethod
    def from_rgb(cls, flag_id: str, rgb_image) -> 'FlagEdges':
        """Create edge info from an RGB image array."""
        return cls(flag_id, **{
            side: build_side_info(side_pixels(rgb_image, side)) for side in SIDES
        })

    @classmethod
    def from_image(cls, image_path) -> 'FlagEdges':
        """Create edge info from an image file; the id is the file stem."""
        image_path = Path(image_path)
        return cls.from_rgb(image_path.stem, load_image(image_path))

    def to_dict(self) -> dict:
        out = {'id': self.id}
        for side in SIDES:
            out[side] = [[color, prop] for color, prop in self.side(side)]
        return out

    @classmethod
    def from_dict(cls, data: dict) -> 'FlagEdges':
        """
        Parse one record of flag_edges.json.

        Raises:
            ValueError: If the record is missing fields or has bad runs
        """
        if not isinstance(data, dict) or not isinstance(data.get('id'), str):
            raise ValueError(f"Flag edge record needs a string 'id': {data!r}")

        sides = {}
        for side in SIDES:
            runs = data.get(side)
            if not isinstance(runs, list):
                raise ValueError(f"Flag {data['id']}: missing '{side}' runs")
            parsed = []
            for run in runs:
                if (not isinstance(run, (list, tuple)) or len(run) != 2
                        or not isinstance(run[0], str)
                        or not isinstance(run[1], int) or isinstance(run[1], bool)
                        or run[1] <= 0):
                    raise ValueError(f"Flag {data['id']}: bad run {run!r} on '{side}'")
                parsed.append((run[0], run[1]))
            sides[side] = parsed

        return cls(data['id'], **sides)


def create_flag_edges(flags_dir) -> List[FlagEdges]:
    """
    Reduce every image in a directory, in file name order.

    Raises:
        FileNotFoundError: If flags_dir does not exist
        ValueError: If any image cannot be decoded
    """
    flags_dir = Path(flags_dir)
    if not flags_dir.is_dir():
        raise FileNotFoundError(f"Flags directory not found: {flags_dir}")

    return [FlagEdges.from_image(path)
            for path in sorted(flags_dir.iterdir()) if path.is_file()]


def save_flag_edges(flag_edges: List[FlagEdges], output_path) -> Path:
    output_path = Path(output_path)
    output_dir = output_path.parent
    if output_dir and str(output_dir) != '.':
        output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        json.dump([fe.to_dict() for fe in flag_edges], f)
    return output_path


def load_flag_edges(path) -> List[FlagEdges]:
    """
    Load flag_edges.json.

    Raises:
        FileNotFoundError: If the file is missing
        ValueError: If the file is not valid JSON or a record is malformed
    """
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Could not parse flag edges file {path}: {e}") from e

    if not isinstance(data, list):
        raise ValueError(f"Flag edges file {path} must hold a list of records")
    return [FlagEdges.from_dict(record) for record in data]
