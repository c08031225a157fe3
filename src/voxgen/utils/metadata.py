"""Render metadata generation and management utilities."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .. import __version__


class MetadataWriter:
    """Handles creation and writing of render metadata files."""

    @staticmethod
    def write_render_metadata(
        output_path: Path,
        grammar: Dict[str, Any],
        config: Dict[str, Any],
        stats: Dict[str, Any],
        vox_file: Optional[str] = None
    ):
        """Write the metadata sidecar for one render.

        Args:
            output_path: Path to the .json sidecar
            grammar: L-System as returned by ``LSystem.to_dict()``
            config: Render settings as returned by ``RenderConfig.to_dict()``
            stats: Statistics from the render
            vox_file: Name of the .vox file this metadata describes
        """
        metadata = {
            "generator": "voxgen",
            "version": __version__,
            "created_at": datetime.now().isoformat(),
            "vox_file": vox_file,
            "grammar": grammar,
            "render": {
                key: config.get(key)
                for key in (
                    "derivation_length",
                    "step_size",
                    "angle_increment",
                    "size_x",
                    "size_y",
                    "size_z",
                    "offset_x",
                    "offset_y",
                    "rainbow",
                )
            },
            "stats": {
                "num_commands": stats.get("num_commands", 0),
                "num_voxels": stats.get("num_voxels", 0),
                "num_colors": stats.get("num_colors", 0),
                "occupancy_ratio": stats.get("occupancy_ratio", 0.0),
                "final_position": stats.get("final_position"),
            },
        }

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, ensure_ascii=False)

    @staticmethod
    def read_render_metadata(input_path: Path) -> Dict[str, Any]:
        """Read a metadata sidecar.

        Args:
            input_path: Path to the .json sidecar

        Returns:
            Metadata dictionary
        """
        with open(input_path, "r", encoding="utf-8") as f:
            return json.load(f)
