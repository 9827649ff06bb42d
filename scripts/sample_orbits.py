# ruff: noqa: T201
"""
Sample the orbit paths of every body in a system file and write them to HDF5.

Each orbiting body gets one dataset under ``/orbits/<name>`` holding the (N, 3) vertex
positions in metres, relative to the body it orbits, spaced roughly one degree apart
over one revolution. Bodies whose orbit cannot be sampled (no period, or the walk did
not close) are skipped.

Usage
-----
python sample_orbits.py \
    --system inner_system.yaml \
    --output orbits.h5 \
    --date 2024-03-20T00:00:00
"""

import logging
from pathlib import Path

import h5py
import numpy as np
from astropy.time import Time

from orrery import DEFAULT_CONFIG, load_config, load_system


def main(
    system_file: Path,
    output_file: Path,
    date: str | None = None,
    config_file: Path | None = None,
    osculating: bool = False,
) -> None:
    config = DEFAULT_CONFIG if config_file is None else load_config(config_file)

    print(f"Loading {system_file!s}...")
    universe = load_system(system_file, config)
    if date is not None:
        universe.set_date(Time(date, scale="utc"))
    print(f"...done - {len(universe)} bodies at {universe.date.isot}")

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with h5py.File(output_file, "w") as h5f:
        h5f.attrs.update(
            {
                "created_utc": Time.now().iso,
                "creator": "orrery/scripts/sample_orbits.py",
                "source_file": str(system_file.resolve().absolute()),
                "date_utc": universe.date.utc.isot,
                "osculating": osculating,
                "units_position": "m",
            }
        )

        grp = h5f.require_group("orbits")
        for body in universe.ordered_bodies():
            if body.is_central:
                continue

            vertices = body.get_orbit_vertices(use_osculating_ellipse=osculating)
            if vertices is None:
                print(f"Skipping {body.name}: no orbit path")
                continue

            ds = grp.create_dataset(body.name, data=np.stack(vertices), dtype="<f8")
            ds.attrs["relative_to"] = body.relative_to or ""
            print(f"{body.name}: {len(vertices)} vertices")

    print(f"Wrote {output_file!s}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description=__doc__, formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument(
        "-s", "--system", required=True, help="Path to system YAML file", type=Path
    )
    parser.add_argument(
        "--output", required=True, help="Path to output HDF5 file", type=Path
    )
    parser.add_argument("--date", default=None, help="ISO date (UTC); J2000 default")
    parser.add_argument(
        "--config", default=None, help="Optional OrbitConfig YAML file", type=Path
    )
    parser.add_argument(
        "--osculating",
        action="store_true",
        help="Sample the osculating ellipse instead of the mean elements",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    main(
        system_file=args.system,
        output_file=args.output,
        date=args.date,
        config_file=args.config,
        osculating=args.osculating,
    )
