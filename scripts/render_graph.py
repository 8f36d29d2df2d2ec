"""CLI for laying out a network snapshot (or the sample network) and writing it as SVG"""

import argparse
from pathlib import Path

import numpy as np

from netcircle.config import settings
from netcircle.domain.sample import sample_snapshot
from netcircle.domain.snapshot import NetworkSnapshot
from netcircle.layout.engine import LayoutEngine
from netcircle.session import NetworkSession
from netcircle.stores.local import LocalSnapshotStore

CLI_USER = "cli"


def main(
    snapshot_file: str | None,
    outfile_svg: str,
    outfile_metrics: str | None,
    seed: int | None,
) -> None:
    if snapshot_file:
        snapshot = NetworkSnapshot.model_validate_json(
            Path(snapshot_file).read_text(encoding="utf-8")
        )
    else:
        snapshot = sample_snapshot()

    # in-memory store, nothing is written back
    store = LocalSnapshotStore()
    store.save(CLI_USER, snapshot)
    engine = LayoutEngine(
        width=settings.layout_width,
        height=settings.layout_height,
        iterations=settings.layout_iterations,
        rng=np.random.default_rng(seed),
    )
    session = NetworkSession(store, CLI_USER, engine=engine)
    session.load()

    svg_output = Path(outfile_svg)
    svg_output.parent.mkdir(parents=True, exist_ok=True)
    svg_output.write_text(session.render_svg(), encoding="utf-8")

    metrics = session.metrics_snapshot()
    if outfile_metrics:
        metrics_output = Path(outfile_metrics)
        metrics_output.parent.mkdir(parents=True, exist_ok=True)
        metrics_output.write_text(
            metrics.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )

    print(
        f"Rendered {metrics.total_people} people and {metrics.total_connections} "
        f"connections to {svg_output}"
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--snapshot",
        type=str,
        required=False,
        help="Network snapshot JSON file, the sample network is used if omitted",
    )
    parser.add_argument(
        "--outfile-svg", type=str, required=False, help="Output SVG file", default="network.svg"
    )
    parser.add_argument(
        "--outfile-metrics", type=str, required=False, help="Output metrics JSON file"
    )
    parser.add_argument(
        "--seed",
        type=int,
        required=False,
        help="Seed for reproducible layouts",
        default=settings.layout_seed,
    )

    args = parser.parse_args()

    main(
        snapshot_file=args.snapshot,
        outfile_svg=args.outfile_svg,
        outfile_metrics=args.outfile_metrics,
        seed=args.seed,
    )
