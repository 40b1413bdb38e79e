"""
CLI command for incident beam generation on a dipole lattice.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from ..beam import (
    BeamConfiguration,
    BeamFieldGenerator,
    BeamInitializer,
    BeamSetup,
    FileBeamState,
    IncPol,
    PhysicalState,
    SubstrateConfig,
    SymmetryFlags,
)
from ..exceptions import BeamError, FieldFileError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    # Beam and geometry arguments shared by all commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--beam",
        nargs="+",
        default=["plane"],
        metavar="ARG",
        help="Beam type and its parameters: plane | lminus|davis3|barton5 W [X0 Y0 Z0] | read FILEY [FILEX]",
    )
    common.add_argument(
        "--wavelength",
        type=float,
        default=2 * np.pi,
        help="Wavelength of incident light",
    )
    common.add_argument(
        "--prop",
        type=float,
        nargs=3,
        default=[0.0, 0.0, 1.0],
        metavar=("X", "Y", "Z"),
        help="Propagation direction in the laboratory frame",
    )
    common.add_argument(
        "--orient",
        type=float,
        nargs=3,
        default=None,
        metavar=("ALPHA", "BETA", "GAMMA"),
        help="Particle orientation, Euler angles in degrees (zyz)",
    )
    common.add_argument(
        "--surf",
        nargs="+",
        default=None,
        metavar="ARG",
        help="Substrate: HEIGHT M_RE M_IM, or HEIGHT inf for a perfect reflector",
    )
    common.add_argument(
        "--box",
        type=int,
        nargs=3,
        default=[8, 8, 8],
        metavar=("NX", "NY", "NZ"),
        help="Size of the rectangular dipole lattice",
    )
    common.add_argument(
        "--spacing",
        type=float,
        default=0.1,
        help="Dipole spacing of the lattice",
    )
    common.add_argument(
        "--dipoles",
        type=str,
        default=None,
        help="Text file with dipole coordinates (x y z per line), overrides --box",
    )

    parser = argparse.ArgumentParser(
        description="Generate incident beams on a dipole lattice",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Generate command
    gen_parser = subparsers.add_parser("generate", parents=[common], help="Write incident field files")
    gen_parser.add_argument(
        "--output-dir",
        type=str,
        required=True,
        help="Output directory for incident field files",
    )

    # Describe command
    subparsers.add_parser("describe", parents=[common], help="Print beam description and symmetries")

    # Plot command
    plot_parser = subparsers.add_parser("plot", parents=[common], help="Plot field intensity on a lattice layer")
    plot_parser.add_argument(
        "--pol",
        type=str,
        choices=["X", "Y"],
        default="Y",
        help="Incident polarization",
    )
    plot_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file (displays if not specified)",
    )

    # Common arguments
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )

    return parser.parse_args(argv)


def make_lattice(box: Sequence[int], spacing: float) -> NDArray:
    """
    Rectangular dipole lattice centered at the origin.

    Args:
        box: Number of dipoles along x, y, z
        spacing: Distance between neighboring dipoles

    Returns:
        Dipole coordinates, shape (NX*NY*NZ, 3), with x varying fastest
    """
    axes = [(np.arange(n) - (n - 1) / 2) * spacing for n in box]
    z, y, x = np.meshgrid(axes[2], axes[1], axes[0], indexing="ij")
    return np.column_stack([x.ravel(), y.ravel(), z.ravel()])


def load_dipoles(path: str) -> NDArray:
    """Load dipole coordinates from a text file."""
    try:
        coords = np.loadtxt(path, ndmin=2)
    except (OSError, ValueError) as e:
        raise FieldFileError(f"could not read dipole coordinates ({e})", path=path) from e
    if coords.shape[1] < 3:
        raise FieldFileError(f"expected at least 3 columns, found {coords.shape[1]}", path=path)
    return coords[:, :3]


def build_problem(args: argparse.Namespace) -> Tuple[BeamConfiguration, PhysicalState]:
    """Create beam configuration and physical state from arguments."""
    config = BeamConfiguration.from_args(args.beam[0], *args.beam[1:])
    substrate = SubstrateConfig.from_args(args.surf) if args.surf else None

    if args.dipoles:
        coords = load_dipoles(args.dipoles)
    else:
        coords = make_lattice(args.box, args.spacing)

    state = PhysicalState.from_direction(
        wavenumber=2 * np.pi / args.wavelength,
        dipole_coords=coords,
        prop=args.prop,
        orientation=args.orient,
        substrate=substrate,
    )
    return config, state


def setup_beam(args: argparse.Namespace) -> Tuple[PhysicalState, BeamSetup, SymmetryFlags]:
    """Run beam initialization for the parsed arguments."""
    config, state = build_problem(args)
    symmetry = SymmetryFlags()
    setup = BeamInitializer(config, state).initialize(symmetry)
    return state, setup, symmetry


def available_polarizations(setup: BeamSetup) -> List[IncPol]:
    """Polarizations for which the beam can be generated."""
    derived = setup.derived
    if isinstance(derived, FileBeamState) and len(derived.sources) == 1:
        return [IncPol.Y]
    return [IncPol.Y, IncPol.X]


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate and save the incident field."""
    from ..io import write_field

    state, setup, _ = setup_beam(args)

    output_dir = Path(args.output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FieldFileError(f"could not create output directory ({e})", path=str(output_dir)) from e

    generator = BeamFieldGenerator(state, setup)
    field = np.empty((state.n_dipoles, 3), dtype=np.complex128)
    for which in available_polarizations(setup):
        generator.generate(which, out=field)
        write_field(output_dir / f"IncBeam-{which.value}", state.dipole_coords, field)

    logger.info(f"Incident beam generated for {state.n_dipoles} dipoles")
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    """Print beam description."""
    _, setup, symmetry = setup_beam(args)

    print(f"Incident beam: {setup.description}")
    flags = ", ".join(f"{name}={value}" for name, value in symmetry.as_dict().items())
    print(f"Symmetries: {flags}")
    return 0


def cmd_plot(args: argparse.Namespace) -> int:
    """Plot field intensity on the lattice layer closest to z = 0."""
    import matplotlib.pyplot as plt

    state, setup, _ = setup_beam(args)
    field = BeamFieldGenerator(state, setup).generate(IncPol(args.pol))

    coords = state.dipole_coords
    z_layer = coords[np.argmin(np.abs(coords[:, 2])), 2]
    layer = np.isclose(coords[:, 2], z_layer)
    intensity = np.sum(np.abs(field[layer]) ** 2, axis=1)

    plt.figure(figsize=(8, 8))
    plt.scatter(coords[layer, 0], coords[layer, 1], c=intensity, cmap="hot", marker="s")
    plt.colorbar(label="|E|$^2$")
    plt.title(f"Incident field, {args.pol} polarization, z={z_layer:.3g}")
    plt.xlabel("x")
    plt.ylabel("y")
    plt.gca().set_aspect("equal")

    if args.output:
        plt.savefig(args.output, dpi=150, bbox_inches="tight")
        print(f"Saved to {args.output}")
    else:
        plt.show()

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    commands = {
        "generate": cmd_generate,
        "describe": cmd_describe,
        "plot": cmd_plot,
    }
    if args.command not in commands:
        print("Please specify a command: generate, describe, or plot")
        print("Use --help for more information")
        return 1

    try:
        return commands[args.command](args)
    except BeamError as e:
        logger.error(f"Beam setup failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
