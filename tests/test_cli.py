"""
Tests for the command-line interface.
"""

import numpy as np
import pytest

from ddabeam.cli.generate import main, make_lattice
from ddabeam.io import TextFieldReader


class TestMakeLattice:
    """Tests for lattice construction."""

    def test_shape_and_center(self):
        """Test lattice size and centering."""
        coords = make_lattice([2, 3, 4], 0.5)
        assert coords.shape == (24, 3)
        assert np.allclose(coords.mean(axis=0), 0)

    def test_x_varies_fastest(self):
        """Test dipole ordering."""
        coords = make_lattice([2, 2, 2], 1.0)
        assert np.allclose(coords[0], [-0.5, -0.5, -0.5])
        assert np.allclose(coords[1], [0.5, -0.5, -0.5])


class TestCommands:
    """Tests for CLI commands."""

    def test_no_command(self):
        """Test missing command."""
        assert main([]) == 1

    def test_describe(self, capsys):
        """Test beam description output."""
        code = main(["describe", "--beam", "davis3", "2", "0.5", "0", "0"])
        out = capsys.readouterr().out

        assert code == 0
        assert "Gaussian beam (3rd order approximation, by Davis)" in out
        assert "Symmetries: x=False, y=True, z=True, r=False" in out

    def test_describe_invalid_beam(self):
        """Test fatal configuration error gives non-zero status."""
        assert main(["describe", "--beam", "lminus", "-1"]) == 1

    def test_describe_parallel_to_surface(self):
        """Test error for propagation along the substrate."""
        code = main(["describe", "--prop", "1", "0", "0", "--surf", "1", "1.5", "0"])
        assert code == 1

    def test_generate(self, tmp_path):
        """Test generated field files."""
        code = main(
            [
                "-v",
                "generate",
                "--box", "2", "2", "2",
                "--wavelength", "1",
                "--output-dir", str(tmp_path),
            ]
        )
        assert code == 0

        coords = make_lattice([2, 2, 2], 0.1)
        reader = TextFieldReader()
        field_y = reader.read(str(tmp_path / "IncBeam-Y"), coords)
        field_x = reader.read(str(tmp_path / "IncBeam-X"), coords)

        phase = np.exp(2j * np.pi * coords[:, 2])
        assert np.allclose(field_y, phase[:, None] * [0, 1, 0])
        assert np.allclose(field_x, phase[:, None] * [1, 0, 0])

    def test_generate_read_beam(self, tmp_path):
        """Test regenerating fields from files written before."""
        source = tmp_path / "source"
        assert main(["generate", "--box", "2", "1", "1", "--beam", "lminus", "1", "--output-dir", str(source)]) == 0

        target = tmp_path / "target"
        code = main(
            [
                "generate",
                "--box", "2", "1", "1",
                "--beam", "read", str(source / "IncBeam-Y"),
                "--output-dir", str(target),
            ]
        )
        assert code == 0
        coords = make_lattice([2, 1, 1], 0.1)
        reader = TextFieldReader()
        expected = reader.read(str(source / "IncBeam-Y"), coords)
        assert np.allclose(reader.read(str(target / "IncBeam-Y"), coords), expected)
        assert not (target / "IncBeam-X").exists()

    def test_generate_from_dipole_file(self, tmp_path):
        """Test dipole coordinates loaded from a file."""
        dipoles = tmp_path / "dipoles.txt"
        np.savetxt(dipoles, [[0.0, 0.0, 0.0], [0.0, 0.0, 0.25]])

        code = main(["generate", "--dipoles", str(dipoles), "--wavelength", "1", "--output-dir", str(tmp_path)])
        assert code == 0
        lines = (tmp_path / "IncBeam-Y").read_text().splitlines()
        assert len(lines) == 3

    def test_missing_dipole_file(self, tmp_path):
        """Test missing dipole file gives non-zero status."""
        code = main(["generate", "--dipoles", str(tmp_path / "absent.txt"), "--output-dir", str(tmp_path)])
        assert code == 1

    def test_dipole_file_with_too_few_columns(self, tmp_path):
        """Test dipole file without three coordinates."""
        dipoles = tmp_path / "dipoles.txt"
        np.savetxt(dipoles, [[0.0, 0.0], [0.0, 0.25]])
        assert main(["describe", "--dipoles", str(dipoles)]) == 1

    def test_unwritable_output_dir(self, tmp_path):
        """Test output directory below a regular file."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        code = main(["generate", "--box", "1", "1", "1", "--output-dir", str(blocker / "out")])
        assert code == 1

    def test_plot(self, tmp_path):
        """Test intensity plot is saved."""
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        output = tmp_path / "intensity.png"
        code = main(["plot", "--beam", "barton5", "0.3", "--box", "4", "4", "1", "--output", str(output)])
        assert code == 0
        assert output.exists()
