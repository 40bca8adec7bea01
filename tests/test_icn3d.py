"""Tests for iCn3D link building."""

from datetime import date
from urllib.parse import parse_qsl, urlsplit

from vizsnp import icn3d
from vizsnp.models.structure import StructureCandidate


def query_params(url: str) -> dict[str, str]:
    return dict(parse_qsl(urlsplit(url).query))


class TestFormatting:
    """Tests for date and parameter encoding."""

    def test_date_without_padding(self):
        assert icn3d.format_date(date(2024, 3, 7)) == "202437"
        assert icn3d.format_date(date(2023, 12, 25)) == "20231225"

    def test_encode_params(self):
        encoded = icn3d.encode_params({"pdbid": "1abc", "command": "a | b; c", "ids": ["x", "y"]})
        assert encoded == "pdbid=1abc&command=a%20%7C%20b%3B%20c&ids=x%2Cy"

    def test_encode_keeps_uri_component_safe_characters(self):
        assert icn3d.encode_params({"k": "a-b_c.d!e~f*g'h(i)"}) == "k=a-b_c.d!e~f*g'h(i)"


class TestCommand:
    """Tests for the iCn3D command script."""

    def test_build_command(self):
        command = icn3d.build_command("1abc_A", 42, "V")
        steps = command.split("; ")

        assert steps[:3] == icn3d.VIEWER_DIRECTIVES
        assert steps[3] == "add track | chainid 1abc_A | title SIFT | text 42 V"
        assert steps[4] == "add track | chainid 1abc_A | title PolyPhen | text 42 V"
        assert steps[5] == "scap interaction 1abc_A_42_V"
        assert len(steps) == 6


class TestLinks:
    """Tests for PDB and AlphaFold links."""

    def test_pdb_link(self):
        structure = StructureCandidate(pdb_id="1abc", chain_id="B", coverage=0.9, resolution=2.0)
        url = icn3d.pdb_link(structure, 42, "V", today=date(2024, 3, 7))

        assert url.startswith(f"{icn3d.ICN3D_URL}?pdbid=1abc&")
        params = query_params(url)
        assert params["pdbid"] == "1abc"
        assert params["date"] == "202437"
        assert params["v"] == icn3d.ICN3D_VERSION
        assert "scap interaction 1abc_B_42_V" in params["command"]

    def test_alphafold_link(self):
        url = icn3d.alphafold_link("P12345", 42, "V", today=date(2024, 11, 30))

        params = query_params(url)
        assert list(params) == ["afid", "date", "v", "command"]
        assert params["afid"] == "P12345"
        assert params["date"] == "20241130"
        assert "add track | chainid P12345_A | title SIFT | text 42 V" in params["command"]

    def test_custom_base_url(self):
        url = icn3d.alphafold_link("P12345", 1, "A", today=date(2024, 1, 1), base_url="https://viewer.test/full.html")
        assert url.startswith("https://viewer.test/full.html?afid=P12345&")
