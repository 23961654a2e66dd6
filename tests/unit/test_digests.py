from pathlib import Path

from consolidator.assembler.digests import file_digests, md5_hex, sm3_hex


class TestDigests:
    def test_md5_of_known_input(self) -> None:
        assert md5_hex(b"abc") == "900150983cd24fb0d6963f7d28e17f72"

    def test_sm3_of_known_input(self) -> None:
        assert sm3_hex(b"abc") == (
            "66c7f0f462eeedd9d1f2d46bdc10e4e24167c4875cf2f7a2297da02b8f4ba8e0"
        )

    def test_file_digests_cover_exact_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.pdf"
        path.write_bytes(b"abc")

        digests = file_digests(path)

        assert digests.md5 == md5_hex(b"abc")
        assert digests.sm3 == sm3_hex(b"abc")
        assert digests.size_bytes == 3
