"""Unit tests for pre-flight input loading (host list + installer).

Uses the real filesystem via tmp_path; pandas does the parsing.
"""
import pytest

from winpush.core import RealFileSystemService
from winpush.deploy.base import Artifact
from winpush.deploy.exceptions import InputError
from winpush.deploy.inputs import load_artifact, load_targets


@pytest.fixture
def fs():
    return RealFileSystemService()


def write_csv(tmp_path, text, name="hosts.csv", encoding="utf-8"):
    path = tmp_path / name
    path.write_text(text, encoding=encoding)
    return str(path)


class TestLoadTargets:
    """Test load_targets deduplication, sorting and failure modes."""

    def test_duplicates_yield_each_host_once(self, tmp_path, fs):
        """Every duplicate (including different case) appears exactly once."""
        path = write_csv(
            tmp_path,
            "ComputerName\nWS-02\nWS-01\nWS-02\nws-01\nWS-03\n"
        )

        targets = load_targets(path, "ComputerName", fs)

        assert targets == ["WS-01", "WS-02", "WS-03"]

    def test_first_spelling_is_kept(self, tmp_path, fs):
        path = write_csv(tmp_path, "ComputerName\nlab-07\nLAB-07\n")

        assert load_targets(path, "ComputerName", fs) == ["lab-07"]

    def test_sort_is_case_insensitive(self, tmp_path, fs):
        path = write_csv(tmp_path, "ComputerName\nbeta\nAlpha\ncharlie\n")

        assert load_targets(path, "ComputerName", fs) == ["Alpha", "beta", "charlie"]

    def test_extra_columns_ignored(self, tmp_path, fs):
        path = write_csv(
            tmp_path,
            "Site,ComputerName,Owner\nHQ,WS-01,ops\nLab,LAB-07,research\n"
        )

        assert load_targets(path, "ComputerName", fs) == ["LAB-07", "WS-01"]

    def test_whitespace_and_blank_cells_dropped(self, tmp_path, fs):
        path = write_csv(
            tmp_path,
            "ComputerName,Site\n  WS-01  ,HQ\n,HQ\n   ,Lab\nWS-02,HQ\n"
        )

        assert load_targets(path, "ComputerName", fs) == ["WS-01", "WS-02"]

    def test_custom_delimiter(self, tmp_path, fs):
        path = write_csv(tmp_path, "Name;Site\nWS-01;HQ\nWS-02;HQ\n")

        assert load_targets(path, "Name", fs, delimiter=";") == ["WS-01", "WS-02"]

    def test_bom_and_padded_header(self, tmp_path, fs):
        """Excel exports carry a BOM and sometimes padded headers."""
        path = write_csv(tmp_path, " ComputerName ,Site\nWS-01,HQ\n", encoding="utf-8-sig")

        assert load_targets(path, "ComputerName", fs) == ["WS-01"]

    def test_numeric_looking_names_stay_strings(self, tmp_path, fs):
        path = write_csv(tmp_path, "ComputerName\n0101\n10.0.0.5\n")

        assert load_targets(path, "ComputerName", fs) == ["0101", "10.0.0.5"]

    def test_null_like_names_are_kept(self, tmp_path, fs):
        """Names pandas would treat as missing values are still hosts."""
        path = write_csv(tmp_path, "ComputerName\nNA\nNULL\nNone\nnan\nN/A\nWS-01\n")

        targets = load_targets(path, "ComputerName", fs)

        assert targets == ["N/A", "NA", "nan", "None", "NULL", "WS-01"]
    def test_missing_file_raises(self, tmp_path, fs):
        with pytest.raises(InputError, match="not found"):
            load_targets(str(tmp_path / "nope.csv"), "ComputerName", fs)

    def test_missing_column_raises(self, tmp_path, fs):
        path = write_csv(tmp_path, "Host,Site\nWS-01,HQ\n")

        with pytest.raises(InputError, match="Column 'ComputerName' not found"):
            load_targets(path, "ComputerName", fs)

    def test_header_only_is_empty_input(self, tmp_path, fs):
        path = write_csv(tmp_path, "ComputerName,Site\n")

        with pytest.raises(InputError, match="No hosts"):
            load_targets(path, "ComputerName", fs)

    def test_all_blank_is_empty_input(self, tmp_path, fs):
        path = write_csv(tmp_path, "ComputerName,Site\n,HQ\n  ,Lab\n")

        with pytest.raises(InputError, match="No hosts"):
            load_targets(path, "ComputerName", fs)

    def test_zero_byte_file_is_empty_input(self, tmp_path, fs):
        path = write_csv(tmp_path, "")

        with pytest.raises(InputError, match="empty"):
            load_targets(path, "ComputerName", fs)


class TestLoadArtifact:
    """Test load_artifact."""

    def test_existing_file(self, tmp_path, fs):
        msi = tmp_path / "PowerShell-7.4.1-win-x64.msi"
        msi.write_bytes(b"\xd0\xcf\x11\xe0")

        artifact = load_artifact(str(msi), fs)

        assert artifact == Artifact(
            path=str(msi),
            name="PowerShell-7.4.1-win-x64.msi",
            stem="PowerShell-7.4.1-win-x64"
        )

    def test_missing_file_raises(self, tmp_path, fs):
        with pytest.raises(InputError, match="Installer not found"):
            load_artifact(str(tmp_path / "missing.msi"), fs)

    def test_directory_is_not_an_installer(self, tmp_path, fs):
        with pytest.raises(InputError):
            load_artifact(str(tmp_path), fs)
