"""Tests for the DependencyFile record."""

import base64

import pytest

from depfile.errors import ConfigurationError, DecodeError
from depfile.files.models import ContentEncoding, DependencyFile, FileType, Operation


class TestConstruction:
    def test_defaults(self):
        f = DependencyFile(name="Gemfile", content="gem 'rake'\n")
        assert f.directory == "/"
        assert f.type is FileType.FILE
        assert f.support_file is False
        assert f.symlink_target is None
        assert f.content_encoding is ContentEncoding.UTF_8
        assert f.operation is Operation.UPDATE

    def test_strings_coerced_to_enums(self):
        f = DependencyFile(
            name="a.bin", content="AAE=", content_encoding="base64", operation="create",
        )
        assert f.content_encoding is ContentEncoding.BASE64
        assert f.operation is Operation.CREATE

    def test_unknown_operation_rejected(self):
        with pytest.raises(ConfigurationError, match="operation"):
            DependencyFile(name="a", content="", operation="rename")

    def test_unknown_type_rejected(self):
        with pytest.raises(ConfigurationError, match="type"):
            DependencyFile(name="a", content="", type="directory")

    def test_bom_and_leading_slashes_normalized(self):
        f = DependencyFile(name="a.txt", content="\ufeffhello", directory="//sub/")
        assert f.content == "hello"
        assert f.directory == "/sub/"
        assert f.path == "/sub/a.txt"


class TestDirectory:
    @pytest.mark.parametrize(
        "given, expected",
        [
            ("", "/"),
            ("/", "/"),
            ("///", "/"),
            ("app", "/app"),
            ("/app", "/app"),
            ("////app/", "/app/"),
            ("//a//b", "/a//b"),
        ],
    )
    def test_single_leading_slash(self, given, expected):
        assert DependencyFile(name="x", content="", directory=given).directory == expected


class TestBom:
    def test_bom_removed_once(self):
        f = DependencyFile(name="a", content="\ufeff\ufeffdata")
        assert f.content == "\ufeffdata"

    def test_no_bom_unchanged(self):
        assert DependencyFile(name="a", content="data").content == "data"

    def test_bom_in_middle_untouched(self):
        assert DependencyFile(name="a", content="da\ufeffta").content == "da\ufeffta"

    def test_base64_never_stripped(self):
        f = DependencyFile(name="a", content="\ufeffAAE=", content_encoding="base64")
        assert f.content == "\ufeffAAE="

    def test_bytes_bom_removed(self):
        f = DependencyFile(name="a", content=b"\xef\xbb\xbfdata")
        assert f.content == b"data"

    def test_none_content(self):
        f = DependencyFile(name="a", content=None, operation="delete")
        assert f.content is None


class TestSymlinks:
    def test_symlink_without_target(self):
        with pytest.raises(ConfigurationError, match="Symlinks must specify a target"):
            DependencyFile(name="a", content="", type="symlink")

    def test_target_without_symlink(self):
        with pytest.raises(ConfigurationError, match="Only symlinked files must specify a target"):
            DependencyFile(name="a", content="", symlink_target="../b")

    def test_target_on_submodule_rejected(self):
        with pytest.raises(ConfigurationError):
            DependencyFile(name="a", content="", type="submodule", symlink_target="../b")

    def test_valid_symlink(self, symlink_file):
        assert symlink_file.type is FileType.SYMLINK
        assert symlink_file.symlink_target == "../shared/Gemfile"


class TestPath:
    @pytest.mark.parametrize(
        "directory, name, expected",
        [
            ("/", "Gemfile", "/Gemfile"),
            ("/app/", "Gemfile", "/app/Gemfile"),
            ("/app", "./lib//x.rb", "/app/lib/x.rb"),
            ("/app/sub", "../Gemfile", "/app/Gemfile"),
            ("/", "../../Gemfile", "/Gemfile"),
            ("/", "/abs/go.mod", "/abs/go.mod"),
        ],
    )
    def test_clean_join(self, directory, name, expected):
        assert DependencyFile(name=name, content="", directory=directory).path == expected


class TestCanonicalMap:
    def test_keys_in_order(self, manifest):
        assert list(manifest.to_dict()) == [
            "name", "content", "directory", "type", "support_file",
            "content_encoding", "deleted", "operation",
        ]

    def test_enum_values_are_plain_strings(self, binary_file):
        data = binary_file.to_dict()
        assert data["type"] == "file"
        assert data["content_encoding"] == "base64"
        assert data["operation"] == "create"
        assert type(data["operation"]) is str

    def test_symlink_target_only_when_set(self, manifest, symlink_file):
        assert "symlink_target" not in manifest.to_dict()
        assert symlink_file.to_dict()["symlink_target"] == "../shared/Gemfile"

    def test_round_trip(self, manifest, lockfile, binary_file, symlink_file):
        for record in (manifest, lockfile, binary_file, symlink_file):
            rebuilt = DependencyFile.from_dict(record.to_dict())
            assert rebuilt == record
            assert rebuilt.support_file == record.support_file

    def test_round_trip_cleans_once(self):
        record = DependencyFile(
            name="./b/../Gemfile", content="\ufeffgem 'rake'\n", directory="///a//x",
        )
        rebuilt = DependencyFile.from_dict(record.to_dict())
        assert rebuilt == record
        assert rebuilt.directory == "/a//x"
        assert rebuilt.path == "/a/x/Gemfile"
        assert rebuilt.content == "gem 'rake'\n"

    def test_from_dict_requires_bool_deleted(self):
        with pytest.raises(ConfigurationError, match="deleted"):
            DependencyFile.from_dict({"name": "a", "content": "x", "deleted": "false"})

    def test_from_dict_bool_deleted(self):
        record = DependencyFile.from_dict({"name": "a", "content": "x", "deleted": False})
        assert record.operation is Operation.UPDATE

    def test_from_dict_ignores_unknown_keys(self):
        f = DependencyFile.from_dict({"name": "go.mod", "content": "module x\n", "mode": "100644"})
        assert f.path == "/go.mod"

    def test_from_dict_requires_name(self):
        with pytest.raises(ConfigurationError, match="name"):
            DependencyFile.from_dict({"content": "x"})


class TestEquality:
    def test_support_file_ignored(self, manifest):
        twin = DependencyFile.from_dict({**manifest.to_dict(), "support_file": True})
        assert twin == manifest
        assert hash(twin) == hash(manifest)
        assert len({twin, manifest}) == 1

    @pytest.mark.parametrize(
        "field, value",
        [
            ("name", "yarn.lock"),
            ("content", "{}"),
            ("directory", "/backend"),
            ("content_encoding", "base64"),
            ("operation", "create"),
        ],
    )
    def test_other_fields_matter(self, manifest, field, value):
        other = DependencyFile.from_dict({**manifest.to_dict(), field: value})
        assert other != manifest

    def test_type_matters(self, manifest):
        other = DependencyFile.from_dict({**manifest.to_dict(), "type": "submodule"})
        assert other != manifest

    def test_symlink_target_matters(self, symlink_file):
        other = DependencyFile.from_dict({**symlink_file.to_dict(), "symlink_target": "x"})
        assert other != symlink_file

    def test_not_equal_to_other_types(self, manifest):
        assert manifest != manifest.to_dict()
        assert manifest != "package.json"


class TestDeleted:
    def test_deleted_overrides_operation(self):
        f = DependencyFile(name="a", content=None, deleted=True, operation="create")
        assert f.operation is Operation.DELETE
        assert f.deleted is True

    def test_deleted_reflects_operation(self):
        assert DependencyFile(name="a", content=None, operation="delete").deleted is True
        assert DependencyFile(name="a", content="", operation="create").deleted is False

    def test_setter(self):
        f = DependencyFile(name="a", content="", operation="create")
        f.deleted = True
        assert f.operation is Operation.DELETE
        f.deleted = False
        assert f.operation is Operation.UPDATE

    def test_canonical_map_reports_deleted(self):
        f = DependencyFile(name="a", content=None, deleted=True)
        assert f.to_dict()["deleted"] is True
        assert f.to_dict()["operation"] == "delete"


class TestContent:
    def test_is_binary(self, manifest, binary_file):
        assert binary_file.is_binary is True
        assert manifest.is_binary is False

    def test_decoded_binary(self, binary_file):
        assert binary_file.decoded_content() == b"\x00\x01gem\xff"

    def test_decoded_line_wrapped_base64(self):
        encoded = base64.encodebytes(b"x" * 100).decode("ascii")
        f = DependencyFile(name="a", content=encoded, content_encoding="base64")
        assert f.decoded_content() == b"x" * 100

    def test_text_unchanged(self, manifest):
        assert manifest.decoded_content() == manifest.content

    def test_invalid_base64(self):
        f = DependencyFile(name="a", content="@@not base64@@", content_encoding="base64")
        with pytest.raises(DecodeError):
            f.decoded_content()

    def test_non_ascii_base64(self):
        f = DependencyFile(name="a", content="AAé=", content_encoding="base64")
        with pytest.raises(DecodeError):
            f.decoded_content()

    def test_binary_without_content(self):
        f = DependencyFile(name="a", content=None, content_encoding="base64", deleted=True)
        assert f.decoded_content() is None
