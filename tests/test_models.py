import pytest

from buildconf.models import (
    BuildConfig,
    BuildConfigBuild,
    BuildConfigVersion,
    UploadTarget,
    builds_from_template,
)
from buildconf.transport import DecodeError


def test_build_config_shapes_differ_by_direction() -> None:
    bc = BuildConfig(user="u", name="n")
    assert bc.to_wire() == {"username": "u", "name": "n"}
    assert bc.to_create_body() == {"build_configuration": {"username": "u", "name": "n"}}
    assert BuildConfig.from_wire({"username": "u", "name": "n", "extra": 1}) == bc


@pytest.mark.parametrize("data", [None, [], "x", {"username": "u"}, {"username": 1, "name": "n"}])
def test_build_config_from_wire_rejects_bad_shapes(data) -> None:
    with pytest.raises(DecodeError):
        BuildConfig.from_wire(data)


def test_version_keeps_build_order_and_is_immutable() -> None:
    builds = [BuildConfigBuild("b", "qemu"), BuildConfigBuild("a", "amazon-ebs")]
    v = BuildConfigVersion(user="u", name="n", builds=builds)
    builds.append(BuildConfigBuild("c", "docker"))

    assert v.builds == (BuildConfigBuild("b", "qemu"), BuildConfigBuild("a", "amazon-ebs"))
    assert v.to_create_body() == {
        "version": {"builds": [{"name": "b", "type": "qemu"}, {"name": "a", "type": "amazon-ebs"}]}
    }


def test_version_with_no_builds() -> None:
    assert BuildConfigVersion(user="u", name="n").to_create_body() == {"version": {"builds": []}}


def test_upload_target_from_wire() -> None:
    assert UploadTarget.from_wire({"upload_path": "https://s/x"}).upload_path == "https://s/x"
    with pytest.raises(DecodeError):
        UploadTarget.from_wire({"upload_path": None})


def test_builds_from_template_defaults_name_to_type() -> None:
    template = {
        "builders": [
            {"type": "amazon-ebs"},
            {"type": "qemu", "name": "local"},
        ]
    }
    assert builds_from_template(template) == [
        BuildConfigBuild(name="amazon-ebs", type="amazon-ebs"),
        BuildConfigBuild(name="local", type="qemu"),
    ]


@pytest.mark.parametrize("template", [[], {}, {"builders": []}, {"builders": [{"name": "x"}]}])
def test_builds_from_template_rejects_bad_templates(template) -> None:
    with pytest.raises(DecodeError):
        builds_from_template(template)
