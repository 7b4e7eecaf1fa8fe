"""Unit tests for build-script link hints."""

import pytest

from cmakecargo.integrator import IntegratorError, is_cmakecargo_build, link_hints


class TestLinkHints:
    """Tests for link_hints()."""

    def test_not_a_cmake_build(self):
        assert not is_cmakecargo_build({})

        with pytest.raises(IntegratorError, match="CMAKECARGO_BUILD_DIR"):
            link_hints({})

    def test_no_hints(self):
        assert link_hints({"CMAKECARGO_BUILD_DIR": "/build"}) == []

    def test_directories_then_libraries(self):
        environ = {
            "CMAKECARGO_BUILD_DIR": "/build",
            "CMAKECARGO_LINK_DIRECTORIES": "/build/a:/build/b",
            "CMAKECARGO_LINK_LIBRARIES": "foo:bar",
        }

        assert link_hints(environ) == [
            "cargo:rustc-link-search=/build/a",
            "cargo:rustc-link-search=/build/b",
            "cargo:rustc-link-lib=foo",
            "cargo:rustc-link-lib=bar",
        ]

    def test_empty_entries_are_dropped(self):
        environ = {"CMAKECARGO_BUILD_DIR": "/build", "CMAKECARGO_LINK_LIBRARIES": "foo::"}

        assert link_hints(environ) == ["cargo:rustc-link-lib=foo"]
