"""
Test 7: Package Exports (fabrica/__init__.py)

Tests that the public API is importable from the top-level package.
"""

import pytest

import fabrica


class TestTopLevelExports:

    def test_version(self):
        assert fabrica.__version__

    def test_factory_entry_points(self):
        from fabrica import New, create, Factory
        assert New is create
        assert Factory is not None

    def test_instance_api(self):
        from fabrica import Accessor, Instance, members, blueprint_of, is_instance_of
        assert all(x is not None for x in (Accessor, Instance, members, blueprint_of, is_instance_of))

    def test_faults(self):
        from fabrica import (
            ConstructionFault,
            InvalidInterfaceFault,
            InvalidCtorFault,
            MissingCtorFault,
            InvalidCompositionFault,
        )
        assert issubclass(InvalidCtorFault, ConstructionFault)

    @pytest.mark.parametrize("name", fabrica.__all__)
    def test_all_resolves(self, name):
        assert hasattr(fabrica, name)

    @pytest.mark.parametrize("name", fabrica.factory.__all__)
    def test_factory_all_resolves(self, name):
        assert hasattr(fabrica.factory, name)
