import pytest

from aquacrm.core.core import SERVICE_MODULES, database_name


class TestDatabaseName:
    def test_name_from_path(self):
        assert database_name("mongodb://localhost:27017/aquacrm") == "aquacrm"

    def test_ignores_query_options(self):
        assert database_name("mongodb://user:pw@db.internal/aquacrm_prod?authSource=admin") == "aquacrm_prod"

    @pytest.mark.parametrize("url", ["mongodb://localhost:27017", "mongodb://localhost:27017/"])
    def test_missing_name(self, url):
        with pytest.raises(ValueError, match="Database name missing"):
            database_name(url)


class TestServiceModules:
    def test_counter_starts_first(self):
        assert SERVICE_MODULES[0][0] == "counter"

    def test_attribute_names_unique(self):
        names = [name for name, _, _ in SERVICE_MODULES]
        assert len(names) == len(set(names))
