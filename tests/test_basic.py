from healthpi_charts import CHART_NAMES, __version__
from healthpi_charts.charts import CHARTS
from healthpi_charts.models import Field


def test_chart_names_match_registry():
    assert CHART_NAMES == list(CHARTS)
    assert CHART_NAMES[0] == "weight"


def test_version_is_set():
    assert __version__.count(".") == 2


def test_field_query_names_and_value_keys():
    assert Field.WEIGHT.value == "Weight"
    assert Field.FAT_PERCENT.key == "fatPercent"
    assert Field.BLOOD_PRESSURE_SYSTOLIC.key == "bloodPressureSystolic"
    assert len(Field) == 11
