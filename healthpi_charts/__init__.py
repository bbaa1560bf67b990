__all__ = ["CHART_NAMES", "DEFAULT_URL", "__version__"]

__version__ = "0.1.0"

DEFAULT_URL = "http://localhost:8080/"

# Order in which charts appear on the dashboard page
CHART_NAMES = [
    "weight",
    "glucose",
]
