from .schema import CompetitorPoint, ForecastPoint, ForecastResponse, HistoryPoint  # noqa
from .forecast_client import ForecastClient  # noqa
from .fx_rate import FxRateConnector  # noqa

__all__ = [
    "CompetitorPoint",
    "ForecastClient",
    "ForecastPoint",
    "ForecastResponse",
    "FxRateConnector",
    "HistoryPoint",
]
