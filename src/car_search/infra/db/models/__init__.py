from car_search.infra.db.models.base import Base
from car_search.infra.db.models.dealer import DealerRow
from car_search.infra.db.models.listing import ListingRow
from car_search.infra.db.models.price_history import PriceHistoryRow

__all__ = ["Base", "DealerRow", "ListingRow", "PriceHistoryRow"]
