# Importing every model registers its table on Base.metadata.
from app.db.models.api_tokens import ApiToken  # noqa: F401
from app.db.models.customers import Customer  # noqa: F401
from app.db.models.import_reports import ImportReport  # noqa: F401
from app.db.models.order_items import OrderItem  # noqa: F401
from app.db.models.orders import Order  # noqa: F401
from app.db.models.products import Product  # noqa: F401
from app.db.models.sales_reps import SalesRep  # noqa: F401
from app.db.models.sync_logs import SyncLog  # noqa: F401
from app.db.models.sync_updates import SyncUpdate  # noqa: F401
