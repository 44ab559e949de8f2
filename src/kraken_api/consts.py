from __future__ import annotations
from enum import Enum

# Base URL (paths below carry the API version prefix)
PRODUCTION_BASE_URL = "https://api.kraken.com"
DEFAULT_USER_AGENT = "kraken-spot-rest"

# Headers
HEADER_API_KEY = "API-Key"
HEADER_API_SIGN = "API-Sign"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
BINARY_CONTENT_TYPES = ("application/octet-stream", "application/zip")

# Exchange documented limits
MAX_ORDER_BATCH = 15
MAX_CANCEL_BATCH = 50

# Market data
SERVER_TIME_PATH = "/0/public/Time"
SYSTEM_STATUS_PATH = "/0/public/SystemStatus"
ASSET_INFO_PATH = "/0/public/Assets"
TRADABLE_ASSET_PAIRS_PATH = "/0/public/AssetPairs"
TICKER_INFORMATION_PATH = "/0/public/Ticker"
OHLC_DATA_PATH = "/0/public/OHLC"
ORDER_BOOK_PATH = "/0/public/Depth"
RECENT_TRADES_PATH = "/0/public/Trades"
RECENT_SPREADS_PATH = "/0/public/Spread"

# Account data
ACCOUNT_BALANCE_PATH = "/0/private/Balance"
EXTENDED_BALANCE_PATH = "/0/private/BalanceEx"
TRADE_BALANCE_PATH = "/0/private/TradeBalance"
OPEN_ORDERS_PATH = "/0/private/OpenOrders"
CLOSED_ORDERS_PATH = "/0/private/ClosedOrders"
QUERY_ORDERS_PATH = "/0/private/QueryOrders"
TRADES_HISTORY_PATH = "/0/private/TradesHistory"
LEDGERS_PATH = "/0/private/Ledgers"
TRADE_VOLUME_PATH = "/0/private/TradeVolume"
ADD_EXPORT_PATH = "/0/private/AddExport"
EXPORT_STATUS_PATH = "/0/private/ExportStatus"
RETRIEVE_EXPORT_PATH = "/0/private/RetrieveExport"
REMOVE_EXPORT_PATH = "/0/private/RemoveExport"

# Trading
ADD_ORDER_PATH = "/0/private/AddOrder"
ADD_ORDER_BATCH_PATH = "/0/private/AddOrderBatch"
EDIT_ORDER_PATH = "/0/private/EditOrder"
CANCEL_ORDER_PATH = "/0/private/CancelOrder"
CANCEL_ALL_PATH = "/0/private/CancelAll"
CANCEL_ALL_AFTER_PATH = "/0/private/CancelAllOrdersAfter"
CANCEL_ORDER_BATCH_PATH = "/0/private/CancelOrderBatch"

# Funding
DEPOSIT_METHODS_PATH = "/0/private/DepositMethods"
DEPOSIT_ADDRESSES_PATH = "/0/private/DepositAddresses"
DEPOSIT_STATUS_PATH = "/0/private/DepositStatus"
WITHDRAW_METHODS_PATH = "/0/private/WithdrawMethods"
WITHDRAW_ADDRESSES_PATH = "/0/private/WithdrawAddresses"
WITHDRAW_INFO_PATH = "/0/private/WithdrawInfo"
WITHDRAW_PATH = "/0/private/Withdraw"
WITHDRAW_STATUS_PATH = "/0/private/WithdrawStatus"
WITHDRAW_CANCEL_PATH = "/0/private/WithdrawCancel"
WALLET_TRANSFER_PATH = "/0/private/WalletTransfer"

# Staking
STAKE_PATH = "/0/private/Stake"
UNSTAKE_PATH = "/0/private/Unstake"
STAKING_ASSETS_PATH = "/0/private/Staking/Assets"
STAKING_PENDING_PATH = "/0/private/Staking/Pending"
STAKING_TRANSACTIONS_PATH = "/0/private/Staking/Transactions"


class OrderType(str, Enum):
    MARKET = "market"
    LIMIT = "limit"
    STOP_LOSS = "stop-loss"
    TAKE_PROFIT = "take-profit"
    STOP_LOSS_LIMIT = "stop-loss-limit"
    TAKE_PROFIT_LIMIT = "take-profit-limit"
    SETTLE_POSITION = "settle-position"


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"


class Trigger(str, Enum):
    LAST = "last"
    INDEX = "index"


class TimeInForce(str, Enum):
    GTC = "GTC"
    IOC = "IOC"
    GTD = "GTD"


class OrderFlag(str, Enum):
    POST = "post"
    FEE_IN_BASE = "fcib"
    FEE_IN_QUOTE = "fciq"
    NO_MARKET_PRICE_PROTECTION = "nompp"
    VOLUME_IN_QUOTE = "viqc"


class SelfTradePrevention(str, Enum):
    CANCEL_NEWEST = "cancel-newest"
    CANCEL_OLDEST = "cancel-oldest"
    CANCEL_BOTH = "cancel-both"


class OrderStatus(str, Enum):
    PENDING = "pending"
    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"
    EXPIRED = "expired"


class SystemStatus(str, Enum):
    ONLINE = "online"
    MAINTENANCE = "maintenance"
    CANCEL_ONLY = "cancel_only"
    POST_ONLY = "post_only"


class OHLCInterval(int, Enum):
    M1 = 1
    M5 = 5
    M15 = 15
    M30 = 30
    M60 = 60
    M240 = 240
    M1440 = 1440
    M10080 = 10080
    M21600 = 21600


class ReportKind(str, Enum):
    TRADES = "trades"
    LEDGERS = "ledgers"


class ReportFormat(str, Enum):
    CSV = "CSV"
    TSV = "TSV"


class LedgerType(str, Enum):
    ALL = "all"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRADE = "trade"
    MARGIN = "margin"
    ROLLOVER = "rollover"
    CREDIT = "credit"
    TRANSFER = "transfer"
    SETTLED = "settled"
    STAKING = "staking"
    SALE = "sale"
