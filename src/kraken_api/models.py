from __future__ import annotations
from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from pydantic import field_validator, model_validator


from .consts import OrderFlag, OrderType, SelfTradePrevention, Side, TimeInForce, Trigger
from .decoders import (
    snippet,
    bool_default_false,
    bool_default_true,
    limit_or_empty,
    minimal_amounts,
    numeric_string,
    one_or_many_strings,
    pair_keyed,
    positional,
)
from .errors import APIError, DecodeError

# Field types for the ambiguous wire shapes
NumStr = Annotated[str, BeforeValidator(numeric_string)]
Limit = Annotated[str, BeforeValidator(limit_or_empty)]
StrList = Annotated[List[str], BeforeValidator(one_or_many_strings)]
BoolTrue = Annotated[bool, BeforeValidator(bool_default_true)]
BoolFalse = Annotated[bool, BeforeValidator(bool_default_false)]

ResultT = TypeVar("ResultT")


class KrakenModel(BaseModel):
    """Base for decoded results; fields the model does not name are kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Envelope(BaseModel, Generic[ResultT]):
    """Outer layout of every JSON response: {"error": [...], "result": ...}."""

    error: List[str] = Field(default_factory=list)
    result: Optional[ResultT] = None

    @field_validator("error", mode="before")
    @classmethod
    def _errors_as_list(cls, v):  # type: ignore[override]
        return one_or_many_strings(v)

    @property
    def ok(self) -> bool:
        return not self.error

    def raise_for_error(self) -> None:
        """Raise APIError if the exchange reported errors.

        The partially decoded result travels with the exception.
        """
        if self.error:
            raise APIError(self.error, self.result)


def decode_response(raw: Union[bytes, str], result_type: Any = Any) -> Envelope:
    """Decode response bytes into Envelope[result_type].

    Raises DecodeError naming the first failing field when the payload is
    not JSON or a field matches none of its accepted shapes. When the
    envelope itself carries errors, the result may be partial or empty;
    APIError is raised instead, with the undecoded result and the
    DecodeError as its cause.
    """
    try:
        return Envelope[result_type].model_validate_json(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        decode_error = DecodeError(first.get("msg", "invalid payload"), field, snippet(raw))
        decode_error.__cause__ = e
    try:
        loose = Envelope[Any].model_validate_json(raw)
    except ValidationError:
        raise decode_error
    if loose.error:
        raise APIError(loose.error, loose.result) from decode_error
    raise decode_error


# --------------------------------------------------------------------------
# Market data
# --------------------------------------------------------------------------


class ServerTime(KrakenModel):
    unixtime: int
    rfc1123: str = ""


class SystemStatusInfo(KrakenModel):
    status: str
    timestamp: str = ""


class AssetInfo(KrakenModel):
    aclass: str = ""
    altname: str = ""
    decimals: int = 0
    display_decimals: int = 0
    collateral_value: Optional[float] = None
    status: str = ""


class AssetPair(KrakenModel):
    altname: str = ""
    wsname: str = ""
    aclass_base: str = ""
    base: str = ""
    aclass_quote: str = ""
    quote: str = ""
    pair_decimals: int = 0
    cost_decimals: int = 0
    lot_decimals: int = 0
    lot_multiplier: int = 1
    ordermin: NumStr = ""
    costmin: NumStr = ""
    tick_size: NumStr = ""
    status: str = ""


class TickerInfo(KrakenModel):
    """Ticker for one pair; the wire uses one-letter keys."""

    ask: List[str] = Field(default_factory=list, alias="a")
    bid: List[str] = Field(default_factory=list, alias="b")
    last_trade: List[str] = Field(default_factory=list, alias="c")
    volume: List[str] = Field(default_factory=list, alias="v")
    vwap: List[str] = Field(default_factory=list, alias="p")
    trades: List[int] = Field(default_factory=list, alias="t")
    low: List[str] = Field(default_factory=list, alias="l")
    high: List[str] = Field(default_factory=list, alias="h")
    opening: NumStr = Field("", alias="o")

    @field_validator("ask", "bid", "last_trade", "volume", "vwap", "low", "high", mode="before")
    @classmethod
    def _numeric_items(cls, v):  # type: ignore[override]
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("expected array")
        return [numeric_string(x) for x in v]

    @field_validator("trades", mode="before")
    @classmethod
    def _null_trades(cls, v):  # type: ignore[override]
        return [] if v is None else v


class OHLCTick(KrakenModel):
    time: int
    open: NumStr
    high: NumStr
    low: NumStr
    close: NumStr
    vwap: NumStr
    volume: NumStr
    count: int

    @model_validator(mode="before")
    @classmethod
    def _from_array(cls, v):  # type: ignore[override]
        return positional(v, ("time", "open", "high", "low", "close", "vwap", "volume", "count"))


class OHLCData(KrakenModel):
    pair: str
    last: int = 0
    data: List[OHLCTick] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_pair(cls, v):  # type: ignore[override]
        return v if isinstance(v, dict) and "pair" in v else pair_keyed(v)


class OrderBookLevel(KrakenModel):
    price: NumStr
    volume: NumStr
    timestamp: int

    @model_validator(mode="before")
    @classmethod
    def _from_array(cls, v):  # type: ignore[override]
        return positional(v, ("price", "volume", "timestamp"))


class OrderBook(KrakenModel):
    pair: str
    asks: List[OrderBookLevel] = Field(default_factory=list)
    bids: List[OrderBookLevel] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_pair(cls, v):  # type: ignore[override]
        if isinstance(v, dict) and "pair" in v:
            return v
        unwrapped = pair_keyed(v, cursor=None)
        book = unwrapped["data"]
        if not isinstance(book, dict):
            raise ValueError("expected object with asks and bids")
        return {"pair": unwrapped["pair"], **book}


class Trade(KrakenModel):
    price: NumStr
    volume: NumStr
    time: float
    side: str
    order_type: str
    misc: str = ""
    trade_id: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _from_array(cls, v):  # type: ignore[override]
        return positional(
            v,
            ("price", "volume", "time", "side", "order_type", "misc", "trade_id"),
            required=6,
        )


class RecentTrades(KrakenModel):
    pair: str
    last: NumStr = ""
    data: List[Trade] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_pair(cls, v):  # type: ignore[override]
        return v if isinstance(v, dict) and "pair" in v else pair_keyed(v)


class Spread(KrakenModel):
    time: int
    bid: NumStr
    ask: NumStr

    @model_validator(mode="before")
    @classmethod
    def _from_array(cls, v):  # type: ignore[override]
        return positional(v, ("time", "bid", "ask"))


class RecentSpreads(KrakenModel):
    pair: str
    last: int = 0
    data: List[Spread] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_pair(cls, v):  # type: ignore[override]
        return v if isinstance(v, dict) and "pair" in v else pair_keyed(v)


# --------------------------------------------------------------------------
# Account data
# --------------------------------------------------------------------------


class ExtendedBalance(KrakenModel):
    balance: NumStr = ""
    credit: NumStr = ""
    credit_used: NumStr = ""
    hold_trade: NumStr = ""


class TradeBalance(KrakenModel):
    """Margin summary; keys are the exchange's abbreviations."""

    eb: NumStr = ""  # equivalent balance
    tb: NumStr = ""  # trade balance
    m: NumStr = ""  # margin amount of open positions
    n: NumStr = ""  # unrealized P&L
    c: NumStr = ""  # cost basis
    v: NumStr = ""  # current valuation
    e: NumStr = ""  # equity
    mf: NumStr = ""  # free margin
    ml: NumStr = ""  # margin level
    uv: NumStr = ""  # unexecuted value


class OrderDescription(KrakenModel):
    order: str = ""
    close: str = ""


class OrderDetail(KrakenModel):
    pair: str = ""
    type: str = ""
    ordertype: str = ""
    price: NumStr = ""
    price2: NumStr = ""
    leverage: str = ""
    order: str = ""
    close: str = ""


class OrderInfo(KrakenModel):
    refid: Optional[str] = None
    userref: Optional[int] = None
    status: str = ""
    opentm: float = 0
    starttm: float = 0
    expiretm: float = 0
    closetm: Optional[float] = None
    descr: OrderDetail = Field(default_factory=OrderDetail)
    vol: NumStr = ""
    vol_exec: NumStr = ""
    cost: NumStr = ""
    fee: NumStr = ""
    price: NumStr = ""
    stopprice: NumStr = ""
    limitprice: NumStr = ""
    misc: str = ""
    oflags: str = ""
    reason: Optional[str] = None
    trades: StrList = Field(default_factory=list)


class OpenOrders(KrakenModel):
    open: Dict[str, OrderInfo] = Field(default_factory=dict)


class ClosedOrders(KrakenModel):
    closed: Dict[str, OrderInfo] = Field(default_factory=dict)
    count: int = 0


class TradeInfo(KrakenModel):
    ordertxid: str = ""
    postxid: str = ""
    pair: str = ""
    time: float = 0
    type: str = ""
    ordertype: str = ""
    price: NumStr = ""
    cost: NumStr = ""
    fee: NumStr = ""
    vol: NumStr = ""
    margin: NumStr = ""
    misc: str = ""
    trade_id: Optional[int] = None
    maker: Optional[bool] = None
    ledgers: StrList = Field(default_factory=list)


class TradesHistory(KrakenModel):
    trades: Dict[str, TradeInfo] = Field(default_factory=dict)
    count: int = 0


class LedgerEntry(KrakenModel):
    refid: str = ""
    time: float = 0
    type: str = ""
    subtype: str = ""
    aclass: str = ""
    asset: str = ""
    amount: NumStr = ""
    fee: NumStr = ""
    balance: NumStr = ""


class LedgersInfo(KrakenModel):
    ledger: Dict[str, LedgerEntry] = Field(default_factory=dict)
    count: int = 0


class FeeTier(KrakenModel):
    fee: NumStr = ""
    minfee: NumStr = ""
    maxfee: NumStr = ""
    nextfee: NumStr = ""
    nextvolume: NumStr = ""
    tiervolume: NumStr = ""


class TradeVolume(KrakenModel):
    currency: str = ""
    volume: NumStr = ""
    fees: Dict[str, FeeTier] = Field(default_factory=dict)
    fees_maker: Dict[str, FeeTier] = Field(default_factory=dict)

    @field_validator("fees", "fees_maker", mode="before")
    @classmethod
    def _null_as_empty(cls, v):  # type: ignore[override]
        return {} if v is None else v


class ExportReportRequested(KrakenModel):
    id: str


class ExportReportStatus(KrakenModel):
    id: str
    descr: str = ""
    format: str = ""
    report: str = ""
    subtype: str = ""
    status: str = ""
    fields: str = ""
    createdtm: NumStr = ""
    starttm: NumStr = ""
    completedtm: NumStr = ""
    datastarttm: NumStr = ""
    dataendtm: NumStr = ""
    asset: str = ""


class DeleteExportResult(KrakenModel):
    delete: BoolFalse = False
    cancel: BoolFalse = False


# --------------------------------------------------------------------------
# Trading
# --------------------------------------------------------------------------


class CloseOrder(BaseModel):
    """Conditional close attached to an order, triggered by its fill."""

    ordertype: OrderType
    price: Optional[NumStr] = None
    price2: Optional[NumStr] = None


class Order(BaseModel):
    """Order parameters shared by AddOrder and AddOrderBatch.

    Prices and volumes accept numbers or strings; they are sent as strings
    so relative prices ("+1.5%", "#5") pass through untouched.
    """

    ordertype: OrderType
    type: Side
    volume: NumStr
    price: Optional[NumStr] = None
    price2: Optional[NumStr] = None
    trigger: Optional[Trigger] = None
    leverage: Optional[str] = None
    reduce_only: Optional[bool] = None
    stp_type: Optional[SelfTradePrevention] = None
    oflags: Optional[List[OrderFlag]] = None
    timeinforce: Optional[TimeInForce] = None
    starttm: Optional[NumStr] = None
    expiretm: Optional[NumStr] = None
    userref: Optional[int] = None
    close: Optional[CloseOrder] = None


class AddOrderResult(KrakenModel):
    descr: OrderDescription = Field(default_factory=OrderDescription)
    txid: StrList = Field(default_factory=list)


class AddOrderBatchEntry(KrakenModel):
    """One line of a batch placement.

    txid and error each arrive as a lone string or an array; both are kept
    as separate lists so a failed line never leaks into the ids.
    """

    descr: Optional[OrderDescription] = None
    txid: List[str] = Field(default_factory=list)
    error: List[str] = Field(default_factory=list)

    @field_validator("txid", "error", mode="before")
    @classmethod
    def _one_or_many(cls, v):  # type: ignore[override]
        return one_or_many_strings(v)

    @property
    def ok(self) -> bool:
        return not self.error


class AddOrderBatchResult(KrakenModel):
    orders: List[AddOrderBatchEntry] = Field(default_factory=list)

    def failed(self) -> List[int]:
        """Indexes of the lines the exchange rejected, for a targeted retry."""
        return [i for i, entry in enumerate(self.orders) if not entry.ok]

    def succeeded(self) -> List[int]:
        return [i for i, entry in enumerate(self.orders) if entry.ok]


class EditOrderResult(KrakenModel):
    descr: OrderDescription = Field(default_factory=OrderDescription)
    txid: str = ""
    originaltxid: str = ""
    volume: NumStr = ""
    price: NumStr = ""
    price2: NumStr = ""
    orders_cancelled: int = 0
    status: str = ""


class CancelOrderResult(KrakenModel):
    count: int = 0
    pending: BoolFalse = False


class CancelAllAfterResult(KrakenModel):
    currentTime: str = ""
    triggerTime: str = ""


class CancelOrderBatchResult(KrakenModel):
    count: int = 0


# --------------------------------------------------------------------------
# Funding
# --------------------------------------------------------------------------


class DepositMethod(KrakenModel):
    method: str
    limit: Limit = ""
    fee: NumStr = ""
    address_setup_fee: NumStr = Field("", alias="address-setup-fee")
    gen_address: BoolFalse = Field(False, alias="gen-address")
    minimum: NumStr = ""


class DepositAddress(KrakenModel):
    address: str = ""
    expiretm: NumStr = ""
    new: BoolFalse = False
    memo: Optional[str] = None
    tag: Optional[str] = None


class TransactionDetails(KrakenModel):
    """Status line of a recent deposit or withdrawal."""

    method: str = ""
    aclass: str = ""
    asset: str = ""
    refid: str = ""
    txid: str = ""
    info: str = ""
    amount: NumStr = ""
    fee: NumStr = ""
    time: int = 0
    status: str = ""
    status_prop: Optional[str] = Field(None, alias="status-prop")
    network: Optional[str] = None


class WithdrawalMethod(KrakenModel):
    asset: str = ""
    method: str = ""
    network: str = ""
    minimum: NumStr = ""


class WithdrawalAddress(KrakenModel):
    address: str = ""
    asset: str = ""
    method: str = ""
    key: str = ""
    memo: Optional[str] = None
    verified: BoolFalse = False


class WithdrawalInformation(KrakenModel):
    method: str = ""
    limit: Limit = ""
    amount: NumStr = ""
    fee: NumStr = ""


class ReferenceId(KrakenModel):
    refid: str


# --------------------------------------------------------------------------
# Staking
# --------------------------------------------------------------------------


class StakingReward(KrakenModel):
    reward: NumStr = ""
    type: str = ""


class MinimumAmount(KrakenModel):
    staking: str = "0"
    unstaking: str = "0"

    @model_validator(mode="before")
    @classmethod
    def _defaults(cls, v):  # type: ignore[override]
        return minimal_amounts(v)


class StakeableAsset(KrakenModel):
    method: str = ""
    asset: str = ""
    staking_asset: str = ""
    rewards: StakingReward = Field(default_factory=StakingReward)
    on_chain: BoolTrue = True
    can_stake: BoolTrue = True
    can_unstake: BoolTrue = True
    enabled_for_user: BoolTrue = True
    minimum_amount: MinimumAmount = Field(default_factory=MinimumAmount)


class StakingTransaction(KrakenModel):
    method: str = ""
    aclass: str = ""
    asset: str = ""
    refid: str = ""
    amount: NumStr = ""
    fee: NumStr = ""
    time: int = 0
    status: str = ""
    type: str = ""
    bond_start: Optional[int] = None
    bond_end: Optional[int] = None
