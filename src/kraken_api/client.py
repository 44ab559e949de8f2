from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from urllib.parse import urlsplit

from opentelemetry.trace import SpanKind, TracerProvider
from pydantic import ValidationError

from .consts import (
    ACCOUNT_BALANCE_PATH,
    ADD_EXPORT_PATH,
    ADD_ORDER_BATCH_PATH,
    ADD_ORDER_PATH,
    ASSET_INFO_PATH,
    BINARY_CONTENT_TYPES,
    CANCEL_ALL_AFTER_PATH,
    CANCEL_ALL_PATH,
    CANCEL_ORDER_BATCH_PATH,
    CANCEL_ORDER_PATH,
    CLOSED_ORDERS_PATH,
    DEFAULT_USER_AGENT,
    DEPOSIT_ADDRESSES_PATH,
    DEPOSIT_METHODS_PATH,
    DEPOSIT_STATUS_PATH,
    EDIT_ORDER_PATH,
    EXPORT_STATUS_PATH,
    EXTENDED_BALANCE_PATH,
    FORM_CONTENT_TYPE,
    HEADER_API_KEY,
    HEADER_API_SIGN,
    HEADER_CONTENT_TYPE,
    HEADER_USER_AGENT,
    JSON_CONTENT_TYPE,
    LEDGERS_PATH,
    OHLC_DATA_PATH,
    OPEN_ORDERS_PATH,
    ORDER_BOOK_PATH,
    PRODUCTION_BASE_URL,
    QUERY_ORDERS_PATH,
    RECENT_SPREADS_PATH,
    RECENT_TRADES_PATH,
    REMOVE_EXPORT_PATH,
    RETRIEVE_EXPORT_PATH,
    SERVER_TIME_PATH,
    STAKE_PATH,
    STAKING_ASSETS_PATH,
    STAKING_PENDING_PATH,
    STAKING_TRANSACTIONS_PATH,
    SYSTEM_STATUS_PATH,
    TICKER_INFORMATION_PATH,
    TRADABLE_ASSET_PAIRS_PATH,
    TRADE_BALANCE_PATH,
    TRADE_VOLUME_PATH,
    TRADES_HISTORY_PATH,
    UNSTAKE_PATH,
    WALLET_TRANSFER_PATH,
    WITHDRAW_ADDRESSES_PATH,
    WITHDRAW_CANCEL_PATH,
    WITHDRAW_INFO_PATH,
    WITHDRAW_METHODS_PATH,
    WITHDRAW_PATH,
    WITHDRAW_STATUS_PATH,
    OHLCInterval,
    ReportFormat,
    ReportKind,
)
from .crypto import decode_secret, sign
from .decoders import snippet
from .errors import APIError, KrakenError, RequestValidationError, TransportError
from .interfaces import AccountData, Amount, Funding, MarketData, OrderLike, Pairs, Staking, Trading
from .models import (
    AddOrderBatchResult,
    AddOrderResult,
    AssetInfo,
    AssetPair,
    CancelAllAfterResult,
    CancelOrderBatchResult,
    CancelOrderResult,
    ClosedOrders,
    DeleteExportResult,
    DepositAddress,
    DepositMethod,
    EditOrderResult,
    ExportReportRequested,
    ExportReportStatus,
    ExtendedBalance,
    LedgersInfo,
    NumStr,
    OHLCData,
    OpenOrders,
    Order,
    OrderBook,
    OrderInfo,
    RecentSpreads,
    RecentTrades,
    ReferenceId,
    ServerTime,
    StakeableAsset,
    StakingTransaction,
    SystemStatusInfo,
    TickerInfo,
    TradeBalance,
    TradesHistory,
    TradeVolume,
    TransactionDetails,
    WithdrawalAddress,
    WithdrawalInformation,
    WithdrawalMethod,
    decode_response,
)
from .nonce import NonceGenerator, UnixMillisNonceGenerator, make_nonce_generator
from .pipeline import check_cancel_batch, check_order_batch, encode_form
from .tracing import TRACES_NAMESPACE, get_tracer, trace_outcome, trace_response
from .transport import HTTPResponse, RequestsTransport, Transport

logger = logging.getLogger(__name__)


def _as_order(order: OrderLike) -> Order:
    if isinstance(order, Order):
        return order
    try:
        return Order.model_validate(order)
    except ValidationError as e:
        raise RequestValidationError(f"invalid order: {e.errors()[0].get('msg')}") from e


def _order_params(order: Order) -> Dict[str, Any]:
    return order.model_dump(exclude_none=True)


class KrakenSpotClient(MarketData, AccountData, Trading, Funding, Staking):
    """Spot REST client.

    Public endpoints work without credentials. Private endpoints POST a form
    body that starts with a fresh nonce and carry the API-Key and API-Sign
    headers. Every JSON response goes through the envelope decoder: a
    non-empty error list raises APIError with whatever result came along.
    """

    def __init__(
        self,
        key: str = "",
        secret: str = "",
        *,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        transport: Optional[Transport] = None,
        nonce_generator: Optional[NonceGenerator] = None,
        timeout: Optional[float] = None,
        tracer_provider: Optional[TracerProvider] = None,
    ):
        self._key = key
        self._secret = decode_secret(secret) if secret else b""
        self.base_url = (base_url or PRODUCTION_BASE_URL).rstrip("/")
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        if transport is None:
            transport = RequestsTransport(timeout=10.0 if timeout is None else timeout)
        self.transport = transport
        self.nonce_generator = nonce_generator or UnixMillisNonceGenerator()
        self.tracer = get_tracer(tracer_provider)

    @classmethod
    def from_settings(cls, s=None, transport: Optional[Transport] = None) -> "KrakenSpotClient":
        """Build a client from KRAKEN_* environment settings."""
        if s is None:
            from .settings import settings as s
        if transport is None:
            transport = RequestsTransport(
                timeout=s.timeout,
                max_retries=s.max_retries,
                backoff_factor=s.retry_backoff,
            )
        return cls(
            s.api_key,
            s.api_secret,
            base_url=s.base_url,
            user_agent=s.user_agent,
            transport=transport,
            nonce_generator=make_nonce_generator(s.nonce_generator),
        )

    def __repr__(self) -> str:
        return f"KrakenSpotClient(base_url={self.base_url!r}, authenticated={self.authenticated})"

    @property
    def authenticated(self) -> bool:
        return bool(self._key and self._secret)

    # ------------------------------------------------------------------
    # Request steps
    # ------------------------------------------------------------------

    def _public(self, path: str, params: Optional[Mapping[str, Any]] = None, result_type: Any = Any):
        url = self.base_url + path
        query = encode_form(params or {})
        if query:
            url = f"{url}?{query}"
        headers = {HEADER_USER_AGENT: self.user_agent}
        return self._send("GET", url, headers, None, result_type)

    def _private(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        result_type: Any = Any,
        otp: Optional[str] = None,
    ):
        if not self.authenticated:
            raise RequestValidationError(f"{path} requires an API key and secret")
        data: Dict[str, Any] = {"nonce": self.nonce_generator.generate()}
        if otp is not None:
            data["otp"] = otp
        for k, v in (params or {}).items():
            data.setdefault(k, v)
        body = encode_form(data)
        url = self.base_url + path
        headers = {
            HEADER_API_KEY: self._key,
            HEADER_API_SIGN: self._sign(urlsplit(url).path, body, data["nonce"]),
            HEADER_CONTENT_TYPE: FORM_CONTENT_TYPE,
            HEADER_USER_AGENT: self.user_agent,
        }
        return self._send("POST", url, headers, body.encode("ascii"), result_type)

    def _sign(self, url_path: str, body: str, nonce: int) -> str:
        with self.tracer.start_as_current_span(
            "sign",
            kind=SpanKind.CLIENT,
            attributes={"path": url_path, "nonce": str(nonce)},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                signature = sign(url_path, body, self._secret)
            except ValueError as e:
                trace_outcome(span, e)
                raise
            trace_outcome(span)
            return signature

    def _send(self, method: str, url: str, headers: Dict[str, str], body: Optional[bytes], result_type: Any):
        path = urlsplit(url).path
        logger.debug("%s %s", method, path)
        with self.tracer.start_as_current_span(
            f"{TRACES_NAMESPACE}.request",
            kind=SpanKind.CLIENT,
            attributes={"http.request.method": method, "url.path": path},
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                resp = self.transport.do(method, url, headers, body)
                trace_response(span, resp)
                result = self._handle(path, resp, result_type)
            except KrakenError as e:
                trace_outcome(span, e)
                raise
            trace_outcome(span)
            return result

    def _handle(self, path: str, resp: HTTPResponse, result_type: Any):
        if resp.status != 200:
            raise TransportError(
                f"{path}: HTTP {resp.status}: {snippet(resp.body)}",
                status=resp.status,
                body=resp.body,
            )
        ctype = resp.content_type
        if ctype == JSON_CONTENT_TYPE:
            try:
                envelope = decode_response(resp.body, result_type)
                envelope.raise_for_error()
            except APIError as e:
                logger.warning("%s returned errors: %s", path, e)
                raise
            return envelope.result
        if ctype in BINARY_CONTENT_TYPES:
            return resp.body
        raise TransportError(
            f"{path}: unsupported content type {ctype or 'none'!r}",
            status=resp.status,
            body=resp.body,
        )

    # ------------------------------------------------------------------
    # MarketData
    # ------------------------------------------------------------------

    def get_server_time(self) -> ServerTime:
        return self._public(SERVER_TIME_PATH, result_type=ServerTime)

    def get_system_status(self) -> SystemStatusInfo:
        return self._public(SYSTEM_STATUS_PATH, result_type=SystemStatusInfo)

    def get_asset_info(self, asset=None, aclass=None) -> Dict[str, AssetInfo]:
        return self._public(
            ASSET_INFO_PATH, {"asset": asset, "aclass": aclass}, Dict[str, AssetInfo]
        )

    def get_tradable_asset_pairs(self, pair=None, info=None, country_code=None) -> Dict[str, AssetPair]:
        params = {"pair": pair, "info": info, "country_code": country_code}
        return self._public(TRADABLE_ASSET_PAIRS_PATH, params, Dict[str, AssetPair])

    def get_ticker_information(self, pair: Optional[Pairs] = None) -> Dict[str, TickerInfo]:
        return self._public(TICKER_INFORMATION_PATH, {"pair": pair}, Dict[str, TickerInfo])

    def get_ohlc_data(self, pair: str, interval: Optional[OHLCInterval] = None, since=None) -> OHLCData:
        params = {"pair": pair, "interval": interval, "since": since}
        return self._public(OHLC_DATA_PATH, params, OHLCData)

    def get_order_book(self, pair: str, count: Optional[int] = None) -> OrderBook:
        return self._public(ORDER_BOOK_PATH, {"pair": pair, "count": count}, OrderBook)

    def get_recent_trades(self, pair: str, since=None, count=None) -> RecentTrades:
        params = {"pair": pair, "since": since, "count": count}
        return self._public(RECENT_TRADES_PATH, params, RecentTrades)

    def get_recent_spreads(self, pair: str, since=None) -> RecentSpreads:
        return self._public(RECENT_SPREADS_PATH, {"pair": pair, "since": since}, RecentSpreads)

    # ------------------------------------------------------------------
    # AccountData
    # ------------------------------------------------------------------

    def get_account_balance(self) -> Dict[str, str]:
        return self._private(ACCOUNT_BALANCE_PATH, result_type=Dict[str, NumStr])

    def get_extended_balance(self) -> Dict[str, ExtendedBalance]:
        return self._private(EXTENDED_BALANCE_PATH, result_type=Dict[str, ExtendedBalance])

    def get_trade_balance(self, asset: Optional[str] = None) -> TradeBalance:
        return self._private(TRADE_BALANCE_PATH, {"asset": asset}, TradeBalance)

    def get_open_orders(self, trades=None, userref=None) -> OpenOrders:
        return self._private(OPEN_ORDERS_PATH, {"trades": trades, "userref": userref}, OpenOrders)

    def get_closed_orders(
        self, trades=None, userref=None, start=None, end=None, ofs=None, closetime=None
    ) -> ClosedOrders:
        params = {
            "trades": trades,
            "userref": userref,
            "start": start,
            "end": end,
            "ofs": ofs,
            "closetime": closetime,
        }
        return self._private(CLOSED_ORDERS_PATH, params, ClosedOrders)

    def query_orders_info(self, txid: Sequence[str], trades=None, userref=None) -> Dict[str, OrderInfo]:
        if isinstance(txid, str):
            txid = [txid]
        if not txid:
            raise RequestValidationError("query_orders_info needs at least one txid")
        params = {"txid": list(txid), "trades": trades, "userref": userref}
        return self._private(QUERY_ORDERS_PATH, params, Dict[str, OrderInfo])

    def get_trades_history(self, type=None, trades=None, start=None, end=None, ofs=None) -> TradesHistory:
        params = {"type": type, "trades": trades, "start": start, "end": end, "ofs": ofs}
        return self._private(TRADES_HISTORY_PATH, params, TradesHistory)

    def get_ledgers_info(
        self, asset=None, aclass=None, type=None, start=None, end=None, ofs=None
    ) -> LedgersInfo:
        params = {
            "asset": asset,
            "aclass": aclass,
            "type": type,
            "start": start,
            "end": end,
            "ofs": ofs,
        }
        return self._private(LEDGERS_PATH, params, LedgersInfo)

    def get_trade_volume(self, pair: Optional[Pairs] = None) -> TradeVolume:
        return self._private(TRADE_VOLUME_PATH, {"pair": pair}, TradeVolume)

    def request_export_report(
        self,
        report: ReportKind,
        description: str,
        format: Optional[ReportFormat] = None,
        fields=None,
        starttm=None,
        endtm=None,
    ) -> ExportReportRequested:
        params = {
            "report": report,
            "description": description,
            "format": format,
            "fields": fields,
            "starttm": starttm,
            "endtm": endtm,
        }
        return self._private(ADD_EXPORT_PATH, params, ExportReportRequested)

    def get_export_report_status(self, report: ReportKind) -> List[ExportReportStatus]:
        return self._private(EXPORT_STATUS_PATH, {"report": report}, List[ExportReportStatus])

    def retrieve_data_export(self, id: str) -> bytes:
        return self._private(RETRIEVE_EXPORT_PATH, {"id": id}, bytes)

    def delete_export_report(self, id: str, kind: str = "delete") -> DeleteExportResult:
        if kind not in ("delete", "cancel"):
            raise RequestValidationError(f"kind must be 'delete' or 'cancel', got {kind!r}")
        return self._private(REMOVE_EXPORT_PATH, {"id": id, "type": kind}, DeleteExportResult)

    # ------------------------------------------------------------------
    # Trading
    # ------------------------------------------------------------------

    def add_order(self, pair: str, order: OrderLike, validate=None, deadline=None, otp=None) -> AddOrderResult:
        params = {"pair": pair, **_order_params(_as_order(order))}
        params.update({"validate": validate, "deadline": deadline})
        return self._private(ADD_ORDER_PATH, params, AddOrderResult, otp=otp)

    def add_order_batch(
        self, pair: str, orders: Sequence[OrderLike], validate=None, deadline=None
    ) -> AddOrderBatchResult:
        check_order_batch(orders)
        batch = [_order_params(_as_order(o)) for o in orders]
        params = {"pair": pair, "orders": batch, "validate": validate, "deadline": deadline}
        return self._private(ADD_ORDER_BATCH_PATH, params, AddOrderBatchResult)

    def edit_order(
        self,
        txid: str,
        pair: str,
        volume=None,
        price=None,
        price2=None,
        oflags=None,
        userref=None,
        deadline=None,
        cancel_response=None,
        validate=None,
    ) -> EditOrderResult:
        params = {
            "txid": txid,
            "pair": pair,
            "volume": volume,
            "price": price,
            "price2": price2,
            "oflags": oflags,
            "userref": userref,
            "deadline": deadline,
            "cancel_response": cancel_response,
            "validate": validate,
        }
        return self._private(EDIT_ORDER_PATH, params, EditOrderResult)

    def cancel_order(self, txid: Union[str, int], otp=None) -> CancelOrderResult:
        if not str(txid).strip():
            raise RequestValidationError("txid is empty")
        return self._private(CANCEL_ORDER_PATH, {"txid": txid}, CancelOrderResult, otp=otp)

    def cancel_all_orders(self) -> CancelOrderResult:
        return self._private(CANCEL_ALL_PATH, result_type=CancelOrderResult)

    def cancel_all_orders_after(self, timeout: int) -> CancelAllAfterResult:
        if timeout < 0:
            raise RequestValidationError("timeout must be >= 0")
        return self._private(CANCEL_ALL_AFTER_PATH, {"timeout": timeout}, CancelAllAfterResult)

    def cancel_order_batch(self, orders: Sequence[Union[str, int]]) -> CancelOrderBatchResult:
        check_cancel_batch(orders)
        return self._private(CANCEL_ORDER_BATCH_PATH, {"orders": list(orders)}, CancelOrderBatchResult)

    # ------------------------------------------------------------------
    # Funding
    # ------------------------------------------------------------------

    def get_deposit_methods(self, asset: str, aclass=None) -> List[DepositMethod]:
        params = {"asset": asset, "aclass": aclass}
        return self._private(DEPOSIT_METHODS_PATH, params, List[DepositMethod])

    def get_deposit_addresses(self, asset: str, method: str, new=None, amount=None) -> List[DepositAddress]:
        params = {"asset": asset, "method": method, "new": new, "amount": amount}
        return self._private(DEPOSIT_ADDRESSES_PATH, params, List[DepositAddress])

    def get_status_of_recent_deposits(self, asset=None, method=None) -> List[TransactionDetails]:
        params = {"asset": asset, "method": method}
        return self._private(DEPOSIT_STATUS_PATH, params, List[TransactionDetails])

    def get_withdrawal_methods(self, asset=None, aclass=None, network=None) -> List[WithdrawalMethod]:
        params = {"asset": asset, "aclass": aclass, "network": network}
        return self._private(WITHDRAW_METHODS_PATH, params, List[WithdrawalMethod])

    def get_withdrawal_addresses(
        self, asset=None, aclass=None, method=None, key=None, verified=None
    ) -> List[WithdrawalAddress]:
        params = {
            "asset": asset,
            "aclass": aclass,
            "method": method,
            "key": key,
            "verified": verified,
        }
        return self._private(WITHDRAW_ADDRESSES_PATH, params, List[WithdrawalAddress])

    def get_withdrawal_information(self, asset: str, key: str, amount: Amount) -> WithdrawalInformation:
        params = {"asset": asset, "key": key, "amount": amount}
        return self._private(WITHDRAW_INFO_PATH, params, WithdrawalInformation)

    def withdraw_funds(
        self, asset: str, key: str, amount: Amount, address=None, max_fee=None, otp=None
    ) -> ReferenceId:
        params = {
            "asset": asset,
            "key": key,
            "amount": amount,
            "address": address,
            "max_fee": max_fee,
        }
        return self._private(WITHDRAW_PATH, params, ReferenceId, otp=otp)

    def get_status_of_recent_withdrawals(self, asset=None, method=None) -> List[TransactionDetails]:
        params = {"asset": asset, "method": method}
        return self._private(WITHDRAW_STATUS_PATH, params, List[TransactionDetails])

    def request_withdrawal_cancellation(self, asset: str, refid: str) -> bool:
        return self._private(WITHDRAW_CANCEL_PATH, {"asset": asset, "refid": refid}, bool)

    def request_wallet_transfer(
        self,
        asset: str,
        amount: Amount,
        from_wallet: str = "Spot Wallet",
        to_wallet: str = "Futures Wallet",
        otp=None,
    ) -> ReferenceId:
        params = {"asset": asset, "from": from_wallet, "to": to_wallet, "amount": amount}
        return self._private(WALLET_TRANSFER_PATH, params, ReferenceId, otp=otp)

    # ------------------------------------------------------------------
    # Staking
    # ------------------------------------------------------------------

    def stake_asset(self, asset: str, amount: Amount, method: str) -> ReferenceId:
        params = {"asset": asset, "amount": amount, "method": method}
        return self._private(STAKE_PATH, params, ReferenceId)

    def unstake_asset(self, asset: str, amount: Amount, method=None) -> ReferenceId:
        params = {"asset": asset, "amount": amount, "method": method}
        return self._private(UNSTAKE_PATH, params, ReferenceId)

    def list_stakeable_assets(self) -> List[StakeableAsset]:
        return self._private(STAKING_ASSETS_PATH, result_type=List[StakeableAsset])

    def get_pending_staking_transactions(self) -> List[StakingTransaction]:
        return self._private(STAKING_PENDING_PATH, result_type=List[StakingTransaction])

    def list_staking_transactions(self) -> List[StakingTransaction]:
        return self._private(STAKING_TRANSACTIONS_PATH, result_type=List[StakingTransaction])

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()
