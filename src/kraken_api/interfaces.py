from __future__ import annotations
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .consts import OHLCInterval, ReportFormat, ReportKind
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
)

"""Capability interfaces of the spot REST API.

KrakenSpotClient implements all five; code that only needs market data can
depend on MarketData alone and accept any implementation (a recording fake in
tests, for instance).
"""

Pairs = Union[str, Sequence[str]]
Amount = Union[str, int, float, Decimal]
OrderLike = Union[Order, Mapping]


class MarketData(ABC):
    """Public endpoints; no credentials needed."""

    @abstractmethod
    def get_server_time(self) -> ServerTime: ...

    @abstractmethod
    def get_system_status(self) -> SystemStatusInfo: ...

    @abstractmethod
    def get_asset_info(
        self, asset: Optional[Pairs] = None, aclass: Optional[str] = None
    ) -> Dict[str, AssetInfo]: ...

    @abstractmethod
    def get_tradable_asset_pairs(
        self,
        pair: Optional[Pairs] = None,
        info: Optional[str] = None,
        country_code: Optional[str] = None,
    ) -> Dict[str, AssetPair]: ...

    @abstractmethod
    def get_ticker_information(self, pair: Optional[Pairs] = None) -> Dict[str, TickerInfo]: ...

    @abstractmethod
    def get_ohlc_data(
        self,
        pair: str,
        interval: Optional[OHLCInterval] = None,
        since: Optional[int] = None,
    ) -> OHLCData: ...

    @abstractmethod
    def get_order_book(self, pair: str, count: Optional[int] = None) -> OrderBook: ...

    @abstractmethod
    def get_recent_trades(
        self, pair: str, since: Optional[str] = None, count: Optional[int] = None
    ) -> RecentTrades: ...

    @abstractmethod
    def get_recent_spreads(self, pair: str, since: Optional[int] = None) -> RecentSpreads: ...


class AccountData(ABC):
    @abstractmethod
    def get_account_balance(self) -> Dict[str, str]: ...

    @abstractmethod
    def get_extended_balance(self) -> Dict[str, ExtendedBalance]: ...

    @abstractmethod
    def get_trade_balance(self, asset: Optional[str] = None) -> TradeBalance: ...

    @abstractmethod
    def get_open_orders(
        self, trades: Optional[bool] = None, userref: Optional[int] = None
    ) -> OpenOrders: ...

    @abstractmethod
    def get_closed_orders(
        self,
        trades: Optional[bool] = None,
        userref: Optional[int] = None,
        start: Optional[Union[int, str]] = None,
        end: Optional[Union[int, str]] = None,
        ofs: Optional[int] = None,
        closetime: Optional[str] = None,
    ) -> ClosedOrders: ...

    @abstractmethod
    def query_orders_info(
        self,
        txid: Sequence[str],
        trades: Optional[bool] = None,
        userref: Optional[int] = None,
    ) -> Dict[str, OrderInfo]: ...

    @abstractmethod
    def get_trades_history(
        self,
        type: Optional[str] = None,
        trades: Optional[bool] = None,
        start: Optional[Union[int, str]] = None,
        end: Optional[Union[int, str]] = None,
        ofs: Optional[int] = None,
    ) -> TradesHistory: ...

    @abstractmethod
    def get_ledgers_info(
        self,
        asset: Optional[Pairs] = None,
        aclass: Optional[str] = None,
        type: Optional[str] = None,
        start: Optional[Union[int, str]] = None,
        end: Optional[Union[int, str]] = None,
        ofs: Optional[int] = None,
    ) -> LedgersInfo: ...

    @abstractmethod
    def get_trade_volume(self, pair: Optional[Pairs] = None) -> TradeVolume: ...

    @abstractmethod
    def request_export_report(
        self,
        report: ReportKind,
        description: str,
        format: Optional[ReportFormat] = None,
        fields: Optional[Sequence[str]] = None,
        starttm: Optional[int] = None,
        endtm: Optional[int] = None,
    ) -> ExportReportRequested: ...

    @abstractmethod
    def get_export_report_status(self, report: ReportKind) -> List[ExportReportStatus]: ...

    @abstractmethod
    def retrieve_data_export(self, id: str) -> bytes:
        """Raw archive bytes of a finished report (a zip file)."""

    @abstractmethod
    def delete_export_report(self, id: str, kind: str = "delete") -> DeleteExportResult: ...


class Trading(ABC):
    @abstractmethod
    def add_order(
        self,
        pair: str,
        order: OrderLike,
        validate: Optional[bool] = None,
        deadline: Optional[str] = None,
        otp: Optional[str] = None,
    ) -> AddOrderResult: ...

    @abstractmethod
    def add_order_batch(
        self,
        pair: str,
        orders: Sequence[OrderLike],
        validate: Optional[bool] = None,
        deadline: Optional[str] = None,
    ) -> AddOrderBatchResult:
        """Place up to 15 orders on one pair.

        Lines the exchange rejects do not fail the call; inspect
        AddOrderBatchResult.failed().
        """

    @abstractmethod
    def edit_order(
        self,
        txid: str,
        pair: str,
        volume: Optional[Amount] = None,
        price: Optional[Amount] = None,
        price2: Optional[Amount] = None,
        oflags: Optional[Sequence[str]] = None,
        userref: Optional[int] = None,
        deadline: Optional[str] = None,
        cancel_response: Optional[bool] = None,
        validate: Optional[bool] = None,
    ) -> EditOrderResult: ...

    @abstractmethod
    def cancel_order(self, txid: Union[str, int], otp: Optional[str] = None) -> CancelOrderResult: ...

    @abstractmethod
    def cancel_all_orders(self) -> CancelOrderResult: ...

    @abstractmethod
    def cancel_all_orders_after(self, timeout: int) -> CancelAllAfterResult:
        """Dead man's switch; a timeout of 0 disarms it."""

    @abstractmethod
    def cancel_order_batch(self, orders: Sequence[Union[str, int]]) -> CancelOrderBatchResult: ...


class Funding(ABC):
    @abstractmethod
    def get_deposit_methods(self, asset: str, aclass: Optional[str] = None) -> List[DepositMethod]: ...

    @abstractmethod
    def get_deposit_addresses(
        self,
        asset: str,
        method: str,
        new: Optional[bool] = None,
        amount: Optional[Amount] = None,
    ) -> List[DepositAddress]: ...

    @abstractmethod
    def get_status_of_recent_deposits(
        self, asset: Optional[str] = None, method: Optional[str] = None
    ) -> List[TransactionDetails]: ...

    @abstractmethod
    def get_withdrawal_methods(
        self,
        asset: Optional[str] = None,
        aclass: Optional[str] = None,
        network: Optional[str] = None,
    ) -> List[WithdrawalMethod]: ...

    @abstractmethod
    def get_withdrawal_addresses(
        self,
        asset: Optional[str] = None,
        aclass: Optional[str] = None,
        method: Optional[str] = None,
        key: Optional[str] = None,
        verified: Optional[bool] = None,
    ) -> List[WithdrawalAddress]: ...

    @abstractmethod
    def get_withdrawal_information(
        self, asset: str, key: str, amount: Amount
    ) -> WithdrawalInformation: ...

    @abstractmethod
    def withdraw_funds(
        self,
        asset: str,
        key: str,
        amount: Amount,
        address: Optional[str] = None,
        max_fee: Optional[Amount] = None,
        otp: Optional[str] = None,
    ) -> ReferenceId:
        """Withdraw to a pre-registered withdrawal key."""

    @abstractmethod
    def get_status_of_recent_withdrawals(
        self, asset: Optional[str] = None, method: Optional[str] = None
    ) -> List[TransactionDetails]: ...

    @abstractmethod
    def request_withdrawal_cancellation(self, asset: str, refid: str) -> bool: ...

    @abstractmethod
    def request_wallet_transfer(
        self,
        asset: str,
        amount: Amount,
        from_wallet: str = "Spot Wallet",
        to_wallet: str = "Futures Wallet",
        otp: Optional[str] = None,
    ) -> ReferenceId: ...


class Staking(ABC):
    @abstractmethod
    def stake_asset(self, asset: str, amount: Amount, method: str) -> ReferenceId: ...

    @abstractmethod
    def unstake_asset(
        self, asset: str, amount: Amount, method: Optional[str] = None
    ) -> ReferenceId: ...

    @abstractmethod
    def list_stakeable_assets(self) -> List[StakeableAsset]: ...

    @abstractmethod
    def get_pending_staking_transactions(self) -> List[StakingTransaction]: ...

    @abstractmethod
    def list_staking_transactions(self) -> List[StakingTransaction]: ...
