import logging
from typing import Callable, Dict, List, Optional, Tuple

from launch_curve.common.model import Token
from launch_curve.external.base import AssetLedger, LiquidityVenue


logger = logging.getLogger(__name__)

TransferHook = Callable[[str, str, int], None]


class InMemoryAssetLedger(AssetLedger):
    """
    Dict-backed ledger for simulation, tests and the web API.

    :param token: Token - the asset this ledger tracks
    :param custodian: str - the curve's account
    :param balances: optional starting balances
    :param hook: optional callable(operation, account, amount) invoked inside
                 transfer_from / transfer_to before funds move, to model
                 collaborators that call back into the curve
    """

    def __init__(
        self,
        token: Token,
        custodian: str = "curve",
        balances: Optional[Dict[str, int]] = None,
        hook: Optional[TransferHook] = None,
    ):
        self.token = token
        self._custodian = custodian
        self._balances: Dict[str, int] = dict(balances or {})
        self.hook = hook

    @property
    def custodian(self) -> str:
        return self._custodian

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def mint(self, holder: str, amount: int):
        if amount < 0:
            raise ValueError("Cannot mint a negative amount.")
        self._balances[holder] = self.balance_of(holder) + amount
        self.token.total_supply = (self.token.total_supply or 0) + amount

    def move(self, sender: str, recipient: str, amount: int) -> bool:
        if amount < 0 or self.balance_of(sender) < amount:
            logger.debug(
                "%s: refusing move of %s from %s (balance %s)",
                self.token.symbol, amount, sender, self.balance_of(sender),
            )
            return False
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[recipient] = self.balance_of(recipient) + amount
        return True

    def transfer_from(self, owner: str, amount: int) -> bool:
        if self.hook is not None:
            self.hook("transfer_from", owner, amount)
        return self.move(owner, self._custodian, amount)

    def transfer_to(self, recipient: str, amount: int) -> bool:
        if self.hook is not None:
            self.hook("transfer_to", recipient, amount)
        return self.move(self._custodian, recipient, amount)


class InMemoryLiquidityVenue(LiquidityVenue):
    """
    Records graduation hand-offs. When ledgers are supplied the venue also
    takes custody: the reserve leaves the curve and the reserve-of-record
    asset leaves 'record_holder'.
    """

    def __init__(
        self,
        address: str = "venue",
        accept: bool = True,
        asset_ledger: Optional[InMemoryAssetLedger] = None,
        reserve_ledger: Optional[InMemoryAssetLedger] = None,
        record_holder: Optional[str] = None,
        hook: Optional[Callable[[int, int], None]] = None,
    ):
        self.address = address
        self.accept = accept
        self.asset_ledger = asset_ledger
        self.reserve_ledger = reserve_ledger
        self.record_holder = record_holder
        self.hook = hook
        self.handoffs: List[Tuple[int, int]] = []

    def accept_graduation(self, asset_amount: int, reserve_amount: int) -> bool:
        if self.hook is not None:
            self.hook(asset_amount, reserve_amount)
        if not self.accept:
            return False

        if self.reserve_ledger is not None:
            if not self.reserve_ledger.transfer_to(self.address, reserve_amount):
                return False
        if self.asset_ledger is not None and self.record_holder is not None:
            if not self.asset_ledger.move(self.record_holder, self.address, asset_amount):
                # put the reserve back so a refused hand-off leaves no trace
                if self.reserve_ledger is not None:
                    self.reserve_ledger.move(self.address, self.reserve_ledger.custodian, reserve_amount)
                return False

        self.handoffs.append((asset_amount, reserve_amount))
        return True
