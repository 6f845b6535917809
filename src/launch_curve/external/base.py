from abc import ABC, abstractmethod


class AssetLedger(ABC):
    """
    Abstract view of one asset's balances, as seen by the curve. Transfers move
    funds between an outside account and the ledger's custodian (the curve).
    Implementations report failure by returning False; they may also call back
    into the curve while a transfer is in progress.
    """

    @property
    @abstractmethod
    def custodian(self) -> str:
        """Account that holds the curve's balance on this ledger."""
        pass

    @abstractmethod
    def transfer_from(self, owner: str, amount: int) -> bool:
        """
        Pulls 'amount' from 'owner' into the custodian account.

        :return: True if the transfer happened, False otherwise.
        """
        pass

    @abstractmethod
    def transfer_to(self, recipient: str, amount: int) -> bool:
        """
        Pushes 'amount' from the custodian account to 'recipient'.

        :return: True if the transfer happened, False otherwise.
        """
        pass

    @abstractmethod
    def balance_of(self, holder: str) -> int:
        pass

    def held_balance(self) -> int:
        """Returns the custodian's own balance."""
        return self.balance_of(self.custodian)


class LiquidityVenue(ABC):
    """External venue that receives the balances of a graduated curve."""

    @abstractmethod
    def accept_graduation(self, asset_amount: int, reserve_amount: int) -> bool:
        """
        Takes over 'asset_amount' of the reserve-of-record asset and
        'reserve_amount' of the collected reserve. Not idempotent.

        :return: True on success, False if the venue refused the hand-off.
        """
        pass
